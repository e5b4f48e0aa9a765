"""Risk calculator API — stateless sizing formulas."""

from decimal import Decimal

from fastapi import APIRouter, Depends

from tradejournal.schemas.risk import (
    BreakevenRequest,
    BreakevenResponse,
    KellyRequest,
    KellyResponse,
    PortfolioHeatRequest,
    PortfolioHeatResponse,
    PositionSizeRequest,
    PositionSizeResponse,
    RiskRewardRequest,
    RiskRewardResponse,
)
from tradejournal.services import risk
from tradejournal.services.metrics import calculate_position_size_pct
from tradejournal.api.deps import get_current_user

router = APIRouter(prefix="/api/risk", tags=["risk"], dependencies=[Depends(get_current_user)])


@router.post("/position-size", response_model=PositionSizeResponse)
def position_size(body: PositionSizeRequest):
    size = risk.calculate_position_size(
        body.account_size, body.risk_percent, body.entry_price, body.stop_loss
    )
    position_value = size * body.entry_price
    return PositionSizeResponse(
        position_size=size,
        risk_amount=risk.calculate_max_position_size(body.account_size, body.risk_percent),
        position_value=position_value,
        position_size_pct=calculate_position_size_pct(position_value, body.account_size),
    )


@router.post("/risk-reward", response_model=RiskRewardResponse)
def risk_reward(body: RiskRewardRequest):
    return RiskRewardResponse(
        risk_reward_ratio=risk.calculate_risk_reward_ratio(
            body.entry_price, body.stop_loss, body.target_price
        ),
        risk_amount=abs(body.entry_price - body.stop_loss),
        reward_amount=abs(body.target_price - body.entry_price),
    )


@router.post("/kelly", response_model=KellyResponse)
def kelly(body: KellyRequest):
    # Win rate arrives as a percentage
    kelly_value = risk.calculate_kelly_criterion(
        body.win_rate / Decimal("100"), body.avg_win, body.avg_loss
    )
    return KellyResponse(
        kelly_percentage=kelly_value,
        half_kelly=kelly_value / 2,
        quarter_kelly=kelly_value / 4,
    )


@router.post("/portfolio-heat", response_model=PortfolioHeatResponse)
def portfolio_heat(body: PortfolioHeatRequest):
    return PortfolioHeatResponse(
        portfolio_heat=risk.calculate_portfolio_heat(body.open_positions_risk, body.account_size),
        total_risk=sum(body.open_positions_risk, Decimal("0")),
        positions_count=len(body.open_positions_risk),
    )


@router.post("/breakeven", response_model=BreakevenResponse)
def breakeven(body: BreakevenRequest):
    return BreakevenResponse(
        breakeven_price=risk.calculate_breakeven_price(
            body.entry_price, body.quantity, body.commissions
        )
    )
