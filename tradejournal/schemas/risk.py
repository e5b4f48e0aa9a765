"""Pydantic schemas for the risk calculator endpoints."""

from decimal import Decimal

from pydantic import BaseModel, Field


class PositionSizeRequest(BaseModel):
    account_size: Decimal = Field(gt=0)
    risk_percent: Decimal = Field(ge=0, le=100)
    entry_price: Decimal = Field(gt=0)
    stop_loss: Decimal = Field(gt=0)


class PositionSizeResponse(BaseModel):
    position_size: Decimal
    risk_amount: Decimal
    position_value: Decimal
    position_size_pct: Decimal | None


class RiskRewardRequest(BaseModel):
    entry_price: Decimal = Field(gt=0)
    stop_loss: Decimal = Field(gt=0)
    target_price: Decimal = Field(gt=0)


class RiskRewardResponse(BaseModel):
    risk_reward_ratio: Decimal | None
    risk_amount: Decimal
    reward_amount: Decimal


class KellyRequest(BaseModel):
    win_rate: Decimal = Field(ge=0, le=100)  # percent
    avg_win: Decimal = Field(ge=0)
    avg_loss: Decimal = Field(ge=0)  # magnitude


class KellyResponse(BaseModel):
    kelly_percentage: Decimal
    half_kelly: Decimal
    quarter_kelly: Decimal


class PortfolioHeatRequest(BaseModel):
    open_positions_risk: list[Decimal]
    account_size: Decimal = Field(ge=0)


class PortfolioHeatResponse(BaseModel):
    portfolio_heat: Decimal
    total_risk: Decimal
    positions_count: int


class BreakevenRequest(BaseModel):
    entry_price: Decimal = Field(gt=0)
    quantity: Decimal = Field(gt=0)
    commissions: Decimal = Field(default=Decimal("0"), ge=0)


class BreakevenResponse(BaseModel):
    breakeven_price: Decimal
