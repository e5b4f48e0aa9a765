"""Analytics API — equity curve, drawdown and performance breakdowns."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlmodel import Session

from tradejournal.config import settings
from tradejournal.database import get_session
from tradejournal.models.trade import Trade
from tradejournal.models.user import User
from tradejournal.schemas.analytics import (
    DrawdownAnalysis,
    EquityCurveResponse,
    SetupPerformance,
    TimeBasedAnalytics,
    WinLossDistribution,
)
from tradejournal.services import analytics, trade_store
from tradejournal.api.deps import get_current_user

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@dataclass
class LedgerQuery:
    from_date: datetime | None = None
    to_date: datetime | None = None
    setup_name: str | None = None


def get_ledger(
    query: LedgerQuery = Depends(),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> list[Trade]:
    """Closed trades for the current user, filtered by exit date and setup."""
    return trade_store.fetch_ledger(
        session,
        user.id,
        from_date=query.from_date,
        to_date=query.to_date,
        setup_name=query.setup_name,
    )


@router.get("/equity-curve", response_model=EquityCurveResponse)
def equity_curve(
    starting_balance: Decimal = Decimal("0"),
    trades: list[Trade] = Depends(get_ledger),
):
    """Cumulative net P&L points. ``starting_balance`` is echoed, not added to them."""
    return EquityCurveResponse(
        points=analytics.compute_equity_curve(trades),
        starting_balance=starting_balance,
    )


@router.get("/win-loss", response_model=WinLossDistribution)
def win_loss_distribution(trades: list[Trade] = Depends(get_ledger)):
    return analytics.compute_win_loss_distribution(trades)


@router.get("/setups", response_model=list[SetupPerformance])
def setup_performance(trades: list[Trade] = Depends(get_ledger)):
    return analytics.compute_setup_performance(trades, min_sample_size=settings.setup_min_trades)


@router.get("/time", response_model=TimeBasedAnalytics)
def time_performance(trades: list[Trade] = Depends(get_ledger)):
    return analytics.compute_time_performance(trades, months=settings.time_performance_months)


@router.get("/drawdown", response_model=DrawdownAnalysis)
def drawdown_analysis(trades: list[Trade] = Depends(get_ledger)):
    return analytics.compute_drawdown(analytics.compute_equity_curve(trades))
