"""Pydantic schemas for analytics responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class EquityCurvePoint(BaseModel):
    date: datetime
    cumulative_pnl: Decimal
    trade_count: int


class EquityCurveResponse(BaseModel):
    points: list[EquityCurvePoint]
    starting_balance: Decimal = Decimal("0")


class WinLossDistribution(BaseModel):
    wins: list[Decimal]
    losses: list[Decimal]
    avg_win: Decimal
    avg_loss: Decimal
    largest_win: Decimal
    largest_loss: Decimal


class SetupPerformance(BaseModel):
    setup_name: str
    trade_count: int
    win_count: int
    loss_count: int
    win_rate: Decimal
    total_pnl: Decimal
    avg_pnl: Decimal
    avg_r_multiple: Decimal | None
    largest_win: Decimal
    largest_loss: Decimal


class HourlyPerformance(BaseModel):
    hour: int
    trade_count: int
    win_rate: Decimal
    avg_pnl: Decimal


class DailyPerformance(BaseModel):
    day_of_week: int  # 0 = Sunday
    day_name: str
    trade_count: int
    win_rate: Decimal
    avg_pnl: Decimal


class MonthlyPerformance(BaseModel):
    month: str  # YYYY-MM
    trade_count: int
    total_pnl: Decimal
    win_rate: Decimal
    avg_pnl: Decimal


class TimeBasedAnalytics(BaseModel):
    hourly: list[HourlyPerformance]
    daily: list[DailyPerformance]
    monthly: list[MonthlyPerformance]


class DrawdownPeriod(BaseModel):
    start_date: datetime
    end_date: datetime | None  # None while still under water
    drawdown_amount: Decimal
    drawdown_percent: Decimal
    duration_days: int | None


class DrawdownAnalysis(BaseModel):
    current_drawdown: Decimal
    max_drawdown: Decimal
    max_drawdown_date: datetime | None
    recovery_factor: Decimal | None
    drawdown_periods: list[DrawdownPeriod]
