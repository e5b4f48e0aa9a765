"""Trade ledger analytics.

Every aggregate here is recomputed on demand from a user's trades. Inputs may
contain trades in any status; only closed trades with a net P&L take part.

A trade counts as a win when ``net_pnl > 0``; break-even trades are losses.
Empty input is valid and produces empty lists and zeroed figures.
"""

import calendar
from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from tradejournal.models.trade import Trade, TradeStatus
from tradejournal.schemas.analytics import (
    DailyPerformance,
    DrawdownAnalysis,
    DrawdownPeriod,
    EquityCurvePoint,
    HourlyPerformance,
    MonthlyPerformance,
    SetupPerformance,
    TimeBasedAnalytics,
    WinLossDistribution,
)
from tradejournal.schemas.trade import TradeStats
from tradejournal.services.metrics import as_utc
from tradejournal.utils.constants import NO_SETUP_LABEL

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def closed_trades(trades: Iterable[Trade]) -> list[Trade]:
    return [t for t in trades if t.status == TradeStatus.CLOSED and t.net_pnl is not None]


def _mean(values: list[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return sum(values, ZERO) / len(values)


def _win_rate(wins: int, total: int) -> Decimal:
    if total == 0:
        return ZERO
    return Decimal(wins) / Decimal(total) * HUNDRED


def _is_win(trade: Trade) -> bool:
    return trade.net_pnl > 0


# ---------------------------------------------------------------------------
# Equity curve and drawdown
# ---------------------------------------------------------------------------

def compute_equity_curve(trades: Iterable[Trade]) -> list[EquityCurvePoint]:
    """Cumulative net P&L after each closed trade, in exit-date order."""
    ordered = sorted(
        (t for t in closed_trades(trades) if t.exit_date is not None),
        key=lambda t: as_utc(t.exit_date),
    )
    points = []
    cumulative = ZERO
    for count, trade in enumerate(ordered, start=1):
        cumulative += trade.net_pnl
        points.append(EquityCurvePoint(
            date=as_utc(trade.exit_date),
            cumulative_pnl=cumulative,
            trade_count=count,
        ))
    return points


def compute_drawdown(points: list[EquityCurvePoint]) -> DrawdownAnalysis:
    """Peak-to-trough analysis of an equity curve.

    The running peak starts at zero (the starting balance), so losses before
    the first new high already count as drawdown.
    """
    peak = ZERO
    max_drawdown = ZERO
    max_drawdown_date = None
    drawdown = ZERO
    periods: list[DrawdownPeriod] = []
    period_start = None
    period_peak = ZERO
    period_depth = ZERO

    for point in points:
        if point.cumulative_pnl >= peak:
            if period_start is not None:
                periods.append(_drawdown_period(period_start, point.date, period_depth, period_peak))
                period_start = None
            peak = point.cumulative_pnl

        drawdown = peak - point.cumulative_pnl
        if drawdown > 0:
            if period_start is None:
                period_start = point.date
                period_peak = peak
                period_depth = ZERO
            period_depth = max(period_depth, drawdown)

        if drawdown > max_drawdown:
            max_drawdown = drawdown
            max_drawdown_date = point.date

    if period_start is not None:
        periods.append(_drawdown_period(period_start, None, period_depth, period_peak))

    total_pnl = points[-1].cumulative_pnl if points else ZERO
    recovery_factor = total_pnl / max_drawdown if max_drawdown > 0 else None

    return DrawdownAnalysis(
        current_drawdown=drawdown,
        max_drawdown=max_drawdown,
        max_drawdown_date=max_drawdown_date,
        recovery_factor=recovery_factor,
        drawdown_periods=periods,
    )


def _drawdown_period(start, end, depth: Decimal, peak: Decimal) -> DrawdownPeriod:
    percent = depth / peak * HUNDRED if peak > 0 else ZERO
    return DrawdownPeriod(
        start_date=start,
        end_date=end,
        drawdown_amount=depth,
        drawdown_percent=percent,
        duration_days=(end - start).days if end is not None else None,
    )


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------

def compute_win_loss_distribution(trades: Iterable[Trade]) -> WinLossDistribution:
    pnls = [t.net_pnl for t in closed_trades(trades)]
    wins = sorted((p for p in pnls if p > 0), reverse=True)
    losses = sorted(p for p in pnls if p <= 0)
    return WinLossDistribution(
        wins=wins,
        losses=losses,
        avg_win=_mean(wins),
        avg_loss=_mean(losses),
        largest_win=wins[0] if wins else ZERO,
        largest_loss=losses[0] if losses else ZERO,
    )


def compute_setup_performance(
    trades: Iterable[Trade],
    min_sample_size: int = 3,
) -> list[SetupPerformance]:
    """Per-setup results, best total first.

    Setups with fewer than ``min_sample_size`` closed trades are left out
    entirely, whatever their P&L.
    """
    groups: dict[str, list[Trade]] = defaultdict(list)
    for trade in closed_trades(trades):
        groups[trade.setup_name or NO_SETUP_LABEL].append(trade)

    results = []
    for name, group in groups.items():
        if len(group) < min_sample_size:
            continue
        pnls = [t.net_pnl for t in group]
        win_count = sum(1 for t in group if _is_win(t))
        r_values = [t.r_multiple for t in group if t.r_multiple is not None]
        total = sum(pnls, ZERO)
        results.append(SetupPerformance(
            setup_name=name,
            trade_count=len(group),
            win_count=win_count,
            loss_count=len(group) - win_count,
            win_rate=_win_rate(win_count, len(group)),
            total_pnl=total,
            avg_pnl=total / len(group),
            avg_r_multiple=_mean(r_values) if r_values else None,
            largest_win=max((p for p in pnls if p > 0), default=ZERO),
            largest_loss=min((p for p in pnls if p <= 0), default=ZERO),
        ))

    results.sort(key=lambda s: s.total_pnl, reverse=True)
    return results


def compute_time_performance(trades: Iterable[Trade], months: int = 12) -> TimeBasedAnalytics:
    """Bucket closed trades by entry hour, entry weekday and entry month."""
    by_hour: dict[int, list[Trade]] = defaultdict(list)
    by_day: dict[int, list[Trade]] = defaultdict(list)
    by_month: dict[str, list[Trade]] = defaultdict(list)

    for trade in closed_trades(trades):
        entry = as_utc(trade.entry_date)
        by_hour[entry.hour].append(trade)
        # Python weekday() is Monday=0; report Sunday=0
        by_day[(entry.weekday() + 1) % 7].append(trade)
        by_month[entry.strftime("%Y-%m")].append(trade)

    hourly = [
        HourlyPerformance(hour=hour, **_bucket_stats(group))
        for hour, group in sorted(by_hour.items())
    ]
    daily = [
        DailyPerformance(
            day_of_week=day,
            day_name=calendar.day_name[(day - 1) % 7],
            **_bucket_stats(group),
        )
        for day, group in sorted(by_day.items())
    ]
    recent_months = sorted(by_month, reverse=True)[:months]
    monthly = [
        MonthlyPerformance(
            month=month,
            total_pnl=sum((t.net_pnl for t in by_month[month]), ZERO),
            **_bucket_stats(by_month[month]),
        )
        for month in recent_months
    ]
    return TimeBasedAnalytics(hourly=hourly, daily=daily, monthly=monthly)


def _bucket_stats(group: list[Trade]) -> dict:
    wins = sum(1 for t in group if _is_win(t))
    return {
        "trade_count": len(group),
        "win_rate": _win_rate(wins, len(group)),
        "avg_pnl": _mean([t.net_pnl for t in group]),
    }


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def compute_trade_stats(trades: Iterable[Trade]) -> TradeStats:
    closed = closed_trades(trades)
    wins = [t.net_pnl for t in closed if t.net_pnl > 0]
    losses = [t.net_pnl for t in closed if t.net_pnl <= 0]
    r_values = [t.r_multiple for t in closed if t.r_multiple is not None]
    hold_times = [t.hold_time_minutes for t in closed if t.hold_time_minutes is not None]

    gross_loss = abs(sum(losses, ZERO))
    profit_factor = sum(wins, ZERO) / gross_loss if gross_loss > 0 else None

    win_rate = _win_rate(len(wins), len(closed))
    avg_win = _mean(wins)
    avg_loss = _mean(losses)
    loss_rate = (HUNDRED - win_rate) / HUNDRED if closed else ZERO
    expectancy = avg_win * win_rate / HUNDRED - abs(avg_loss) * loss_rate

    return TradeStats(
        total_trades=len(closed),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=win_rate,
        total_pnl=sum((t.net_pnl for t in closed), ZERO),
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=profit_factor,
        expectancy=expectancy,
        avg_r_multiple=_mean(r_values) if r_values else None,
        largest_win=max(wins, default=ZERO),
        largest_loss=min(losses, default=ZERO),
        avg_hold_time_minutes=int(sum(hold_times) / len(hold_times)) if hold_times else None,
    )
