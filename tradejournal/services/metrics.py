"""Trade metric calculations.

Pure functions over Decimal inputs: no I/O, no session, no settings. Every
value that reaches a trade column or an API response is computed here with
base-10 arithmetic so currency and ratio fields never pick up float drift.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from tradejournal.models.trade import TradeDirection

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CloseMetrics:
    """Derived fields written together when a trade is closed."""

    pnl: Decimal
    pnl_percent: Decimal
    net_pnl: Decimal
    r_multiple: Decimal | None
    hold_time_minutes: int


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (SQLite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_pnl(
    direction: TradeDirection,
    entry_price: Decimal,
    exit_price: Decimal,
    quantity: Decimal,
) -> Decimal:
    if direction == TradeDirection.LONG:
        return (exit_price - entry_price) * quantity
    return (entry_price - exit_price) * quantity


def calculate_pnl_percent(pnl: Decimal, entry_price: Decimal, quantity: Decimal) -> Decimal:
    cost_basis = entry_price * quantity
    if cost_basis == 0:
        return ZERO
    return pnl / cost_basis * HUNDRED


def calculate_net_pnl(pnl: Decimal, commissions: Decimal | None = None) -> Decimal:
    return pnl - (commissions or ZERO)


def calculate_r_multiple(pnl: Decimal, risk_amount: Decimal | None) -> Decimal | None:
    """P&L as a multiple of the amount risked; None when nothing was risked."""
    if risk_amount is None or risk_amount == 0:
        return None
    return pnl / risk_amount


def calculate_hold_time(entry_date: datetime, exit_date: datetime) -> int:
    """Whole minutes between entry and exit, truncated toward zero."""
    seconds = (as_utc(exit_date) - as_utc(entry_date)).total_seconds()
    return int(seconds / 60)


def calculate_risk_from_stop(
    direction: TradeDirection,
    entry_price: Decimal,
    stop_loss: Decimal,
    quantity: Decimal,
) -> Decimal:
    """Dollar risk between entry and stop.

    A stop on the wrong side of entry yields zero rather than an error; trade
    writes reject such stops in validation before this is reached.
    """
    if direction == TradeDirection.LONG:
        if entry_price > stop_loss:
            return (entry_price - stop_loss) * quantity
        return ZERO
    if stop_loss > entry_price:
        return (stop_loss - entry_price) * quantity
    return ZERO


def calculate_position_size_pct(position_value: Decimal, account_size: Decimal) -> Decimal | None:
    if account_size == 0:
        return None
    return position_value / account_size * HUNDRED


def calculate_close_metrics(trade, exit_date: datetime, exit_price: Decimal) -> CloseMetrics:
    """Compute every derived close field for ``trade`` exiting at ``exit_price``.

    ``exit_price`` must already be the effective price (actual fill when one
    was reported).
    """
    pnl = calculate_pnl(trade.direction, trade.entry_price, exit_price, trade.quantity)
    return CloseMetrics(
        pnl=pnl,
        pnl_percent=calculate_pnl_percent(pnl, trade.entry_price, trade.quantity),
        net_pnl=calculate_net_pnl(pnl, trade.commissions),
        r_multiple=calculate_r_multiple(pnl, trade.risk_amount),
        hold_time_minutes=calculate_hold_time(trade.entry_date, exit_date),
    )
