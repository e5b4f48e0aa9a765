"""User-scoped trade persistence.

Every lookup filters on ``user_id`` as well as ``id``: a trade owned by
someone else is reported exactly like a trade that does not exist.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import Float, cast, update
from sqlmodel import Session, select, func, col

from tradejournal.errors import ConflictError, NotFoundError, ValidationError
from tradejournal.models.trade import (
    AssetClass,
    ConvictionLevel,
    Trade,
    TradeDirection,
    TradeStatus,
)
from tradejournal.models.trade_leg import TradeLeg
from tradejournal.models.types import ExactDecimal
from tradejournal.utils.constants import SORTABLE_FIELD_NAMES, SORT_ORDERS

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {name: getattr(Trade, name) for name in SORTABLE_FIELD_NAMES}


@dataclass
class TradeFilters:
    status: TradeStatus | None = None
    direction: TradeDirection | None = None
    asset_class: AssetClass | None = None
    symbol: str | None = None  # substring, case-insensitive
    setup_name: str | None = None  # substring, case-insensitive
    conviction: ConvictionLevel | None = None
    is_paper_trade: bool | None = None
    from_date: datetime | None = None  # on entry_date
    to_date: datetime | None = None


def get_trade(
    session: Session,
    user_id: uuid.UUID,
    trade_id: uuid.UUID,
    status: TradeStatus | None = None,
) -> Trade:
    stmt = select(Trade).where(Trade.id == trade_id, Trade.user_id == user_id)
    if status is not None:
        stmt = stmt.where(Trade.status == status)
    trade = session.exec(stmt).first()
    if trade is None:
        if status == TradeStatus.OPEN:
            raise NotFoundError("Open trade not found")
        raise NotFoundError("Trade not found")
    return trade


def resolve_sort(sort_by: str, sort_order: str, decimals_as_text: bool = False):
    """Map caller-supplied sort names onto a column expression via the allow-list.

    With ``decimals_as_text`` (SQLite) decimal columns hold strings and are
    cast so they order numerically.
    """
    column = SORTABLE_FIELDS.get(sort_by)
    if column is None:
        allowed = ", ".join(SORTABLE_FIELD_NAMES)
        raise ValidationError(f"Invalid sort column '{sort_by}'. Allowed: {allowed}")
    if decimals_as_text and isinstance(column.type, ExactDecimal):
        column = cast(column, Float)
    order = sort_order.lower()
    if order not in SORT_ORDERS:
        raise ValidationError(f"Invalid sort order '{sort_order}'. Allowed: asc, desc")
    return column.asc() if order == "asc" else column.desc()


def _apply_filters(stmt, user_id: uuid.UUID, filters: TradeFilters):
    stmt = stmt.where(Trade.user_id == user_id)
    if filters.status is not None:
        stmt = stmt.where(Trade.status == filters.status)
    if filters.direction is not None:
        stmt = stmt.where(Trade.direction == filters.direction)
    if filters.asset_class is not None:
        stmt = stmt.where(Trade.asset_class == filters.asset_class)
    if filters.symbol:
        stmt = stmt.where(col(Trade.symbol).ilike(f"%{filters.symbol}%"))
    if filters.setup_name:
        stmt = stmt.where(col(Trade.setup_name).ilike(f"%{filters.setup_name}%"))
    if filters.conviction is not None:
        stmt = stmt.where(Trade.conviction == filters.conviction)
    if filters.is_paper_trade is not None:
        stmt = stmt.where(Trade.is_paper_trade == filters.is_paper_trade)
    if filters.from_date is not None:
        stmt = stmt.where(Trade.entry_date >= filters.from_date)
    if filters.to_date is not None:
        stmt = stmt.where(Trade.entry_date <= filters.to_date)
    return stmt


def list_trades(
    session: Session,
    user_id: uuid.UUID,
    filters: TradeFilters,
    sort_by: str = "entry_date",
    sort_order: str = "desc",
    page: int = 1,
    per_page: int = 50,
) -> tuple[list[Trade], int]:
    """Return one page of the user's trades and the total match count."""
    order_by = resolve_sort(
        sort_by, sort_order, decimals_as_text=session.get_bind().dialect.name == "sqlite"
    )

    count_stmt = _apply_filters(select(func.count()).select_from(Trade), user_id, filters)
    total = session.exec(count_stmt).one()

    stmt = (
        _apply_filters(select(Trade), user_id, filters)
        .order_by(order_by)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return list(session.exec(stmt).all()), total


def fetch_ledger(
    session: Session,
    user_id: uuid.UUID,
    status: TradeStatus = TradeStatus.CLOSED,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    setup_name: str | None = None,
) -> list[Trade]:
    """Trades feeding the analytics, date range applied to the exit date."""
    stmt = select(Trade).where(Trade.user_id == user_id, Trade.status == status)
    if from_date is not None:
        stmt = stmt.where(Trade.exit_date >= from_date)
    if to_date is not None:
        stmt = stmt.where(Trade.exit_date <= to_date)
    if setup_name:
        stmt = stmt.where(Trade.setup_name == setup_name)
    return list(session.exec(stmt.order_by(Trade.exit_date)).all())


def apply_update(
    session: Session,
    user_id: uuid.UUID,
    trade_id: uuid.UUID,
    values: dict[str, Any],
    expected_status: TradeStatus | None = None,
) -> Trade:
    """Write ``values`` to one trade in a single conditional UPDATE.

    With ``expected_status`` the row only matches while the trade is still in
    that status, so of two concurrent transitions exactly one succeeds; the
    loser gets ConflictError and nothing of its update is applied.
    """
    stmt = (
        update(Trade)
        .where(Trade.id == trade_id, Trade.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if expected_status is not None:
        stmt = stmt.where(Trade.status == expected_status)

    result = session.exec(stmt)
    if result.rowcount == 0:
        session.rollback()
        if expected_status == TradeStatus.OPEN:
            raise ConflictError("Open trade not found")
        raise NotFoundError("Trade not found")
    session.commit()

    trade = session.get(Trade, trade_id)
    session.refresh(trade)
    return trade


def delete_trade(session: Session, user_id: uuid.UUID, trade_id: uuid.UUID):
    trade = get_trade(session, user_id, trade_id)
    for leg in list_legs(session, trade.id):
        session.delete(leg)
    session.delete(trade)
    session.commit()
    logger.info(f"Deleted trade {trade_id}")


def list_legs(session: Session, trade_id: uuid.UUID) -> list[TradeLeg]:
    stmt = select(TradeLeg).where(TradeLeg.trade_id == trade_id).order_by(TradeLeg.leg_number)
    return list(session.exec(stmt).all())


def add_leg(session: Session, trade: Trade, **fields) -> TradeLeg:
    """Append the next sequential leg to ``trade``."""
    last = session.exec(
        select(func.max(TradeLeg.leg_number)).where(TradeLeg.trade_id == trade.id)
    ).one()
    leg = TradeLeg(trade_id=trade.id, leg_number=(last or 0) + 1, **fields)
    session.add(leg)
    session.commit()
    session.refresh(leg)
    return leg
