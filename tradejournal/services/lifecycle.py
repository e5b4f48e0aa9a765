"""Trade lifecycle: create, patch, close and cancel.

State machine::

    open --close--> closed
    open --cancel-> cancelled

Closed and cancelled trades take no further transitions. The derived close
fields are computed up front and written with the status change in one
conditional UPDATE, so a trade is either fully closed or untouched.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Session

from tradejournal.errors import ConflictError, ValidationError
from tradejournal.models.trade import Trade, TradeStatus
from tradejournal.schemas.trade import TradeClose, TradeCreate, TradeUpdate
from tradejournal.services import trade_store
from tradejournal.services.metrics import as_utc, calculate_close_metrics, calculate_risk_from_stop
from tradejournal.services.validation import validate_exit, validate_trade

logger = logging.getLogger(__name__)

# Editable at any status
ANNOTATION_FIELDS = {
    "mistakes",
    "lessons",
    "execution_grade",
    "patience_grade",
    "discipline_grade",
    "overall_grade",
    "broke_rules",
    "followed_plan",
}

# Optional close-request fields copied onto the trade when supplied
CLOSE_OPTIONAL_FIELDS = ANNOTATION_FIELDS | {"mae", "mfe"}

NON_NULLABLE_FIELDS = {"is_paper_trade", "is_revenge_trade", "broke_rules", "followed_plan"}


def create_trade(session: Session, user_id: uuid.UUID, data: TradeCreate) -> Trade:
    validate_trade(data.entry_price, data.quantity, data.stop_loss, data.take_profit, data.direction)

    risk_amount = data.risk_amount
    if risk_amount is None and data.stop_loss is not None:
        risk_amount = calculate_risk_from_stop(
            data.direction, data.entry_price, data.stop_loss, data.quantity
        )

    payload = data.model_dump(exclude={"risk_amount", "entry_date"})
    trade = Trade(
        **payload,
        user_id=user_id,
        status=TradeStatus.OPEN,
        entry_date=as_utc(data.entry_date),
        risk_amount=risk_amount,
    )
    session.add(trade)
    session.commit()
    session.refresh(trade)

    logger.info(f"Trade created: {trade.id} {trade.symbol} {trade.direction.value}")
    return trade


def build_close_update(trade: Trade, request: TradeClose) -> dict[str, Any]:
    """Column values that turn ``trade`` into a closed trade.

    ``exit_price`` is stored as submitted; metrics use the actual fill price
    when one was reported.
    """
    if trade.status != TradeStatus.OPEN:
        raise ConflictError("Open trade not found")

    validate_exit(trade.entry_date, request.exit_date, request.exit_price, request.actual_exit_price)

    effective_exit = (
        request.actual_exit_price if request.actual_exit_price is not None else request.exit_price
    )
    metrics = calculate_close_metrics(trade, request.exit_date, effective_exit)

    values = {
        "status": TradeStatus.CLOSED,
        "exit_date": as_utc(request.exit_date),
        "exit_price": request.exit_price,
        "actual_exit_price": request.actual_exit_price,
        "pnl": metrics.pnl,
        "pnl_percent": metrics.pnl_percent,
        "net_pnl": metrics.net_pnl,
        "r_multiple": metrics.r_multiple,
        "hold_time_minutes": metrics.hold_time_minutes,
        "updated_at": datetime.now(timezone.utc),
    }
    for field in CLOSE_OPTIONAL_FIELDS:
        value = getattr(request, field)
        if value is not None:
            values[field] = value
    return values


def close_trade(
    session: Session,
    user_id: uuid.UUID,
    trade_id: uuid.UUID,
    request: TradeClose,
) -> Trade:
    trade = trade_store.get_trade(session, user_id, trade_id, status=TradeStatus.OPEN)
    values = build_close_update(trade, request)
    closed = trade_store.apply_update(
        session, user_id, trade_id, values, expected_status=TradeStatus.OPEN
    )
    logger.info(
        f"Trade closed: {closed.id} {closed.symbol} net_pnl={closed.net_pnl} "
        f"r={closed.r_multiple}"
    )
    return closed


def cancel_trade(session: Session, user_id: uuid.UUID, trade_id: uuid.UUID) -> Trade:
    trade_store.get_trade(session, user_id, trade_id, status=TradeStatus.OPEN)
    values = {"status": TradeStatus.CANCELLED, "updated_at": datetime.now(timezone.utc)}
    cancelled = trade_store.apply_update(
        session, user_id, trade_id, values, expected_status=TradeStatus.OPEN
    )
    logger.info(f"Trade cancelled: {cancelled.id} {cancelled.symbol}")
    return cancelled


def build_patch(trade: Trade, patch: TradeUpdate) -> dict[str, Any]:
    """Validate a partial update against the stored trade.

    Fields absent from the request are left alone; fields sent as null are
    cleared. Risk fields only change while the trade is open.
    """
    values = patch.model_dump(exclude_unset=True)
    if not values:
        return values

    for field in NON_NULLABLE_FIELDS & values.keys():
        if values[field] is None:
            raise ValidationError(f"{field} cannot be null")

    risk_changes = sorted(values.keys() - ANNOTATION_FIELDS)
    if risk_changes and trade.status != TradeStatus.OPEN:
        raise ValidationError(
            f"{', '.join(risk_changes)} cannot be changed on a {trade.status.value} trade"
        )

    stop_loss = values.get("stop_loss", trade.stop_loss)
    take_profit = values.get("take_profit", trade.take_profit)
    validate_trade(trade.entry_price, trade.quantity, stop_loss, take_profit, trade.direction)

    if values.get("stop_loss") is not None and "risk_amount" not in values:
        values["risk_amount"] = calculate_risk_from_stop(
            trade.direction, trade.entry_price, stop_loss, trade.quantity
        )
    elif "stop_loss" in values and "risk_amount" not in values:
        # Stop cleared; risk derived from it no longer applies
        values["risk_amount"] = None

    values["updated_at"] = datetime.now(timezone.utc)
    return values


def update_trade(
    session: Session,
    user_id: uuid.UUID,
    trade_id: uuid.UUID,
    patch: TradeUpdate,
) -> Trade:
    trade = trade_store.get_trade(session, user_id, trade_id)
    values = build_patch(trade, patch)
    if not values:
        return trade

    # Risk edits race with close; require the trade to still be open
    expected = None if values.keys() <= ANNOTATION_FIELDS | {"updated_at"} else TradeStatus.OPEN
    return trade_store.apply_update(session, user_id, trade_id, values, expected_status=expected)
