"""Trade invariants checked before any write."""

from datetime import datetime
from decimal import Decimal

from tradejournal.errors import ValidationError
from tradejournal.models.trade import TradeDirection
from tradejournal.services.metrics import as_utc


def validate_trade(
    entry_price: Decimal,
    quantity: Decimal,
    stop_loss: Decimal | None,
    take_profit: Decimal | None,
    direction: TradeDirection,
):
    """Raise ValidationError for the first violated price/size rule."""
    if entry_price <= 0:
        raise ValidationError("entry_price must be > 0")
    if quantity <= 0:
        raise ValidationError("quantity must be > 0")

    if stop_loss is not None:
        if direction == TradeDirection.LONG and stop_loss >= entry_price:
            raise ValidationError("stop_loss must be below entry_price for long trades")
        if direction == TradeDirection.SHORT and stop_loss <= entry_price:
            raise ValidationError("stop_loss must be above entry_price for short trades")

    if take_profit is not None:
        if direction == TradeDirection.LONG and take_profit <= entry_price:
            raise ValidationError("take_profit must be above entry_price for long trades")
        if direction == TradeDirection.SHORT and take_profit >= entry_price:
            raise ValidationError("take_profit must be below entry_price for short trades")


def validate_exit(
    entry_date: datetime,
    exit_date: datetime,
    exit_price: Decimal,
    actual_exit_price: Decimal | None = None,
):
    if exit_price <= 0:
        raise ValidationError("exit_price must be > 0")
    if actual_exit_price is not None and actual_exit_price <= 0:
        raise ValidationError("actual_exit_price must be > 0")
    if as_utc(exit_date) < as_utc(entry_date):
        raise ValidationError("exit_date must not be before entry_date")


def validate_leg(quantity: Decimal, price: Decimal):
    if quantity <= 0:
        raise ValidationError("quantity must be > 0")
    if price <= 0:
        raise ValidationError("price must be > 0")
