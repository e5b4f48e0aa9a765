"""TradeLeg model — append-only partial fill attached to a trade."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from tradejournal.models.trade import MONEY


class TradeLeg(SQLModel, table=True):
    __tablename__ = "trade_leg"
    __table_args__ = (UniqueConstraint("trade_id", "leg_number"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    trade_id: uuid.UUID = Field(foreign_key="trade.id", index=True)
    leg_number: int  # 1-based, sequential per trade
    action: str  # "buy" or "sell"
    quantity: Decimal = Field(max_digits=20, decimal_places=8, sa_type=MONEY)
    price: Decimal = Field(max_digits=20, decimal_places=8, sa_type=MONEY)
    timestamp: datetime
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
