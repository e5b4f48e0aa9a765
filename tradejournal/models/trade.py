"""Trade model — one journaled position from entry through close."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from sqlmodel import SQLModel, Field

from tradejournal.models.types import ExactDecimal


class TradeDirection(str, Enum):
    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class AssetClass(str, Enum):
    STOCKS = "stocks"
    OPTIONS = "options"
    FUTURES = "futures"
    FOREX = "forex"
    CRYPTO = "crypto"


class ConvictionLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


MONEY = ExactDecimal(20, 8)


def _money(**kwargs):
    return Field(default=None, max_digits=20, decimal_places=8, sa_type=MONEY, **kwargs)


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    symbol: str = Field(index=True, max_length=20)
    direction: TradeDirection
    asset_class: AssetClass = AssetClass.STOCKS
    status: TradeStatus = Field(default=TradeStatus.OPEN, index=True)

    # Entry (fixed at creation)
    entry_date: datetime = Field(index=True)
    entry_price: Decimal = Field(max_digits=20, decimal_places=8, sa_type=MONEY)
    quantity: Decimal = Field(max_digits=20, decimal_places=8, sa_type=MONEY)
    stop_loss: Decimal | None = _money()
    take_profit: Decimal | None = _money()

    # Exit
    exit_date: datetime | None = Field(default=None, index=True)
    exit_price: Decimal | None = _money()
    actual_exit_price: Decimal | None = _money()  # fill price, preferred over exit_price

    # Derived on close
    pnl: Decimal | None = _money()
    pnl_percent: Decimal | None = _money()
    commissions: Decimal | None = _money()
    net_pnl: Decimal | None = _money()
    r_multiple: Decimal | None = _money()
    mae: Decimal | None = _money()
    mfe: Decimal | None = _money()
    hold_time_minutes: int | None = None

    # Risk and setup
    risk_amount: Decimal | None = _money()
    risk_percent: Decimal | None = _money()
    position_size_pct: Decimal | None = _money()
    conviction: ConvictionLevel | None = None
    setup_name: str | None = Field(default=None, index=True, max_length=200)
    timeframe: str | None = None

    # Notes
    thesis: str | None = None
    mistakes: str | None = None
    lessons: str | None = None
    emotional_state: str | None = None
    market_condition: str | None = None

    # Grades
    execution_grade: str | None = None
    patience_grade: str | None = None
    discipline_grade: str | None = None
    overall_grade: str | None = None

    is_paper_trade: bool = False
    is_revenge_trade: bool = False
    broke_rules: bool = False
    followed_plan: bool = False

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
