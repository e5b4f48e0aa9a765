"""Pydantic schemas for Trade API."""

import re
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from tradejournal.models.trade import AssetClass, ConvictionLevel, TradeDirection, TradeStatus

_GRADE_RE = re.compile(r"^[A-DF][+-]?$")


def _check_grade(value: str | None) -> str | None:
    if value is None:
        return None
    grade = value.strip().upper()
    if not _GRADE_RE.fullmatch(grade):
        raise ValueError("must be a letter grade A-F with optional +/-")
    return grade


class TradeCreate(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)
    direction: TradeDirection
    asset_class: AssetClass = AssetClass.STOCKS
    entry_date: datetime
    # Sign checks live in the trade validator so errors name the broken rule
    entry_price: Decimal
    quantity: Decimal
    stop_loss: Decimal | None = Field(default=None, gt=0)
    take_profit: Decimal | None = Field(default=None, gt=0)
    risk_amount: Decimal | None = Field(default=None, ge=0)
    risk_percent: Decimal | None = Field(default=None, ge=0, le=100)
    position_size_pct: Decimal | None = Field(default=None, ge=0)
    conviction: ConvictionLevel | None = None
    setup_name: str | None = Field(default=None, max_length=200)
    timeframe: str | None = Field(default=None, max_length=20)
    thesis: str | None = Field(default=None, max_length=10_000)
    emotional_state: str | None = None
    market_condition: str | None = None
    is_paper_trade: bool = False
    commissions: Decimal | None = Field(default=None, ge=0)

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        text = value.strip().upper()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("setup_name")
    @classmethod
    def _trim_setup(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TradeUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    stop_loss: Decimal | None = Field(default=None, gt=0)
    take_profit: Decimal | None = Field(default=None, gt=0)
    risk_amount: Decimal | None = Field(default=None, ge=0)
    risk_percent: Decimal | None = Field(default=None, ge=0, le=100)
    position_size_pct: Decimal | None = Field(default=None, ge=0)
    conviction: ConvictionLevel | None = None
    setup_name: str | None = Field(default=None, max_length=200)
    timeframe: str | None = Field(default=None, max_length=20)
    thesis: str | None = Field(default=None, max_length=10_000)
    emotional_state: str | None = None
    market_condition: str | None = None
    commissions: Decimal | None = Field(default=None, ge=0)
    is_paper_trade: bool | None = None
    is_revenge_trade: bool | None = None

    # Annotations, editable after close
    mistakes: str | None = None
    lessons: str | None = None
    execution_grade: str | None = None
    patience_grade: str | None = None
    discipline_grade: str | None = None
    overall_grade: str | None = None
    broke_rules: bool | None = None
    followed_plan: bool | None = None

    @field_validator("execution_grade", "patience_grade", "discipline_grade", "overall_grade")
    @classmethod
    def _validate_grade(cls, value: str | None) -> str | None:
        return _check_grade(value)

    @field_validator("setup_name")
    @classmethod
    def _trim_setup(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TradeClose(BaseModel):
    exit_date: datetime
    exit_price: Decimal
    actual_exit_price: Decimal | None = None
    mae: Decimal | None = None
    mfe: Decimal | None = None
    mistakes: str | None = None
    lessons: str | None = None
    execution_grade: str | None = None
    patience_grade: str | None = None
    discipline_grade: str | None = None
    overall_grade: str | None = None
    broke_rules: bool | None = None
    followed_plan: bool | None = None

    @field_validator("execution_grade", "patience_grade", "discipline_grade", "overall_grade")
    @classmethod
    def _validate_grade(cls, value: str | None) -> str | None:
        return _check_grade(value)


class TradeLegCreate(BaseModel):
    action: str
    quantity: Decimal
    price: Decimal
    timestamp: datetime
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("action")
    @classmethod
    def _validate_action(cls, value: str) -> str:
        action = value.strip().lower()
        if action not in ("buy", "sell"):
            raise ValueError("must be 'buy' or 'sell'")
        return action


class TradeLegRead(BaseModel):
    id: uuid.UUID
    trade_id: uuid.UUID
    leg_number: int
    action: str
    quantity: Decimal
    price: Decimal
    timestamp: datetime
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class TradeRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    symbol: str
    direction: TradeDirection
    asset_class: AssetClass
    status: TradeStatus
    entry_date: datetime
    entry_price: Decimal
    quantity: Decimal
    stop_loss: Decimal | None
    take_profit: Decimal | None
    exit_date: datetime | None
    exit_price: Decimal | None
    actual_exit_price: Decimal | None
    pnl: Decimal | None
    pnl_percent: Decimal | None
    commissions: Decimal | None
    net_pnl: Decimal | None
    r_multiple: Decimal | None
    mae: Decimal | None
    mfe: Decimal | None
    hold_time_minutes: int | None
    risk_amount: Decimal | None
    risk_percent: Decimal | None
    position_size_pct: Decimal | None
    conviction: ConvictionLevel | None
    setup_name: str | None
    timeframe: str | None
    thesis: str | None
    mistakes: str | None
    lessons: str | None
    emotional_state: str | None
    market_condition: str | None
    execution_grade: str | None
    patience_grade: str | None
    discipline_grade: str | None
    overall_grade: str | None
    is_paper_trade: bool
    is_revenge_trade: bool
    broke_rules: bool
    followed_plan: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TradeDetail(TradeRead):
    legs: list[TradeLegRead] = []


class TradeListResponse(BaseModel):
    trades: list[TradeRead]
    total: int
    page: int
    per_page: int
    total_pages: int


class TradeStats(BaseModel):
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: Decimal
    total_pnl: Decimal
    avg_win: Decimal
    avg_loss: Decimal
    profit_factor: Decimal | None
    expectancy: Decimal
    avg_r_multiple: Decimal | None
    largest_win: Decimal
    largest_loss: Decimal
    avg_hold_time_minutes: int | None
