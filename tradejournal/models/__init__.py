"""Database models."""

from tradejournal.models.user import User
from tradejournal.models.trade import (
    AssetClass,
    ConvictionLevel,
    Trade,
    TradeDirection,
    TradeStatus,
)
from tradejournal.models.trade_leg import TradeLeg

__all__ = [
    "User",
    "Trade",
    "TradeLeg",
    "TradeDirection",
    "TradeStatus",
    "AssetClass",
    "ConvictionLevel",
]
