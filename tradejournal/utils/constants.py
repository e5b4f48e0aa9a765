"""Shared constants and defaults."""

# Setup label for trades journaled without a setup name
NO_SETUP_LABEL = "No Setup"

# Fields a caller may sort the trade list by (see trade_store.SORTABLE_FIELDS)
SORTABLE_FIELD_NAMES = [
    "entry_date",
    "exit_date",
    "symbol",
    "direction",
    "asset_class",
    "status",
    "entry_price",
    "exit_price",
    "quantity",
    "pnl",
    "net_pnl",
    "pnl_percent",
    "r_multiple",
    "hold_time_minutes",
    "created_at",
    "updated_at",
]

SORT_ORDERS = ["asc", "desc"]
