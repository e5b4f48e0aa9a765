"""Trade journal API."""

import math
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from tradejournal.config import settings
from tradejournal.database import get_session
from tradejournal.models.trade import AssetClass, ConvictionLevel, TradeDirection, TradeStatus
from tradejournal.models.user import User
from tradejournal.schemas.trade import (
    TradeClose,
    TradeCreate,
    TradeDetail,
    TradeLegCreate,
    TradeLegRead,
    TradeListResponse,
    TradeRead,
    TradeStats,
    TradeUpdate,
)
from tradejournal.services import analytics, lifecycle, trade_store
from tradejournal.services.validation import validate_leg
from tradejournal.api.deps import get_current_user

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return lifecycle.create_trade(session, user.id, data)


@router.get("", response_model=TradeListResponse)
def list_trades(
    status: TradeStatus | None = None,
    direction: TradeDirection | None = None,
    asset_class: AssetClass | None = None,
    symbol: str | None = None,
    setup_name: str | None = None,
    conviction: ConvictionLevel | None = None,
    is_paper_trade: bool | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    sort_by: str = "entry_date",
    sort_order: str = "desc",
    page: int = Query(default=1, ge=1),
    per_page: int | None = Query(default=None, ge=1),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    per_page = min(per_page or settings.default_page_size, settings.max_page_size)
    filters = trade_store.TradeFilters(
        status=status,
        direction=direction,
        asset_class=asset_class,
        symbol=symbol,
        setup_name=setup_name,
        conviction=conviction,
        is_paper_trade=is_paper_trade,
        from_date=from_date,
        to_date=to_date,
    )
    trades, total = trade_store.list_trades(
        session, user.id, filters,
        sort_by=sort_by, sort_order=sort_order, page=page, per_page=per_page,
    )
    return TradeListResponse(
        trades=[TradeRead.model_validate(t) for t in trades],
        total=total,
        page=page,
        per_page=per_page,
        total_pages=math.ceil(total / per_page),
    )


@router.get("/stats", response_model=TradeStats)
def trade_stats(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Summary figures across all of the user's closed trades."""
    return analytics.compute_trade_stats(trade_store.fetch_ledger(session, user.id))


@router.get("/{trade_id}", response_model=TradeDetail)
def get_trade(
    trade_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = trade_store.get_trade(session, user.id, trade_id)
    legs = trade_store.list_legs(session, trade.id)
    return TradeDetail(
        **TradeRead.model_validate(trade).model_dump(),
        legs=[TradeLegRead.model_validate(leg) for leg in legs],
    )


@router.patch("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: uuid.UUID,
    data: TradeUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return lifecycle.update_trade(session, user.id, trade_id, data)


@router.post("/{trade_id}/close", response_model=TradeRead)
def close_trade(
    trade_id: uuid.UUID,
    data: TradeClose,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return lifecycle.close_trade(session, user.id, trade_id, data)


@router.post("/{trade_id}/cancel", response_model=TradeRead)
def cancel_trade(
    trade_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return lifecycle.cancel_trade(session, user.id, trade_id)


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade_store.delete_trade(session, user.id, trade_id)


@router.post("/{trade_id}/legs", response_model=TradeLegRead, status_code=201)
def add_trade_leg(
    trade_id: uuid.UUID,
    data: TradeLegCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = trade_store.get_trade(session, user.id, trade_id)
    validate_leg(data.quantity, data.price)
    return trade_store.add_leg(session, trade, **data.model_dump())
