"""pe_trade REST API.

POST /trades                    : purchase from a listing (funds go to escrow)
GET  /trades/{trade_id}         : trade plus its pending escrow entry
POST /trades/{trade_id}/confirm : buyer confirms delivery, escrow released
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.database import get_db_session
from src.pe_common.response import ApiResponse, success_response
from src.pe_gateway.auth.dependencies import get_caller_id
from src.pe_trade.application.schemas import PurchaseRequest, TradeResponse
from src.pe_trade.application.service import TradeLedgerService

router = APIRouter(prefix="/trades", tags=["trades"])

_service = TradeLedgerService()


@router.post("")
async def purchase(
    body: PurchaseRequest,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    trade = await _service.purchase(db, caller, body.listing_id, body.energy_amount)
    data = TradeResponse.from_domain(trade, escrow_amount=trade.total_price)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{trade_id}")
async def get_trade(
    trade_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_trade(db, trade_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{trade_id}/confirm")
async def confirm(
    trade_id: int,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.confirm(db, caller, trade_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
