"""pe_account REST API: 3 endpoints, all require a Bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_account.application.schemas import CreditRequest
from src.pe_account.application.service import AccountApplicationService
from src.pe_common.database import get_db_session
from src.pe_common.response import ApiResponse, success_response
from src.pe_gateway.auth.dependencies import get_caller_id

router = APIRouter(prefix="/account", tags=["account"])

_service = AccountApplicationService()


@router.get("/balance")
async def get_balance(
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, caller)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/credit")
async def credit(
    body: CreditRequest,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.credit(db, caller, body.user_id, body.amount)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/ledger")
async def list_ledger(
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    entry_type: str | None = Query(None, description="Filter by LedgerEntryType"),
) -> ApiResponse:
    data = await _service.list_ledger(db, caller, cursor, limit, entry_type)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
