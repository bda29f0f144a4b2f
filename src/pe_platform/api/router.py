"""pe_platform REST endpoints.

GET /platform/stats      : global counters + current height
GET /platform/invariants : custody / energy invariant check (owner only)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.database import get_db_session
from src.pe_common.response import ApiResponse, success_response
from src.pe_gateway.auth.dependencies import require_platform_owner
from src.pe_platform.application.service import PlatformService

router = APIRouter(prefix="/platform", tags=["platform"])

_service = PlatformService()


@router.get("/stats")
async def get_stats(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_stats(db)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    owner: Annotated[str, Depends(require_platform_owner)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.verify_invariants(db)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
