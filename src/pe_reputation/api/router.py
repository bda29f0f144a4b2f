"""pe_reputation REST endpoints.

GET /reputation/{identity}: (total_trades, successful_trades, score), defaults when absent
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.database import get_db_session
from src.pe_common.response import ApiResponse, success_response
from src.pe_reputation.application.service import ReputationTracker

router = APIRouter(prefix="/reputation", tags=["reputation"])

_service = ReputationTracker()


@router.get("/{identity}")
async def get_reputation(
    identity: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_reputation(db, identity)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
