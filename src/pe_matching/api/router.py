"""pe_matching REST API: POST /match buys from the best-scoring listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.database import get_db_session
from src.pe_common.response import ApiResponse, success_response
from src.pe_gateway.auth.dependencies import get_caller_id
from src.pe_matching.application.schemas import AutoMatchRequest, AutoMatchResponse
from src.pe_matching.application.service import MatcherService
from src.pe_matching.domain.models import MatchCriteria

router = APIRouter(prefix="/match", tags=["matching"])

_service = MatcherService()


@router.post("")
async def auto_match(
    body: AutoMatchRequest,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    criteria = MatchCriteria(
        buyer=caller,
        max_price=body.max_price,
        desired_amount=body.desired_amount,
        preferred_type=body.preferred_type,
        max_distance=body.max_distance,
        min_reputation=body.min_reputation,
    )
    result = await _service.auto_match(db, criteria)
    resp = success_response(AutoMatchResponse.from_result(result).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
