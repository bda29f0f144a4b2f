"""pe_listing REST API.

POST /listings               : create a listing as the caller (seller)
GET  /listings               : cursor-paginated list, newest first
GET  /listings/{listing_id}  : single listing, including inactive/expired ones
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.database import get_db_session
from src.pe_common.height import get_height_clock
from src.pe_common.response import ApiResponse, success_response
from src.pe_gateway.auth.dependencies import get_caller_id
from src.pe_listing.application.schemas import CreateListingRequest, ListingResponse
from src.pe_listing.application.service import ListingRegistry

router = APIRouter(prefix="/listings", tags=["listings"])

_service = ListingRegistry()


@router.post("")
async def create_listing(
    body: CreateListingRequest,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    listing = await _service.create(
        db,
        seller=caller,
        amount=body.energy_amount,
        unit_price=body.price_per_unit,
        energy_type=body.energy_type,
        location=body.location,
        duration=body.duration,
    )
    data = ListingResponse.from_domain(listing, get_height_clock().current_height())
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("")
async def list_listings(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    active_only: bool = Query(True, description="Hide exhausted listings"),
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    data = await _service.list_listings(db, active_only, cursor, limit)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{listing_id}")
async def get_listing(
    listing_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_listing(db, listing_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
