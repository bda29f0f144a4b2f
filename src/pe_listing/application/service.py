"""ListingRegistry: owns listing records and their lifecycle.

`create` runs in its own transaction. `apply_purchase` is only called from
the trade ledger and runs inside the ledger's transaction without
committing.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.cursor import cursor_decode, cursor_encode
from src.pe_common.errors import ListingNotFoundError
from src.pe_common.height import HeightProvider, get_height_clock
from src.pe_listing.application.schemas import ListingListResponse, ListingResponse
from src.pe_listing.domain.models import Listing
from src.pe_listing.domain.repository import ListingRepositoryProtocol
from src.pe_listing.domain.rules import check_purchase, consume, validate_new_listing
from src.pe_listing.infrastructure.persistence import ListingRepository
from src.pe_platform.domain.repository import PlatformStateRepositoryProtocol
from src.pe_platform.infrastructure.persistence import PlatformStateRepository

logger = logging.getLogger(__name__)


class ListingRegistry:
    def __init__(
        self,
        repo: ListingRepositoryProtocol | None = None,
        platform: PlatformStateRepositoryProtocol | None = None,
        height: HeightProvider | None = None,
    ) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()
        self._platform: PlatformStateRepositoryProtocol = platform or PlatformStateRepository()
        self._height: HeightProvider = height or get_height_clock()

    async def create(
        self,
        db: AsyncSession,
        seller: str,
        amount: int,
        unit_price: int,
        energy_type: str,
        location: str,
        duration: int,
    ) -> Listing:
        validate_new_listing(amount, unit_price, duration)
        try:
            await self._platform.lock(db)
            listing_id = await self._platform.allocate_listing_id(db)
            listing = await self._repo.insert(
                db,
                Listing(
                    listing_id=listing_id,
                    seller=seller,
                    energy_amount=amount,
                    price_per_unit=unit_price,
                    energy_type=energy_type,
                    location=location,
                    expiry_height=self._height.current_height() + duration,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Listing created: id=%d seller=%s amount=%d price=%d expiry=%d",
            listing.listing_id, seller, amount, unit_price, listing.expiry_height,
        )
        return listing

    async def get(self, db: AsyncSession, listing_id: int) -> Listing | None:
        return await self._repo.get(db, listing_id)

    async def apply_purchase(self, db: AsyncSession, listing_id: int, amount: int) -> Listing:
        """Validate and consume `amount` kWh. Returns the updated listing."""
        listing = check_purchase(
            await self._repo.get(db, listing_id), listing_id, amount, self._height.current_height()
        )
        return await self._repo.update_remaining(db, consume(listing, amount))

    async def get_listing(self, db: AsyncSession, listing_id: int) -> ListingResponse:
        listing = await self._repo.get(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return ListingResponse.from_domain(listing, self._height.current_height())

    async def list_listings(
        self, db: AsyncSession, active_only: bool, cursor: str | None, limit: int
    ) -> ListingListResponse:
        listings = await self._repo.list_page(db, active_only, cursor_decode(cursor), limit + 1)
        has_more = len(listings) > limit
        page = listings[:limit]
        height = self._height.current_height()
        return ListingListResponse(
            items=[ListingResponse.from_domain(listing, height) for listing in page],
            next_cursor=cursor_encode(page[-1].listing_id) if has_more and page else None,
            has_more=has_more,
        )
