"""Repository Protocol: dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_listing.domain.models import Listing


class ListingRepositoryProtocol(Protocol):
    async def get(self, db: AsyncSession, listing_id: int) -> Listing | None: ...

    async def get_by_ids(self, db: AsyncSession, listing_ids: list[int]) -> list[Listing]: ...

    async def list_live(self, db: AsyncSession, height: int) -> list[Listing]: ...

    async def list_page(
        self,
        db: AsyncSession,
        active_only: bool,
        cursor_id: int | None,
        limit: int,
    ) -> list[Listing]: ...

    async def insert(self, db: AsyncSession, listing: Listing) -> Listing: ...

    async def update_remaining(self, db: AsyncSession, listing: Listing) -> Listing: ...
