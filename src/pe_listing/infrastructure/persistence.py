"""ListingRepository: concrete implementation of ListingRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.errors import InternalError
from src.pe_common.units import MAX_BIGINT
from src.pe_listing.domain.models import Listing

_COLUMNS = """listing_id, seller, energy_amount, price_per_unit, energy_type,
           location, expiry_height, is_active, created_at, updated_at"""

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_SQL = text(f"SELECT {_COLUMNS} FROM listings WHERE listing_id = :listing_id")

_GET_BY_IDS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM listings
    WHERE listing_id IN :listing_ids
    ORDER BY listing_id
""").bindparams(bindparam("listing_ids", expanding=True))

_LIST_LIVE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM listings
    WHERE is_active AND expiry_height >= :height
    ORDER BY listing_id
""")

_LIST_PAGE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM listings
    WHERE (NOT CAST(:active_only AS BOOLEAN) OR is_active)
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR listing_id < CAST(:cursor_id AS BIGINT))
    ORDER BY listing_id DESC
    LIMIT :limit
""")

_INSERT_SQL = text(f"""
    INSERT INTO listings
        (listing_id, seller, energy_amount, price_per_unit, energy_type,
         location, expiry_height, is_active)
    VALUES
        (:listing_id, :seller, :energy_amount, :price_per_unit, :energy_type,
         :location, :expiry_height, :is_active)
    RETURNING {_COLUMNS}
""")

# energy_amount may only shrink; the WHERE guard keeps a stale write from growing it back
_UPDATE_REMAINING_SQL = text(f"""
    UPDATE listings
    SET energy_amount = :energy_amount,
        is_active     = :is_active,
        updated_at    = NOW()
    WHERE listing_id = :listing_id AND energy_amount >= :energy_amount
    RETURNING {_COLUMNS}
""")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_listing(row: object) -> Listing:
    return Listing(
        listing_id=row.listing_id,  # type: ignore[attr-defined]
        seller=row.seller,  # type: ignore[attr-defined]
        energy_amount=row.energy_amount,  # type: ignore[attr-defined]
        price_per_unit=row.price_per_unit,  # type: ignore[attr-defined]
        energy_type=row.energy_type,  # type: ignore[attr-defined]
        location=row.location,  # type: ignore[attr-defined]
        expiry_height=row.expiry_height,  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingRepository:
    """Listings are never deleted; inactive and expired rows stay readable."""

    async def get(self, db: AsyncSession, listing_id: int) -> Listing | None:
        if not 0 <= listing_id <= MAX_BIGINT:
            return None
        result = await db.execute(_GET_SQL, {"listing_id": listing_id})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def get_by_ids(self, db: AsyncSession, listing_ids: list[int]) -> list[Listing]:
        if not listing_ids:
            return []
        result = await db.execute(_GET_BY_IDS_SQL, {"listing_ids": list(listing_ids)})
        return [_row_to_listing(row) for row in result.fetchall()]

    async def list_live(self, db: AsyncSession, height: int) -> list[Listing]:
        result = await db.execute(_LIST_LIVE_SQL, {"height": height})
        return [_row_to_listing(row) for row in result.fetchall()]

    async def list_page(
        self,
        db: AsyncSession,
        active_only: bool,
        cursor_id: int | None,
        limit: int,
    ) -> list[Listing]:
        result = await db.execute(
            _LIST_PAGE_SQL,
            {"active_only": active_only, "cursor_id": cursor_id, "limit": limit},
        )
        return [_row_to_listing(row) for row in result.fetchall()]

    async def insert(self, db: AsyncSession, listing: Listing) -> Listing:
        result = await db.execute(
            _INSERT_SQL,
            {
                "listing_id": listing.listing_id,
                "seller": listing.seller,
                "energy_amount": listing.energy_amount,
                "price_per_unit": listing.price_per_unit,
                "energy_type": listing.energy_type,
                "location": listing.location,
                "expiry_height": listing.expiry_height,
                "is_active": listing.is_active,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Listing insert returned no rows: this should never happen")
        return _row_to_listing(row)

    async def update_remaining(self, db: AsyncSession, listing: Listing) -> Listing:
        result = await db.execute(
            _UPDATE_REMAINING_SQL,
            {
                "listing_id": listing.listing_id,
                "energy_amount": listing.energy_amount,
                "is_active": listing.is_active,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Listing {listing.listing_id} update rejected")
        return _row_to_listing(row)
