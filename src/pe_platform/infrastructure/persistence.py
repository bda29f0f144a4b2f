"""PlatformStateRepository: single-row `platform_state` table (id = 1).

`lock()` takes the row lock that serializes every mutating operation:
all writers queue on it, so operations never interleave their reads and
writes. The lock is released when the caller commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_account.domain.constants import ESCROW_CUSTODY_ID
from src.pe_common.errors import InternalError
from src.pe_platform.domain.models import InvariantInputs, PlatformState

_COLUMNS = "next_listing_id, next_trade_id, total_energy_traded, total_platform_revenue"

_LOCK_SQL = text(f"SELECT {_COLUMNS} FROM platform_state WHERE id = 1 FOR UPDATE")

_GET_SQL = text(f"SELECT {_COLUMNS} FROM platform_state WHERE id = 1")

_ALLOCATE_LISTING_ID_SQL = text("""
    UPDATE platform_state
    SET next_listing_id = next_listing_id + 1, updated_at = NOW()
    WHERE id = 1
    RETURNING next_listing_id - 1 AS allocated_id
""")

_ALLOCATE_TRADE_ID_SQL = text("""
    UPDATE platform_state
    SET next_trade_id = next_trade_id + 1, updated_at = NOW()
    WHERE id = 1
    RETURNING next_trade_id - 1 AS allocated_id
""")

_RECORD_SETTLEMENT_SQL = text(f"""
    UPDATE platform_state
    SET total_energy_traded    = total_energy_traded + :energy_amount,
        total_platform_revenue = total_platform_revenue + :fee,
        updated_at = NOW()
    WHERE id = 1
    RETURNING {_COLUMNS}
""")

_CUSTODY_BALANCE_SQL = text(
    "SELECT COALESCE(SUM(balance), 0) FROM accounts WHERE user_id = :custody_id"
)
_PENDING_ESCROW_SQL = text("SELECT COALESCE(SUM(amount), 0) FROM escrows")
_COMPLETED_ENERGY_SQL = text(
    "SELECT COALESCE(SUM(energy_amount), 0) FROM trades WHERE is_completed"
)


def _row_to_state(row: object) -> PlatformState:
    return PlatformState(
        next_listing_id=row.next_listing_id,  # type: ignore[attr-defined]
        next_trade_id=row.next_trade_id,  # type: ignore[attr-defined]
        total_energy_traded=row.total_energy_traded,  # type: ignore[attr-defined]
        total_platform_revenue=row.total_platform_revenue,  # type: ignore[attr-defined]
    )


class PlatformStateRepository:
    async def lock(self, db: AsyncSession) -> PlatformState:
        row = (await db.execute(_LOCK_SQL)).fetchone()
        if row is None:
            raise InternalError("platform_state row missing: run migrations")
        return _row_to_state(row)

    async def get(self, db: AsyncSession) -> PlatformState:
        row = (await db.execute(_GET_SQL)).fetchone()
        if row is None:
            raise InternalError("platform_state row missing: run migrations")
        return _row_to_state(row)

    async def allocate_listing_id(self, db: AsyncSession) -> int:
        return await self._allocate(db, _ALLOCATE_LISTING_ID_SQL)

    async def allocate_trade_id(self, db: AsyncSession) -> int:
        return await self._allocate(db, _ALLOCATE_TRADE_ID_SQL)

    async def record_settlement(
        self, db: AsyncSession, energy_amount: int, fee: int
    ) -> PlatformState:
        row = (
            await db.execute(_RECORD_SETTLEMENT_SQL, {"energy_amount": energy_amount, "fee": fee})
        ).fetchone()
        if row is None:
            raise InternalError("platform_state row missing: run migrations")
        return _row_to_state(row)

    async def get_invariant_inputs(self, db: AsyncSession) -> InvariantInputs:
        custody = (
            await db.execute(_CUSTODY_BALANCE_SQL, {"custody_id": ESCROW_CUSTODY_ID})
        ).scalar_one()
        pending = (await db.execute(_PENDING_ESCROW_SQL)).scalar_one()
        completed = (await db.execute(_COMPLETED_ENERGY_SQL)).scalar_one()
        return InvariantInputs(
            custody_balance=int(custody),
            pending_escrow_total=int(pending),
            completed_energy_total=int(completed),
        )

    async def _allocate(self, db: AsyncSession, sql: object) -> int:
        row = (await db.execute(sql)).fetchone()  # type: ignore[arg-type]
        if row is None:
            raise InternalError("platform_state row missing: run migrations")
        return int(row.allocated_id)
