"""TradeRepository and EscrowRepository: raw SQL over `trades` / `escrows`.

Transaction ownership: the CALLER (TradeLedgerService) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.errors import InternalError
from src.pe_common.units import MAX_BIGINT
from src.pe_trade.domain.models import EscrowEntry, Trade

_TRADE_COLUMNS = """trade_id, listing_id, buyer, seller, energy_amount, total_price,
           created_height, is_completed, completed_height, updated_at"""

_GET_TRADE_SQL = text(f"SELECT {_TRADE_COLUMNS} FROM trades WHERE trade_id = :trade_id")

_INSERT_TRADE_SQL = text(f"""
    INSERT INTO trades
        (trade_id, listing_id, buyer, seller, energy_amount, total_price,
         created_height, is_completed)
    VALUES
        (:trade_id, :listing_id, :buyer, :seller, :energy_amount, :total_price,
         :created_height, FALSE)
    RETURNING {_TRADE_COLUMNS}
""")

# is_completed flips false -> true exactly once
_COMPLETE_TRADE_SQL = text(f"""
    UPDATE trades
    SET is_completed = TRUE,
        completed_height = :completed_height,
        updated_at = NOW()
    WHERE trade_id = :trade_id AND NOT is_completed
    RETURNING {_TRADE_COLUMNS}
""")

_GET_ESCROW_SQL = text(
    "SELECT trade_id, amount, depositor FROM escrows WHERE trade_id = :trade_id"
)

_INSERT_ESCROW_SQL = text("""
    INSERT INTO escrows (trade_id, amount, depositor)
    VALUES (:trade_id, :amount, :depositor)
    RETURNING trade_id, amount, depositor
""")

_DELETE_ESCROW_SQL = text("DELETE FROM escrows WHERE trade_id = :trade_id RETURNING trade_id")


def _row_to_trade(row: object) -> Trade:
    return Trade(
        trade_id=row.trade_id,  # type: ignore[attr-defined]
        listing_id=row.listing_id,  # type: ignore[attr-defined]
        buyer=row.buyer,  # type: ignore[attr-defined]
        seller=row.seller,  # type: ignore[attr-defined]
        energy_amount=row.energy_amount,  # type: ignore[attr-defined]
        total_price=row.total_price,  # type: ignore[attr-defined]
        created_at=row.created_height,  # type: ignore[attr-defined]
        is_completed=row.is_completed,  # type: ignore[attr-defined]
        completed_at=row.completed_height,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_escrow(row: object) -> EscrowEntry:
    return EscrowEntry(
        trade_id=row.trade_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        depositor=row.depositor,  # type: ignore[attr-defined]
    )


class TradeRepository:
    async def get(self, db: AsyncSession, trade_id: int) -> Trade | None:
        if not 0 <= trade_id <= MAX_BIGINT:
            return None
        row = (await db.execute(_GET_TRADE_SQL, {"trade_id": trade_id})).fetchone()
        return _row_to_trade(row) if row else None

    async def insert(self, db: AsyncSession, trade: Trade) -> Trade:
        result = await db.execute(
            _INSERT_TRADE_SQL,
            {
                "trade_id": trade.trade_id,
                "listing_id": trade.listing_id,
                "buyer": trade.buyer,
                "seller": trade.seller,
                "energy_amount": trade.energy_amount,
                "total_price": trade.total_price,
                "created_height": trade.created_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Trade insert returned no rows: this should never happen")
        return _row_to_trade(row)

    async def mark_completed(self, db: AsyncSession, trade_id: int, completed_at: int) -> Trade:
        result = await db.execute(
            _COMPLETE_TRADE_SQL, {"trade_id": trade_id, "completed_height": completed_at}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Trade {trade_id} could not be marked completed")
        return _row_to_trade(row)


class EscrowRepository:
    async def get(self, db: AsyncSession, trade_id: int) -> EscrowEntry | None:
        if not 0 <= trade_id <= MAX_BIGINT:
            return None
        row = (await db.execute(_GET_ESCROW_SQL, {"trade_id": trade_id})).fetchone()
        return _row_to_escrow(row) if row else None

    async def insert(self, db: AsyncSession, entry: EscrowEntry) -> EscrowEntry:
        result = await db.execute(
            _INSERT_ESCROW_SQL,
            {"trade_id": entry.trade_id, "amount": entry.amount, "depositor": entry.depositor},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Escrow insert returned no rows: this should never happen")
        return _row_to_escrow(row)

    async def delete(self, db: AsyncSession, trade_id: int) -> None:
        row = (await db.execute(_DELETE_ESCROW_SQL, {"trade_id": trade_id})).fetchone()
        if row is None:
            raise InternalError(f"Escrow for trade {trade_id} vanished during settlement")
