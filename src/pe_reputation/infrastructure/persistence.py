"""ReputationRepository: concrete implementation of ReputationRepositoryProtocol.

Transaction ownership: the CALLER (trade settlement) commits or rolls back.
"""

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.errors import InternalError
from src.pe_reputation.domain.models import ReputationRecord

_GET_SQL = text("""
    SELECT identity, total_trades, successful_trades, score, updated_at
    FROM reputations
    WHERE identity = :identity
""")

_GET_MANY_SQL = text("""
    SELECT identity, total_trades, successful_trades, score, updated_at
    FROM reputations
    WHERE identity IN :identities
""").bindparams(bindparam("identities", expanding=True))

_UPSERT_SQL = text("""
    INSERT INTO reputations (identity, total_trades, successful_trades, score)
    VALUES (:identity, :total_trades, :successful_trades, :score)
    ON CONFLICT (identity) DO UPDATE
        SET total_trades      = EXCLUDED.total_trades,
            successful_trades = EXCLUDED.successful_trades,
            score             = EXCLUDED.score,
            updated_at        = NOW()
    RETURNING identity, total_trades, successful_trades, score, updated_at
""")


def _row_to_record(row: object) -> ReputationRecord:
    return ReputationRecord(
        identity=row.identity,  # type: ignore[attr-defined]
        total_trades=row.total_trades,  # type: ignore[attr-defined]
        successful_trades=row.successful_trades,  # type: ignore[attr-defined]
        score=row.score,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class ReputationRepository:
    async def get(self, db: AsyncSession, identity: str) -> ReputationRecord | None:
        result = await db.execute(_GET_SQL, {"identity": identity})
        row = result.fetchone()
        return _row_to_record(row) if row else None

    async def get_many(
        self, db: AsyncSession, identities: list[str]
    ) -> dict[str, ReputationRecord]:
        if not identities:
            return {}
        result = await db.execute(_GET_MANY_SQL, {"identities": list(identities)})
        return {row.identity: _row_to_record(row) for row in result.fetchall()}

    async def upsert(self, db: AsyncSession, record: ReputationRecord) -> ReputationRecord:
        result = await db.execute(
            _UPSERT_SQL,
            {
                "identity": record.identity,
                "total_trades": record.total_trades,
                "successful_trades": record.successful_trades,
                "score": record.score,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Reputation upsert returned no rows: this should never happen")
        return _row_to_record(row)
