"""ReputationTracker: per-identity trust scores.

Reads never fail: an identity without a stored record reads as (0, 0, 500).
`record_outcome` is the only mutator and runs inside the caller's
transaction (trade settlement); it never commits.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_reputation.application.schemas import ReputationResponse
from src.pe_reputation.domain.models import ReputationRecord
from src.pe_reputation.domain.repository import ReputationRepositoryProtocol
from src.pe_reputation.domain.scoring import apply_outcome
from src.pe_reputation.infrastructure.persistence import ReputationRepository

logger = logging.getLogger(__name__)


class ReputationTracker:
    def __init__(self, repo: ReputationRepositoryProtocol | None = None) -> None:
        self._repo: ReputationRepositoryProtocol = repo or ReputationRepository()

    async def get(self, db: AsyncSession, identity: str) -> ReputationRecord:
        record = await self._repo.get(db, identity)
        return record if record is not None else ReputationRecord.default_for(identity)

    async def get_scores(self, db: AsyncSession, identities: list[str]) -> dict[str, int]:
        """Score per identity, defaulting absent identities to 500."""
        stored = await self._repo.get_many(db, sorted(set(identities)))
        return {
            identity: (stored[identity] if identity in stored
                       else ReputationRecord.default_for(identity)).score
            for identity in identities
        }

    async def record_outcome(
        self, db: AsyncSession, identity: str, successful: bool
    ) -> ReputationRecord:
        current = await self.get(db, identity)
        updated = await self._repo.upsert(db, apply_outcome(current, successful))
        logger.debug(
            "Reputation updated: identity=%s successful=%s score %d -> %d",
            identity, successful, current.score, updated.score,
        )
        return updated

    async def get_reputation(self, db: AsyncSession, identity: str) -> ReputationResponse:
        return ReputationResponse.from_domain(await self.get(db, identity))
