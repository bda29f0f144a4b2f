"""Repository Protocol: dependency inversion for testability.

Unit tests inject an in-memory implementation or a mock conforming to this
Protocol. Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_reputation.domain.models import ReputationRecord


class ReputationRepositoryProtocol(Protocol):
    async def get(self, db: AsyncSession, identity: str) -> ReputationRecord | None: ...

    async def get_many(
        self, db: AsyncSession, identities: list[str]
    ) -> dict[str, ReputationRecord]: ...

    async def upsert(self, db: AsyncSession, record: ReputationRecord) -> ReputationRecord: ...
