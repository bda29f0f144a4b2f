"""PlatformStateRepository Protocol: the single-row counter store."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_platform.domain.models import InvariantInputs, PlatformState


class PlatformStateRepositoryProtocol(Protocol):
    async def lock(self, db: AsyncSession) -> PlatformState: ...

    async def get(self, db: AsyncSession) -> PlatformState: ...

    async def allocate_listing_id(self, db: AsyncSession) -> int: ...

    async def allocate_trade_id(self, db: AsyncSession) -> int: ...

    async def record_settlement(
        self, db: AsyncSession, energy_amount: int, fee: int
    ) -> PlatformState: ...

    async def get_invariant_inputs(self, db: AsyncSession) -> InvariantInputs: ...
