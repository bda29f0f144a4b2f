"""PlatformService: read-only views over the global counters."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_common.height import HeightProvider, get_height_clock
from src.pe_platform.application.schemas import InvariantReport, PlatformStatsResponse
from src.pe_platform.domain.invariants import check_invariants
from src.pe_platform.domain.repository import PlatformStateRepositoryProtocol
from src.pe_platform.infrastructure.persistence import PlatformStateRepository


class PlatformService:
    def __init__(
        self,
        repo: PlatformStateRepositoryProtocol | None = None,
        height: HeightProvider | None = None,
    ) -> None:
        self._repo: PlatformStateRepositoryProtocol = repo or PlatformStateRepository()
        self._height: HeightProvider = height or get_height_clock()

    async def get_stats(self, db: AsyncSession) -> PlatformStatsResponse:
        state = await self._repo.get(db)
        return PlatformStatsResponse.from_domain(state, self._height.current_height())

    async def verify_invariants(self, db: AsyncSession) -> InvariantReport:
        state = await self._repo.get(db)
        inputs = await self._repo.get_invariant_inputs(db)
        violations = check_invariants(state, inputs)
        return InvariantReport(ok=not violations, violations=violations)
