"""MatcherService: picks the best listing for a buyer and buys from it.

Candidates are listing ids 1..scan_window (default 10). A scan window of 0
scans every active, unexpired listing instead; the two modes can pick
different listings once more than `scan_window` listings exist.

The whole match (candidate read, scoring, purchase) is one transaction under
the platform lock. Purchase errors propagate unchanged.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pe_common.errors import InvalidAmountError, NoMatchingListingError
from src.pe_common.height import HeightProvider, get_height_clock
from src.pe_listing.domain.models import Listing
from src.pe_listing.domain.repository import ListingRepositoryProtocol
from src.pe_listing.domain.rules import check_energy_amount, check_unit_price
from src.pe_listing.infrastructure.persistence import ListingRepository
from src.pe_matching.domain.models import MatchCriteria, MatchResult, ScoredListing
from src.pe_matching.engine.scoring import score_listing, select_best
from src.pe_platform.domain.repository import PlatformStateRepositoryProtocol
from src.pe_platform.infrastructure.persistence import PlatformStateRepository
from src.pe_reputation.application.service import ReputationTracker
from src.pe_reputation.domain.models import MAX_SCORE
from src.pe_trade.application.service import TradeLedgerService

logger = logging.getLogger(__name__)


def validate_criteria(criteria: MatchCriteria) -> None:
    check_unit_price(criteria.max_price, "max_price")
    check_energy_amount(criteria.desired_amount)
    if criteria.min_reputation > MAX_SCORE:
        raise InvalidAmountError(f"min_reputation {criteria.min_reputation} exceeds {MAX_SCORE}")


class MatcherService:
    def __init__(
        self,
        listings: ListingRepositoryProtocol | None = None,
        reputation: ReputationTracker | None = None,
        ledger: TradeLedgerService | None = None,
        platform: PlatformStateRepositoryProtocol | None = None,
        height: HeightProvider | None = None,
        scan_window: int | None = None,
    ) -> None:
        self._listings: ListingRepositoryProtocol = listings or ListingRepository()
        self._reputation = reputation or ReputationTracker()
        self._platform: PlatformStateRepositoryProtocol = platform or PlatformStateRepository()
        self._height: HeightProvider = height or get_height_clock()
        self._ledger = ledger or TradeLedgerService(platform=self._platform, height=self._height)
        self._scan_window = settings.MATCH_SCAN_WINDOW if scan_window is None else scan_window

    async def auto_match(self, db: AsyncSession, criteria: MatchCriteria) -> MatchResult:
        validate_criteria(criteria)
        try:
            await self._platform.lock(db)
            best = await self._find_best(db, criteria)
            if best is None:
                raise NoMatchingListingError()
            amount = min(criteria.desired_amount, best.listing.energy_amount)
            trade = await self._ledger.execute_purchase(
                db, criteria.buyer, best.listing.listing_id, amount
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Auto-match: buyer=%s listing=%d score=%d trade=%d amount=%d",
            criteria.buyer, best.listing.listing_id, best.score, trade.trade_id, amount,
        )
        return MatchResult(trade=trade, score=best.score)

    async def _find_best(self, db: AsyncSession, criteria: MatchCriteria) -> ScoredListing | None:
        height = self._height.current_height()
        candidates = [c for c in await self._candidates(db, height) if c.is_live(height)]
        seller_scores = await self._reputation.get_scores(db, [c.seller for c in candidates])

        scored = []
        for listing in sorted(candidates, key=lambda c: c.listing_id):
            seller_score = seller_scores[listing.seller]
            score = score_listing(listing, criteria, seller_score)
            logger.debug(
                "Match candidate: listing=%d seller_score=%d score=%d",
                listing.listing_id, seller_score, score,
            )
            scored.append(ScoredListing(listing=listing, seller_score=seller_score, score=score))
        return select_best(scored)

    async def _candidates(self, db: AsyncSession, height: int) -> list[Listing]:
        if self._scan_window > 0:
            return await self._listings.get_by_ids(db, list(range(1, self._scan_window + 1)))
        return await self._listings.list_live(db, height)
