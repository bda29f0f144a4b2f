"""TradeLedgerService: two-phase settlement, purchase then confirm.

purchase: consume listing inventory, move buyer funds into the custody
account, record the trade and its escrow entry.
confirm:  release the escrow (minus the platform fee) to the seller, mark
the trade completed, bump the global totals and both parties' reputation.

Each public operation is one transaction opened by the platform lock and
ended by commit, or rollback on any exception. `execute_purchase` is the
lock-free body shared with the matcher, which supplies its own transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pe_account.domain.constants import ESCROW_CUSTODY_ID
from src.pe_account.domain.repository import AccountRepositoryProtocol
from src.pe_account.infrastructure.persistence import AccountRepository
from src.pe_common.enums import LedgerEntryType, ReferenceType
from src.pe_common.errors import (
    EscrowNotFoundError,
    TradeCompletedError,
    TradeNotFoundError,
    UnauthorizedError,
)
from src.pe_common.height import HeightProvider, get_height_clock
from src.pe_listing.application.service import ListingRegistry
from src.pe_platform.domain.repository import PlatformStateRepositoryProtocol
from src.pe_platform.infrastructure.persistence import PlatformStateRepository
from src.pe_reputation.application.service import ReputationTracker
from src.pe_trade.application.schemas import ConfirmResponse, TradeResponse
from src.pe_trade.domain.fee import split_settlement
from src.pe_trade.domain.models import EscrowEntry, Trade
from src.pe_trade.domain.repository import EscrowRepositoryProtocol, TradeRepositoryProtocol
from src.pe_trade.infrastructure.persistence import EscrowRepository, TradeRepository

logger = logging.getLogger(__name__)


class TradeLedgerService:
    def __init__(
        self,
        trades: TradeRepositoryProtocol | None = None,
        escrows: EscrowRepositoryProtocol | None = None,
        listings: ListingRegistry | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        platform: PlatformStateRepositoryProtocol | None = None,
        reputation: ReputationTracker | None = None,
        height: HeightProvider | None = None,
        fee_bps: int | None = None,
    ) -> None:
        self._trades: TradeRepositoryProtocol = trades or TradeRepository()
        self._escrows: EscrowRepositoryProtocol = escrows or EscrowRepository()
        self._platform: PlatformStateRepositoryProtocol = platform or PlatformStateRepository()
        self._height: HeightProvider = height or get_height_clock()
        self._listings = listings or ListingRegistry(platform=self._platform, height=self._height)
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._reputation = reputation or ReputationTracker()
        self._fee_bps = settings.PLATFORM_FEE_BPS if fee_bps is None else fee_bps

    # ------------------------------------------------------------------
    # Purchase
    # ------------------------------------------------------------------

    async def purchase(
        self, db: AsyncSession, buyer: str, listing_id: int, amount: int
    ) -> Trade:
        try:
            await self._platform.lock(db)
            trade = await self.execute_purchase(db, buyer, listing_id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Trade opened: id=%d listing=%d buyer=%s amount=%d escrow=%d",
            trade.trade_id, listing_id, buyer, amount, trade.total_price,
        )
        return trade

    async def execute_purchase(
        self, db: AsyncSession, buyer: str, listing_id: int, amount: int
    ) -> Trade:
        """Purchase body. The caller holds the platform lock and owns the transaction."""
        listing = await self._listings.apply_purchase(db, listing_id, amount)
        if buyer == listing.seller:
            raise UnauthorizedError("sellers cannot buy their own listing")

        total_price = amount * listing.price_per_unit
        trade_id = await self._platform.allocate_trade_id(db)
        await self._accounts.transfer(
            db,
            total_price,
            sender=buyer,
            recipient=ESCROW_CUSTODY_ID,
            debit_type=LedgerEntryType.ESCROW_LOCK.value,
            credit_type=LedgerEntryType.ESCROW_HOLD.value,
            ref_type=ReferenceType.TRADE.value,
            ref_id=str(trade_id),
        )
        trade = await self._trades.insert(
            db,
            Trade(
                trade_id=trade_id,
                listing_id=listing_id,
                buyer=buyer,
                seller=listing.seller,
                energy_amount=amount,
                total_price=total_price,
                created_at=self._height.current_height(),
            ),
        )
        await self._escrows.insert(
            db, EscrowEntry(trade_id=trade_id, amount=total_price, depositor=buyer)
        )
        return trade

    # ------------------------------------------------------------------
    # Confirm
    # ------------------------------------------------------------------

    async def confirm(self, db: AsyncSession, caller: str, trade_id: int) -> ConfirmResponse:
        try:
            await self._platform.lock(db)
            trade = await self._trades.get(db, trade_id)
            if trade is None:
                raise TradeNotFoundError(trade_id)
            if caller != trade.buyer:
                raise UnauthorizedError("only the buyer can confirm delivery")
            if trade.is_completed:
                raise TradeCompletedError(trade_id)
            escrow = await self._escrows.get(db, trade_id)
            if escrow is None:
                raise EscrowNotFoundError(trade_id)

            split = split_settlement(trade.total_price, self._fee_bps)
            await self._accounts.transfer(
                db,
                split.seller_amount,
                sender=ESCROW_CUSTODY_ID,
                recipient=trade.seller,
                debit_type=LedgerEntryType.ESCROW_RELEASE.value,
                credit_type=LedgerEntryType.SETTLEMENT_RECEIPT.value,
                ref_type=ReferenceType.TRADE.value,
                ref_id=str(trade_id),
            )
            await self._platform.record_settlement(db, trade.energy_amount, split.fee)
            trade = await self._trades.mark_completed(db, trade_id, self._height.current_height())
            await self._escrows.delete(db, trade_id)
            await self._reputation.record_outcome(db, trade.buyer, successful=True)
            await self._reputation.record_outcome(db, trade.seller, successful=True)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Trade settled: id=%d seller=%s seller_amount=%d fee=%d",
            trade_id, trade.seller, split.seller_amount, split.fee,
        )
        return ConfirmResponse.from_settlement(trade, split)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_trade(self, db: AsyncSession, trade_id: int) -> TradeResponse:
        trade = await self._trades.get(db, trade_id)
        if trade is None:
            raise TradeNotFoundError(trade_id)
        escrow = await self._escrows.get(db, trade_id)
        return TradeResponse.from_domain(trade, escrow.amount if escrow else None)
