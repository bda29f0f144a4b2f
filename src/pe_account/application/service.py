"""AccountApplicationService: thin composition layer.

Combines repository calls with schema transformations. `credit` is the only
mutating operation here: it takes the platform lock, writes, and commits or
rolls back as one unit. Reads run without an explicit transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pe_account.application.schemas import (
    BalanceResponse,
    CreditResponse,
    LedgerEntryItem,
    LedgerResponse,
)
from src.pe_account.domain.repository import AccountRepositoryProtocol
from src.pe_account.infrastructure.persistence import AccountRepository
from src.pe_common.cursor import cursor_decode, cursor_encode
from src.pe_common.enums import ReferenceType
from src.pe_common.errors import InvalidAmountError, OwnerOnlyError
from src.pe_common.units import MAX_BIGINT, micro_to_display
from src.pe_platform.domain.repository import PlatformStateRepositoryProtocol
from src.pe_platform.infrastructure.persistence import PlatformStateRepository

logger = logging.getLogger(__name__)


class AccountApplicationService:
    def __init__(
        self,
        repo: AccountRepositoryProtocol | None = None,
        platform: PlatformStateRepositoryProtocol | None = None,
        owner_id: str | None = None,
    ) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()
        self._platform: PlatformStateRepositoryProtocol = platform or PlatformStateRepository()
        self._owner_id = owner_id or settings.PLATFORM_OWNER_ID

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        account = await self._repo.get_account_by_user_id(db, user_id)
        return BalanceResponse.from_micro(user_id, account.balance if account else 0)

    async def credit(
        self, db: AsyncSession, caller: str, user_id: str, amount: int
    ) -> CreditResponse:
        if caller != self._owner_id:
            raise OwnerOnlyError()
        if amount <= 0:
            raise InvalidAmountError("credit amount must be positive")
        try:
            await self._platform.lock(db)
            existing = await self._repo.get_account_by_user_id(db, user_id)
            headroom = MAX_BIGINT - (existing.balance if existing else 0)
            if amount > headroom:
                raise InvalidAmountError(f"credit of {amount} would exceed the balance limit")
            account, entry = await self._repo.credit(
                db, user_id, amount, ReferenceType.CREDIT.value, None, "Owner credit"
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Account credited: user=%s amount=%d balance=%d", user_id, amount, account.balance)
        return CreditResponse.from_result(
            user_id=user_id, balance=account.balance, amount=amount, entry_id=entry.id
        )

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_ledger_entries(
            db, user_id, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                amount=e.amount,
                amount_display=micro_to_display(e.amount),
                balance_after=e.balance_after,
                balance_after_display=micro_to_display(e.balance_after),
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                description=e.description,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)
