"""Repository Protocol: dependency inversion for testability.

`transfer` is the value-transfer primitive used by escrow: it moves funds
between two accounts all-or-nothing and raises InsufficientFundsError
without touching either balance when the sender is short.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_account.domain.models import Account, LedgerEntry


class AccountRepositoryProtocol(Protocol):
    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None: ...

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        ref_type: str,
        ref_id: str | None,
        description: str,
    ) -> tuple[Account, LedgerEntry]: ...

    async def transfer(
        self,
        db: AsyncSession,
        amount: int,
        sender: str,
        recipient: str,
        debit_type: str,
        credit_type: str,
        ref_type: str,
        ref_id: str,
    ) -> tuple[Account, Account]: ...

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...
