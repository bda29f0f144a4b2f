"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows on a debit means the sender's balance is insufficient.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back. A failed debit raises before any write, so a
rejected transfer leaves both balances untouched even inside an open
transaction.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_account.domain.models import Account, LedgerEntry
from src.pe_common.enums import LedgerEntryType
from src.pe_common.errors import InsufficientFundsError, InternalError

_ACCOUNT_COLUMNS = "user_id, balance, version, created_at, updated_at"

# ---------------------------------------------------------------------------
# SQL: accounts mutations
# ---------------------------------------------------------------------------

_CREDIT_SQL = text(f"""
    INSERT INTO accounts (user_id, balance)
    VALUES (:user_id, :amount)
    ON CONFLICT (user_id) DO UPDATE
        SET balance = accounts.balance + EXCLUDED.balance,
            version = accounts.version + 1,
            updated_at = NOW()
    RETURNING {_ACCOUNT_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE accounts
    SET balance = balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND balance >= :amount
    RETURNING {_ACCOUNT_COLUMNS}
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_id, entry_type, amount, balance_after,
           reference_type, reference_id, description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = CAST(:entry_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE user_id = :user_id
""")


def _row_to_account(row: object) -> Account:
    return Account(
        user_id=row.user_id,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        ref_type: str,
        ref_id: str | None,
        description: str,
    ) -> tuple[Account, LedgerEntry]:
        account = await self._credit_balance(db, user_id, amount)
        entry = await self._write_ledger(
            db, account, LedgerEntryType.CREDIT.value, amount, ref_type, ref_id, description
        )
        return account, entry

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
    ) -> tuple[Account, Account]:
        result = await db.execute(_DEBIT_SQL, {"user_id": sender, "amount": amount})
        row = result.fetchone()
        if row is None:
            existing = await self.get_account_by_user_id(db, sender)
            raise InsufficientFundsError(amount, existing.balance if existing else 0)
        sender_account = _row_to_account(row)
        recipient_account = await self._credit_balance(db, recipient, amount)

        description = f"{ref_type} {ref_id}: {sender} -> {recipient}"
        await self._write_ledger(
            db, sender_account, debit_type, -amount, ref_type, ref_id, description
        )
        await self._write_ledger(
            db, recipient_account, credit_type, amount, ref_type, ref_id, description
        )
        return sender_account, recipient_account

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "entry_type": entry_type,
                "limit": limit,
            },
        )
        rows = result.fetchall()
        return [_row_to_ledger(row) for row in rows]

    async def _credit_balance(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise InternalError("Account credit returned no rows: this should never happen")
        return _row_to_account(row)

    async def _write_ledger(
        self,
        db: AsyncSession,
        account: Account,
        entry_type: str,
        amount: int,
        ref_type: str,
        ref_id: str | None,
        description: str,
    ) -> LedgerEntry:
        ledger_result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": account.user_id,
                "entry_type": entry_type,
                "amount": amount,
                "balance_after": account.balance,
                "reference_type": ref_type,
                "reference_id": ref_id,
                "description": description,
            },
        )
        ledger_row = ledger_result.fetchone()
        if ledger_row is None:
            raise InternalError("Ledger insert returned no rows: this should never happen")
        return _row_to_ledger(ledger_row)
