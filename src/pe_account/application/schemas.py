"""Pydantic schemas for pe_account API."""

from pydantic import BaseModel, Field

from src.pe_account.domain.constants import MAX_IDENTITY_LENGTH
from src.pe_common.units import micro_to_display

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreditRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=MAX_IDENTITY_LENGTH)
    amount: int = Field(..., ge=0, description="Amount to credit in micro-units")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    balance: int
    balance_display: str

    @classmethod
    def from_micro(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(user_id=user_id, balance=balance, balance_display=micro_to_display(balance))


class CreditResponse(BaseModel):
    user_id: str
    balance: int
    balance_display: str
    credited: int
    credited_display: str
    ledger_entry_id: int

    @classmethod
    def from_result(
        cls, user_id: str, balance: int, amount: int, entry_id: int
    ) -> "CreditResponse":
        return cls(
            user_id=user_id,
            balance=balance,
            balance_display=micro_to_display(balance),
            credited=amount,
            credited_display=micro_to_display(amount),
            ledger_entry_id=entry_id,
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount: int
    amount_display: str
    balance_after: int
    balance_after_display: str
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str  # ISO8601 string


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
