"""Global enums: string values are stored in the DB and returned to callers."""

from enum import Enum


class ErrorKind(str, Enum):
    """Error kind reported in the `error` field of failed responses."""
    OWNER_ONLY = "OwnerOnly"
    NOT_FOUND = "NotFound"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    UNAUTHORIZED = "Unauthorized"
    INVALID_AMOUNT = "InvalidAmount"
    TRADE_EXPIRED = "TradeExpired"
    TRADE_COMPLETED = "TradeCompleted"
    INVALID_PRICE = "InvalidPrice"
    INTERNAL = "Internal"


class LedgerEntryType(str, Enum):
    # Owner funding
    CREDIT = "CREDIT"
    # Purchase (buyer debit + custody credit)
    ESCROW_LOCK = "ESCROW_LOCK"
    ESCROW_HOLD = "ESCROW_HOLD"
    # Confirmation (custody debit + seller credit)
    ESCROW_RELEASE = "ESCROW_RELEASE"
    SETTLEMENT_RECEIPT = "SETTLEMENT_RECEIPT"


class ReferenceType(str, Enum):
    CREDIT = "CREDIT"
    TRADE = "TRADE"
