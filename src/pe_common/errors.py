"""Unified error codes and custom exceptions.

Every business failure carries a numeric code, an HTTP status and the
error kind reported to callers in the response envelope.

Error code ranges:
  1xxx: Caller / authorization
  2xxx: Account / funds
  3xxx: Listing
  4xxx: Trade / escrow
  5xxx: Matching
  9xxx: System
"""

from src.pe_common.enums import ErrorKind


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        kind: ErrorKind | str = ErrorKind.INTERNAL,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.kind: str = kind.value if isinstance(kind, ErrorKind) else kind
        super().__init__(message)


# --- 1xxx: Caller / authorization ---

class OwnerOnlyError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Operation restricted to the platform owner", 403, ErrorKind.OWNER_ONLY)


class UnauthorizedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1002, f"Unauthorized: {detail}", 403, ErrorKind.UNAUTHORIZED)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Bearer token is invalid or expired", 401, ErrorKind.UNAUTHORIZED)


# --- 2xxx: Account / funds ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient funds: required {required}, available {available}",
            422,
            ErrorKind.INSUFFICIENT_FUNDS,
        )


# --- 3xxx: Listing ---

class ListingNotFoundError(AppError):
    def __init__(self, listing_id: int) -> None:
        super().__init__(3001, f"Listing not found or inactive: {listing_id}", 404, ErrorKind.NOT_FOUND)


class InvalidAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3002, f"Invalid amount: {detail}", 422, ErrorKind.INVALID_AMOUNT)


class InvalidPriceError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3003, f"Invalid price: {detail}", 422, ErrorKind.INVALID_PRICE)


class TradeExpiredError(AppError):
    def __init__(self, listing_id: int, expiry_height: int, current_height: int) -> None:
        super().__init__(
            3004,
            f"Listing {listing_id} expired at height {expiry_height} (current {current_height})",
            422,
            ErrorKind.TRADE_EXPIRED,
        )


# --- 4xxx: Trade / escrow ---

class TradeNotFoundError(AppError):
    def __init__(self, trade_id: int) -> None:
        super().__init__(4001, f"Trade not found: {trade_id}", 404, ErrorKind.NOT_FOUND)


class EscrowNotFoundError(AppError):
    def __init__(self, trade_id: int) -> None:
        super().__init__(4002, f"Escrow entry not found for trade {trade_id}", 404, ErrorKind.NOT_FOUND)


class TradeCompletedError(AppError):
    def __init__(self, trade_id: int) -> None:
        super().__init__(4003, f"Trade already completed: {trade_id}", 409, ErrorKind.TRADE_COMPLETED)


# --- 5xxx: Matching ---

class NoMatchingListingError(AppError):
    def __init__(self) -> None:
        super().__init__(5001, "No eligible listing found", 404, ErrorKind.NOT_FOUND)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429, "RateLimited")


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
