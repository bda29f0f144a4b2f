"""Listing rules: creation limits and purchase preconditions.

Pure functions over the Listing dataclass. Each raises the matching AppError
subclass; the caller's transaction rolls back on any of them.
"""

from src.pe_common.errors import (
    InvalidAmountError,
    InvalidPriceError,
    ListingNotFoundError,
    TradeExpiredError,
)
from src.pe_common.units import MAX_BIGINT
from src.pe_listing.domain.models import Listing

MIN_ENERGY_AMOUNT: int = 1
MAX_ENERGY_AMOUNT: int = 1_000_000
# total_price = amount * price must fit in BIGINT for the largest listing
MAX_PRICE_PER_UNIT: int = MAX_BIGINT // MAX_ENERGY_AMOUNT
# ~3 years at the default 10s block interval
MAX_DURATION: int = 10_000_000


def check_energy_amount(amount: int) -> None:
    """InvalidAmount unless MIN_ENERGY_AMOUNT <= amount <= MAX_ENERGY_AMOUNT."""
    if not MIN_ENERGY_AMOUNT <= amount <= MAX_ENERGY_AMOUNT:
        raise InvalidAmountError(
            f"{amount} outside [{MIN_ENERGY_AMOUNT}, {MAX_ENERGY_AMOUNT}]"
        )


def check_unit_price(price: int, field: str = "price per unit") -> None:
    """InvalidPrice unless 0 < price <= MAX_PRICE_PER_UNIT."""
    if price == 0:
        raise InvalidPriceError(f"{field} must be positive")
    if price > MAX_PRICE_PER_UNIT:
        raise InvalidPriceError(f"{field} {price} exceeds {MAX_PRICE_PER_UNIT}")


def validate_new_listing(amount: int, unit_price: int, duration: int) -> None:
    check_energy_amount(amount)
    if not 1 <= duration <= MAX_DURATION:
        raise InvalidAmountError(f"duration {duration} outside [1, {MAX_DURATION}] blocks")
    check_unit_price(unit_price)


def check_purchase(listing: Listing | None, listing_id: int, amount: int, height: int) -> Listing:
    """Validate a purchase of `amount` kWh against `listing` at `height`.

    Order of checks: existence/active → expiry → quantity.
    """
    if listing is None or not listing.is_active:
        raise ListingNotFoundError(listing_id)
    if listing.is_expired(height):
        raise TradeExpiredError(listing_id, listing.expiry_height, height)
    if amount == 0:
        raise InvalidAmountError("purchase amount must be positive")
    if amount > listing.energy_amount:
        raise InvalidAmountError(
            f"requested {amount} kWh, only {listing.energy_amount} kWh remaining"
        )
    return listing


def consume(listing: Listing, amount: int) -> Listing:
    """Decrement the remainder in place; buying it all deactivates the listing."""
    listing.energy_amount -= amount
    if listing.energy_amount == 0:
        listing.is_active = False
    return listing
