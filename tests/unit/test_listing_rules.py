"""Unit tests for listing rules (pure functions)."""

import pytest

from src.pe_common.errors import (
    InvalidAmountError,
    InvalidPriceError,
    ListingNotFoundError,
    TradeExpiredError,
)
from src.pe_listing.domain.models import Listing
from src.pe_listing.domain.rules import (
    MAX_DURATION,
    MAX_ENERGY_AMOUNT,
    MAX_PRICE_PER_UNIT,
    MIN_ENERGY_AMOUNT,
    check_purchase,
    consume,
    validate_new_listing,
)


def _make_listing(amount: int = 500, expiry: int = 200, active: bool = True) -> Listing:
    return Listing(
        listing_id=1,
        seller="seller-1",
        energy_amount=amount,
        price_per_unit=1000,
        energy_type="solar",
        location="zone-a",
        expiry_height=expiry,
        is_active=active,
    )


class TestValidateNewListing:
    def test_valid(self) -> None:
        validate_new_listing(MIN_ENERGY_AMOUNT, 1, 1)
        validate_new_listing(MAX_ENERGY_AMOUNT, 1, 1)

    def test_amount_checked_before_price(self) -> None:
        with pytest.raises(InvalidAmountError):
            validate_new_listing(0, 0, 10)

    def test_zero_duration(self) -> None:
        with pytest.raises(InvalidAmountError, match="duration"):
            validate_new_listing(10, 1, 0)

    def test_zero_price(self) -> None:
        with pytest.raises(InvalidPriceError):
            validate_new_listing(10, 0, 10)

    def test_price_bound_keeps_total_in_bigint(self) -> None:
        assert MAX_ENERGY_AMOUNT * MAX_PRICE_PER_UNIT <= 2**63 - 1
        validate_new_listing(MAX_ENERGY_AMOUNT, MAX_PRICE_PER_UNIT, 10)

    @pytest.mark.parametrize("price", [MAX_PRICE_PER_UNIT + 1, 10**19])
    def test_price_above_bound(self, price: int) -> None:
        with pytest.raises(InvalidPriceError):
            validate_new_listing(10, price, 10)

    def test_duration_above_bound(self) -> None:
        validate_new_listing(10, 1, MAX_DURATION)
        with pytest.raises(InvalidAmountError, match="duration"):
            validate_new_listing(10, 1, MAX_DURATION + 1)


class TestCheckPurchase:
    def test_absent(self) -> None:
        with pytest.raises(ListingNotFoundError):
            check_purchase(None, 9, 1, 100)

    def test_inactive(self) -> None:
        with pytest.raises(ListingNotFoundError):
            check_purchase(_make_listing(active=False), 1, 1, 100)

    def test_expired_is_strictly_after_expiry(self) -> None:
        check_purchase(_make_listing(expiry=200), 1, 1, 200)
        with pytest.raises(TradeExpiredError):
            check_purchase(_make_listing(expiry=200), 1, 1, 201)

    def test_expiry_checked_before_amount(self) -> None:
        with pytest.raises(TradeExpiredError):
            check_purchase(_make_listing(amount=5, expiry=10), 1, 50, 11)

    def test_amount_over_remaining(self) -> None:
        with pytest.raises(InvalidAmountError):
            check_purchase(_make_listing(amount=5), 1, 6, 100)


class TestConsume:
    def test_partial(self) -> None:
        listing = consume(_make_listing(amount=500), 200)
        assert listing.energy_amount == 300
        assert listing.is_active is True

    def test_full_remainder_deactivates(self) -> None:
        listing = consume(_make_listing(amount=500), 500)
        assert listing.energy_amount == 0
        assert listing.is_active is False

    def test_is_live(self) -> None:
        assert _make_listing(expiry=10).is_live(10) is True
        assert _make_listing(expiry=10).is_live(11) is False
        assert _make_listing(active=False).is_live(0) is False
