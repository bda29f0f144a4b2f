"""TradeLedgerService end-to-end over the in-memory store."""

import pytest

from src.pe_account.domain.constants import ESCROW_CUSTODY_ID
from src.pe_common.errors import (
    EscrowNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    ListingNotFoundError,
    TradeCompletedError,
    TradeExpiredError,
    TradeNotFoundError,
    UnauthorizedError,
)
from src.pe_common.enums import LedgerEntryType
from src.pe_common.units import MAX_BIGINT
from src.pe_listing.domain.rules import MAX_ENERGY_AMOUNT, MAX_PRICE_PER_UNIT

SELLER = "seller-1"
BUYER = "buyer-1"


async def _list(registry, db, amount=500, price=1000, energy_type="solar", duration=100, seller=SELLER):
    return await registry.create(db, seller, amount, price, energy_type, "zone-a", duration)


class TestScenario:
    async def test_purchase_then_confirm(self, registry, ledger, tracker, db, store, fund) -> None:
        listing = await _list(registry, db)
        assert listing.listing_id == 1
        fund(BUYER, 250_000)

        trade = await ledger.purchase(db, BUYER, 1, 250)

        assert trade.trade_id == 1
        assert trade.total_price == 250_000
        assert store.escrows[1].amount == 250_000
        assert store.escrows[1].depositor == BUYER
        assert store.listings[1].energy_amount == 250
        assert store.listings[1].is_active is True
        assert store.balances[BUYER] == 0
        assert store.balances[ESCROW_CUSTODY_ID] == 250_000
        # seller is not paid until confirmation
        assert store.balances.get(SELLER, 0) == 0

        result = await ledger.confirm(db, BUYER, 1)

        assert result.seller_amount == 247_500
        assert result.fee == 2_500
        assert store.balances[SELLER] == 247_500
        assert 1 not in store.escrows
        assert store.trades[1].is_completed is True
        assert store.state.total_platform_revenue == 2_500
        assert store.state.total_energy_traded == 250
        assert (await tracker.get(db, BUYER)).as_tuple() == (1, 1, 510)
        assert (await tracker.get(db, SELLER)).as_tuple() == (1, 1, 510)

    async def test_custody_holds_escrow_plus_revenue(self, registry, ledger, db, store, fund) -> None:
        await _list(registry, db)
        fund(BUYER, 1_000_000)
        await ledger.purchase(db, BUYER, 1, 100)
        await ledger.purchase(db, BUYER, 1, 200)
        await ledger.confirm(db, BUYER, 1)

        pending = sum(e.amount for e in store.escrows.values())
        assert pending == 200_000
        assert store.balances[ESCROW_CUSTODY_ID] == pending + store.state.total_platform_revenue

    async def test_ledger_entries_written_for_each_leg(self, registry, ledger, db, store, fund) -> None:
        await _list(registry, db)
        fund(BUYER, 250_000)
        await ledger.purchase(db, BUYER, 1, 250)
        await ledger.confirm(db, BUYER, 1)

        types = [(e.user_id, e.entry_type, e.amount) for e in store.ledger]
        assert types == [
            (BUYER, LedgerEntryType.ESCROW_LOCK.value, -250_000),
            (ESCROW_CUSTODY_ID, LedgerEntryType.ESCROW_HOLD.value, 250_000),
            (ESCROW_CUSTODY_ID, LedgerEntryType.ESCROW_RELEASE.value, -247_500),
            (SELLER, LedgerEntryType.SETTLEMENT_RECEIPT.value, 247_500),
        ]


class TestPurchase:
    async def test_trade_ids_independent_of_listing_ids(self, registry, ledger, db, fund) -> None:
        await _list(registry, db)
        await _list(registry, db)
        await _list(registry, db)
        fund(BUYER, 1_000_000)
        trade = await ledger.purchase(db, BUYER, 3, 1)
        assert trade.trade_id == 1
        assert trade.listing_id == 3

    async def test_full_remainder_deactivates_listing(self, registry, ledger, db, store, fund) -> None:
        await _list(registry, db, amount=300)
        fund(BUYER, 1_000_000)
        await ledger.purchase(db, BUYER, 1, 300)
        assert store.listings[1].energy_amount == 0
        assert store.listings[1].is_active is False

        with pytest.raises(ListingNotFoundError):
            await ledger.purchase(db, BUYER, 1, 1)

    async def test_over_remaining_is_invalid_amount(self, registry, ledger, db, store, fund) -> None:
        await _list(registry, db, amount=500)
        fund(BUYER, 10_000_000)
        with pytest.raises(InvalidAmountError):
            await ledger.purchase(db, BUYER, 1, 501)
        assert store.listings[1].energy_amount == 500

    async def test_zero_amount_rejected(self, registry, ledger, db, fund) -> None:
        await _list(registry, db)
        fund(BUYER, 1_000)
        with pytest.raises(InvalidAmountError):
            await ledger.purchase(db, BUYER, 1, 0)

    async def test_unknown_listing(self, ledger, db) -> None:
        with pytest.raises(ListingNotFoundError):
            await ledger.purchase(db, BUYER, 42, 1)

    async def test_expired_listing_mutates_nothing(self, registry, ledger, db, store, height, fund) -> None:
        await _list(registry, db, duration=10)  # expiry_height = 110
        fund(BUYER, 1_000_000)
        before = store.snapshot()
        height.height = 111

        with pytest.raises(TradeExpiredError):
            await ledger.purchase(db, BUYER, 1, 10)

        assert store.snapshot() == before
        assert db.rollbacks == 1

    async def test_purchase_allowed_at_expiry_height(self, registry, ledger, db, height, fund) -> None:
        await _list(registry, db, duration=10)
        fund(BUYER, 1_000_000)
        height.height = 110
        trade = await ledger.purchase(db, BUYER, 1, 10)
        assert trade.created_at == 110

    async def test_self_trade_unauthorized_and_rolled_back(self, registry, ledger, db, store, fund) -> None:
        await _list(registry, db)
        fund(SELLER, 1_000_000)

        with pytest.raises(UnauthorizedError):
            await ledger.purchase(db, SELLER, 1, 100)

        assert store.listings[1].energy_amount == 500
        assert store.state.next_trade_id == 1
        assert store.balances[SELLER] == 1_000_000

    async def test_insufficient_funds_leaves_state_unchanged(self, registry, ledger, db, store, fund) -> None:
        await _list(registry, db)
        fund(BUYER, 249_999)
        before = store.snapshot()

        with pytest.raises(InsufficientFundsError):
            await ledger.purchase(db, BUYER, 1, 250)

        assert store.snapshot() == before
        assert store.listings[1].energy_amount == 500
        assert store.state.next_trade_id == 1
        assert store.trades == {}
        assert store.escrows == {}

    async def test_buyer_without_account_is_insufficient(self, registry, ledger, db) -> None:
        await _list(registry, db)
        with pytest.raises(InsufficientFundsError):
            await ledger.purchase(db, "nobody", 1, 1)

    async def test_largest_listing_total_is_insufficient_not_overflow(
        self, registry, ledger, db, store, fund
    ) -> None:
        await _list(registry, db, amount=MAX_ENERGY_AMOUNT, price=MAX_PRICE_PER_UNIT)
        fund(BUYER, 1_000_000)
        with pytest.raises(InsufficientFundsError) as exc_info:
            await ledger.purchase(db, BUYER, 1, MAX_ENERGY_AMOUNT)
        assert MAX_ENERGY_AMOUNT * MAX_PRICE_PER_UNIT <= MAX_BIGINT
        assert str(MAX_ENERGY_AMOUNT * MAX_PRICE_PER_UNIT) in exc_info.value.message
        assert store.listings[1].energy_amount == MAX_ENERGY_AMOUNT

    async def test_seller_copied_at_creation(self, registry, ledger, db, store, fund) -> None:
        await _list(registry, db)
        fund(BUYER, 1_000_000)
        await ledger.purchase(db, BUYER, 1, 10)
        store.listings[1].seller = "someone-else"
        assert store.trades[1].seller == SELLER


class TestConfirm:
    @pytest.fixture
    async def pending(self, registry, ledger, db, fund):
        await _list(registry, db)
        fund(BUYER, 1_000_000)
        return await ledger.purchase(db, BUYER, 1, 250)

    async def test_second_confirm_is_trade_completed(self, ledger, db, pending) -> None:
        await ledger.confirm(db, BUYER, pending.trade_id)
        with pytest.raises(TradeCompletedError):
            await ledger.confirm(db, BUYER, pending.trade_id)

    async def test_only_buyer_may_confirm(self, ledger, db, store, pending) -> None:
        with pytest.raises(UnauthorizedError):
            await ledger.confirm(db, SELLER, pending.trade_id)
        assert store.trades[pending.trade_id].is_completed is False
        assert pending.trade_id in store.escrows

    async def test_unknown_trade(self, ledger, db) -> None:
        with pytest.raises(TradeNotFoundError):
            await ledger.confirm(db, BUYER, 99)

    async def test_missing_escrow(self, ledger, db, store, pending) -> None:
        del store.escrows[pending.trade_id]
        with pytest.raises(EscrowNotFoundError):
            await ledger.confirm(db, BUYER, pending.trade_id)

    async def test_failed_release_aborts_confirmation(self, ledger, db, store, pending) -> None:
        store.balances[ESCROW_CUSTODY_ID] = 0
        await db.commit()

        with pytest.raises(InsufficientFundsError):
            await ledger.confirm(db, BUYER, pending.trade_id)

        assert store.trades[pending.trade_id].is_completed is False
        assert pending.trade_id in store.escrows
        assert store.state.total_platform_revenue == 0
        assert store.reputations == {}

    async def test_completed_at_recorded(self, ledger, db, store, height, pending) -> None:
        height.height = 150
        result = await ledger.confirm(db, BUYER, pending.trade_id)
        assert result.completed_at == 150
        assert store.trades[pending.trade_id].completed_at == 150

    @pytest.mark.parametrize("amount,price", [(1, 1), (1, 99), (3, 37), (999, 1001)])
    async def test_seller_amount_plus_fee_equals_total(
        self, registry, ledger, db, store, fund, amount, price
    ) -> None:
        await _list(registry, db, amount=1000, price=price, seller="s2")
        fund("b2", amount * price)
        trade = await ledger.purchase(db, "b2", 1, amount)
        revenue_before = store.state.total_platform_revenue

        result = await ledger.confirm(db, "b2", trade.trade_id)

        assert result.seller_amount + result.fee == trade.total_price
        assert store.state.total_platform_revenue - revenue_before == result.fee


class TestGetTrade:
    async def test_reports_escrow_until_settled(self, registry, ledger, db, fund) -> None:
        await _list(registry, db)
        fund(BUYER, 1_000_000)
        await ledger.purchase(db, BUYER, 1, 5)

        pending = await ledger.get_trade(db, 1)
        assert pending.escrow_amount == 5_000
        assert pending.is_completed is False

        await ledger.confirm(db, BUYER, 1)
        settled = await ledger.get_trade(db, 1)
        assert settled.escrow_amount is None
        assert settled.is_completed is True

    async def test_unknown_trade(self, ledger, db) -> None:
        with pytest.raises(TradeNotFoundError):
            await ledger.get_trade(db, 7)
