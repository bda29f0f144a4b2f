"""In-memory store and repositories for service-level tests.

FakeSession mimics the commit/rollback contract of AsyncSession: commit
snapshots the store, rollback restores the last snapshot. Repositories hand
out copies, so a service only changes stored state through repository
writes, exactly as with the SQL implementations.
"""

import copy
from dataclasses import dataclass, field

import pytest

from src.pe_account.application.service import AccountApplicationService
from src.pe_account.domain.constants import ESCROW_CUSTODY_ID
from src.pe_account.domain.models import Account, LedgerEntry
from src.pe_common.enums import LedgerEntryType
from src.pe_common.errors import InsufficientFundsError, InternalError
from src.pe_listing.application.service import ListingRegistry
from src.pe_listing.domain.models import Listing
from src.pe_matching.application.service import MatcherService
from src.pe_platform.application.service import PlatformService
from src.pe_platform.domain.models import InvariantInputs, PlatformState
from src.pe_reputation.application.service import ReputationTracker
from src.pe_reputation.domain.models import ReputationRecord
from src.pe_trade.application.service import TradeLedgerService
from src.pe_trade.domain.models import EscrowEntry, Trade

OWNER = "PLATFORM_OWNER"
FEE_BPS = 100


@dataclass
class MemoryStore:
    listings: dict[int, Listing] = field(default_factory=dict)
    trades: dict[int, Trade] = field(default_factory=dict)
    escrows: dict[int, EscrowEntry] = field(default_factory=dict)
    reputations: dict[str, ReputationRecord] = field(default_factory=dict)
    balances: dict[str, int] = field(default_factory=lambda: {ESCROW_CUSTODY_ID: 0})
    ledger: list[LedgerEntry] = field(default_factory=list)
    state: PlatformState = field(default_factory=PlatformState)

    def snapshot(self) -> dict:
        return copy.deepcopy(vars(self))

    def restore(self, snap: dict) -> None:
        vars(self).update(copy.deepcopy(snap))


class FakeSession:
    def __init__(self, store: MemoryStore) -> None:
        self.store = store
        self.commits = 0
        self.rollbacks = 0
        self.locks = 0
        self._snapshot = store.snapshot()

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = self.store.snapshot()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.store.restore(self._snapshot)

    def mark_clean(self) -> None:
        """Treat direct store edits made by a test as already committed."""
        self._snapshot = self.store.snapshot()


class FixedHeight:
    def __init__(self, height: int = 100) -> None:
        self.height = height

    def current_height(self) -> int:
        return self.height


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class MemoryListingRepository:
    def __init__(self, store: MemoryStore) -> None:
        self.s = store

    async def get(self, db, listing_id):
        return copy.deepcopy(self.s.listings.get(listing_id))

    async def get_by_ids(self, db, listing_ids):
        return [copy.deepcopy(self.s.listings[i]) for i in sorted(listing_ids) if i in self.s.listings]

    async def list_live(self, db, height):
        return [
            copy.deepcopy(l) for i, l in sorted(self.s.listings.items())
            if l.is_active and l.expiry_height >= height
        ]

    async def list_page(self, db, active_only, cursor_id, limit):
        rows = [
            copy.deepcopy(l) for i, l in sorted(self.s.listings.items(), reverse=True)
            if (not active_only or l.is_active) and (cursor_id is None or i < cursor_id)
        ]
        return rows[:limit]

    async def insert(self, db, listing):
        self.s.listings[listing.listing_id] = copy.deepcopy(listing)
        return copy.deepcopy(listing)

    async def update_remaining(self, db, listing):
        stored = self.s.listings[listing.listing_id]
        if listing.energy_amount > stored.energy_amount:
            raise InternalError(f"Listing {listing.listing_id} update rejected")
        stored.energy_amount = listing.energy_amount
        stored.is_active = listing.is_active
        return copy.deepcopy(stored)


class MemoryTradeRepository:
    def __init__(self, store: MemoryStore) -> None:
        self.s = store

    async def get(self, db, trade_id):
        return copy.deepcopy(self.s.trades.get(trade_id))

    async def insert(self, db, trade):
        self.s.trades[trade.trade_id] = copy.deepcopy(trade)
        return copy.deepcopy(trade)

    async def mark_completed(self, db, trade_id, completed_at):
        trade = self.s.trades[trade_id]
        if trade.is_completed:
            raise InternalError(f"Trade {trade_id} could not be marked completed")
        trade.is_completed = True
        trade.completed_at = completed_at
        return copy.deepcopy(trade)


class MemoryEscrowRepository:
    def __init__(self, store: MemoryStore) -> None:
        self.s = store

    async def get(self, db, trade_id):
        return copy.deepcopy(self.s.escrows.get(trade_id))

    async def insert(self, db, entry):
        self.s.escrows[entry.trade_id] = copy.deepcopy(entry)
        return copy.deepcopy(entry)

    async def delete(self, db, trade_id):
        del self.s.escrows[trade_id]


class MemoryReputationRepository:
    def __init__(self, store: MemoryStore) -> None:
        self.s = store

    async def get(self, db, identity):
        return copy.deepcopy(self.s.reputations.get(identity))

    async def get_many(self, db, identities):
        return {i: copy.deepcopy(self.s.reputations[i]) for i in identities if i in self.s.reputations}

    async def upsert(self, db, record):
        self.s.reputations[record.identity] = copy.deepcopy(record)
        return copy.deepcopy(record)


class MemoryAccountRepository:
    def __init__(self, store: MemoryStore) -> None:
        self.s = store

    async def get_account_by_user_id(self, db, user_id):
        if user_id not in self.s.balances:
            return None
        return Account(user_id=user_id, balance=self.s.balances[user_id])

    async def credit(self, db, user_id, amount, ref_type, ref_id, description):
        self.s.balances[user_id] = self.s.balances.get(user_id, 0) + amount
        entry = self._write(user_id, LedgerEntryType.CREDIT.value, amount, ref_type, ref_id)
        return Account(user_id=user_id, balance=self.s.balances[user_id]), entry

    async def transfer(self, db, amount, sender, recipient, debit_type, credit_type, ref_type, ref_id):
        available = self.s.balances.get(sender, 0)
        if available < amount:
            raise InsufficientFundsError(amount, available)
        self.s.balances[sender] = available - amount
        self.s.balances[recipient] = self.s.balances.get(recipient, 0) + amount
        self._write(sender, debit_type, -amount, ref_type, ref_id)
        self._write(recipient, credit_type, amount, ref_type, ref_id)
        return (
            Account(user_id=sender, balance=self.s.balances[sender]),
            Account(user_id=recipient, balance=self.s.balances[recipient]),
        )

    async def list_ledger_entries(self, db, user_id, cursor_id, limit, entry_type):
        rows = [
            e for e in reversed(self.s.ledger)
            if e.user_id == user_id
            and (cursor_id is None or e.id < cursor_id)
            and (entry_type is None or e.entry_type == entry_type)
        ]
        return copy.deepcopy(rows[:limit])

    def _write(self, user_id, entry_type, amount, ref_type, ref_id):
        entry = LedgerEntry(
            id=len(self.s.ledger) + 1,
            user_id=user_id,
            entry_type=entry_type,
            amount=amount,
            balance_after=self.s.balances[user_id],
            reference_type=ref_type,
            reference_id=ref_id,
        )
        self.s.ledger.append(entry)
        return entry


class MemoryPlatformRepository:
    def __init__(self, store: MemoryStore) -> None:
        self.s = store

    async def lock(self, db):
        db.locks += 1
        return copy.deepcopy(self.s.state)

    async def get(self, db):
        return copy.deepcopy(self.s.state)

    async def allocate_listing_id(self, db):
        allocated = self.s.state.next_listing_id
        self.s.state.next_listing_id += 1
        return allocated

    async def allocate_trade_id(self, db):
        allocated = self.s.state.next_trade_id
        self.s.state.next_trade_id += 1
        return allocated

    async def record_settlement(self, db, energy_amount, fee):
        self.s.state.total_energy_traded += energy_amount
        self.s.state.total_platform_revenue += fee
        return copy.deepcopy(self.s.state)

    async def get_invariant_inputs(self, db):
        return InvariantInputs(
            custody_balance=self.s.balances.get(ESCROW_CUSTODY_ID, 0),
            pending_escrow_total=sum(e.amount for e in self.s.escrows.values()),
            completed_energy_total=sum(
                t.energy_amount for t in self.s.trades.values() if t.is_completed
            ),
        )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def db(store: MemoryStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def height() -> FixedHeight:
    return FixedHeight(100)


@pytest.fixture
def platform_repo(store: MemoryStore) -> MemoryPlatformRepository:
    return MemoryPlatformRepository(store)


@pytest.fixture
def listing_repo(store: MemoryStore) -> MemoryListingRepository:
    return MemoryListingRepository(store)


@pytest.fixture
def account_repo(store: MemoryStore) -> MemoryAccountRepository:
    return MemoryAccountRepository(store)


@pytest.fixture
def tracker(store: MemoryStore) -> ReputationTracker:
    return ReputationTracker(repo=MemoryReputationRepository(store))


@pytest.fixture
def registry(listing_repo, platform_repo, height) -> ListingRegistry:
    return ListingRegistry(repo=listing_repo, platform=platform_repo, height=height)


@pytest.fixture
def ledger(store, registry, account_repo, platform_repo, tracker, height) -> TradeLedgerService:
    return TradeLedgerService(
        trades=MemoryTradeRepository(store),
        escrows=MemoryEscrowRepository(store),
        listings=registry,
        accounts=account_repo,
        platform=platform_repo,
        reputation=tracker,
        height=height,
        fee_bps=FEE_BPS,
    )


@pytest.fixture
def make_matcher(listing_repo, tracker, ledger, platform_repo, height):
    def _make(scan_window: int = 10) -> MatcherService:
        return MatcherService(
            listings=listing_repo,
            reputation=tracker,
            ledger=ledger,
            platform=platform_repo,
            height=height,
            scan_window=scan_window,
        )
    return _make


@pytest.fixture
def account_service(account_repo, platform_repo) -> AccountApplicationService:
    return AccountApplicationService(repo=account_repo, platform=platform_repo, owner_id=OWNER)


@pytest.fixture
def platform_service(platform_repo, height) -> PlatformService:
    return PlatformService(repo=platform_repo, height=height)


@pytest.fixture
def fund(store: MemoryStore, db: FakeSession):
    """Seed a committed balance directly, bypassing the owner credit path."""
    def _fund(user_id: str, amount: int) -> None:
        store.balances[user_id] = store.balances.get(user_id, 0) + amount
        db.mark_clean()
    return _fund
