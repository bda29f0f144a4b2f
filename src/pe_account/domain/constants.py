"""Reserved system account ids (seeded by migration 008)."""

# Holds every pending escrow amount plus accrued platform fees.
ESCROW_CUSTODY_ID = "ESCROW_CUSTODY"

SYSTEM_ACCOUNT_IDS: frozenset[str] = frozenset({ESCROW_CUSTODY_ID})

# Width of every identity column (accounts, listings, trades, escrows, reputations).
MAX_IDENTITY_LENGTH = 64
