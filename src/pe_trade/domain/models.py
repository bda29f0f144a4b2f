"""Trade domain models: pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class Trade:
    trade_id: int
    listing_id: int
    buyer: str
    seller: str  # copied from the listing at purchase time
    energy_amount: int
    total_price: int  # energy_amount * price_per_unit, fixed at purchase
    created_at: int  # height
    is_completed: bool = False
    completed_at: int | None = None  # height
    updated_at: datetime | None = None


@dataclass
class EscrowEntry:
    """Funds held in custody for a pending trade. Exists iff the trade is not completed."""

    trade_id: int
    amount: int
    depositor: str
