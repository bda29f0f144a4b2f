from dataclasses import dataclass

from src.pe_listing.domain.models import Listing
from src.pe_trade.domain.models import Trade


@dataclass(frozen=True)
class MatchCriteria:
    """Buyer-supplied constraints for auto-matching."""

    buyer: str
    max_price: int  # micro-units per kWh
    desired_amount: int  # kWh
    preferred_type: str
    max_distance: int  # accepted, not scored
    min_reputation: int  # 0-1000


@dataclass
class ScoredListing:
    listing: Listing
    seller_score: int
    score: int


@dataclass
class MatchResult:
    """Trade produced by auto-matching plus the winning candidate's score."""

    trade: Trade
    score: int
