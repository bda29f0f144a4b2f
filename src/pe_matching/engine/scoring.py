"""Additive listing score and best-candidate selection.

  price       unit price <= max_price            300 | 0
  type        energy_type == preferred_type      200 | 100
  reputation  seller score >= min_reputation     200 | 0
  supply      remaining >= desired_amount        100 | 50

Every eligible listing scores at least 150, so a best score of 0 means
there was no candidate at all.
"""
from collections.abc import Iterable

from src.pe_listing.domain.models import Listing
from src.pe_matching.domain.models import MatchCriteria, ScoredListing

PRICE_POINTS: int = 300
TYPE_MATCH_POINTS: int = 200
TYPE_MISMATCH_POINTS: int = 100
REPUTATION_POINTS: int = 200
FULL_SUPPLY_POINTS: int = 100
PARTIAL_SUPPLY_POINTS: int = 50


def score_listing(listing: Listing, criteria: MatchCriteria, seller_score: int) -> int:
    score = 0
    if listing.price_per_unit <= criteria.max_price:
        score += PRICE_POINTS
    if listing.energy_type == criteria.preferred_type:
        score += TYPE_MATCH_POINTS
    else:
        score += TYPE_MISMATCH_POINTS
    if seller_score >= criteria.min_reputation:
        score += REPUTATION_POINTS
    if listing.energy_amount >= criteria.desired_amount:
        score += FULL_SUPPLY_POINTS
    else:
        score += PARTIAL_SUPPLY_POINTS
    return score


def select_best(scored: Iterable[ScoredListing]) -> ScoredListing | None:
    """Running max with strict `>`: ties keep the earliest (lowest id) candidate."""
    best: ScoredListing | None = None
    best_score = 0
    for candidate in scored:
        if candidate.score > best_score:
            best, best_score = candidate, candidate.score
    return best
