"""Pydantic schemas for pe_matching API."""

from pydantic import BaseModel, Field

from src.pe_common.units import kwh_to_display, micro_to_display
from src.pe_matching.domain.models import MatchResult


class AutoMatchRequest(BaseModel):
    max_price: int = Field(..., ge=0, description="Highest acceptable micro-units per kWh")
    desired_amount: int = Field(..., ge=0, description="kWh wanted")
    preferred_type: str = Field(..., max_length=32)
    max_distance: int = Field(0, ge=0, description="Accepted but not used for scoring")
    min_reputation: int = Field(0, ge=0)


class AutoMatchResponse(BaseModel):
    trade_id: int
    listing_id: int
    seller: str
    energy_amount: int
    energy_amount_display: str
    total_price: int
    total_price_display: str
    score: int

    @classmethod
    def from_result(cls, result: MatchResult) -> "AutoMatchResponse":
        trade = result.trade
        return cls(
            trade_id=trade.trade_id,
            listing_id=trade.listing_id,
            seller=trade.seller,
            energy_amount=trade.energy_amount,
            energy_amount_display=kwh_to_display(trade.energy_amount),
            total_price=trade.total_price,
            total_price_display=micro_to_display(trade.total_price),
            score=result.score,
        )
