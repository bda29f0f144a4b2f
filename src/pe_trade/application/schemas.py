"""Pydantic schemas for pe_trade API."""

from pydantic import BaseModel, Field

from src.pe_common.units import kwh_to_display, micro_to_display
from src.pe_trade.domain.fee import SettlementSplit
from src.pe_trade.domain.models import Trade


class PurchaseRequest(BaseModel):
    listing_id: int = Field(..., ge=0)
    energy_amount: int = Field(..., ge=0, description="kWh to buy")


class TradeResponse(BaseModel):
    trade_id: int
    listing_id: int
    buyer: str
    seller: str
    energy_amount: int
    energy_amount_display: str
    total_price: int
    total_price_display: str
    created_at: int
    is_completed: bool
    completed_at: int | None
    escrow_amount: int | None  # None once settled

    @classmethod
    def from_domain(cls, trade: Trade, escrow_amount: int | None) -> "TradeResponse":
        return cls(
            trade_id=trade.trade_id,
            listing_id=trade.listing_id,
            buyer=trade.buyer,
            seller=trade.seller,
            energy_amount=trade.energy_amount,
            energy_amount_display=kwh_to_display(trade.energy_amount),
            total_price=trade.total_price,
            total_price_display=micro_to_display(trade.total_price),
            created_at=trade.created_at,
            is_completed=trade.is_completed,
            completed_at=trade.completed_at,
            escrow_amount=escrow_amount,
        )


class ConfirmResponse(BaseModel):
    trade_id: int
    total_price: int
    fee: int
    fee_display: str
    seller_amount: int
    seller_amount_display: str
    completed_at: int

    @classmethod
    def from_settlement(cls, trade: Trade, split: SettlementSplit) -> "ConfirmResponse":
        return cls(
            trade_id=trade.trade_id,
            total_price=split.total_price,
            fee=split.fee,
            fee_display=micro_to_display(split.fee),
            seller_amount=split.seller_amount,
            seller_amount_display=micro_to_display(split.seller_amount),
            completed_at=trade.completed_at or 0,
        )
