"""Pydantic schemas for pe_listing API."""

from pydantic import BaseModel, Field

from src.pe_common.units import kwh_to_display, micro_to_display
from src.pe_listing.domain.models import Listing


class CreateListingRequest(BaseModel):
    energy_amount: int = Field(..., ge=0, description="kWh offered")
    price_per_unit: int = Field(..., ge=0, description="Micro-units per kWh")
    energy_type: str = Field(..., min_length=1, max_length=32)
    location: str = Field("", max_length=100)
    duration: int = Field(..., ge=0, description="Validity in blocks from now")


class ListingResponse(BaseModel):
    listing_id: int
    seller: str
    energy_amount: int
    energy_amount_display: str
    price_per_unit: int
    price_per_unit_display: str
    energy_type: str
    location: str
    expiry_height: int
    is_active: bool
    is_expired: bool

    @classmethod
    def from_domain(cls, listing: Listing, height: int) -> "ListingResponse":
        return cls(
            listing_id=listing.listing_id,
            seller=listing.seller,
            energy_amount=listing.energy_amount,
            energy_amount_display=kwh_to_display(listing.energy_amount),
            price_per_unit=listing.price_per_unit,
            price_per_unit_display=micro_to_display(listing.price_per_unit),
            energy_type=listing.energy_type,
            location=listing.location,
            expiry_height=listing.expiry_height,
            is_active=listing.is_active,
            is_expired=listing.is_expired(height),
        )


class ListingListResponse(BaseModel):
    items: list[ListingResponse]
    next_cursor: str | None
    has_more: bool
