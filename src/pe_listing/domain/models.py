"""Listing domain model: pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime


@dataclass
class Listing:
    listing_id: int
    seller: str
    energy_amount: int  # remaining kWh
    price_per_unit: int  # micro-units per kWh
    energy_type: str
    location: str
    expiry_height: int
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_expired(self, height: int) -> bool:
        return height > self.expiry_height

    def is_live(self, height: int) -> bool:
        """Active and not past its expiry height."""
        return self.is_active and not self.is_expired(height)
