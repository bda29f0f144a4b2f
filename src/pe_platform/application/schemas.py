"""Pydantic schemas for pe_platform API."""

from pydantic import BaseModel

from src.pe_common.units import kwh_to_display, micro_to_display
from src.pe_platform.domain.models import PlatformState


class PlatformStatsResponse(BaseModel):
    current_height: int
    listings_created: int
    trades_created: int
    total_energy_traded_kwh: int
    total_energy_traded_display: str
    total_platform_revenue: int
    total_platform_revenue_display: str

    @classmethod
    def from_domain(cls, state: PlatformState, height: int) -> "PlatformStatsResponse":
        return cls(
            current_height=height,
            listings_created=state.next_listing_id - 1,
            trades_created=state.next_trade_id - 1,
            total_energy_traded_kwh=state.total_energy_traded,
            total_energy_traded_display=kwh_to_display(state.total_energy_traded),
            total_platform_revenue=state.total_platform_revenue,
            total_platform_revenue_display=micro_to_display(state.total_platform_revenue),
        )


class InvariantReport(BaseModel):
    ok: bool
    violations: list[str]
