"""Domain models for pe_platform: global counters and invariant inputs."""

from dataclasses import dataclass


@dataclass
class PlatformState:
    next_listing_id: int = 1
    next_trade_id: int = 1
    total_energy_traded: int = 0      # kWh
    total_platform_revenue: int = 0   # micro-units


@dataclass
class InvariantInputs:
    """Aggregates read from storage for the global invariant check."""

    custody_balance: int
    pending_escrow_total: int
    completed_energy_total: int
