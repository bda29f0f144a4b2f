"""Global invariant verification over the platform counters.

INV-CUSTODY: custody balance == pending escrow total + total_platform_revenue
INV-ENERGY:  total_energy_traded == energy of all completed trades
"""

import logging

from src.pe_platform.domain.models import InvariantInputs, PlatformState

logger = logging.getLogger(__name__)


def check_invariants(state: PlatformState, inputs: InvariantInputs) -> list[str]:
    """Return a list of violation strings (empty when consistent)."""
    violations: list[str] = []

    expected_custody = inputs.pending_escrow_total + state.total_platform_revenue
    if inputs.custody_balance != expected_custody:
        violations.append(
            f"INV-CUSTODY violated: custody_balance({inputs.custody_balance}) != "
            f"pending_escrow({inputs.pending_escrow_total}) + "
            f"revenue({state.total_platform_revenue}) = {expected_custody}"
        )

    if state.total_energy_traded != inputs.completed_energy_total:
        violations.append(
            f"INV-ENERGY violated: total_energy_traded({state.total_energy_traded}) != "
            f"completed_trade_energy({inputs.completed_energy_total})"
        )

    for msg in violations:
        logger.error(msg)
    return violations
