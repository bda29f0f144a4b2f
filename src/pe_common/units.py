"""Integer arithmetic utilities for micro-currency amounts and kWh quantities.

All prices, amounts and balances use int (micro-units, 1 unit = 1_000_000).
No float, no Decimal.
"""

MICRO_PER_UNIT = 1_000_000
BPS_DENOMINATOR = 10_000

# Every amount, price, balance and id column is a PostgreSQL BIGINT.
MAX_BIGINT = 2**63 - 1


def micro_to_display(micro: int) -> str:
    """Convert micro-units to display string: 2_500_000 -> '2.500000', -1 -> '-0.000001'."""
    sign = "-" if micro < 0 else ""
    abs_micro = abs(micro)
    return f"{sign}{abs_micro // MICRO_PER_UNIT:,}.{abs_micro % MICRO_PER_UNIT:06d}"


def kwh_to_display(kwh: int) -> str:
    """Format an energy quantity: 1500 -> '1,500 kWh'."""
    return f"{kwh:,} kWh"


def calculate_fee(trade_value: int, fee_rate_bps: int) -> int:
    """Calculate fee with floor division (no rounding beyond the floor).

    fee = floor(trade_value * fee_rate_bps / 10000)
    """
    if trade_value == 0 or fee_rate_bps == 0:
        return 0
    return (trade_value * fee_rate_bps) // BPS_DENOMINATOR
