"""Settlement split: floor-division platform fee."""
from dataclasses import dataclass

from src.pe_common.units import calculate_fee


@dataclass(frozen=True)
class SettlementSplit:
    total_price: int
    fee: int
    seller_amount: int


def split_settlement(total_price: int, fee_bps: int) -> SettlementSplit:
    """fee = floor(total_price * fee_bps / 10000); seller_amount + fee == total_price."""
    fee = calculate_fee(total_price, fee_bps)
    return SettlementSplit(total_price=total_price, fee=fee, seller_amount=total_price - fee)
