"""
Pricing / fee calculator.

Pure, deterministic, no side effects. The fee rate is always supplied by
the caller so it can vary per seller tier without touching this module.
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, Union

from ..exceptions import ValidationError
from ..value_objects import FeeBreakdown, round2

Number = Union[Decimal, int, str]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, float):
        # floats carry binary noise; go through str like Money does
        return Decimal(str(value))
    return Decimal(value)


def compute_totals(line_item_prices: Iterable[Number], fee_rate_percent: Number) -> FeeBreakdown:
    """
    Compute subtotal, platform fee, seller amount and total.

    The fee is rounded once, on the final amount, never per line item.

    Args:
        line_item_prices: Extended price of each line item
        fee_rate_percent: Platform fee rate, e.g. 10 for 10%

    Returns:
        FeeBreakdown with subtotal + platform_fee == total

    Raises:
        ValidationError: If the fee rate or a price is negative
    """
    rate = _to_decimal(fee_rate_percent)
    if rate < 0:
        raise ValidationError(f"Fee rate must be >= 0, got: {rate}")

    subtotal = Decimal("0")
    for price in line_item_prices:
        amount = _to_decimal(price)
        if amount < 0:
            raise ValidationError(f"Line item price must be >= 0, got: {amount}")
        subtotal += amount

    subtotal = round2(subtotal)
    platform_fee = round2(subtotal * rate / Decimal("100"))

    return FeeBreakdown(
        subtotal=subtotal,
        platform_fee=platform_fee,
        seller_amount=subtotal,
        total=subtotal + platform_fee,
        fee_rate_percent=rate,
    )


def per_seller_amounts(line_items: Iterable) -> Dict[str, Decimal]:
    """Group extended line item prices by seller_id (payout view)."""
    amounts: Dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
    for item in line_items:
        amounts[item.seller_id] += item.unit_price.amount * item.quantity
    return {seller_id: round2(amount) for seller_id, amount in amounts.items()}
