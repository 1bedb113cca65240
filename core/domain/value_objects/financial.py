"""
Financial value objects for order pricing.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class FeeBreakdown:
    """
    Financial snapshot of a cart or order.
    
    Balance Equation (MUST ALWAYS HOLD):
        subtotal + platform_fee = total
    
    The platform fee is a buyer-paid surcharge, so the seller's share is
    the full subtotal.
    """
    subtotal: Decimal
    platform_fee: Decimal
    seller_amount: Decimal
    total: Decimal
    fee_rate_percent: Decimal = Decimal("0")
    
    def validate_balance(self) -> bool:
        """Check the balance equation holds exactly."""
        return self.subtotal + self.platform_fee == self.total
