"""Pure domain services."""

from .pricing import compute_totals, per_seller_amounts
from .moderation import ModerationPolicy

__all__ = ["ModerationPolicy", "compute_totals", "per_seller_amounts"]
