"""Domain enums."""

from .order_status import OrderStatus, PaymentStatus
from .product_status import ProductStatus
from .review_status import ReviewStatus, VoteType
from .notification_type import NotificationType

__all__ = [
    "NotificationType",
    "OrderStatus",
    "PaymentStatus",
    "ProductStatus",
    "ReviewStatus",
    "VoteType",
]
