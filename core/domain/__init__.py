"""Domain layer - pure domain models and interfaces."""

from .entities import (
    Cart,
    CartLineItem,
    DownloadToken,
    Order,
    OrderLineItem,
    Product,
    Review,
    ReviewReport,
    ReviewResponse,
    ReviewVote,
)
from .enums import OrderStatus, PaymentStatus, ProductStatus, ReviewStatus, VoteType
from .repositories import (
    CartRepository,
    DownloadTokenRepository,
    OrderRepository,
    ReviewRepository,
)
from .value_objects import ExecutionID, FeeBreakdown, Money, OrderNumber

__all__ = [
    "Cart",
    "CartLineItem",
    "CartRepository",
    "DownloadToken",
    "DownloadTokenRepository",
    "ExecutionID",
    "FeeBreakdown",
    "Money",
    "Order",
    "OrderLineItem",
    "OrderNumber",
    "OrderRepository",
    "OrderStatus",
    "PaymentStatus",
    "Product",
    "ProductStatus",
    "Review",
    "ReviewReport",
    "ReviewRepository",
    "ReviewResponse",
    "ReviewStatus",
    "ReviewVote",
    "VoteType",
]
