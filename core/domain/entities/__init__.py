"""Domain entities and aggregates."""

from .cart import Cart, CartLineItem
from .download_token import DownloadToken
from .order import Order, OrderLineItem
from .product import Product
from .review import Review, ReviewReport, ReviewResponse, ReviewVote

__all__ = [
    "Cart",
    "CartLineItem",
    "DownloadToken",
    "Order",
    "OrderLineItem",
    "Product",
    "Review",
    "ReviewReport",
    "ReviewResponse",
    "ReviewVote",
]
