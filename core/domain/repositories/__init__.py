"""Repository interfaces."""

from .cart_repository import CartRepository
from .download_token_repository import DownloadTokenRepository
from .order_repository import OrderRepository
from .review_repository import ReviewRepository

__all__ = [
    "CartRepository",
    "DownloadTokenRepository",
    "OrderRepository",
    "ReviewRepository",
]
