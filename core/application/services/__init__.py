"""Application services."""
from .cart_service import CartService
from .download_service import DownloadService, EntitlementIssuer
from .order_service import OrderApplicationService
from .review_service import ReviewService

__all__ = [
    "CartService",
    "DownloadService",
    "EntitlementIssuer",
    "OrderApplicationService",
    "ReviewService",
]
