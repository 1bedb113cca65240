"""Database models."""

from .base import Base
from .cart_model import CartItemModel
from .download_token_model import DownloadTokenModel
from .order_model import OrderItemModel, OrderModel, PaymentEventModel
from .product_model import ProductModel
from .review_model import (
    ReviewModel,
    ReviewReportModel,
    ReviewResponseModel,
    ReviewVoteModel,
)

__all__ = [
    "Base",
    "CartItemModel",
    "DownloadTokenModel",
    "OrderItemModel",
    "OrderModel",
    "PaymentEventModel",
    "ProductModel",
    "ReviewModel",
    "ReviewReportModel",
    "ReviewResponseModel",
    "ReviewVoteModel",
]
