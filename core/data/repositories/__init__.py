"""Repository implementations."""

from .cart_repository_impl import SqlAlchemyCartRepository
from .download_token_repository_impl import SqlAlchemyDownloadTokenRepository
from .order_repository_impl import SqlAlchemyOrderRepository
from .product_catalog_impl import SqlAlchemyProductCatalog
from .review_repository_impl import SqlAlchemyReviewRepository

__all__ = [
    "SqlAlchemyCartRepository",
    "SqlAlchemyDownloadTokenRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductCatalog",
    "SqlAlchemyReviewRepository",
]
