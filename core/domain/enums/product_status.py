"""Product listing status (read from the catalog)."""
from enum import Enum


class ProductStatus(str, Enum):
    """Catalog status values. Only APPROVED products are purchasable."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"
