"""SQLAlchemy ORM model for the product catalog."""

from sqlalchemy import Column, DateTime, Numeric, String, Text

from core.domain.clock import utc_now

from .base import Base


class ProductModel(Base):
    """SQLAlchemy ORM model for products table."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True)
    seller_id = Column(String(36), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price_amount = Column(Numeric(12, 2), nullable=False)
    price_currency = Column(String(3), nullable=False, default="USD")
    status = Column(String(20), nullable=False, default="draft", index=True)
    file_ref = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utc_now)
