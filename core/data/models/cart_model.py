"""SQLAlchemy ORM model for cart line items."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint

from .base import Base


class CartItemModel(Base):
    """SQLAlchemy ORM model for cart_items table."""

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("buyer_id", "product_id", name="uq_cart_items_buyer_product"),
    )

    id = Column(String(36), primary_key=True)
    buyer_id = Column(String(36), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    seller_id = Column(String(36), nullable=False)
    product_title = Column(String(255), nullable=False)
    unit_price_amount = Column(Numeric(12, 2), nullable=False)
    unit_price_currency = Column(String(3), nullable=False, default="USD")
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime, nullable=False, index=True)
