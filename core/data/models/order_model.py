"""SQLAlchemy ORM models for Order aggregate."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from core.domain.clock import utc_now

from .base import Base


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    order_number = Column(String(32), nullable=False, unique=True)
    buyer_id = Column(String(36), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    payment_status = Column(String(20), nullable=False, default="unpaid")

    subtotal_amount = Column(Numeric(12, 2), nullable=False)
    platform_fee_amount = Column(Numeric(12, 2), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    platform_fee_rate = Column(Numeric(5, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")

    payment_intent_ref = Column(String(255), nullable=True, unique=True)
    payment_error_code = Column(String(100), nullable=True)
    payment_error_message = Column(Text, nullable=True)
    cancel_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, index=True)
    paid_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    # Relationship to items
    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderItemModel(Base):
    """SQLAlchemy ORM model for order_items table."""

    __tablename__ = "order_items"
    __table_args__ = (
        UniqueConstraint("order_id", "product_id", name="uq_order_items_order_product"),
    )

    id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), nullable=False, index=True)
    seller_id = Column(String(36), nullable=False, index=True)
    unit_price_amount = Column(Numeric(12, 2), nullable=False)
    unit_price_currency = Column(String(3), nullable=False, default="USD")
    product_title_snapshot = Column(String(255), nullable=False)
    product_description_snapshot = Column(Text, nullable=False, default="")
    quantity = Column(Integer, nullable=False, default=1)

    # Relationship back to order
    order = relationship("OrderModel", back_populates="items")


class PaymentEventModel(Base):
    """Processed gateway events, keyed by the provider's event id."""

    __tablename__ = "payment_events"

    provider_event_id = Column(String(255), primary_key=True)
    event_type = Column(String(100), nullable=False)
    order_id = Column(String(36), nullable=True, index=True)
    received_at = Column(DateTime, default=utc_now)
