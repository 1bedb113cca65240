"""SQLAlchemy ORM model for download tokens."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from .base import Base


class DownloadTokenModel(Base):
    """SQLAlchemy ORM model for download_tokens table."""

    __tablename__ = "download_tokens"
    __table_args__ = (
        UniqueConstraint("order_id", "product_id", name="uq_download_tokens_order_product"),
    )

    id = Column(String(36), primary_key=True)
    token = Column(String(128), nullable=False, unique=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), nullable=False)
    buyer_id = Column(String(36), nullable=False, index=True)
    download_count = Column(Integer, nullable=False, default=0)
    download_limit = Column(Integer, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)
    last_download_at = Column(DateTime, nullable=True)
    last_ip_address = Column(String(64), nullable=True)
    last_user_agent = Column(String(500), nullable=True)
