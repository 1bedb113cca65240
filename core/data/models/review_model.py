"""SQLAlchemy ORM models for reviews and their satellites."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from core.domain.clock import utc_now

from .base import Base


class ReviewModel(Base):
    """SQLAlchemy ORM model for reviews table."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint(
            "order_id", "product_id", "buyer_id", name="uq_reviews_order_product_buyer"
        ),
    )

    id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False)
    product_id = Column(String(36), nullable=False, index=True)
    buyer_id = Column(String(36), nullable=False, index=True)
    seller_id = Column(String(36), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    title = Column(String(255), nullable=True)
    comment = Column(Text, nullable=False)
    pros = Column(Text, nullable=True)
    cons = Column(Text, nullable=True)
    status = Column(String(30), nullable=False, index=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    helpful_count = Column(Integer, nullable=False, default=0)
    not_helpful_count = Column(Integer, nullable=False, default=0)
    report_count = Column(Integer, nullable=False, default=0)
    moderated_by = Column(String(36), nullable=True)
    moderated_at = Column(DateTime, nullable=True)
    moderation_reason = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class ReviewVoteModel(Base):
    """SQLAlchemy ORM model for review_votes table."""

    __tablename__ = "review_votes"
    __table_args__ = (
        UniqueConstraint("review_id", "user_id", name="uq_review_votes_review_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(String(36), ForeignKey("reviews.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    vote = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class ReviewResponseModel(Base):
    """SQLAlchemy ORM model for review_responses table (one per review)."""

    __tablename__ = "review_responses"

    id = Column(String(36), primary_key=True)
    review_id = Column(String(36), ForeignKey("reviews.id"), nullable=False, unique=True)
    seller_id = Column(String(36), nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False)


class ReviewReportModel(Base):
    """SQLAlchemy ORM model for review_reports table."""

    __tablename__ = "review_reports"
    __table_args__ = (
        UniqueConstraint("review_id", "user_id", name="uq_review_reports_review_user"),
    )

    id = Column(String(36), primary_key=True)
    review_id = Column(String(36), ForeignKey("reviews.id"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    reason = Column(String(100), nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)
