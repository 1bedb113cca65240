"""DTOs for reviews."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.domain.entities.review import Review, ReviewResponse
from core.domain.enums import ReviewStatus, VoteType


class CreateReviewRequest(BaseModel):
    """
    Rating and comment are validated by the domain so every rule
    violation surfaces as the same ValidationError.
    """

    order_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    rating: int
    comment: str
    title: Optional[str] = Field(None, max_length=255)
    pros: Optional[str] = None
    cons: Optional[str] = None

    model_config = {"frozen": True}


class UpdateReviewRequest(BaseModel):
    """Fields left out keep their current value."""

    rating: Optional[int] = None
    comment: Optional[str] = None
    title: Optional[str] = Field(None, max_length=255)
    pros: Optional[str] = None
    cons: Optional[str] = None

    model_config = {"frozen": True}


class VoteReviewRequest(BaseModel):
    vote: VoteType

    model_config = {"frozen": True}


class RespondToReviewRequest(BaseModel):
    comment: str = Field(..., min_length=1, max_length=5000)

    model_config = {"frozen": True}


class ReportReviewRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=100)
    details: Optional[str] = Field(None, max_length=2000)

    model_config = {"frozen": True}


class ModerateReviewRequest(BaseModel):
    status: ReviewStatus
    reason: Optional[str] = Field(None, max_length=500)

    model_config = {"frozen": True}


class ReviewResponseDTO(BaseModel):
    id: str
    seller_id: str
    comment: str
    created_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, response: ReviewResponse) -> "ReviewResponseDTO":
        return cls(
            id=response.id,
            seller_id=response.seller_id,
            comment=response.comment,
            created_at=response.created_at,
        )


class ReviewDTO(BaseModel):
    id: str
    order_id: str
    product_id: str
    buyer_id: str
    seller_id: str
    rating: int
    title: Optional[str] = None
    comment: str
    pros: Optional[str] = None
    cons: Optional[str] = None
    status: ReviewStatus
    is_verified: bool
    helpful_count: int = 0
    not_helpful_count: int = 0
    report_count: int = 0
    created_at: datetime
    response: Optional[ReviewResponseDTO] = None

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, review: Review, response: Optional[ReviewResponse] = None) -> "ReviewDTO":
        return cls(
            id=review.id,
            order_id=review.order_id,
            product_id=review.product_id,
            buyer_id=review.buyer_id,
            seller_id=review.seller_id,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            pros=review.pros,
            cons=review.cons,
            status=review.status,
            is_verified=review.is_verified,
            helpful_count=review.helpful_count,
            not_helpful_count=review.not_helpful_count,
            report_count=review.report_count,
            created_at=review.created_at,
            response=ReviewResponseDTO.from_domain(response) if response else None,
        )


class RatingStatsDTO(BaseModel):
    product_id: str
    review_count: int = 0
    average_rating: Decimal = Decimal("0.00")
    distribution: Dict[int, int] = Field(default_factory=lambda: {star: 0 for star in range(1, 6)})
    recommendation_rate: Decimal = Field(
        default=Decimal("0.00"), description="Percent of 4 and 5 star reviews"
    )

    model_config = {"frozen": True}


class SellerRatingStatsDTO(BaseModel):
    """Aggregate over the published reviews of all the seller's products."""

    seller_id: str
    review_count: int = 0
    average_rating: Decimal = Decimal("0.00")
    distribution: Dict[int, int] = Field(default_factory=lambda: {star: 0 for star in range(1, 6)})

    model_config = {"frozen": True}


class ReviewListDTO(BaseModel):
    reviews: List[ReviewDTO] = Field(default_factory=list)
    total: int = Field(..., ge=0)

    model_config = {"frozen": True}
