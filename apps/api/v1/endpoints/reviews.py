"""Review endpoints for REST API."""

from fastapi import APIRouter, Depends, Query

from apps.api.deps import get_current_user_id, get_is_admin, get_review_service
from core.application.dtos.review_dto import (
    CreateReviewRequest,
    ModerateReviewRequest,
    RatingStatsDTO,
    ReportReviewRequest,
    RespondToReviewRequest,
    ReviewDTO,
    ReviewListDTO,
    SellerRatingStatsDTO,
    UpdateReviewRequest,
    VoteReviewRequest,
)
from core.application.services.review_service import ReviewService
from core.domain.exceptions import NotFoundError

router = APIRouter(tags=["reviews"])


@router.post("/reviews", response_model=ReviewDTO, status_code=201)
async def create_review(
    request: CreateReviewRequest,
    buyer_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewDTO:
    """Review a product from one of the caller's completed orders."""
    return await service.create_review(buyer_id, request)


@router.get("/products/{product_id}/reviews", response_model=ReviewListDTO)
async def list_product_reviews(
    product_id: str,
    sort: str = Query(default="newest", pattern="^(newest|oldest|highest|lowest|helpful)$"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: ReviewService = Depends(get_review_service),
) -> ReviewListDTO:
    return await service.list_product_reviews(product_id, sort=sort, limit=limit, offset=offset)


@router.get("/products/{product_id}/rating", response_model=RatingStatsDTO)
async def product_rating_stats(
    product_id: str,
    service: ReviewService = Depends(get_review_service),
) -> RatingStatsDTO:
    return await service.product_rating_stats(product_id)


@router.post("/reviews/{review_id}/vote", response_model=ReviewDTO)
async def vote_review(
    review_id: str,
    request: VoteReviewRequest,
    voter_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewDTO:
    return await service.vote_review(review_id, voter_id, request.vote)


@router.post("/reviews/{review_id}/response", response_model=ReviewDTO, status_code=201)
async def respond_to_review(
    review_id: str,
    request: RespondToReviewRequest,
    seller_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewDTO:
    return await service.respond_to_review(review_id, seller_id, request.comment)


@router.post("/reviews/{review_id}/report", response_model=ReviewDTO, status_code=201)
async def report_review(
    review_id: str,
    request: ReportReviewRequest,
    user_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewDTO:
    return await service.report_review(review_id, user_id, request.reason, request.details)


@router.post("/reviews/{review_id}/moderate", response_model=ReviewDTO)
async def moderate_review(
    review_id: str,
    request: ModerateReviewRequest,
    moderator_id: str = Depends(get_current_user_id),
    is_admin: bool = Depends(get_is_admin),
    service: ReviewService = Depends(get_review_service),
) -> ReviewDTO:
    if not is_admin:
        raise NotFoundError("Not found")
    return await service.moderate_review(review_id, moderator_id, request.status, request.reason)


@router.delete("/reviews/{review_id}", response_model=ReviewDTO)
async def remove_review(
    review_id: str,
    actor_id: str = Depends(get_current_user_id),
    is_admin: bool = Depends(get_is_admin),
    service: ReviewService = Depends(get_review_service),
) -> ReviewDTO:
    return await service.remove_review(review_id, actor_id, is_admin=is_admin)


@router.patch("/reviews/{review_id}", response_model=ReviewDTO)
async def update_review(
    review_id: str,
    request: UpdateReviewRequest,
    buyer_id: str = Depends(get_current_user_id),
    service: ReviewService = Depends(get_review_service),
) -> ReviewDTO:
    """Edit the caller's own review; it is moderated again."""
    return await service.update_review(review_id, buyer_id, request)


@router.get("/reviews/moderation-queue", response_model=ReviewListDTO)
async def list_moderation_queue(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    is_admin: bool = Depends(get_is_admin),
    service: ReviewService = Depends(get_review_service),
) -> ReviewListDTO:
    if not is_admin:
        raise NotFoundError("Not found")
    return await service.list_moderation_queue(limit=limit, offset=offset)


@router.get("/sellers/{seller_id}/rating", response_model=SellerRatingStatsDTO)
async def seller_rating_stats(
    seller_id: str,
    service: ReviewService = Depends(get_review_service),
) -> SellerRatingStatsDTO:
    return await service.seller_rating_stats(seller_id)
