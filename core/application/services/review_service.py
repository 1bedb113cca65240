"""Application service for product reviews."""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.review_dto import (
    CreateReviewRequest,
    RatingStatsDTO,
    ReviewDTO,
    ReviewListDTO,
    SellerRatingStatsDTO,
    UpdateReviewRequest,
)
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities.review import Review, ReviewReport, ReviewResponse, ReviewVote
from core.domain.enums import ReviewStatus, VoteType
from core.domain.event_bus import EventBus
from core.domain.events import ReviewResponseCreatedEvent
from core.domain.exceptions import (
    ConflictError,
    DuplicateReviewError,
    NotFoundError,
    PurchaseNotVerifiedError,
    ValidationError,
)
from core.domain.services.moderation import ModerationPolicy
from core.domain.value_objects import round2
from core.settings.modules.commerce_settings import CommerceSettings

from ._events import publish_collected

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Verified-purchase reviews.

    Only a buyer holding a COMPLETED order that contains the product may
    review it, once per (order, product). New reviews are auto-moderated in
    the creating transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: CommerceSettings,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._event_bus = event_bus
        self._policy = ModerationPolicy(denylist=tuple(settings.review_denylist))

    async def create_review(self, buyer_id: str, request: CreateReviewRequest) -> ReviewDTO:
        """Create and auto-moderate a review.

        Checks run in order: eligibility, uniqueness, field validation.

        Raises:
            PurchaseNotVerifiedError: No completed order of this buyer with the product
            DuplicateReviewError: Already reviewed for this order
            ValidationError: Rating outside 1..5 or comment too short
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.find_completed_purchase(
                request.order_id, buyer_id, request.product_id
            )
            if order is None:
                raise PurchaseNotVerifiedError(
                    "You can only review products from your completed orders",
                    order_id=request.order_id,
                    product_id=request.product_id,
                )
            if await uow.reviews.exists_for(request.order_id, request.product_id, buyer_id):
                raise DuplicateReviewError(
                    "You have already reviewed this product for this order",
                    order_id=request.order_id,
                    product_id=request.product_id,
                )

            item = next(i for i in order.items if i.product_id == request.product_id)
            review = Review.create(
                order_id=order.id,
                product_id=request.product_id,
                buyer_id=buyer_id,
                seller_id=item.seller_id,
                rating=request.rating,
                comment=request.comment,
                min_comment_length=self._settings.review_min_comment_length,
                title=request.title,
                pros=request.pros,
                cons=request.cons,
            )
            await uow.reviews.add(review)

            status = review.auto_moderate(self._policy, product_title=item.product_title_snapshot)
            await uow.reviews.save(review)
            await uow.commit()

        logger.info(f"Review {review.id} for product {review.product_id} -> {status.value}")
        await publish_collected(self._event_bus, review, uow, user_id=buyer_id)
        return ReviewDTO.from_domain(review)

    async def update_review(
        self, review_id: str, buyer_id: str, request: UpdateReviewRequest
    ) -> ReviewDTO:
        """Author edit; the review is moderated again in the same transaction.

        Raises:
            NotFoundError: Unknown review, removed, or not the caller's
            ValidationError: Review is FLAGGED, or an edited field is invalid
        """
        uow = create_uow(self._session_factory)
        async with uow:
            review = await self._get_visible(uow, review_id, for_update=True)
            if review.buyer_id != buyer_id:
                raise NotFoundError(f"Review {review_id} not found")

            product = await uow.products.get_product(review.product_id)
            status = review.revise(
                self._policy,
                self._settings.review_min_comment_length,
                rating=request.rating,
                comment=request.comment,
                title=request.title,
                pros=request.pros,
                cons=request.cons,
                product_title=product.title if product else "",
            )
            response = await uow.reviews.get_response(review_id)
            await uow.reviews.save(review)
            await uow.commit()

        logger.info(f"Review {review_id} edited by its author -> {status.value}")
        await publish_collected(self._event_bus, review, uow, user_id=buyer_id)
        return ReviewDTO.from_domain(review, response)

    async def vote_review(self, review_id: str, voter_id: str, vote: VoteType) -> ReviewDTO:
        """Upsert a helpful / not-helpful vote and recount both counters."""
        uow = create_uow(self._session_factory)
        async with uow:
            review = await self._get_visible(uow, review_id, for_update=True)
            if not review.is_published:
                raise ValidationError("Only published reviews can be voted on")
            if review.buyer_id == voter_id:
                raise ValidationError("You cannot vote on your own review")

            await uow.reviews.upsert_vote(ReviewVote(review_id=review_id, user_id=voter_id, vote=vote))
            review.recount_votes(await uow.reviews.list_votes(review_id))
            await uow.reviews.save(review)
            await uow.commit()

        return ReviewDTO.from_domain(review)

    async def respond_to_review(self, review_id: str, seller_id: str, comment: str) -> ReviewDTO:
        """One public response per review, by the review's seller, on published reviews."""
        comment = (comment or "").strip()
        if not comment:
            raise ValidationError("Response comment cannot be empty")

        uow = create_uow(self._session_factory)
        async with uow:
            review = await self._get_visible(uow, review_id)
            if review.seller_id != seller_id:
                raise ValidationError("Only the seller of the product can respond to this review")
            if not review.is_published:
                raise ValidationError("Only published reviews can receive a response")
            if await uow.reviews.get_response(review_id) is not None:
                raise ConflictError("Review already has a response", review_id=review_id)

            response = ReviewResponse(review_id=review_id, seller_id=seller_id, comment=comment)
            await uow.reviews.add_response(response)
            await uow.commit()

        logger.info(f"Seller {seller_id} responded to review {review_id}")
        if self._event_bus is not None:
            await self._event_bus.publish(
                ReviewResponseCreatedEvent(
                    review_id=review.id,
                    product_id=review.product_id,
                    seller_id=seller_id,
                    buyer_id=review.buyer_id,
                    execution_id=str(uow.execution_id),
                    user_id=seller_id,
                )
            )
        return ReviewDTO.from_domain(review, response)

    async def report_review(
        self, review_id: str, user_id: str, reason: str, details: Optional[str] = None
    ) -> ReviewDTO:
        """Record an abuse report; enough reports flag a published review."""
        uow = create_uow(self._session_factory)
        async with uow:
            review = await self._get_visible(uow, review_id, for_update=True)
            if review.buyer_id == user_id:
                raise ValidationError("You cannot report your own review")

            await uow.reviews.add_report(
                ReviewReport(review_id=review_id, user_id=user_id, reason=reason, details=details)
            )
            count = await uow.reviews.count_reports(review_id)
            if review.register_report(count, self._settings.report_flag_threshold):
                logger.warning(f"🚩 Review {review_id} flagged after {count} reports")
            await uow.reviews.save(review)
            await uow.commit()

        await publish_collected(self._event_bus, review, uow, user_id=user_id)
        return ReviewDTO.from_domain(review)

    async def moderate_review(
        self,
        review_id: str,
        moderator_id: str,
        status: ReviewStatus,
        reason: Optional[str] = None,
    ) -> ReviewDTO:
        """Administrator decision: PUBLISHED, FLAGGED or REMOVED."""
        uow = create_uow(self._session_factory)
        async with uow:
            review = await uow.reviews.get(review_id, for_update=True)
            if review is None:
                raise NotFoundError(f"Review {review_id} not found")

            product = await uow.products.get_product(review.product_id)
            review.moderate(
                status,
                moderator_id,
                reason=reason,
                product_title=product.title if product else "",
            )
            await uow.reviews.save(review)
            await uow.commit()

        logger.info(f"Review {review_id} moderated to {status.value} by {moderator_id}")
        await publish_collected(self._event_bus, review, uow, user_id=moderator_id)
        return ReviewDTO.from_domain(review)

    async def remove_review(self, review_id: str, actor_id: str, is_admin: bool = False) -> ReviewDTO:
        """Soft delete by the author or an administrator."""
        uow = create_uow(self._session_factory)
        async with uow:
            review = await self._get_visible(uow, review_id, for_update=True)
            if not is_admin and review.buyer_id != actor_id:
                raise NotFoundError(f"Review {review_id} not found")

            reason = "Removed by administrator" if is_admin else "Removed by author"
            review.moderate(ReviewStatus.REMOVED, actor_id, reason=reason)
            await uow.reviews.save(review)
            await uow.commit()

        await publish_collected(self._event_bus, review, uow, user_id=actor_id)
        return ReviewDTO.from_domain(review)

    async def list_product_reviews(
        self, product_id: str, sort: str = "newest", limit: int = 20, offset: int = 0
    ) -> ReviewListDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            reviews = await uow.reviews.list_published_for_product(
                product_id, sort=sort, limit=limit, offset=offset
            )
            dtos = [
                ReviewDTO.from_domain(review, await uow.reviews.get_response(review.id))
                for review in reviews
            ]
        return ReviewListDTO(reviews=dtos, total=len(dtos))

    async def product_rating_stats(self, product_id: str) -> RatingStatsDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            ratings = await uow.reviews.published_ratings(product_id)

        if not ratings:
            return RatingStatsDTO(product_id=product_id)

        summary = _rating_summary(ratings)
        distribution = summary["distribution"]
        recommended = distribution[4] + distribution[5]
        return RatingStatsDTO(
            product_id=product_id,
            recommendation_rate=round2(Decimal(recommended) * 100 / len(ratings)),
            **summary,
        )

    async def seller_rating_stats(self, seller_id: str) -> SellerRatingStatsDTO:
        """Published reviews across every product of the seller."""
        uow = create_uow(self._session_factory)
        async with uow:
            ratings = await uow.reviews.published_ratings_for_seller(seller_id)

        if not ratings:
            return SellerRatingStatsDTO(seller_id=seller_id)
        return SellerRatingStatsDTO(seller_id=seller_id, **_rating_summary(ratings))

    async def list_moderation_queue(self, limit: int = 20, offset: int = 0) -> ReviewListDTO:
        """FLAGGED and PENDING_MODERATION reviews awaiting an administrator, newest first."""
        uow = create_uow(self._session_factory)
        async with uow:
            reviews = await uow.reviews.list_by_status(
                (ReviewStatus.FLAGGED, ReviewStatus.PENDING_MODERATION), limit=limit, offset=offset
            )
        return ReviewListDTO(reviews=[ReviewDTO.from_domain(r) for r in reviews], total=len(reviews))

    @staticmethod
    async def _get_visible(uow: UnitOfWork, review_id: str, for_update: bool = False) -> Review:
        review = await uow.reviews.get(review_id, for_update=for_update)
        if review is None or review.status == ReviewStatus.REMOVED:
            raise NotFoundError(f"Review {review_id} not found")
        return review


def _rating_summary(ratings: List[int]) -> Dict[str, Any]:
    count = len(ratings)
    return {
        "review_count": count,
        "average_rating": round2(Decimal(sum(ratings)) / count),
        "distribution": {star: ratings.count(star) for star in range(1, 6)},
    }
