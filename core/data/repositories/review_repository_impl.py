"""SQLAlchemy implementation of ReviewRepository."""

from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.review import Review, ReviewReport, ReviewResponse, ReviewVote
from core.domain.enums import ReviewStatus
from core.domain.exceptions import ConflictError, DuplicateReviewError, ValidationError
from core.domain.repositories.review_repository import ReviewRepository

from ..mappers import ReviewMapper
from ..models.review_model import (
    ReviewModel,
    ReviewReportModel,
    ReviewResponseModel,
    ReviewVoteModel,
)


_SORTS = {
    "newest": (ReviewModel.created_at.desc(),),
    "oldest": (ReviewModel.created_at.asc(),),
    "highest": (ReviewModel.rating.desc(), ReviewModel.created_at.desc()),
    "lowest": (ReviewModel.rating.asc(), ReviewModel.created_at.desc()),
    "helpful": (ReviewModel.helpful_count.desc(), ReviewModel.created_at.desc()),
}


class SqlAlchemyReviewRepository(ReviewRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, review: Review) -> None:
        self._session.add(ReviewMapper.to_persistence(review))
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise DuplicateReviewError(
                "You have already reviewed this product for this order",
                order_id=review.order_id,
                product_id=review.product_id,
            ) from exc

    async def get(self, review_id: str, for_update: bool = False) -> Optional[Review]:
        stmt = select(ReviewModel).where(ReviewModel.id == review_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return ReviewMapper.to_domain(model) if model else None

    async def save(self, review: Review) -> None:
        model = await self._session.get(ReviewModel, review.id)
        ReviewMapper.update_persistence(review, model)
        await self._session.flush()

    async def exists_for(self, order_id: str, product_id: str, buyer_id: str) -> bool:
        result = await self._session.execute(
            select(ReviewModel.id).where(
                ReviewModel.order_id == order_id,
                ReviewModel.product_id == product_id,
                ReviewModel.buyer_id == buyer_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def upsert_vote(self, vote: ReviewVote) -> bool:
        result = await self._session.execute(
            select(ReviewVoteModel).where(
                ReviewVoteModel.review_id == vote.review_id,
                ReviewVoteModel.user_id == vote.user_id,
            )
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            existing.vote = vote.vote.value
            await self._session.flush()
            return False

        self._session.add(
            ReviewVoteModel(review_id=vote.review_id, user_id=vote.user_id, vote=vote.vote.value)
        )
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError("Concurrent vote on the same review, retry") from exc
        return True

    async def list_votes(self, review_id: str) -> List[ReviewVote]:
        result = await self._session.execute(
            select(ReviewVoteModel).where(ReviewVoteModel.review_id == review_id)
        )
        return [ReviewMapper.vote_to_domain(model) for model in result.scalars().all()]

    async def add_response(self, response: ReviewResponse) -> None:
        self._session.add(ReviewMapper.response_to_persistence(response))
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError("Review already has a response", review_id=response.review_id) from exc

    async def get_response(self, review_id: str) -> Optional[ReviewResponse]:
        result = await self._session.execute(
            select(ReviewResponseModel).where(ReviewResponseModel.review_id == review_id)
        )
        model = result.scalar_one_or_none()
        return ReviewMapper.response_to_domain(model) if model else None

    async def add_report(self, report: ReviewReport) -> None:
        self._session.add(ReviewMapper.report_to_persistence(report))
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError("You have already reported this review", review_id=report.review_id) from exc

    async def count_reports(self, review_id: str) -> int:
        result = await self._session.execute(
            select(func.count(ReviewReportModel.id)).where(ReviewReportModel.review_id == review_id)
        )
        return result.scalar_one()

    async def list_published_for_product(
        self, product_id: str, sort: str = "newest", limit: int = 20, offset: int = 0
    ) -> List[Review]:
        if sort not in _SORTS:
            raise ValidationError(f"Unknown sort: {sort}", allowed=sorted(_SORTS))
        result = await self._session.execute(
            select(ReviewModel)
            .where(
                ReviewModel.product_id == product_id,
                ReviewModel.status == ReviewStatus.PUBLISHED.value,
            )
            .order_by(*_SORTS[sort])
            .limit(limit)
            .offset(offset)
        )
        return [ReviewMapper.to_domain(model) for model in result.scalars().all()]

    async def published_ratings(self, product_id: str) -> List[int]:
        result = await self._session.execute(
            select(ReviewModel.rating).where(
                ReviewModel.product_id == product_id,
                ReviewModel.status == ReviewStatus.PUBLISHED.value,
            )
        )
        return list(result.scalars().all())

    async def list_by_status(
        self, statuses: Sequence[ReviewStatus], limit: int = 20, offset: int = 0
    ) -> List[Review]:
        result = await self._session.execute(
            select(ReviewModel)
            .where(ReviewModel.status.in_([status.value for status in statuses]))
            .order_by(ReviewModel.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return [ReviewMapper.to_domain(model) for model in result.scalars().all()]

    async def published_ratings_for_seller(self, seller_id: str) -> List[int]:
        result = await self._session.execute(
            select(ReviewModel.rating).where(
                ReviewModel.seller_id == seller_id,
                ReviewModel.status == ReviewStatus.PUBLISHED.value,
            )
        )
        return list(result.scalars().all())
