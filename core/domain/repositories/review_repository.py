"""Repository interface for reviews, votes, responses and reports."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..entities.review import Review, ReviewReport, ReviewResponse, ReviewVote
from ..enums import ReviewStatus


class ReviewRepository(ABC):

    @abstractmethod
    async def add(self, review: Review) -> None:
        """Insert a review.

        Raises:
            DuplicateReviewError: (order, product, buyer) already reviewed
        """
        pass

    @abstractmethod
    async def get(self, review_id: str, for_update: bool = False) -> Optional[Review]:
        pass

    @abstractmethod
    async def save(self, review: Review) -> None:
        """Persist content, status, counters and moderation fields."""
        pass

    @abstractmethod
    async def exists_for(self, order_id: str, product_id: str, buyer_id: str) -> bool:
        pass

    @abstractmethod
    async def upsert_vote(self, vote: ReviewVote) -> bool:
        """Insert or overwrite the voter's vote. Returns True if newly created."""
        pass

    @abstractmethod
    async def list_votes(self, review_id: str) -> List[ReviewVote]:
        pass

    @abstractmethod
    async def add_response(self, response: ReviewResponse) -> None:
        """Raises ConflictError if the review already has a response."""
        pass

    @abstractmethod
    async def get_response(self, review_id: str) -> Optional[ReviewResponse]:
        pass

    @abstractmethod
    async def add_report(self, report: ReviewReport) -> None:
        """Raises ConflictError if the user already reported the review."""
        pass

    @abstractmethod
    async def count_reports(self, review_id: str) -> int:
        pass

    @abstractmethod
    async def list_published_for_product(
        self, product_id: str, sort: str = "newest", limit: int = 20, offset: int = 0
    ) -> List[Review]:
        pass

    @abstractmethod
    async def published_ratings(self, product_id: str) -> List[int]:
        pass

    @abstractmethod
    async def list_by_status(
        self, statuses: Sequence[ReviewStatus], limit: int = 20, offset: int = 0
    ) -> List[Review]:
        """Newest first."""
        pass

    @abstractmethod
    async def published_ratings_for_seller(self, seller_id: str) -> List[int]:
        pass
