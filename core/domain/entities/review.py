"""
Review aggregate.

At most one review per (order, product, buyer). Reviews are never
physically deleted; REMOVED is the terminal soft-delete state.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional
import uuid

from ..clock import utc_now
from ..enums import ReviewStatus, VoteType
from ..events.base import DomainEvent
from ..exceptions import InvalidStateTransition, ValidationError
from ..services.moderation import ModerationPolicy


MIN_RATING = 1
MAX_RATING = 5

EDITABLE_STATUSES = (ReviewStatus.PENDING_MODERATION, ReviewStatus.PUBLISHED)


def _checked_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}",
            rating=rating,
        )
    return rating


def _checked_comment(comment: Optional[str], min_comment_length: int) -> str:
    comment = (comment or "").strip()
    if len(comment) < min_comment_length:
        raise ValidationError(
            f"Comment must be at least {min_comment_length} characters",
            min_length=min_comment_length,
        )
    return comment


@dataclass(frozen=True)
class ReviewVote:
    review_id: str
    user_id: str
    vote: VoteType


@dataclass(frozen=True)
class ReviewResponse:
    review_id: str
    seller_id: str
    comment: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class ReviewReport:
    review_id: str
    user_id: str
    reason: str
    details: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class Review:
    order_id: str
    product_id: str
    buyer_id: str
    seller_id: str
    rating: int
    comment: str
    title: Optional[str] = None
    pros: Optional[str] = None
    cons: Optional[str] = None
    status: ReviewStatus = ReviewStatus.PENDING_MODERATION
    is_verified: bool = False
    helpful_count: int = 0
    not_helpful_count: int = 0
    report_count: int = 0
    moderated_by: Optional[str] = None
    moderated_at: Optional[datetime] = None
    moderation_reason: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def create(
        cls,
        order_id: str,
        product_id: str,
        buyer_id: str,
        seller_id: str,
        rating: int,
        comment: str,
        min_comment_length: int,
        title: Optional[str] = None,
        pros: Optional[str] = None,
        cons: Optional[str] = None,
    ) -> "Review":
        """
        Build a verified review awaiting moderation.

        Eligibility is checked by the caller; reaching this factory means the
        buyer holds a completed order containing the product.

        Raises:
            ValidationError: Rating outside 1..5 or comment too short
        """
        return cls(
            order_id=order_id,
            product_id=product_id,
            buyer_id=buyer_id,
            seller_id=seller_id,
            rating=_checked_rating(rating),
            comment=_checked_comment(comment, min_comment_length),
            title=title,
            pros=pros,
            cons=cons,
            is_verified=True,
        )

    @property
    def is_published(self) -> bool:
        return self.status == ReviewStatus.PUBLISHED

    def auto_moderate(self, policy: ModerationPolicy, product_title: str = "") -> ReviewStatus:
        """Apply the denylist / low-rating rule right after creation."""
        new_status = policy.evaluate(self.rating, self.comment)
        reason = None
        if new_status == ReviewStatus.FLAGGED:
            terms = policy.matched_terms(self.comment)
            reason = f"denylist: {', '.join(terms)}" if terms else f"rating {self.rating}"
        self._set_status(new_status, reason=reason, product_title=product_title)
        return new_status

    def moderate(
        self,
        status: ReviewStatus,
        moderator_id: str,
        reason: Optional[str] = None,
        product_title: str = "",
        now: Optional[datetime] = None,
    ) -> None:
        """Manual moderation decision. REMOVED is final.

        Raises:
            InvalidStateTransition: The review was already removed
            ValidationError: Target is PENDING_MODERATION
        """
        if self.status == ReviewStatus.REMOVED:
            raise InvalidStateTransition(self.status.value, status.value, entity="review")
        if status == ReviewStatus.PENDING_MODERATION:
            raise ValidationError("Moderation must publish, flag or remove a review")
        self.moderated_by = moderator_id
        self.moderated_at = now or utc_now()
        self.moderation_reason = reason
        self._set_status(status, reason=reason, product_title=product_title)

    def revise(
        self,
        policy: ModerationPolicy,
        min_comment_length: int,
        rating: Optional[int] = None,
        comment: Optional[str] = None,
        title: Optional[str] = None,
        pros: Optional[str] = None,
        cons: Optional[str] = None,
        product_title: str = "",
    ) -> ReviewStatus:
        """
        Author edit of a pending or published review.

        Only the given fields change. The edited review goes back through
        auto-moderation; a review that stays published does not announce
        itself to the seller again.

        Raises:
            ValidationError: Review is FLAGGED or REMOVED, or a field is invalid
        """
        if self.status not in EDITABLE_STATUSES:
            raise ValidationError(f"A {self.status.value} review cannot be edited", review_id=self.id)
        if rating is not None:
            rating = _checked_rating(rating)
        if comment is not None:
            comment = _checked_comment(comment, min_comment_length)

        self.rating = self.rating if rating is None else rating
        self.comment = self.comment if comment is None else comment
        self.title = self.title if title is None else title
        self.pros = self.pros if pros is None else pros
        self.cons = self.cons if cons is None else cons

        if self.is_published and policy.evaluate(self.rating, self.comment) == ReviewStatus.PUBLISHED:
            return self.status
        self.status = ReviewStatus.PENDING_MODERATION
        return self.auto_moderate(policy, product_title=product_title)

    def recount_votes(self, votes: Iterable[ReviewVote]) -> None:
        """Derive both counters from the full vote set."""
        votes = list(votes)
        self.helpful_count = sum(1 for v in votes if v.vote == VoteType.HELPFUL)
        self.not_helpful_count = sum(1 for v in votes if v.vote == VoteType.NOT_HELPFUL)

    def register_report(self, report_count: int, flag_threshold: int) -> bool:
        """Returns True when this report pushed a published review into FLAGGED."""
        self.report_count = report_count
        if self.is_published and report_count >= flag_threshold:
            self._set_status(ReviewStatus.FLAGGED, reason="Multiple reports received")
            return True
        return False

    def _set_status(self, status: ReviewStatus, reason: Optional[str] = None, product_title: str = "") -> None:
        previous = self.status
        self.status = status
        if previous == status:
            return

        from ..events.review_events import (
            ReviewFlaggedEvent,
            ReviewPublishedEvent,
            ReviewRemovedEvent,
        )

        if status == ReviewStatus.PUBLISHED:
            self._domain_events.append(
                ReviewPublishedEvent(
                    review_id=self.id,
                    product_id=self.product_id,
                    seller_id=self.seller_id,
                    buyer_id=self.buyer_id,
                    rating=self.rating,
                    product_title=product_title,
                )
            )
        elif status == ReviewStatus.FLAGGED:
            self._domain_events.append(
                ReviewFlaggedEvent(
                    review_id=self.id,
                    product_id=self.product_id,
                    buyer_id=self.buyer_id,
                    reason=reason,
                )
            )
        elif status == ReviewStatus.REMOVED:
            self._domain_events.append(
                ReviewRemovedEvent(
                    review_id=self.id,
                    product_id=self.product_id,
                    buyer_id=self.buyer_id,
                    reason=reason,
                )
            )

    def get_domain_events(self) -> List[DomainEvent]:
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        self._domain_events.clear()
