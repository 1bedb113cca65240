"""Application tests for verified-purchase reviews."""
from decimal import Decimal

import pytest
import pytest_asyncio

from core.application.dtos.review_dto import CreateReviewRequest, UpdateReviewRequest
from core.domain.enums import NotificationType, ReviewStatus, VoteType
from core.domain.exceptions import (
    ConflictError,
    DuplicateReviewError,
    InvalidStateTransition,
    NotFoundError,
    PurchaseNotVerifiedError,
    ValidationError,
)
from tests.helpers import (
    BUYER_ID,
    OTHER_BUYER_ID,
    OTHER_SELLER_ID,
    SELLER_ID,
    complete_order,
    make_product,
    place_order,
    seed_products,
)

GOOD_COMMENT = "Clear drawings and a complete cut list."


def _request(order_id: str, product_id: str = "p1", rating: int = 5, comment: str = GOOD_COMMENT):
    return CreateReviewRequest(order_id=order_id, product_id=product_id, rating=rating, comment=comment)


@pytest_asyncio.fixture
async def completed_order(cart_service, order_service, test_session_factory):
    await seed_products(
        test_session_factory,
        [make_product(f"p{i}") for i in range(1, 4)] + [make_product("p9", seller_id=OTHER_SELLER_ID)],
    )
    return await complete_order(cart_service, order_service, BUYER_ID, ["p1", "p2", "p3", "p9"])


@pytest_asyncio.fixture
async def published_review(review_service, completed_order):
    return await review_service.create_review(BUYER_ID, _request(completed_order.id))


class TestCreateReview:
    @pytest.mark.asyncio
    async def test_clean_review_is_published_and_verified(
        self, review_service, published_review, notifier
    ):
        assert published_review.status == ReviewStatus.PUBLISHED
        assert published_review.is_verified
        assert published_review.seller_id == SELLER_ID

        [notification] = notifier.get_notifications(SELLER_ID, NotificationType.REVIEW_RECEIVED)
        assert "Plan p1" in notification["message"]

    @pytest.mark.asyncio
    async def test_requires_completed_order(self, review_service, cart_service, order_service, test_session_factory):
        await seed_products(test_session_factory, [make_product("p5")])
        pending = await place_order(cart_service, order_service, BUYER_ID, ["p5"])

        with pytest.raises(PurchaseNotVerifiedError):
            await review_service.create_review(BUYER_ID, _request(pending.id, "p5"))

    @pytest.mark.asyncio
    async def test_requires_product_in_order_and_buyer_ownership(self, review_service, completed_order):
        with pytest.raises(PurchaseNotVerifiedError):
            await review_service.create_review(BUYER_ID, _request(completed_order.id, "p-not-bought"))
        with pytest.raises(PurchaseNotVerifiedError):
            await review_service.create_review(OTHER_BUYER_ID, _request(completed_order.id))

    @pytest.mark.asyncio
    async def test_one_review_per_order_and_product(self, review_service, completed_order, published_review):
        with pytest.raises(DuplicateReviewError):
            await review_service.create_review(BUYER_ID, _request(completed_order.id))

    @pytest.mark.asyncio
    async def test_duplicate_is_reported_before_field_errors(self, review_service, completed_order, published_review):
        with pytest.raises(DuplicateReviewError):
            await review_service.create_review(BUYER_ID, _request(completed_order.id, rating=9, comment="x"))

    @pytest.mark.asyncio
    async def test_eligibility_is_reported_before_field_errors(self, review_service, completed_order):
        with pytest.raises(PurchaseNotVerifiedError):
            await review_service.create_review(OTHER_BUYER_ID, _request(completed_order.id, rating=0))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating,comment", [(0, GOOD_COMMENT), (6, GOOD_COMMENT), (4, "too short")])
    async def test_field_validation(self, review_service, completed_order, rating, comment):
        with pytest.raises(ValidationError):
            await review_service.create_review(
                BUYER_ID, _request(completed_order.id, rating=rating, comment=comment)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "rating,comment",
        [(5, "This is a SCAM, do not buy it"), (1, "The joinery did not line up at all")],
    )
    async def test_auto_flagging(self, review_service, completed_order, notifier, rating, comment):
        review = await review_service.create_review(
            BUYER_ID, _request(completed_order.id, rating=rating, comment=comment)
        )

        assert review.status == ReviewStatus.FLAGGED
        assert len(notifier.get_notifications(BUYER_ID, NotificationType.REVIEW_FLAGGED)) == 1
        assert notifier.get_notifications(SELLER_ID, NotificationType.REVIEW_RECEIVED) == []
        assert (await review_service.list_product_reviews("p1")).total == 0




class TestEditing:
    @pytest.mark.asyncio
    async def test_clean_edit_stays_published_without_new_announcement(
        self, review_service, published_review, notifier
    ):
        edited = await review_service.update_review(
            published_review.id,
            BUYER_ID,
            UpdateReviewRequest(rating=4, comment="Good plans, one measurement was off."),
        )

        assert edited.status == ReviewStatus.PUBLISHED
        assert edited.rating == 4
        assert edited.comment == "Good plans, one measurement was off."
        assert edited.title is None
        assert len(notifier.get_notifications(SELLER_ID, NotificationType.REVIEW_RECEIVED)) == 1
        [listed] = (await review_service.list_product_reviews("p1")).reviews
        assert listed.rating == 4

    @pytest.mark.asyncio
    async def test_edit_runs_auto_moderation_again(self, review_service, published_review, notifier):
        edited = await review_service.update_review(
            published_review.id, BUYER_ID, UpdateReviewRequest(comment="Honestly this is a scam listing")
        )

        assert edited.status == ReviewStatus.FLAGGED
        assert edited.rating == 5
        assert len(notifier.get_notifications(BUYER_ID, NotificationType.REVIEW_FLAGGED)) == 1
        assert (await review_service.list_product_reviews("p1")).total == 0

    @pytest.mark.asyncio
    async def test_flagged_review_cannot_be_edited(self, review_service, completed_order):
        flagged = await review_service.create_review(
            BUYER_ID, _request(completed_order.id, rating=1, comment="Nothing lined up at all")
        )

        with pytest.raises(ValidationError):
            await review_service.update_review(
                flagged.id, BUYER_ID, UpdateReviewRequest(rating=5, comment=GOOD_COMMENT)
            )

    @pytest.mark.asyncio
    async def test_only_the_author_edits_with_valid_fields(self, review_service, published_review):
        with pytest.raises(NotFoundError):
            await review_service.update_review(published_review.id, OTHER_BUYER_ID, UpdateReviewRequest(rating=3))
        with pytest.raises(ValidationError):
            await review_service.update_review(published_review.id, BUYER_ID, UpdateReviewRequest(rating=6))
        with pytest.raises(ValidationError):
            await review_service.update_review(published_review.id, BUYER_ID, UpdateReviewRequest(comment="meh"))


class TestVotes:
    @pytest.mark.asyncio
    async def test_vote_upsert_recounts(self, review_service, published_review):
        await review_service.vote_review(published_review.id, "u1", VoteType.HELPFUL)
        await review_service.vote_review(published_review.id, "u2", VoteType.HELPFUL)
        review = await review_service.vote_review(published_review.id, "u1", VoteType.NOT_HELPFUL)

        assert review.helpful_count == 1
        assert review.not_helpful_count == 1

    @pytest.mark.asyncio
    async def test_cannot_vote_on_own_review(self, review_service, published_review):
        with pytest.raises(ValidationError):
            await review_service.vote_review(published_review.id, BUYER_ID, VoteType.HELPFUL)

    @pytest.mark.asyncio
    async def test_cannot_vote_on_flagged_review(self, review_service, completed_order):
        flagged = await review_service.create_review(
            BUYER_ID, _request(completed_order.id, comment="fake plans, nothing fits")
        )

        with pytest.raises(ValidationError):
            await review_service.vote_review(flagged.id, "u1", VoteType.HELPFUL)


class TestResponses:
    @pytest.mark.asyncio
    async def test_seller_responds_once(self, review_service, published_review, notifier):
        review = await review_service.respond_to_review(published_review.id, SELLER_ID, "Thanks for building it!")

        assert review.response.comment == "Thanks for building it!"
        assert len(notifier.get_notifications(BUYER_ID, NotificationType.REVIEW_RESPONSE)) == 1
        with pytest.raises(ConflictError):
            await review_service.respond_to_review(published_review.id, SELLER_ID, "Again")

        listed = await review_service.list_product_reviews("p1")
        assert listed.reviews[0].response.seller_id == SELLER_ID

    @pytest.mark.asyncio
    async def test_only_the_products_seller_may_respond(self, review_service, published_review):
        with pytest.raises(ValidationError):
            await review_service.respond_to_review(published_review.id, OTHER_SELLER_ID, "Not mine")
        with pytest.raises(ValidationError):
            await review_service.respond_to_review(published_review.id, SELLER_ID, "   ")


class TestReportsAndModeration:
    @pytest.mark.asyncio
    async def test_reports_flag_after_threshold(self, review_service, published_review, notifier):
        await review_service.report_review(published_review.id, "u1", "spam")
        second = await review_service.report_review(published_review.id, "u2", "offensive")
        assert second.status == ReviewStatus.PUBLISHED

        third = await review_service.report_review(published_review.id, "u3", "spam")

        assert third.status == ReviewStatus.FLAGGED
        assert third.report_count == 3
        assert len(notifier.get_notifications(BUYER_ID, NotificationType.REVIEW_FLAGGED)) == 1

    @pytest.mark.asyncio
    async def test_one_report_per_user(self, review_service, published_review):
        await review_service.report_review(published_review.id, "u1", "spam")

        with pytest.raises(ConflictError):
            await review_service.report_review(published_review.id, "u1", "spam again")

    @pytest.mark.asyncio
    async def test_author_cannot_report_own_review(self, review_service, published_review):
        with pytest.raises(ValidationError):
            await review_service.report_review(published_review.id, BUYER_ID, "oops")

    @pytest.mark.asyncio
    async def test_moderation_can_republish_and_remove(self, review_service, completed_order, notifier):
        flagged = await review_service.create_review(
            BUYER_ID, _request(completed_order.id, rating=1, comment="Terrible instructions overall")
        )

        published = await review_service.moderate_review(flagged.id, "admin-1", ReviewStatus.PUBLISHED)
        assert published.status == ReviewStatus.PUBLISHED
        assert (await review_service.list_product_reviews("p1")).total == 1

        removed = await review_service.moderate_review(
            flagged.id, "admin-1", ReviewStatus.REMOVED, reason="Off topic"
        )
        assert removed.status == ReviewStatus.REMOVED
        [notification] = notifier.get_notifications(BUYER_ID, NotificationType.REVIEW_REMOVED)
        assert "Off topic" in notification["message"]
        assert (await review_service.list_product_reviews("p1")).total == 0

    @pytest.mark.asyncio
    async def test_moderate_unknown_review(self, review_service):
        with pytest.raises(NotFoundError):
            await review_service.moderate_review("missing", "admin-1", ReviewStatus.PUBLISHED)

    @pytest.mark.asyncio
    async def test_author_removes_own_review(self, review_service, published_review):
        with pytest.raises(NotFoundError):
            await review_service.remove_review(published_review.id, OTHER_BUYER_ID)

        removed = await review_service.remove_review(published_review.id, BUYER_ID)

        assert removed.status == ReviewStatus.REMOVED
        with pytest.raises(NotFoundError):
            await review_service.vote_review(published_review.id, "u1", VoteType.HELPFUL)
        with pytest.raises(NotFoundError):
            await review_service.remove_review(published_review.id, BUYER_ID)

    @pytest.mark.asyncio
    async def test_removed_review_stays_removed(self, review_service, published_review):
        await review_service.remove_review(published_review.id, BUYER_ID)

        with pytest.raises(InvalidStateTransition):
            await review_service.moderate_review(published_review.id, "admin-1", ReviewStatus.PUBLISHED)
        with pytest.raises(InvalidStateTransition):
            await review_service.moderate_review(published_review.id, "admin-1", ReviewStatus.FLAGGED)
        assert (await review_service.list_product_reviews("p1")).total == 0
        assert (await review_service.list_moderation_queue()).total == 0


class TestListingAndStats:
    @pytest.mark.asyncio
    async def test_rating_stats_single_review(self, review_service, completed_order):
        await review_service.create_review(BUYER_ID, _request(completed_order.id, "p1", rating=5))

        stats = await review_service.product_rating_stats("p1")

        assert stats.review_count == 1
        assert stats.average_rating == Decimal("5.00")
        assert stats.recommendation_rate == Decimal("100.00")
        assert stats.distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 1}

    @pytest.mark.asyncio
    async def test_rating_stats_empty(self, review_service):
        stats = await review_service.product_rating_stats("nothing")

        assert stats.review_count == 0
        assert stats.average_rating == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_stats_across_buyers(
        self, review_service, cart_service, order_service, completed_order, test_session_factory
    ):
        second = await complete_order(cart_service, order_service, OTHER_BUYER_ID, ["p1"])
        third = await complete_order(cart_service, order_service, "buyer-3", ["p1"])
        await review_service.create_review(BUYER_ID, _request(completed_order.id, "p1", rating=5))
        await review_service.create_review(OTHER_BUYER_ID, _request(second.id, "p1", rating=4))
        await review_service.create_review("buyer-3", _request(third.id, "p1", rating=2))

        stats = await review_service.product_rating_stats("p1")

        assert stats.review_count == 3
        assert stats.average_rating == Decimal("3.67")
        assert stats.recommendation_rate == Decimal("66.67")
        assert stats.distribution[2] == 1

    @pytest.mark.asyncio
    async def test_listing_sorts(
        self, review_service, cart_service, order_service, completed_order
    ):
        second = await complete_order(cart_service, order_service, OTHER_BUYER_ID, ["p1"])
        low = await review_service.create_review(BUYER_ID, _request(completed_order.id, "p1", rating=2))
        high = await review_service.create_review(OTHER_BUYER_ID, _request(second.id, "p1", rating=5))
        await review_service.vote_review(low.id, "u1", VoteType.HELPFUL)

        highest = await review_service.list_product_reviews("p1", sort="highest")
        lowest = await review_service.list_product_reviews("p1", sort="lowest")
        helpful = await review_service.list_product_reviews("p1", sort="helpful")
        newest = await review_service.list_product_reviews("p1", sort="newest")

        assert [r.id for r in highest.reviews] == [high.id, low.id]
        assert [r.id for r in lowest.reviews] == [low.id, high.id]
        assert [r.id for r in helpful.reviews] == [low.id, high.id]
        assert [r.id for r in newest.reviews] == [high.id, low.id]
        with pytest.raises(ValidationError):
            await review_service.list_product_reviews("p1", sort="random")

    @pytest.mark.asyncio
    async def test_seller_stats_cover_all_products(self, review_service, completed_order):
        await review_service.create_review(BUYER_ID, _request(completed_order.id, "p1", rating=5))
        await review_service.create_review(BUYER_ID, _request(completed_order.id, "p2", rating=4))
        await review_service.create_review(BUYER_ID, _request(completed_order.id, "p3", rating=1))
        await review_service.create_review(BUYER_ID, _request(completed_order.id, "p9", rating=2))

        stats = await review_service.seller_rating_stats(SELLER_ID)
        other = await review_service.seller_rating_stats(OTHER_SELLER_ID)
        empty = await review_service.seller_rating_stats("nobody")

        assert stats.review_count == 2
        assert stats.average_rating == Decimal("4.50")
        assert stats.distribution == {1: 0, 2: 0, 3: 0, 4: 1, 5: 1}
        assert other.review_count == 1
        assert other.average_rating == Decimal("2.00")
        assert empty.review_count == 0
        assert empty.average_rating == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_moderation_queue_holds_flagged_reviews(self, review_service, completed_order):
        await review_service.create_review(BUYER_ID, _request(completed_order.id, "p1", rating=5))
        flagged = await review_service.create_review(
            BUYER_ID, _request(completed_order.id, "p2", comment="Fake listing, avoid it")
        )

        queue = await review_service.list_moderation_queue()

        assert [r.id for r in queue.reviews] == [flagged.id]
        assert queue.reviews[0].status == ReviewStatus.FLAGGED

        await review_service.moderate_review(flagged.id, "admin-1", ReviewStatus.PUBLISHED)
        assert (await review_service.list_moderation_queue()).total == 0
