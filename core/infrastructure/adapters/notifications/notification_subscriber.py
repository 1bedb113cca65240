"""
Turns committed domain events into user notifications.

Delivery is best effort: each send is retried per RetryPolicy, and a final
failure is logged. Nothing here ever raises back into the publisher.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.application.interfaces import INotificationService
from core.domain.enums import NotificationType
from core.domain.events import (
    OrderCompletedEvent,
    OrderFailedEvent,
    ReviewFlaggedEvent,
    ReviewPublishedEvent,
    ReviewRemovedEvent,
    ReviewResponseCreatedEvent,
)
from core.domain.events.base import DomainEvent


logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """Retry policy for notification delivery."""

    max_attempts: int = 3
    backoff_seconds: float = 0.0


class NotificationSubscriber:
    """Event bus subscriber dispatching on event class."""

    def __init__(self, notifier: INotificationService, retry_policy: Optional[RetryPolicy] = None):
        self._notifier = notifier
        self._retry_policy = retry_policy or RetryPolicy()
        self._handlers = {
            OrderCompletedEvent: self._on_order_completed,
            OrderFailedEvent: self._on_order_failed,
            ReviewPublishedEvent: self._on_review_published,
            ReviewResponseCreatedEvent: self._on_review_response,
            ReviewFlaggedEvent: self._on_review_flagged,
            ReviewRemovedEvent: self._on_review_removed,
        }

    async def __call__(self, event: DomainEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            return
        await handler(event)

    # =========================================================================
    # HANDLERS
    # =========================================================================

    async def _on_order_completed(self, event: OrderCompletedEvent) -> None:
        metadata = {"order_id": event.order_id, "order_number": event.order_number}
        await self._deliver(
            event.buyer_id,
            NotificationType.ORDER_COMPLETED,
            "Order completed",
            f"Your order {event.order_number} is complete. "
            f"{event.token_count} download(s) are ready.",
            metadata,
        )
        for seller_id in event.seller_ids:
            await self._deliver(
                seller_id,
                NotificationType.NEW_SALE,
                "New sale",
                f"You made a sale in order {event.order_number}.",
                metadata,
            )

    async def _on_order_failed(self, event: OrderFailedEvent) -> None:
        await self._deliver(
            event.buyer_id,
            NotificationType.ORDER_FAILED,
            "Payment failed",
            f"Payment for order {event.order_number} failed: "
            f"{event.error_message or 'no reason given'}",
            {"order_id": event.order_id, "error_code": event.error_code},
        )

    async def _on_review_published(self, event: ReviewPublishedEvent) -> None:
        product = event.product_title or "your product"
        await self._deliver(
            event.seller_id,
            NotificationType.REVIEW_RECEIVED,
            "New review",
            f"{product} received a {event.rating}-star review.",
            {"review_id": event.review_id, "product_id": event.product_id},
        )

    async def _on_review_response(self, event: ReviewResponseCreatedEvent) -> None:
        await self._deliver(
            event.buyer_id,
            NotificationType.REVIEW_RESPONSE,
            "The seller responded",
            "The seller responded to your review.",
            {"review_id": event.review_id, "product_id": event.product_id},
        )

    async def _on_review_flagged(self, event: ReviewFlaggedEvent) -> None:
        await self._deliver(
            event.buyer_id,
            NotificationType.REVIEW_FLAGGED,
            "Review under moderation",
            "Your review is being checked by our moderators.",
            {"review_id": event.review_id},
        )

    async def _on_review_removed(self, event: ReviewRemovedEvent) -> None:
        await self._deliver(
            event.buyer_id,
            NotificationType.REVIEW_REMOVED,
            "Review removed",
            f"Your review was removed: {event.reason or 'policy violation'}",
            {"review_id": event.review_id},
        )

    # =========================================================================
    # DELIVERY
    # =========================================================================

    async def _deliver(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        metadata: Dict[str, Any],
    ) -> bool:
        policy = self._retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            try:
                await self._notifier.send(user_id, notification_type, title, message, metadata)
                return True
            except Exception as e:
                logger.warning(
                    f"Notification {notification_type.value} to {user_id} failed "
                    f"(attempt {attempt}/{policy.max_attempts}): {e}"
                )
                if attempt < policy.max_attempts and policy.backoff_seconds > 0:
                    await asyncio.sleep(policy.backoff_seconds * attempt)

        logger.error(f"❌ Giving up on {notification_type.value} notification to {user_id}")
        return False
