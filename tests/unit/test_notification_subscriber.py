"""
Unit tests for event bus delivery and notification dispatch.
"""
import pytest
from unittest.mock import AsyncMock

from core.domain.enums import NotificationType
from core.domain.events import (
    OrderCompletedEvent,
    OrderCreatedEvent,
    OrderFailedEvent,
    ReviewPublishedEvent,
    ReviewResponseCreatedEvent,
)
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.adapters.notifications.notification_subscriber import (
    NotificationSubscriber,
    RetryPolicy,
)
from core.infrastructure.event_bus import InMemoryEventBus


def _completed_event() -> OrderCompletedEvent:
    return OrderCompletedEvent(
        order_id="order-1",
        order_number="ORD-20250114-001",
        buyer_id="buyer-1",
        seller_ids=["seller-1", "seller-2"],
        token_count=3,
    )


@pytest.fixture
def mock_notification_service():
    """Create a mock notification service for testing."""
    return MockNotificationService()


@pytest.mark.asyncio
async def test_order_completed_notifies_buyer_and_each_seller(mock_notification_service):
    subscriber = NotificationSubscriber(mock_notification_service)

    await subscriber(_completed_event())

    buyer = mock_notification_service.get_notifications("buyer-1", NotificationType.ORDER_COMPLETED)
    assert len(buyer) == 1
    assert "3 download(s)" in buyer[0]["message"]
    sales = mock_notification_service.get_notifications(notification_type=NotificationType.NEW_SALE)
    assert [n["user_id"] for n in sales] == ["seller-1", "seller-2"]
    assert sales[0]["metadata"]["order_id"] == "order-1"


@pytest.mark.asyncio
async def test_order_failed_includes_gateway_message(mock_notification_service):
    subscriber = NotificationSubscriber(mock_notification_service)

    await subscriber(
        OrderFailedEvent(
            order_id="order-1",
            order_number="ORD-20250114-001",
            buyer_id="buyer-1",
            error_code="card_declined",
            error_message="Your card was declined.",
        )
    )

    [notification] = mock_notification_service.get_notifications("buyer-1")
    assert notification["type"] == NotificationType.ORDER_FAILED
    assert "Your card was declined." in notification["message"]


@pytest.mark.asyncio
async def test_review_events_reach_seller_and_author(mock_notification_service):
    subscriber = NotificationSubscriber(mock_notification_service)

    await subscriber(
        ReviewPublishedEvent(
            review_id="r1", product_id="p1", seller_id="seller-1", buyer_id="buyer-1",
            rating=4, product_title="Workbench",
        )
    )
    await subscriber(
        ReviewResponseCreatedEvent(review_id="r1", product_id="p1", seller_id="seller-1", buyer_id="buyer-1")
    )

    [received] = mock_notification_service.get_notifications("seller-1")
    assert received["type"] == NotificationType.REVIEW_RECEIVED
    assert "Workbench received a 4-star review" in received["message"]
    [response] = mock_notification_service.get_notifications("buyer-1")
    assert response["type"] == NotificationType.REVIEW_RESPONSE


@pytest.mark.asyncio
async def test_unhandled_event_is_ignored(mock_notification_service):
    subscriber = NotificationSubscriber(mock_notification_service)

    await subscriber(OrderCreatedEvent(order_id="order-1", buyer_id="buyer-1"))

    assert mock_notification_service.get_notifications() == []


@pytest.mark.asyncio
async def test_delivery_is_retried_until_success():
    notifier = AsyncMock()
    notifier.send.side_effect = [RuntimeError("timeout"), None]
    subscriber = NotificationSubscriber(notifier, RetryPolicy(max_attempts=3, backoff_seconds=0))

    await subscriber(
        OrderFailedEvent(order_id="order-1", order_number="ORD-20250114-001", buyer_id="buyer-1")
    )

    assert notifier.send.await_count == 2


@pytest.mark.asyncio
async def test_final_delivery_failure_is_swallowed():
    notifier = AsyncMock()
    notifier.send.side_effect = RuntimeError("slack down")
    subscriber = NotificationSubscriber(notifier, RetryPolicy(max_attempts=2, backoff_seconds=0))

    # buyer + two sellers, two attempts each
    await subscriber(_completed_event())

    assert notifier.send.await_count == 6


@pytest.mark.asyncio
async def test_bus_isolates_failing_subscriber(mock_notification_service):
    bus = InMemoryEventBus()
    failing = AsyncMock(side_effect=RuntimeError("boom"))
    bus.subscribe(failing)
    bus.subscribe(NotificationSubscriber(mock_notification_service))

    await bus.publish_all([_completed_event()])

    failing.assert_awaited_once()
    assert len(mock_notification_service.get_notifications()) == 3


@pytest.mark.asyncio
async def test_bus_supports_sync_handlers_and_unsubscribe():
    bus = InMemoryEventBus()
    received = []
    bus.subscribe(received.append)
    bus.subscribe(received.append)

    await bus.publish(_completed_event())
    bus.unsubscribe(received.append)
    await bus.publish(_completed_event())

    assert len(received) == 1


def test_event_metadata_and_serialization():
    event = _completed_event()

    payload = event.to_dict()

    assert event.aggregate_id == "order-1"
    assert payload["event_type"] == "OrderCompletedEvent"
    assert payload["aggregate_type"] == "Order"
    assert payload["data"]["seller_ids"] == ["seller-1", "seller-2"]
    assert payload["data"]["token_count"] == 3
    assert "event_id" not in payload["data"]
