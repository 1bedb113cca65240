"""Domain events."""

from .base import DomainEvent
from .order_events import (
    OrderCancelledEvent,
    OrderCompletedEvent,
    OrderCreatedEvent,
    OrderFailedEvent,
    OrderStatusChangedEvent,
)
from .review_events import (
    ReviewFlaggedEvent,
    ReviewPublishedEvent,
    ReviewRemovedEvent,
    ReviewResponseCreatedEvent,
)

__all__ = [
    "DomainEvent",
    "OrderCancelledEvent",
    "OrderCompletedEvent",
    "OrderCreatedEvent",
    "OrderFailedEvent",
    "OrderStatusChangedEvent",
    "ReviewFlaggedEvent",
    "ReviewPublishedEvent",
    "ReviewRemovedEvent",
    "ReviewResponseCreatedEvent",
]
