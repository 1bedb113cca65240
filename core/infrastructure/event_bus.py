"""
Event Bus Implementation (Infrastructure Layer).

Delivers committed domain events to in-process subscribers.
"""
import asyncio
import logging
from typing import Callable, List, Optional

from core.domain.event_bus import EventBus
from core.domain.events.base import DomainEvent


logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    In-Memory Event Bus Implementation.
    
    Features:
    - Notifies registered subscribers in registration order
    - Supports sync and async handlers
    - A failing subscriber is logged and never affects the publisher
    
    Can be replaced with a message broker without touching services.
    """
    
    def __init__(self):
        """Initialize event bus with subscribers."""
        self._subscribers: List[Callable[[DomainEvent], None]] = []
    
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a single domain event.
        
        Args:
            event: Domain event to publish
        """
        logger.info(f"Publishing event: {event.event_type} (aggregate: {event.aggregate_id})")
        logger.debug(f"Event payload: {event.to_dict()}")
        await self._notify_subscribers(event)
    
    async def publish_all(self, events: List[DomainEvent]) -> None:
        """
        Publish multiple domain events in order.
        
        Args:
            events: List of domain events to publish
        """
        if not events:
            return
        
        logger.debug(f"Publishing {len(events)} events")
        for event in events:
            await self.publish(event)
    
    def subscribe(self, handler: Callable[[DomainEvent], None]) -> None:
        """
        Subscribe to all domain events.
        
        Args:
            handler: Callback function that receives events
        """
        if handler not in self._subscribers:
            self._subscribers.append(handler)
            logger.info(f"Registered event subscriber: {_handler_name(handler)}")
    
    def unsubscribe(self, handler: Callable[[DomainEvent], None]) -> None:
        """
        Unsubscribe from domain events.
        
        Args:
            handler: Callback function to remove
        """
        if handler in self._subscribers:
            self._subscribers.remove(handler)
            logger.info(f"Unregistered event subscriber: {_handler_name(handler)}")
    
    async def _notify_subscribers(self, event: DomainEvent) -> None:
        """Notify all subscribers about an event."""
        for subscriber in list(self._subscribers):
            try:
                result = subscriber(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"Subscriber {_handler_name(subscriber)} failed: {e}", exc_info=True)


def _handler_name(handler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


# Global event bus instance
_event_bus_instance: Optional[InMemoryEventBus] = None


def get_event_bus() -> InMemoryEventBus:
    """
    Get or create global event bus instance.
    
    Returns:
        Global event bus instance
    """
    global _event_bus_instance
    
    if _event_bus_instance is None:
        _event_bus_instance = InMemoryEventBus()
    
    return _event_bus_instance
