"""Post-commit publication of aggregate events."""

import logging
from typing import Optional

from core.data.uow import UnitOfWork
from core.domain.event_bus import EventBus

logger = logging.getLogger(__name__)


async def publish_collected(
    event_bus: Optional[EventBus],
    aggregate,
    uow: Optional[UnitOfWork] = None,
    user_id: Optional[str] = None,
) -> None:
    """Drain the aggregate's collected events onto the bus (after commit only).

    Events are stamped with the execution id of the unit of work that
    committed them and with the acting user, when known.
    """
    events = aggregate.get_domain_events()
    aggregate.clear_domain_events()
    if event_bus is None or not events:
        return

    execution_id = str(uow.execution_id) if uow is not None else None
    for event in events:
        event.execution_id = execution_id
        event.user_id = user_id
    logger.debug(f"Publishing {len(events)} events for execution {execution_id}")
    await event_bus.publish_all(events)
