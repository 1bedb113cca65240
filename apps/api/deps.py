"""FastAPI dependencies for dependency injection."""

import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.application.interfaces import IFileStorage, INotificationService
from core.application.services import (
    CartService,
    DownloadService,
    OrderApplicationService,
    ReviewService,
)
from core.data.database import create_engine, create_session_factory
from core.domain.exceptions import ValidationError
from core.infrastructure.adapters.notifications.notification_subscriber import (
    NotificationSubscriber,
    RetryPolicy,
)
from core.infrastructure.event_bus import InMemoryEventBus, get_event_bus
from core.infrastructure.storage import LocalFileStorage
from core.settings import get_app_settings
from core.settings.modules.commerce_settings import CommerceSettings

logger = logging.getLogger(__name__)

load_dotenv()

_settings = get_app_settings()

_engine = create_engine(_settings.database)

# Create session factory
_session_factory: async_sessionmaker[AsyncSession] = create_session_factory(_engine)


def _build_notifier() -> INotificationService:
    if _settings.slack.enabled and _settings.slack.webhook_url:
        from core.infrastructure.adapters.notifications.slack_notification_service import (
            SlackNotificationService,
        )

        return SlackNotificationService(_settings.slack)

    from core.infrastructure.adapters.notifications.mock_notification_service import (
        MockNotificationService,
    )

    return MockNotificationService()


def wire_event_bus(bus: InMemoryEventBus, notifier: INotificationService) -> NotificationSubscriber:
    """Attach the notification subscriber to a bus."""
    subscriber = NotificationSubscriber(
        notifier,
        RetryPolicy(
            max_attempts=_settings.notifications.max_attempts,
            backoff_seconds=_settings.notifications.backoff_seconds,
        ),
    )
    bus.subscribe(subscriber)
    return subscriber


_event_bus = get_event_bus()
wire_event_bus(_event_bus, _build_notifier())


def get_engine():
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get SQLAlchemy session factory.

    Returns:
        async_sessionmaker instance
    """
    return _session_factory


def get_commerce_settings() -> CommerceSettings:
    return _settings.commerce


def get_event_bus_dep() -> InMemoryEventBus:
    return _event_bus


def get_file_storage(
    settings: CommerceSettings = Depends(get_commerce_settings),
) -> IFileStorage:
    return LocalFileStorage(settings.storage_root)


# =============================================================================
# CALLER IDENTITY (authentication is handled upstream)
# =============================================================================

def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    if not x_user_id:
        raise ValidationError("Missing X-User-Id header")
    return x_user_id


def get_is_admin(x_user_role: Optional[str] = Header(None)) -> bool:
    return (x_user_role or "").lower() == "admin"


# =============================================================================
# SERVICES
# =============================================================================

def get_cart_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: CommerceSettings = Depends(get_commerce_settings),
) -> CartService:
    return CartService(session_factory, settings)


def get_order_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: CommerceSettings = Depends(get_commerce_settings),
    event_bus: InMemoryEventBus = Depends(get_event_bus_dep),
) -> OrderApplicationService:
    """Get OrderApplicationService instance.

    Returns:
        OrderApplicationService instance
    """
    return OrderApplicationService(session_factory, settings, event_bus)


def get_download_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    storage: IFileStorage = Depends(get_file_storage),
) -> DownloadService:
    return DownloadService(session_factory, storage)


def get_review_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: CommerceSettings = Depends(get_commerce_settings),
    event_bus: InMemoryEventBus = Depends(get_event_bus_dep),
) -> ReviewService:
    return ReviewService(session_factory, settings, event_bus)
