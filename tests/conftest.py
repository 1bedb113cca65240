"""Shared fixtures: database, settings, services and event bus."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.application.services import (
    CartService,
    DownloadService,
    OrderApplicationService,
    ReviewService,
)
from core.data.models.base import Base
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.adapters.notifications.notification_subscriber import (
    NotificationSubscriber,
    RetryPolicy,
)
from core.infrastructure.event_bus import InMemoryEventBus
from core.infrastructure.storage import LocalFileStorage
from core.settings.modules.commerce_settings import CommerceSettings
from tests.helpers import WEBHOOK_SECRET


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """File-backed SQLite with one connection per session (real concurrency)."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'furnibles-test.db'}",
        connect_args={"timeout": 30},
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Create test session factory."""
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    yield session_factory


@pytest.fixture
def storage_root(tmp_path):
    root = tmp_path / "storage"
    (root / "files").mkdir(parents=True)
    return root


@pytest.fixture
def commerce_settings(storage_root) -> CommerceSettings:
    return CommerceSettings(
        _env_file=None,
        storage_root=str(storage_root),
        webhook_secret=WEBHOOK_SECRET,
    )


@pytest.fixture
def notifier() -> MockNotificationService:
    return MockNotificationService()


@pytest.fixture
def event_bus(notifier) -> InMemoryEventBus:
    bus = InMemoryEventBus()
    bus.subscribe(NotificationSubscriber(notifier, RetryPolicy(max_attempts=3, backoff_seconds=0)))
    return bus


@pytest.fixture
def cart_service(test_session_factory, commerce_settings) -> CartService:
    return CartService(test_session_factory, commerce_settings)


@pytest.fixture
def order_service(test_session_factory, commerce_settings, event_bus) -> OrderApplicationService:
    return OrderApplicationService(test_session_factory, commerce_settings, event_bus)


@pytest.fixture
def download_service(test_session_factory, storage_root) -> DownloadService:
    return DownloadService(test_session_factory, LocalFileStorage(str(storage_root)))


@pytest.fixture
def review_service(test_session_factory, commerce_settings, event_bus) -> ReviewService:
    return ReviewService(test_session_factory, commerce_settings, event_bus)


