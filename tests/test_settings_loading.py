"""
Test settings loading from the environment.

Every section reads its own prefix; defaults encode the marketplace rules.
"""
from decimal import Decimal

import pytest

from core.settings import get_app_settings
from core.settings.modules.commerce_settings import CommerceSettings
from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.integrations_settings import NotificationSettings, SlackSettings


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    get_app_settings.cache_clear()
    yield
    get_app_settings.cache_clear()


def test_commerce_defaults():
    settings = CommerceSettings(_env_file=None)

    assert settings.platform_fee_rate_percent == Decimal("10")
    assert settings.currency == "USD"
    assert settings.max_cart_items == 10
    assert settings.download_limit == 5
    assert settings.download_expiry_days == 30
    assert settings.review_min_comment_length == 10
    assert settings.review_denylist == ["spam", "fake", "scam"]
    assert settings.report_flag_threshold == 3


def test_commerce_reads_prefixed_env(monkeypatch):
    monkeypatch.setenv("FURNIBLES_PLATFORM_FEE_RATE_PERCENT", "12.5")
    monkeypatch.setenv("FURNIBLES_CURRENCY", "eur")
    monkeypatch.setenv("FURNIBLES_DOWNLOAD_LIMIT", "3")
    monkeypatch.setenv("FURNIBLES_REVIEW_DENYLIST", '[" Spam ", "Knockoff", ""]')

    settings = CommerceSettings(_env_file=None)

    assert settings.platform_fee_rate_percent == Decimal("12.5")
    assert settings.currency == "EUR"
    assert settings.download_limit == 3
    assert settings.review_denylist == ["spam", "knockoff"]


def test_commerce_rejects_out_of_range_values(monkeypatch):
    monkeypatch.setenv("FURNIBLES_DOWNLOAD_LIMIT", "0")

    with pytest.raises(ValueError):
        CommerceSettings(_env_file=None)


def test_database_and_integrations_prefixes(monkeypatch):
    monkeypatch.setenv("DB_DATABASE_URL", "postgresql+asyncpg://u:p@localhost/furnibles")
    monkeypatch.setenv("FURNIBLES_SLACK_ENABLED", "true")
    monkeypatch.setenv("FURNIBLES_SLACK_WEBHOOK_URL", "https://hooks.slack.test/x")
    monkeypatch.setenv("FURNIBLES_NOTIFY_MAX_ATTEMPTS", "5")

    database = DatabaseSettings(_env_file=None)
    slack = SlackSettings(_env_file=None)
    notifications = NotificationSettings(_env_file=None)

    assert not database.is_sqlite
    assert slack.enabled
    assert slack.webhook_url == "https://hooks.slack.test/x"
    assert notifications.max_attempts == 5


def test_app_settings_aggregates_sections(monkeypatch):
    monkeypatch.setenv("FURNIBLES_NOTIFY_BACKOFF_SECONDS", "0.25")

    settings = get_app_settings()

    assert isinstance(settings.commerce, CommerceSettings)
    assert settings.notifications.backoff_seconds == 0.25
    assert settings.slack is settings.integrations.slack
    assert get_app_settings() is settings
