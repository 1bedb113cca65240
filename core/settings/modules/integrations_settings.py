from __future__ import annotations

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from core.settings.base_settings import FurniblesBaseSettings


class SlackSettings(FurniblesBaseSettings):
    """
    Slack integration settings.
    Loaded from .env with prefix FURNIBLES_SLACK_*
    """

    enabled: bool = False
    webhook_url: str = ""
    prefix: str = "[FURNIBLES]"
    timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FURNIBLES_SLACK_",
        extra="ignore",
    )


class NotificationSettings(FurniblesBaseSettings):
    """
    Delivery retry policy for notifications.
    Loaded from .env with prefix FURNIBLES_NOTIFY_*
    """

    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=0.5, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FURNIBLES_NOTIFY_",
        extra="ignore",
    )
