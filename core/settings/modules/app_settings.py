from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.commerce_settings import CommerceSettings
from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.integrations_settings import (
    NotificationSettings,
    SlackSettings,
)


class IntegrationsSettings(BaseModel):
    """Aggregates integrations settings as nested objects."""

    model_config = ConfigDict(extra="ignore")

    slack: SlackSettings
    notifications: NotificationSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    database: DatabaseSettings
    commerce: CommerceSettings
    integrations: IntegrationsSettings

    @property
    def slack(self) -> SlackSettings:
        return self.integrations.slack

    @property
    def notifications(self) -> NotificationSettings:
        return self.integrations.notifications


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        database=DatabaseSettings(),
        commerce=CommerceSettings(),
        integrations=IntegrationsSettings(
            slack=SlackSettings(),
            notifications=NotificationSettings(),
        ),
    )
