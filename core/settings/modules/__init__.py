# Settings modules
from .app_settings import AppSettings, get_app_settings, IntegrationsSettings
from .commerce_settings import CommerceSettings
from .database_settings import DatabaseSettings
from .integrations_settings import NotificationSettings, SlackSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "IntegrationsSettings",
    "CommerceSettings",
    "DatabaseSettings",
    "NotificationSettings",
    "SlackSettings",
]
