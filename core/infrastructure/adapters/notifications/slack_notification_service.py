"""
Slack Notification Service Implementation.

Sends notifications via Slack Webhook API.
"""
from typing import Any, Dict, Optional
import logging
import aiohttp

from core.application.interfaces import INotificationService
from core.domain.enums import NotificationType
from core.domain.exceptions import ExternalDependencyError
from core.settings.modules.integrations_settings import SlackSettings


logger = logging.getLogger(__name__)


_COLORS = {
    NotificationType.ORDER_COMPLETED: "good",
    NotificationType.NEW_SALE: "good",
    NotificationType.ORDER_FAILED: "danger",
    NotificationType.REVIEW_FLAGGED: "warning",
    NotificationType.REVIEW_REMOVED: "danger",
}


class SlackNotificationService(INotificationService):
    """
    Slack implementation of notification service.
    
    Sends notifications via Slack Webhook API. Raises on delivery failure so
    the caller's retry policy can take over.
    """
    
    def __init__(self, settings: SlackSettings):
        """
        Initialize Slack notification service.
        
        Args:
            settings: Slack settings with webhook URL
        """
        self.settings = settings
        self.webhook_url = settings.webhook_url
        self.prefix = settings.prefix
        logger.info("SlackNotificationService initialized")
    
    async def send(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Send one notification via Slack."""
        text = (
            f"{self.prefix} *{title}*\n"
            f"To: `{user_id}`\n"
            f"{message}"
        )
        if metadata:
            text += "\n" + "\n".join(f"{key}: `{value}`" for key, value in metadata.items())
        await self._send_message(text, color=_COLORS.get(notification_type, "#439FE0"))
    
    async def _send_message(self, text: str, color: str = "good") -> None:
        """
        Send message to Slack.
        
        Args:
            text: Message text
            color: Attachment color (good, warning, danger)
        
        Raises:
            ExternalDependencyError: Transport error or non-200 response
        """
        if not self.webhook_url:
            logger.warning("Slack webhook_url not configured, skipping notification")
            return
        
        payload = {
            "attachments": [
                {
                    "color": color,
                    "text": text,
                    "mrkdwn_in": ["text"],
                }
            ]
        }
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.webhook_url, json=payload) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise ExternalDependencyError(
                            f"Slack API error: {response.status} - {error_text}",
                            dependency="slack",
                        )
                    logger.info("Slack notification sent successfully")
        except aiohttp.ClientError as e:
            raise ExternalDependencyError(f"Failed to reach Slack: {e}", dependency="slack") from e
