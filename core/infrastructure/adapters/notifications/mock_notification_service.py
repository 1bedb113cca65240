"""
Mock Notification Service Implementation.

This simulates notifications for testing and demos.
"""
from typing import Any, Dict, List, Optional
import logging

from core.application.interfaces import INotificationService
from core.domain.enums import NotificationType


logger = logging.getLogger(__name__)


class MockNotificationService(INotificationService):
    """
    Mock implementation of notification service.
    
    Logs notifications instead of actually sending them.
    Useful for testing and demos.
    """
    
    def __init__(self):
        """Initialize mock notification service."""
        self.notifications_sent: List[Dict[str, Any]] = []
        logger.info("MockNotificationService initialized (console logging)")
    
    async def send(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record and log the notification."""
        notification = {
            "user_id": user_id,
            "type": notification_type,
            "title": title,
            "message": message,
            "metadata": dict(metadata or {}),
        }
        self.notifications_sent.append(notification)
        
        logger.info(
            f"🔔 NOTIFICATION [{notification_type.value}] to {user_id}:\n"
            f"   {title}\n"
            f"   {message}"
        )
    
    def get_notifications(
        self, user_id: Optional[str] = None, notification_type: Optional[NotificationType] = None
    ) -> List[Dict[str, Any]]:
        """Get sent notifications, optionally filtered (for testing)."""
        return [
            n
            for n in self.notifications_sent
            if (user_id is None or n["user_id"] == user_id)
            and (notification_type is None or n["type"] == notification_type)
        ]
    
    def clear(self) -> None:
        """Clear notifications (for testing)."""
        self.notifications_sent.clear()
        logger.info("🗑️ Notifications cleared")
