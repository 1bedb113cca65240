"""Notification types sent to users."""
from enum import Enum


class NotificationType(str, Enum):
    ORDER_COMPLETED = "ORDER_COMPLETED"
    ORDER_FAILED = "ORDER_FAILED"
    NEW_SALE = "NEW_SALE"
    REVIEW_RECEIVED = "REVIEW_RECEIVED"
    REVIEW_RESPONSE = "REVIEW_RESPONSE"
    REVIEW_FLAGGED = "REVIEW_FLAGGED"
    REVIEW_REMOVED = "REVIEW_REMOVED"
