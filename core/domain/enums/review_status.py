"""Review moderation status and vote values."""
from enum import Enum


class ReviewStatus(str, Enum):
    """Review moderation states. REMOVED is the soft-delete state."""

    PENDING_MODERATION = "PENDING_MODERATION"
    PUBLISHED = "PUBLISHED"
    FLAGGED = "FLAGGED"
    REMOVED = "REMOVED"


class VoteType(str, Enum):
    """Helpfulness vote."""

    HELPFUL = "HELPFUL"
    NOT_HELPFUL = "NOT_HELPFUL"
