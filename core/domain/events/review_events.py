"""Review Domain Events."""
from dataclasses import dataclass
from typing import Optional

from .base import DomainEvent


@dataclass
class _ReviewEvent(DomainEvent):
    review_id: str = ""
    product_id: str = ""
    
    def __post_init__(self):
        if not self.aggregate_id and self.review_id:
            object.__setattr__(self, 'aggregate_id', self.review_id)
        super().__post_init__()


@dataclass
class ReviewPublishedEvent(_ReviewEvent):
    """Review became visible. Notifies the seller."""
    
    seller_id: str = ""
    buyer_id: str = ""
    rating: int = 0
    product_title: str = ""


@dataclass
class ReviewFlaggedEvent(_ReviewEvent):
    """Review queued for manual moderation."""
    
    buyer_id: str = ""
    reason: Optional[str] = None


@dataclass
class ReviewRemovedEvent(_ReviewEvent):
    """Review soft-removed by moderation."""
    
    buyer_id: str = ""
    reason: Optional[str] = None


@dataclass
class ReviewResponseCreatedEvent(_ReviewEvent):
    """Seller answered a review. Notifies the author."""
    
    seller_id: str = ""
    buyer_id: str = ""
