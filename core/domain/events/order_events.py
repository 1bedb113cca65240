"""
Order Domain Events.

Events that occur during the order lifecycle:
checkout -> payment events -> completion (download tokens) or failure.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .base import DomainEvent


@dataclass
class _OrderEvent(DomainEvent):
    order_id: str = ""
    order_number: str = ""
    
    def __post_init__(self):
        """Set aggregate_id to order_id."""
        if not self.aggregate_id and self.order_id:
            object.__setattr__(self, 'aggregate_id', self.order_id)
        super().__post_init__()


@dataclass
class OrderCreatedEvent(_OrderEvent):
    """
    Order was created from a cart at checkout.
    
    Trigger: checkout
    """
    
    buyer_id: str = ""
    total_amount: str = ""
    currency: str = ""
    item_count: int = 0


@dataclass
class OrderStatusChangedEvent(_OrderEvent):
    """
    Order status changed.
    
    Tracks every transition (PENDING -> PROCESSING -> COMPLETED, etc.).
    """
    
    previous_status: str = ""
    new_status: str = ""
    reason: Optional[str] = None


@dataclass
class OrderCompletedEvent(_OrderEvent):
    """
    Payment succeeded and download tokens were minted.
    
    Consumers: NotificationSubscriber (buyer "order completed",
    one "new sale" per distinct seller).
    """
    
    buyer_id: str = ""
    seller_ids: List[str] = field(default_factory=list)
    product_titles: List[str] = field(default_factory=list)
    total_amount: str = ""
    currency: str = ""
    token_count: int = 0


@dataclass
class OrderFailedEvent(_OrderEvent):
    """Payment failed at the gateway."""
    
    buyer_id: str = ""
    error_code: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class OrderCancelledEvent(_OrderEvent):
    """Order cancelled by buyer, admin, or gateway (canceled / expired session)."""
    
    buyer_id: str = ""
    reason: Optional[str] = None
