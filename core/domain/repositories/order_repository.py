"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from ..entities.order import Order
from ..enums import OrderStatus


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Insert a new order with its line items.

        Raises:
            ConflictError: If the order number is already taken
        """
        pass

    @abstractmethod
    async def get(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """Retrieve order by id.

        Args:
            order_id: Order id
            for_update: Lock the order row until the transaction ends

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_payment_intent(
        self, payment_intent_ref: str, for_update: bool = False
    ) -> Optional[Order]:
        """Retrieve order by gateway payment intent reference."""
        pass

    @abstractmethod
    async def save_transition(self, order: Order, expected_status: OrderStatus) -> bool:
        """Persist order state only if the stored status still equals expected_status.

        Returns:
            True if written, False if another transaction changed the order first
        """
        pass

    @abstractmethod
    async def update_payment_intent(self, order: Order) -> None:
        """Persist the payment intent reference."""
        pass

    @abstractmethod
    async def count_created_on(self, day: date) -> int:
        """Number of orders created on the given UTC day (order number sequence)."""
        pass

    @abstractmethod
    async def list_by_buyer(self, buyer_id: str, limit: int = 50, offset: int = 0) -> List[Order]:
        pass

    @abstractmethod
    async def list_by_seller(self, seller_id: str, limit: int = 50, offset: int = 0) -> List[Order]:
        pass

    @abstractmethod
    async def find_completed_purchase(
        self, order_id: str, buyer_id: str, product_id: str
    ) -> Optional[Order]:
        """COMPLETED order of this buyer that contains the product, if any."""
        pass

    @abstractmethod
    async def list_pending_created_before(self, cutoff: datetime) -> List[Order]:
        pass

    @abstractmethod
    async def register_payment_event(
        self, provider_event_id: str, event_type: str, order_id: Optional[str]
    ) -> bool:
        """Record a gateway event id.

        Returns:
            True if first seen, False if already processed
        """
        pass
