"""Repository interface for the Cart aggregate."""

from abc import ABC, abstractmethod
from datetime import datetime

from ..entities.cart import Cart, CartLineItem


class CartRepository(ABC):

    @abstractmethod
    async def get_cart(self, buyer_id: str) -> Cart:
        """Load the buyer's cart (empty cart if none)."""
        pass

    @abstractmethod
    async def add_item(self, item: CartLineItem) -> None:
        """Insert a line item.

        Raises:
            ConflictError: If the product is already in the buyer's cart
        """
        pass

    @abstractmethod
    async def remove_item(self, item_id: str) -> None:
        pass

    @abstractmethod
    async def clear(self, buyer_id: str) -> int:
        """Delete every line item of the buyer. Returns rows deleted."""
        pass

    @abstractmethod
    async def delete_added_before(self, cutoff: datetime) -> int:
        pass
