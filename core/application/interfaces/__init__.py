"""Application layer interfaces."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from core.domain.entities.product import Product
from core.domain.enums import NotificationType


class IProductCatalog(ABC):
    """
    Read access to product listings.

    Catalog management (creation, approval) is owned by another module;
    the order core only needs a product's current status and price.
    """

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[Product]:
        """
        Get product by id.

        Args:
            product_id: Product id

        Returns:
            Product if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_products(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        """
        Batch lookup.

        Returns:
            Mapping of product id to Product (missing ids are absent)
        """
        pass


class IFileStorage(ABC):
    """Resolves a product's file reference to downloadable content."""

    @abstractmethod
    async def resolve(self, file_ref: str) -> str:
        """
        Resolve a file reference to a local path or signed URL.

        Raises:
            ExternalDependencyError: If the file cannot be located
        """
        pass


class INotificationService(ABC):
    """
    Interface for notification service operations.
    
    This interface defines the contract for sending notifications,
    allowing different implementations (Slack, email, in-app, etc.)
    Delivery is best effort: callers catch and log failures.
    """
    
    @abstractmethod
    async def send(
        self,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Send one notification to one user.
        
        Args:
            user_id: Recipient
            notification_type: Notification category
            title: Short title
            message: Body text
            metadata: Extra structured data (order id, review id, ...)
        
        Raises:
            ExternalDependencyError: If the channel rejected the message
        """
        pass


__all__ = ["IFileStorage", "INotificationService", "IProductCatalog"]
