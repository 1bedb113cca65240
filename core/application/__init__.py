"""Application layer - services, interfaces, and DTOs.

Services are imported from ``core.application.services`` directly; the data
layer depends on the interfaces declared here.
"""

from .interfaces import IFileStorage, INotificationService, IProductCatalog

__all__ = ["IFileStorage", "INotificationService", "IProductCatalog"]
