"""Product as seen by the order core (read-only catalog snapshot)."""
from dataclasses import dataclass
from typing import Optional

from ..enums import ProductStatus
from ..value_objects import Money


@dataclass(frozen=True)
class Product:
    id: str
    seller_id: str
    title: str
    price: Money
    status: ProductStatus
    description: str = ""
    file_ref: Optional[str] = None

    @property
    def is_purchasable(self) -> bool:
        return self.status == ProductStatus.APPROVED
