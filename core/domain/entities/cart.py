"""
Cart aggregate.

Holds a buyer's line items with the price captured when each item was
added. Snapshots are never updated when the product price changes.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import uuid

from ..clock import utc_now
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..services.pricing import compute_totals
from ..value_objects import FeeBreakdown, Money
from .product import Product


@dataclass(frozen=True)
class CartLineItem:
    """Single product in a cart. Digital goods, so quantity is always 1."""
    buyer_id: str
    product_id: str
    seller_id: str
    product_title: str
    unit_price_snapshot: Money
    quantity: int = 1
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    added_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_product(cls, buyer_id: str, product: Product) -> "CartLineItem":
        return cls(
            buyer_id=buyer_id,
            product_id=product.id,
            seller_id=product.seller_id,
            product_title=product.title,
            unit_price_snapshot=product.price,
        )

    @property
    def line_total(self) -> Money:
        return self.unit_price_snapshot * self.quantity


@dataclass
class Cart:
    """All line items of one buyer."""
    buyer_id: str
    items: List[CartLineItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, item_id: str) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def contains_product(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self.items)

    @property
    def currency(self) -> Optional[str]:
        """Currency of the price snapshots; None for an empty cart."""
        currencies = {item.unit_price_snapshot.currency for item in self.items}
        if len(currencies) > 1:
            raise ValidationError(f"Cart mixes currencies: {', '.join(sorted(currencies))}")
        return next(iter(currencies), None)

    def add(self, product: Product, max_items: int) -> CartLineItem:
        """
        Business rules for adding a product.

        Raises:
            ValidationError: Own product, cart is full, or priced in another currency
            ConflictError: Product already in cart
        """
        if product.seller_id == self.buyer_id:
            raise ValidationError("You cannot buy your own product", product_id=product.id)
        if self.contains_product(product.id):
            raise ConflictError("Product is already in the cart", product_id=product.id)
        if len(self.items) >= max_items:
            raise ValidationError(f"Cart cannot hold more than {max_items} items")
        if self.items and product.price.currency != self.currency:
            raise ValidationError(
                f"Cart is priced in {self.currency}, product is priced in {product.price.currency}",
                product_id=product.id,
            )

        item = CartLineItem.from_product(self.buyer_id, product)
        self.items.append(item)
        return item

    def remove(self, item_id: str) -> CartLineItem:
        item = self.find(item_id)
        if item is None:
            raise NotFoundError(f"Cart item {item_id} not found")
        self.items.remove(item)
        return item

    def summary(self, fee_rate_percent: Decimal) -> FeeBreakdown:
        return compute_totals([item.line_total.amount for item in self.items], fee_rate_percent)
