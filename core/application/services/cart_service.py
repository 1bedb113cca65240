"""Application service for the buyer's cart."""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.cart_dto import CartDTO, CartItemDTO, CartSummaryDTO
from core.data.uow import create_uow
from core.domain.clock import utc_now
from core.domain.entities.cart import CartLineItem
from core.domain.exceptions import NotFoundError, ProductUnavailableError
from core.settings.modules.commerce_settings import CommerceSettings

logger = logging.getLogger(__name__)


class CartService:
    """
    Cart operations.

    Price snapshots are taken once, at add time. Listings that stop being
    purchasable stay in the cart and are reported as unavailable; checkout
    rejects them.
    """

    def __init__(self, session_factory: async_sessionmaker, settings: CommerceSettings) -> None:
        self._session_factory = session_factory
        self._settings = settings

    async def add_to_cart(self, buyer_id: str, product_id: str) -> CartItemDTO:
        """Add a purchasable product to the buyer's cart.

        Raises:
            NotFoundError: Unknown product
            ProductUnavailableError: Product is not approved for sale
            ValidationError: Own product, or cart is full
            ConflictError: Product already in the cart
        """
        uow = create_uow(self._session_factory)
        async with uow:
            product = await uow.products.get_product(product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found", product_id=product_id)
            if not product.is_purchasable:
                raise ProductUnavailableError(product_id, reason=f"status is {product.status.value}")

            cart = await uow.carts.get_cart(buyer_id)
            item = cart.add(product, max_items=self._settings.max_cart_items)
            await uow.carts.add_item(item)
            await uow.commit()

        logger.info(f"Buyer {buyer_id} added product {product_id} at {item.unit_price_snapshot}")
        return self._item_to_dto(item, available=True)

    async def get_cart(self, buyer_id: str) -> CartDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            cart = await uow.carts.get_cart(buyer_id)
            products = await uow.products.get_products(item.product_id for item in cart.items)

        unavailable = [
            item.product_id
            for item in cart.items
            if item.product_id not in products or not products[item.product_id].is_purchasable
        ]
        totals = cart.summary(self._settings.platform_fee_rate_percent)
        return CartDTO(
            buyer_id=buyer_id,
            items=[
                self._item_to_dto(item, available=item.product_id not in unavailable)
                for item in cart.items
            ],
            summary=CartSummaryDTO(
                item_count=len(cart.items),
                subtotal=totals.subtotal,
                platform_fee_rate=totals.fee_rate_percent,
                platform_fee=totals.platform_fee,
                total=totals.total,
                currency=cart.currency or self._settings.currency,
            ),
            unavailable_product_ids=unavailable,
        )

    async def remove_from_cart(self, buyer_id: str, item_id: str) -> None:
        """Raises NotFoundError if the item is not in this buyer's cart."""
        uow = create_uow(self._session_factory)
        async with uow:
            cart = await uow.carts.get_cart(buyer_id)
            cart.remove(item_id)
            await uow.carts.remove_item(item_id)
            await uow.commit()

    async def clear_cart(self, buyer_id: str) -> int:
        uow = create_uow(self._session_factory)
        async with uow:
            removed = await uow.carts.clear(buyer_id)
            await uow.commit()
        return removed

    async def cleanup_abandoned_carts(self, older_than_days: Optional[int] = None) -> int:
        """Maintenance: drop cart items untouched for longer than the threshold."""
        days = older_than_days or self._settings.abandoned_cart_days
        cutoff = utc_now() - timedelta(days=days)
        uow = create_uow(self._session_factory)
        async with uow:
            removed = await uow.carts.delete_added_before(cutoff)
            await uow.commit()
        logger.info(f"🧹 Removed {removed} abandoned cart items older than {days} days")
        return removed

    @staticmethod
    def _item_to_dto(item: CartLineItem, available: bool) -> CartItemDTO:
        return CartItemDTO(
            id=item.id,
            product_id=item.product_id,
            seller_id=item.seller_id,
            product_title=item.product_title,
            unit_price=item.unit_price_snapshot.amount,
            currency=item.unit_price_snapshot.currency,
            quantity=item.quantity,
            added_at=item.added_at,
            available=available,
        )
