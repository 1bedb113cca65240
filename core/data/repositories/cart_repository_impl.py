"""SQLAlchemy implementation of CartRepository."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.cart import Cart, CartLineItem
from core.domain.exceptions import ConflictError
from core.domain.repositories.cart_repository import CartRepository

from ..mappers import CartItemMapper
from ..models.cart_model import CartItemModel


class SqlAlchemyCartRepository(CartRepository):
    """Carts are rows of cart_items grouped by buyer."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_cart(self, buyer_id: str) -> Cart:
        result = await self._session.execute(
            select(CartItemModel)
            .where(CartItemModel.buyer_id == buyer_id)
            .order_by(CartItemModel.added_at)
        )
        items = [CartItemMapper.to_domain(model) for model in result.scalars().all()]
        return Cart(buyer_id=buyer_id, items=items)

    async def add_item(self, item: CartLineItem) -> None:
        self._session.add(CartItemMapper.to_persistence(item))
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError("Product is already in the cart", product_id=item.product_id) from exc

    async def remove_item(self, item_id: str) -> None:
        await self._session.execute(delete(CartItemModel).where(CartItemModel.id == item_id))

    async def clear(self, buyer_id: str) -> int:
        result = await self._session.execute(
            delete(CartItemModel).where(CartItemModel.buyer_id == buyer_id)
        )
        return result.rowcount

    async def delete_added_before(self, cutoff: datetime) -> int:
        result = await self._session.execute(
            delete(CartItemModel).where(CartItemModel.added_at < cutoff)
        )
        return result.rowcount
