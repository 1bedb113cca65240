"""SQLAlchemy implementation of OrderRepository."""

from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.clock import utc_now
from core.domain.entities.order import Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import ConflictError
from core.domain.repositories.order_repository import OrderRepository

from ..mappers import OrderMapper
from ..models.order_model import OrderItemModel, OrderModel, PaymentEventModel


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def add(self, order: Order) -> None:
        """Insert order with items; flush so constraint violations surface here."""
        self._session.add(OrderMapper.to_persistence(order))
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError(
                f"Order number {order.order_number} already exists",
                order_number=str(order.order_number),
            ) from exc

    async def get(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        stmt = select(OrderModel).where(OrderModel.id == order_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def get_by_payment_intent(
        self, payment_intent_ref: str, for_update: bool = False
    ) -> Optional[Order]:
        stmt = select(OrderModel).where(OrderModel.payment_intent_ref == payment_intent_ref)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def save_transition(self, order: Order, expected_status: OrderStatus) -> bool:
        """Compare-and-set on status. Returns False when another writer got there first."""
        result = await self._session.execute(
            update(OrderModel)
            .where(OrderModel.id == order.id, OrderModel.status == expected_status.value)
            .values(**OrderMapper.lifecycle_values(order), updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def update_payment_intent(self, order: Order) -> None:
        try:
            await self._session.execute(
                update(OrderModel)
                .where(OrderModel.id == order.id)
                .values(payment_intent_ref=order.payment_intent_ref, updated_at=utc_now())
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError(
                "Payment intent is already linked to another order",
                payment_intent_ref=order.payment_intent_ref,
            ) from exc

    async def count_created_on(self, day: date) -> int:
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        result = await self._session.execute(
            select(func.count(OrderModel.id)).where(
                OrderModel.created_at >= start, OrderModel.created_at < end
            )
        )
        return result.scalar_one()

    async def list_by_buyer(self, buyer_id: str, limit: int = 50, offset: int = 0) -> List[Order]:
        result = await self._session.execute(
            select(OrderModel)
            .where(OrderModel.buyer_id == buyer_id)
            .order_by(OrderModel.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return [OrderMapper.to_domain(model) for model in result.scalars().all()]

    async def list_by_seller(self, seller_id: str, limit: int = 50, offset: int = 0) -> List[Order]:
        seller_orders = select(OrderItemModel.order_id).where(OrderItemModel.seller_id == seller_id)
        result = await self._session.execute(
            select(OrderModel)
            .where(OrderModel.id.in_(seller_orders))
            .order_by(OrderModel.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return [OrderMapper.to_domain(model) for model in result.scalars().all()]

    async def find_completed_purchase(
        self, order_id: str, buyer_id: str, product_id: str
    ) -> Optional[Order]:
        result = await self._session.execute(
            select(OrderModel)
            .join(OrderItemModel, OrderItemModel.order_id == OrderModel.id)
            .where(
                OrderModel.id == order_id,
                OrderModel.buyer_id == buyer_id,
                OrderModel.status == OrderStatus.COMPLETED.value,
                OrderItemModel.product_id == product_id,
            )
        )
        model = result.scalars().first()
        return OrderMapper.to_domain(model) if model else None

    async def list_pending_created_before(self, cutoff: datetime) -> List[Order]:
        result = await self._session.execute(
            select(OrderModel).where(
                OrderModel.status == OrderStatus.PENDING.value,
                OrderModel.created_at < cutoff,
            )
        )
        return [OrderMapper.to_domain(model) for model in result.scalars().all()]

    async def register_payment_event(
        self, provider_event_id: str, event_type: str, order_id: Optional[str]
    ) -> bool:
        """Insert the event id. Must run first in the webhook transaction."""
        self._session.add(
            PaymentEventModel(
                provider_event_id=provider_event_id,
                event_type=event_type,
                order_id=order_id,
            )
        )
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            return False
        return True
