"""Application service for Order operations."""

import logging
from datetime import timedelta
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.order_dto import OrderDTO, OrderListDTO
from core.application.dtos.payment_dto import PaymentEventDTO, PaymentEventResultDTO
from core.data.uow import UnitOfWork, create_uow
from core.domain.clock import utc_now
from core.domain.entities.order import Order, OrderLineItem
from core.domain.enums import OrderStatus
from core.domain.event_bus import EventBus
from core.domain.exceptions import (
    ConflictError,
    InvalidStateTransition,
    NotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from core.domain.value_objects import OrderNumber
from core.settings.modules.commerce_settings import CommerceSettings

from ._events import publish_collected
from .download_service import EntitlementIssuer

logger = logging.getLogger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5

CHECKOUT_EXPIRED = "checkout.session.expired"

# Gateway event vocabulary -> target order status
PAYMENT_EVENT_TARGETS: Dict[str, OrderStatus] = {
    "payment_intent.processing": OrderStatus.PROCESSING,
    "payment_intent.succeeded": OrderStatus.COMPLETED,
    "payment_intent.payment_failed": OrderStatus.FAILED,
    "payment_intent.canceled": OrderStatus.CANCELLED,
    CHECKOUT_EXPIRED: OrderStatus.CANCELLED,
}


class OrderApplicationService:
    """
    Application service for orchestrating order operations.

    Responsibilities:
    - Checkout: cart -> PENDING order, atomically
    - Apply verified payment gateway events, idempotently
    - Mint download tokens in the same transaction as completion
    - Publish collected domain events after commit
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: CommerceSettings,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
            settings: Commerce rules (fee rate, currency, token defaults)
            event_bus: Receives domain events after each commit
        """
        self._session_factory = session_factory
        self._settings = settings
        self._event_bus = event_bus
        self._issuer = EntitlementIssuer(settings)

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    async def checkout(self, buyer_id: str) -> OrderDTO:
        """Convert the buyer's cart into a PENDING order.

        Every product is re-validated before anything is written. The order,
        its line items and the cart clear commit together.

        Raises:
            ValidationError: Empty cart, or items priced in different currencies
            ProductUnavailableError: A cart product is no longer purchasable
            ConflictError: No order number left for today
        """
        for attempt in range(1, MAX_ORDER_NUMBER_ATTEMPTS + 1):
            uow = create_uow(self._session_factory)
            async with uow:
                cart = await uow.carts.get_cart(buyer_id)
                if cart.is_empty:
                    raise ValidationError("Cart is empty")

                products = await uow.products.get_products(item.product_id for item in cart.items)
                for item in cart.items:
                    product = products.get(item.product_id)
                    if product is None:
                        raise ProductUnavailableError(item.product_id, reason="listing no longer exists")
                    if not product.is_purchasable:
                        raise ProductUnavailableError(
                            item.product_id, reason=f"status is {product.status.value}"
                        )

                today = utc_now().date()
                sequence = await uow.orders.count_created_on(today) + attempt
                order = Order.create(
                    order_number=OrderNumber.for_day(today, sequence),
                    buyer_id=buyer_id,
                    items=[
                        OrderLineItem.from_cart_item(item, products[item.product_id])
                        for item in cart.items
                    ],
                    fee_rate_percent=self._settings.platform_fee_rate_percent,
                )

                try:
                    await uow.orders.add(order)
                except ConflictError:
                    logger.warning(
                        f"Order number {order.order_number} taken, retrying "
                        f"(attempt {attempt}/{MAX_ORDER_NUMBER_ATTEMPTS})"
                    )
                    continue

                await uow.carts.clear(buyer_id)
                await uow.commit()

            logger.info(
                f"✅ Order {order.order_number} created for buyer {buyer_id}: "
                f"{len(order.items)} items, total {order.total}"
            )
            await publish_collected(self._event_bus, order, uow, user_id=buyer_id)
            return OrderDTO.from_domain(order)

        raise ConflictError("Could not allocate an order number, try again")

    async def attach_payment_intent(
        self, order_id: str, buyer_id: str, payment_intent_ref: str
    ) -> OrderDTO:
        """Link the gateway payment intent created for a pending order."""
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None or order.buyer_id != buyer_id:
                raise NotFoundError(f"Order {order_id} not found")
            if order.payment_intent_ref == payment_intent_ref:
                return OrderDTO.from_domain(order)

            order.attach_payment_intent(payment_intent_ref)
            await uow.orders.update_payment_intent(order)
            await uow.commit()

        logger.info(f"Order {order.order_number} linked to payment intent {payment_intent_ref}")
        return OrderDTO.from_domain(order)

    # =========================================================================
    # PAYMENT EVENTS
    # =========================================================================

    async def handle_payment_event(self, event: PaymentEventDTO) -> PaymentEventResultDTO:
        """Apply a verified gateway event to its order.

        Idempotent on two levels: a repeated provider event id is ignored, and
        an event whose target status the order already has is a no-op.
        Concurrent deliveries serialize on the order row (compare-and-set on
        the previous status).

        Raises:
            InvalidStateTransition: Event would move a terminal order
        """
        target = PAYMENT_EVENT_TARGETS.get(event.event_type)
        if target is None:
            logger.info(f"Ignoring unhandled payment event type {event.event_type}")
            return PaymentEventResultDTO(event_id=event.event_id, outcome="ignored")

        uow = create_uow(self._session_factory)
        async with uow:
            first_seen = await uow.orders.register_payment_event(
                event.event_id, event.event_type, event.order_id
            )
            if not first_seen:
                logger.info(f"Payment event {event.event_id} already processed")
                return PaymentEventResultDTO(
                    event_id=event.event_id, outcome="duplicate", order_id=event.order_id
                )

            order = await self._locate_order(uow, event)
            if order is None:
                logger.warning(
                    f"Payment event {event.event_id} ({event.event_type}) references no known order"
                )
                await uow.commit()
                return PaymentEventResultDTO(event_id=event.event_id, outcome="ignored")

            if order.status == target or (
                event.event_type == CHECKOUT_EXPIRED and order.status != OrderStatus.PENDING
            ):
                await uow.commit()
                return self._noop(event, order)

            previous = order.status
            self._apply(order, event, target)

            if not await uow.orders.save_transition(order, previous):
                logger.info(
                    f"Order {order.order_number} changed concurrently, "
                    f"event {event.event_id} is a no-op"
                )
                await uow.commit()
                return self._noop(event, order)

            tokens = []
            if target == OrderStatus.COMPLETED:
                tokens = await self._issuer.issue_tokens_for_order(uow, order)
                order.record_completion(len(tokens))

            await uow.commit()

        logger.info(
            f"✅ Order {order.order_number}: {previous.value} -> {order.status.value} "
            f"(event {event.event_type})"
        )
        await publish_collected(self._event_bus, order, uow)
        return PaymentEventResultDTO(
            event_id=event.event_id,
            outcome="applied",
            order_id=order.id,
            status=order.status,
            tokens_issued=len(tokens),
        )

    @staticmethod
    async def _locate_order(uow: UnitOfWork, event: PaymentEventDTO) -> Optional[Order]:
        order = None
        if event.order_id:
            order = await uow.orders.get(event.order_id, for_update=True)
        if order is None and event.payment_intent_ref:
            order = await uow.orders.get_by_payment_intent(event.payment_intent_ref, for_update=True)
        return order

    @staticmethod
    def _apply(order: Order, event: PaymentEventDTO, target: OrderStatus) -> None:
        if not order.can_transition(target):
            raise InvalidStateTransition(order.status.value, target.value)
        if order.payment_intent_ref is None and event.payment_intent_ref:
            order.attach_payment_intent(event.payment_intent_ref)

        if target == OrderStatus.PROCESSING:
            order.mark_processing()
        elif target == OrderStatus.COMPLETED:
            order.mark_completed(utc_now())
        elif target == OrderStatus.FAILED:
            order.mark_failed(event.error_code, event.error_message)
        elif event.event_type == CHECKOUT_EXPIRED:
            order.cancel("Checkout session expired")
        else:
            order.cancel("Payment canceled")

    @staticmethod
    def _noop(event: PaymentEventDTO, order: Order) -> PaymentEventResultDTO:
        order.clear_domain_events()
        return PaymentEventResultDTO(
            event_id=event.event_id, outcome="noop", order_id=order.id, status=order.status
        )

    # =========================================================================
    # CANCELLATION / MAINTENANCE
    # =========================================================================

    async def cancel_order(
        self,
        order_id: str,
        actor_id: str,
        reason: Optional[str] = None,
        is_admin: bool = False,
    ) -> OrderDTO:
        """Buyer or admin cancellation of a non-terminal order.

        Raises:
            NotFoundError: Unknown order, or actor is not the buyer
            InvalidStateTransition: Order is already terminal
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None or (not is_admin and order.buyer_id != actor_id):
                raise NotFoundError(f"Order {order_id} not found")

            previous = order.status
            order.cancel(reason or "Cancelled by buyer")
            if not await uow.orders.save_transition(order, previous):
                raise ConflictError("Order was modified concurrently, reload and retry")
            await uow.commit()

        logger.info(f"Order {order.order_number} cancelled by {actor_id}")
        await publish_collected(self._event_bus, order, uow, user_id=actor_id)
        return OrderDTO.from_domain(order)

    async def cleanup_pending_orders(self, older_than_hours: Optional[int] = None) -> int:
        """Cancel PENDING orders that never received a payment event."""
        hours = older_than_hours or self._settings.pending_order_ttl_hours
        cutoff = utc_now() - timedelta(hours=hours)

        cancelled = []
        uow = create_uow(self._session_factory)
        async with uow:
            for order in await uow.orders.list_pending_created_before(cutoff):
                order.cancel("Order expired without payment")
                if await uow.orders.save_transition(order, OrderStatus.PENDING):
                    cancelled.append(order)
            await uow.commit()

        for order in cancelled:
            await publish_collected(self._event_bus, order, uow)
        logger.info(f"🧹 Cancelled {len(cancelled)} pending orders older than {hours}h")
        return len(cancelled)

    # =========================================================================
    # READS
    # =========================================================================

    async def get_order(self, order_id: str, viewer_id: Optional[str] = None) -> OrderDTO:
        """Get order by id.

        Args:
            order_id: Order id
            viewer_id: When given, must be the buyer or a seller in the order

        Raises:
            NotFoundError: Unknown order or not visible to the viewer
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id)

        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        if viewer_id is not None and viewer_id != order.buyer_id and not order.involves_seller(viewer_id):
            raise NotFoundError(f"Order {order_id} not found")
        return OrderDTO.from_domain(order)

    async def list_buyer_orders(self, buyer_id: str, limit: int = 50, offset: int = 0) -> OrderListDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.list_by_buyer(buyer_id, limit=limit, offset=offset)
        return OrderListDTO(orders=[OrderDTO.from_domain(o) for o in orders], total=len(orders))

    async def list_seller_orders(self, seller_id: str, limit: int = 50, offset: int = 0) -> OrderListDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.list_by_seller(seller_id, limit=limit, offset=offset)
        return OrderListDTO(orders=[OrderDTO.from_domain(o) for o in orders], total=len(orders))
