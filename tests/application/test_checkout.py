"""Application tests for checkout, order reads and cancellation."""
import re
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import update

from core.application.services.order_service import OrderApplicationService
from core.data.models import CartItemModel, OrderModel, ProductModel
from core.data.repositories.order_repository_impl import SqlAlchemyOrderRepository
from core.domain.clock import utc_now
from core.domain.enums import OrderStatus, PaymentStatus, ProductStatus
from core.domain.events import OrderCancelledEvent, OrderCreatedEvent, OrderStatusChangedEvent
from core.domain.exceptions import (
    ConflictError,
    InvalidStateTransition,
    NotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from core.infrastructure.event_bus import InMemoryEventBus
from tests.helpers import (
    BUYER_ID,
    OTHER_BUYER_ID,
    OTHER_SELLER_ID,
    SELLER_ID,
    complete_order,
    make_product,
    place_order,
    seed_products,
    set_product_status,
)


@pytest.mark.asyncio
async def test_checkout_creates_pending_order_and_clears_cart(
    cart_service, order_service, test_session_factory
):
    await seed_products(
        test_session_factory,
        [make_product("p1", price="19.99"), make_product("p2", price="5.01", seller_id=OTHER_SELLER_ID)],
    )

    order = await place_order(cart_service, order_service, BUYER_ID, ["p1", "p2"])

    assert order.status == OrderStatus.PENDING
    assert order.payment_status == PaymentStatus.UNPAID
    assert re.fullmatch(r"ORD-\d{8}-001", order.order_number)
    assert order.subtotal == Decimal("25.00")
    assert order.platform_fee == Decimal("2.50")
    assert order.total == Decimal("27.50")
    assert order.seller_amount == Decimal("25.00")
    assert [(i.product_id, i.seller_id, i.unit_price) for i in order.items] == [
        ("p1", SELLER_ID, Decimal("19.99")),
        ("p2", OTHER_SELLER_ID, Decimal("5.01")),
    ]
    assert order.items[0].product_title == "Plan p1"
    assert (await cart_service.get_cart(BUYER_ID)).items == []


@pytest.mark.asyncio
async def test_order_numbers_increase_within_a_day(cart_service, order_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1"), make_product("p2")])

    first = await place_order(cart_service, order_service, BUYER_ID, ["p1"])
    second = await place_order(cart_service, order_service, OTHER_BUYER_ID, ["p2"])

    assert first.order_number.endswith("-001")
    assert second.order_number.endswith("-002")


@pytest.mark.asyncio
async def test_checkout_stops_when_daily_sequence_is_exhausted(
    cart_service, order_service, test_session_factory, monkeypatch
):
    await seed_products(test_session_factory, [make_product("p1")])
    await cart_service.add_to_cart(BUYER_ID, "p1")

    async def full_day(self, day):
        return 999

    monkeypatch.setattr(SqlAlchemyOrderRepository, "count_created_on", full_day)

    with pytest.raises(ConflictError):
        await order_service.checkout(BUYER_ID)
    assert (await cart_service.get_cart(BUYER_ID)).items


@pytest.mark.asyncio
async def test_checkout_empty_cart(order_service):
    with pytest.raises(ValidationError):
        await order_service.checkout(BUYER_ID)


@pytest.mark.asyncio
async def test_checkout_rejects_unavailable_product_and_keeps_cart(
    cart_service, order_service, test_session_factory
):
    await seed_products(test_session_factory, [make_product("p1"), make_product("p2")])
    await cart_service.add_to_cart(BUYER_ID, "p1")
    await cart_service.add_to_cart(BUYER_ID, "p2")
    await set_product_status(test_session_factory, "p2", ProductStatus.SUSPENDED)

    with pytest.raises(ProductUnavailableError) as exc_info:
        await order_service.checkout(BUYER_ID)

    assert exc_info.value.product_id == "p2"
    assert len((await cart_service.get_cart(BUYER_ID)).items) == 2
    assert (await order_service.list_buyer_orders(BUYER_ID)).total == 0


@pytest.mark.asyncio
async def test_checkout_uses_cart_price_snapshot(cart_service, order_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1", price="10.00")])
    await cart_service.add_to_cart(BUYER_ID, "p1")

    async with test_session_factory() as session:
        await session.execute(
            update(ProductModel).where(ProductModel.id == "p1").values(price_amount=Decimal("15.00"))
        )
        await session.commit()

    order = await order_service.checkout(BUYER_ID)

    assert order.items[0].unit_price == Decimal("10.00")
    assert order.total == Decimal("11.00")


@pytest.mark.asyncio
async def test_order_currency_follows_item_prices(cart_service, order_service, test_session_factory):
    await seed_products(
        test_session_factory,
        [make_product("p1", price="150.00", currency="EUR"), make_product("p2", price="100.00", currency="EUR")],
    )

    order = await place_order(cart_service, order_service, BUYER_ID, ["p1", "p2"])

    assert order.currency == "EUR"
    assert order.total == Decimal("275.00")


@pytest.mark.asyncio
async def test_checkout_rejects_mixed_currency_cart(cart_service, order_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1"), make_product("p2")])
    await cart_service.add_to_cart(BUYER_ID, "p1")
    await cart_service.add_to_cart(BUYER_ID, "p2")

    async with test_session_factory() as session:
        await session.execute(
            update(CartItemModel).where(CartItemModel.product_id == "p2").values(unit_price_currency="JPY")
        )
        await session.commit()

    with pytest.raises(ValidationError):
        await order_service.checkout(BUYER_ID)
    assert (await order_service.list_buyer_orders(BUYER_ID)).total == 0


@pytest.mark.asyncio
async def test_checkout_publishes_created_event(cart_service, test_session_factory, commerce_settings):
    await seed_products(test_session_factory, [make_product("p1")])
    bus = InMemoryEventBus()
    received = []
    bus.subscribe(received.append)
    service = OrderApplicationService(test_session_factory, commerce_settings, bus)

    order = await place_order(cart_service, service, BUYER_ID, ["p1"])

    assert [type(e) for e in received] == [OrderCreatedEvent]
    assert received[0].order_id == order.id


@pytest.mark.asyncio
async def test_published_events_carry_execution_and_actor(
    cart_service, test_session_factory, commerce_settings
):
    await seed_products(test_session_factory, [make_product("p1")])
    bus = InMemoryEventBus()
    received = []
    bus.subscribe(received.append)
    service = OrderApplicationService(test_session_factory, commerce_settings, bus)

    order = await place_order(cart_service, service, BUYER_ID, ["p1"])
    await service.cancel_order(order.id, "admin-1", reason="Duplicate", is_admin=True)

    created, *cancellation = received
    assert created.user_id == BUYER_ID
    assert uuid.UUID(created.execution_id)
    assert {type(e) for e in cancellation} == {OrderStatusChangedEvent, OrderCancelledEvent}
    assert {e.user_id for e in cancellation} == {"admin-1"}
    assert len({e.execution_id for e in cancellation}) == 1
    assert cancellation[0].execution_id != created.execution_id
    assert cancellation[0].to_dict()["execution_id"] == cancellation[0].execution_id


@pytest.mark.asyncio
async def test_attach_payment_intent(cart_service, order_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1")])
    order = await place_order(cart_service, order_service, BUYER_ID, ["p1"])

    linked = await order_service.attach_payment_intent(order.id, BUYER_ID, "pi_123")
    again = await order_service.attach_payment_intent(order.id, BUYER_ID, "pi_123")

    assert linked.payment_intent_ref == "pi_123"
    assert again.payment_intent_ref == "pi_123"
    with pytest.raises(NotFoundError):
        await order_service.attach_payment_intent(order.id, OTHER_BUYER_ID, "pi_999")


@pytest.mark.asyncio
async def test_order_visibility(cart_service, order_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1")])
    order = await place_order(cart_service, order_service, BUYER_ID, ["p1"])

    assert (await order_service.get_order(order.id, viewer_id=BUYER_ID)).id == order.id
    assert (await order_service.get_order(order.id, viewer_id=SELLER_ID)).id == order.id
    with pytest.raises(NotFoundError):
        await order_service.get_order(order.id, viewer_id=OTHER_BUYER_ID)
    with pytest.raises(NotFoundError):
        await order_service.get_order("missing")


@pytest.mark.asyncio
async def test_buyer_and_seller_listings(cart_service, order_service, test_session_factory):
    await seed_products(
        test_session_factory, [make_product("p1"), make_product("p2", seller_id=OTHER_SELLER_ID)]
    )
    await place_order(cart_service, order_service, BUYER_ID, ["p1"])
    await place_order(cart_service, order_service, BUYER_ID, ["p2"])

    assert (await order_service.list_buyer_orders(BUYER_ID)).total == 2
    assert (await order_service.list_seller_orders(SELLER_ID)).total == 1
    assert (await order_service.list_seller_orders(OTHER_SELLER_ID)).total == 1
    assert (await order_service.list_buyer_orders(OTHER_BUYER_ID)).total == 0


@pytest.mark.asyncio
async def test_buyer_can_cancel_pending_order(cart_service, order_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1")])
    order = await place_order(cart_service, order_service, BUYER_ID, ["p1"])

    with pytest.raises(NotFoundError):
        await order_service.cancel_order(order.id, OTHER_BUYER_ID)
    cancelled = await order_service.cancel_order(order.id, BUYER_ID, reason="Wrong plan")

    assert cancelled.status == OrderStatus.CANCELLED
    assert cancelled.cancel_reason == "Wrong plan"
    assert (await order_service.get_order(order.id)).status == OrderStatus.CANCELLED


@pytest.mark.asyncio
async def test_completed_order_cannot_be_cancelled(cart_service, order_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1")])
    order = await complete_order(cart_service, order_service, BUYER_ID, ["p1"])

    with pytest.raises(InvalidStateTransition):
        await order_service.cancel_order(order.id, "admin-1", is_admin=True)


@pytest.mark.asyncio
async def test_cleanup_cancels_stale_pending_orders(
    cart_service, order_service, test_session_factory, event_bus
):
    await seed_products(test_session_factory, [make_product("p1"), make_product("p2")])
    stale = await place_order(cart_service, order_service, BUYER_ID, ["p1"])
    fresh = await place_order(cart_service, order_service, OTHER_BUYER_ID, ["p2"])

    async with test_session_factory() as session:
        await session.execute(
            update(OrderModel)
            .where(OrderModel.id == stale.id)
            .values(created_at=utc_now() - timedelta(hours=25))
        )
        await session.commit()

    received = []
    event_bus.subscribe(received.append)
    assert await order_service.cleanup_pending_orders() == 1

    assert (await order_service.get_order(stale.id)).status == OrderStatus.CANCELLED
    assert (await order_service.get_order(fresh.id)).status == OrderStatus.PENDING
    assert any(isinstance(e, OrderCancelledEvent) for e in received)
