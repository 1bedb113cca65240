"""Application tests for CartService."""
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import update

from core.data.models import CartItemModel, ProductModel
from core.domain.clock import utc_now
from core.domain.enums import ProductStatus
from core.domain.exceptions import (
    ConflictError,
    NotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from tests.helpers import BUYER_ID, SELLER_ID, make_product, seed_products, set_product_status


@pytest.mark.asyncio
async def test_add_to_cart_snapshots_price(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1", price="24.99")])

    item = await cart_service.add_to_cart(BUYER_ID, "p1")

    assert item.unit_price == Decimal("24.99")
    assert item.seller_id == SELLER_ID
    assert item.available


@pytest.mark.asyncio
async def test_unknown_product(cart_service):
    with pytest.raises(NotFoundError):
        await cart_service.add_to_cart(BUYER_ID, "missing")


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [ProductStatus.DRAFT, ProductStatus.PENDING, ProductStatus.SUSPENDED])
async def test_only_approved_products_can_be_added(cart_service, test_session_factory, status):
    await seed_products(test_session_factory, [make_product("p1", status=status)])

    with pytest.raises(ProductUnavailableError):
        await cart_service.add_to_cart(BUYER_ID, "p1")


@pytest.mark.asyncio
async def test_cannot_buy_own_product(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1")])

    with pytest.raises(ValidationError):
        await cart_service.add_to_cart(SELLER_ID, "p1")


@pytest.mark.asyncio
async def test_duplicate_product_conflicts(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1")])
    await cart_service.add_to_cart(BUYER_ID, "p1")

    with pytest.raises(ConflictError):
        await cart_service.add_to_cart(BUYER_ID, "p1")

    cart = await cart_service.get_cart(BUYER_ID)
    assert len(cart.items) == 1


@pytest.mark.asyncio
async def test_cart_holds_at_most_ten_items(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product(f"p{i}") for i in range(11)])
    for i in range(10):
        await cart_service.add_to_cart(BUYER_ID, f"p{i}")

    with pytest.raises(ValidationError):
        await cart_service.add_to_cart(BUYER_ID, "p10")


@pytest.mark.asyncio
async def test_get_cart_summary_and_unavailable_items(cart_service, test_session_factory):
    await seed_products(
        test_session_factory, [make_product("p1", price="10.00"), make_product("p2", price="5.00")]
    )
    await cart_service.add_to_cart(BUYER_ID, "p1")
    await cart_service.add_to_cart(BUYER_ID, "p2")
    await set_product_status(test_session_factory, "p2", ProductStatus.SUSPENDED)

    cart = await cart_service.get_cart(BUYER_ID)

    assert cart.summary.item_count == 2
    assert cart.summary.subtotal == Decimal("15.00")
    assert cart.summary.platform_fee == Decimal("1.50")
    assert cart.summary.total == Decimal("16.50")
    assert cart.unavailable_product_ids == ["p2"]
    assert [item.available for item in cart.items] == [True, False]


@pytest.mark.asyncio
async def test_price_change_does_not_touch_snapshot(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1", price="10.00")])
    await cart_service.add_to_cart(BUYER_ID, "p1")

    async with test_session_factory() as session:
        await session.execute(
            update(ProductModel).where(ProductModel.id == "p1").values(price_amount=Decimal("99.00"))
        )
        await session.commit()

    cart = await cart_service.get_cart(BUYER_ID)
    assert cart.items[0].unit_price == Decimal("10.00")


@pytest.mark.asyncio
async def test_remove_and_clear(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1"), make_product("p2")])
    first = await cart_service.add_to_cart(BUYER_ID, "p1")
    await cart_service.add_to_cart(BUYER_ID, "p2")

    await cart_service.remove_from_cart(BUYER_ID, first.id)
    assert [item.product_id for item in (await cart_service.get_cart(BUYER_ID)).items] == ["p2"]

    assert await cart_service.clear_cart(BUYER_ID) == 1
    assert (await cart_service.get_cart(BUYER_ID)).items == []


@pytest.mark.asyncio
async def test_cannot_remove_another_buyers_item(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1")])
    item = await cart_service.add_to_cart(BUYER_ID, "p1")

    with pytest.raises(NotFoundError):
        await cart_service.remove_from_cart("buyer-2", item.id)


@pytest.mark.asyncio
async def test_cleanup_abandoned_carts(cart_service, test_session_factory):
    await seed_products(test_session_factory, [make_product("p1"), make_product("p2")])
    old = await cart_service.add_to_cart(BUYER_ID, "p1")
    await cart_service.add_to_cart(BUYER_ID, "p2")

    async with test_session_factory() as session:
        await session.execute(
            update(CartItemModel)
            .where(CartItemModel.id == old.id)
            .values(added_at=utc_now() - timedelta(days=31))
        )
        await session.commit()

    assert await cart_service.cleanup_abandoned_carts() == 1
    assert [item.product_id for item in (await cart_service.get_cart(BUYER_ID)).items] == ["p2"]
