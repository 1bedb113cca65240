"""Seed data and shortcuts shared by the test suites."""

from decimal import Decimal
from typing import List, Optional

from core.application.dtos.payment_dto import PaymentEventDTO
from core.data.uow import create_uow
from core.domain.entities.product import Product
from core.domain.enums import ProductStatus
from core.domain.value_objects import Money

SELLER_ID = "seller-1"
OTHER_SELLER_ID = "seller-2"
BUYER_ID = "buyer-1"
OTHER_BUYER_ID = "buyer-2"
WEBHOOK_SECRET = "whsec-test"


def make_product(
    product_id: str,
    price: str = "10.00",
    seller_id: str = SELLER_ID,
    status: ProductStatus = ProductStatus.APPROVED,
    file_ref: Optional[str] = None,
    currency: str = "USD",
) -> Product:
    return Product(
        id=product_id,
        seller_id=seller_id,
        title=f"Plan {product_id}",
        price=Money(Decimal(price), currency),
        status=status,
        description=f"Woodworking plan {product_id}",
        file_ref=file_ref or f"files/{product_id}.pdf",
    )


async def seed_products(session_factory, products: List[Product], storage_root=None) -> None:
    uow = create_uow(session_factory)
    async with uow:
        for product in products:
            await uow.products.add(product)
        await uow.commit()
    if storage_root is not None:
        for product in products:
            (storage_root / product.file_ref).write_bytes(b"%PDF-1.4 plan")


async def set_product_status(session_factory, product_id: str, status: ProductStatus) -> None:
    uow = create_uow(session_factory)
    async with uow:
        await uow.products.set_status(product_id, status)
        await uow.commit()


def payment_event(event_type: str, order_id: str, event_id: Optional[str] = None, **kwargs) -> PaymentEventDTO:
    return PaymentEventDTO(
        event_id=event_id or f"evt-{event_type}-{order_id}",
        event_type=event_type,
        order_id=order_id,
        **kwargs,
    )


async def place_order(cart_service, order_service, buyer_id: str, product_ids: List[str]):
    for product_id in product_ids:
        await cart_service.add_to_cart(buyer_id, product_id)
    return await order_service.checkout(buyer_id)


async def complete_order(cart_service, order_service, buyer_id: str, product_ids: List[str]):
    order = await place_order(cart_service, order_service, buyer_id, product_ids)
    await order_service.handle_payment_event(payment_event("payment_intent.succeeded", order.id))
    return await order_service.get_order(order.id)


def auth(user_id: str, admin: bool = False) -> dict:
    """Caller identity headers as set by the upstream gateway."""
    headers = {"X-User-Id": user_id}
    if admin:
        headers["X-User-Role"] = "admin"
    return headers
