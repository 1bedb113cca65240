"""Order endpoints for REST API."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from apps.api.deps import get_current_user_id, get_is_admin, get_order_service
from core.application.dtos.order_dto import (
    AttachPaymentIntentRequest,
    CancelOrderRequest,
    OrderDTO,
    OrderListDTO,
)
from core.application.services.order_service import OrderApplicationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/checkout", response_model=OrderDTO, status_code=201)
async def checkout(
    buyer_id: str = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    """Create a PENDING order from the caller's cart.

    The order is charged in the currency its items were priced in.

    Returns:
        OrderDTO with the immutable financial snapshot
    """
    return await service.checkout(buyer_id)


@router.get("", response_model=OrderListDTO)
async def list_my_orders(
    limit: int = Query(default=50, ge=1, le=200, description="Maximum number of orders"),
    offset: int = Query(default=0, ge=0),
    buyer_id: str = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderListDTO:
    return await service.list_buyer_orders(buyer_id, limit=limit, offset=offset)


@router.get("/sales", response_model=OrderListDTO)
async def list_my_sales(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    seller_id: str = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderListDTO:
    """Orders containing at least one of the caller's products."""
    return await service.list_seller_orders(seller_id, limit=limit, offset=offset)


@router.get("/{order_id}", response_model=OrderDTO)
async def get_order(
    order_id: str,
    viewer_id: str = Depends(get_current_user_id),
    is_admin: bool = Depends(get_is_admin),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    """Get order by ID (buyer, a seller in the order, or an administrator)."""
    return await service.get_order(order_id, viewer_id=None if is_admin else viewer_id)


@router.post("/{order_id}/payment-intent", response_model=OrderDTO)
async def attach_payment_intent(
    order_id: str,
    request: AttachPaymentIntentRequest,
    buyer_id: str = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.attach_payment_intent(order_id, buyer_id, request.payment_intent_ref)


@router.post("/{order_id}/cancel", response_model=OrderDTO)
async def cancel_order(
    order_id: str,
    request: Optional[CancelOrderRequest] = None,
    actor_id: str = Depends(get_current_user_id),
    is_admin: bool = Depends(get_is_admin),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    reason = request.reason if request else None
    return await service.cancel_order(order_id, actor_id, reason=reason, is_admin=is_admin)
