"""Cart endpoints for REST API."""

from fastapi import APIRouter, Depends, Response

from apps.api.deps import get_cart_service, get_current_user_id
from core.application.dtos.cart_dto import AddToCartRequest, CartDTO, CartItemDTO
from core.application.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartDTO)
async def get_cart(
    buyer_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartDTO:
    return await service.get_cart(buyer_id)


@router.post("/items", response_model=CartItemDTO, status_code=201)
async def add_to_cart(
    request: AddToCartRequest,
    buyer_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> CartItemDTO:
    """Add a product to the cart at its current price."""
    return await service.add_to_cart(buyer_id, request.product_id)


@router.delete("/items/{item_id}", status_code=204)
async def remove_from_cart(
    item_id: str,
    buyer_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> Response:
    await service.remove_from_cart(buyer_id, item_id)
    return Response(status_code=204)


@router.delete("", status_code=204)
async def clear_cart(
    buyer_id: str = Depends(get_current_user_id),
    service: CartService = Depends(get_cart_service),
) -> Response:
    await service.clear_cart(buyer_id)
    return Response(status_code=204)
