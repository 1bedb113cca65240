"""Administrative maintenance endpoints."""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query

from apps.api.deps import (
    get_cart_service,
    get_download_service,
    get_is_admin,
    get_order_service,
)
from core.application.services import CartService, DownloadService, OrderApplicationService
from core.domain.exceptions import NotFoundError

router = APIRouter(prefix="/admin/maintenance", tags=["admin"])


def require_admin(is_admin: bool = Depends(get_is_admin)) -> None:
    if not is_admin:
        raise NotFoundError("Not found")


@router.post("/pending-orders", dependencies=[Depends(require_admin)])
async def cleanup_pending_orders(
    older_than_hours: Optional[int] = Query(default=None, ge=1),
    service: OrderApplicationService = Depends(get_order_service),
) -> Dict[str, int]:
    return {"cancelled": await service.cleanup_pending_orders(older_than_hours)}


@router.post("/abandoned-carts", dependencies=[Depends(require_admin)])
async def cleanup_abandoned_carts(
    older_than_days: Optional[int] = Query(default=None, ge=1),
    service: CartService = Depends(get_cart_service),
) -> Dict[str, int]:
    return {"removed": await service.cleanup_abandoned_carts(older_than_days)}


@router.post("/expired-tokens", dependencies=[Depends(require_admin)])
async def deactivate_expired_tokens(
    service: DownloadService = Depends(get_download_service),
) -> Dict[str, int]:
    return {"deactivated": await service.deactivate_expired_tokens()}
