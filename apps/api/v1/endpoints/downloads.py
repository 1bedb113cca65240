"""Download endpoints for REST API."""

from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from apps.api.deps import get_current_user_id, get_download_service, get_is_admin
from core.application.dtos.download_dto import DownloadTokenDTO, SellerDownloadStatsDTO
from core.application.services.download_service import DownloadService

router = APIRouter(tags=["downloads"])


@router.get("/downloads/{token}")
async def download_file(
    token: str,
    request: Request,
    service: DownloadService = Depends(get_download_service),
) -> FileResponse:
    """Consume one download and stream the purchased file.

    The token itself is the credential; no caller identity is required.
    """
    grant = await service.check_and_consume(
        token,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return FileResponse(
        grant.location,
        filename=grant.file_name,
        headers={"X-Downloads-Remaining": str(grant.remaining_downloads)},
    )


@router.get("/orders/{order_id}/downloads", response_model=List[DownloadTokenDTO])
async def list_order_downloads(
    order_id: str,
    buyer_id: str = Depends(get_current_user_id),
    service: DownloadService = Depends(get_download_service),
) -> List[DownloadTokenDTO]:
    return await service.list_order_downloads(order_id, buyer_id)


@router.post("/download-tokens/{token_id}/revoke", response_model=DownloadTokenDTO)
async def revoke_token(
    token_id: str,
    actor_id: str = Depends(get_current_user_id),
    is_admin: bool = Depends(get_is_admin),
    service: DownloadService = Depends(get_download_service),
) -> DownloadTokenDTO:
    return await service.revoke_token(token_id, actor_id, is_admin=is_admin)


@router.get("/sellers/me/download-stats", response_model=SellerDownloadStatsDTO)
async def seller_download_stats(
    seller_id: str = Depends(get_current_user_id),
    service: DownloadService = Depends(get_download_service),
) -> SellerDownloadStatsDTO:
    return await service.seller_download_stats(seller_id)
