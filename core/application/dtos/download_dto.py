"""DTOs for download entitlements."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from core.domain.entities.download_token import DownloadToken


class DownloadTokenDTO(BaseModel):
    id: str
    token: str
    order_id: str
    product_id: str
    buyer_id: str
    download_count: int = Field(..., ge=0)
    download_limit: int = Field(..., ge=1)
    remaining_downloads: int = Field(..., ge=0)
    expires_at: datetime
    is_active: bool
    created_at: datetime
    last_download_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_domain(cls, token: DownloadToken) -> "DownloadTokenDTO":
        return cls(
            id=token.id,
            token=token.token,
            order_id=token.order_id,
            product_id=token.product_id,
            buyer_id=token.buyer_id,
            download_count=token.download_count,
            download_limit=token.download_limit,
            remaining_downloads=token.remaining_downloads,
            expires_at=token.expires_at,
            is_active=token.is_active,
            created_at=token.created_at,
            last_download_at=token.last_download_at,
        )


class DownloadGrantDTO(BaseModel):
    """Result of a successful check-and-consume."""

    token_id: str
    order_id: str
    product_id: str
    file_ref: str = Field(..., description="Storage reference of the purchased file")
    location: str = Field(..., description="Resolved path or URL to stream")
    file_name: str
    download_count: int = Field(..., ge=1)
    download_limit: int = Field(..., ge=1)
    remaining_downloads: int = Field(..., ge=0)
    expires_at: datetime

    model_config = {"frozen": True}


class SellerDownloadStatsDTO(BaseModel):
    seller_id: str
    total_tokens: int = 0
    active_tokens: int = 0
    exhausted_tokens: int = 0
    total_downloads: int = 0

    model_config = {"frozen": True}
