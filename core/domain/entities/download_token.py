"""
Download entitlement.

Invariants:
- download_count <= download_limit
- once revoked, expired or exhausted, a token never becomes usable again
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
import secrets
import uuid

from ..clock import utc_now
from ..exceptions import (
    DownloadLimitExceededError,
    TokenExpiredError,
    TokenRevokedError,
)


TOKEN_BYTES = 32


@dataclass
class DownloadToken:
    """Time- and count-limited credential for one purchased file."""
    token: str
    order_id: str
    product_id: str
    buyer_id: str
    download_limit: int
    expires_at: datetime
    download_count: int = 0
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)
    last_download_at: Optional[datetime] = None
    last_ip_address: Optional[str] = None
    last_user_agent: Optional[str] = None

    @staticmethod
    def generate_secret() -> str:
        """256 bits from the OS CSPRNG, URL-safe."""
        return secrets.token_urlsafe(TOKEN_BYTES)

    @classmethod
    def issue(
        cls,
        token: str,
        order_id: str,
        product_id: str,
        buyer_id: str,
        completed_at: datetime,
        download_limit: int,
        expiry_days: int,
    ) -> "DownloadToken":
        if download_limit < 1:
            raise ValueError(f"download_limit must be positive, got: {download_limit}")
        return cls(
            token=token,
            order_id=order_id,
            product_id=product_id,
            buyer_id=buyer_id,
            download_limit=download_limit,
            expires_at=completed_at + timedelta(days=expiry_days),
            created_at=completed_at,
        )

    @property
    def remaining_downloads(self) -> int:
        return max(self.download_limit - self.download_count, 0)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utc_now())

    def is_usable(self, now: Optional[datetime] = None) -> bool:
        return (
            self.is_active
            and not self.is_expired(now)
            and self.download_count < self.download_limit
        )

    def ensure_usable(self, now: Optional[datetime] = None) -> None:
        """
        Fail fast, first match wins: revoked, expired, exhausted.

        Raises:
            TokenRevokedError / TokenExpiredError / DownloadLimitExceededError
        """
        if not self.is_active:
            raise TokenRevokedError("Download token has been revoked")
        if self.is_expired(now):
            raise TokenExpiredError("Download token has expired", expired_at=self.expires_at.isoformat())
        if self.download_count >= self.download_limit:
            raise DownloadLimitExceededError(
                "Download limit reached",
                download_limit=self.download_limit,
            )

    def revoke(self) -> None:
        self.is_active = False
