"""Repository interface for download tokens."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from ..entities.download_token import DownloadToken


class DownloadTokenRepository(ABC):

    @abstractmethod
    async def add_all(self, tokens: List[DownloadToken]) -> None:
        """Insert tokens.

        Raises:
            ConflictError: Token string or (order, product) already exists
        """
        pass

    @abstractmethod
    async def token_exists(self, token: str) -> bool:
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[DownloadToken]:
        pass

    @abstractmethod
    async def get(self, token_id: str) -> Optional[DownloadToken]:
        pass

    @abstractmethod
    async def list_by_order(self, order_id: str) -> List[DownloadToken]:
        pass

    @abstractmethod
    async def try_consume(
        self,
        token: str,
        now: datetime,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> bool:
        """Atomically increment download_count if the token is still usable.

        Single conditional update: active, not expired and below the limit.

        Returns:
            True if one download was consumed, False otherwise
        """
        pass

    @abstractmethod
    async def revoke(self, token_id: str) -> None:
        pass

    @abstractmethod
    async def deactivate_expired(self, now: datetime) -> int:
        pass

    @abstractmethod
    async def stats_for_seller(self, seller_id: str, now: datetime) -> Dict[str, int]:
        pass
