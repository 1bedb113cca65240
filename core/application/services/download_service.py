"""Download entitlements: issuing tokens and guarding downloads."""

import logging
import posixpath
from datetime import datetime
from typing import Callable, List, Optional, Set

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.download_dto import (
    DownloadGrantDTO,
    DownloadTokenDTO,
    SellerDownloadStatsDTO,
)
from core.application.interfaces import IFileStorage
from core.data.uow import UnitOfWork, create_uow
from core.domain.clock import utc_now
from core.domain.entities.download_token import DownloadToken
from core.domain.entities.order import Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import (
    ConflictError,
    DownloadLimitExceededError,
    ExternalDependencyError,
    InvalidStateTransition,
    NotFoundError,
    TokenNotFoundError,
    ValidationError,
)
from core.settings.modules.commerce_settings import CommerceSettings

logger = logging.getLogger(__name__)

MAX_TOKEN_ATTEMPTS = 5


class EntitlementIssuer:
    """Mints one token per line item inside the caller's transaction."""

    def __init__(self, settings: CommerceSettings) -> None:
        self._settings = settings

    async def issue_tokens_for_order(self, uow: UnitOfWork, order: Order) -> List[DownloadToken]:
        """
        Create download tokens for a just-completed order.

        Must run in the same unit of work as the COMPLETED transition.

        Raises:
            InvalidStateTransition: Order is not COMPLETED
            ConflictError: Could not generate a unique token, or tokens already issued
        """
        if order.status != OrderStatus.COMPLETED or order.completed_at is None:
            raise InvalidStateTransition(order.status.value, "issue_tokens")

        tokens: List[DownloadToken] = []
        taken: Set[str] = set()
        for item in order.items:
            secret = await self._unique_secret(uow, taken)
            taken.add(secret)
            tokens.append(
                DownloadToken.issue(
                    token=secret,
                    order_id=order.id,
                    product_id=item.product_id,
                    buyer_id=order.buyer_id,
                    completed_at=order.completed_at,
                    download_limit=self._settings.download_limit,
                    expiry_days=self._settings.download_expiry_days,
                )
            )

        await uow.tokens.add_all(tokens)
        logger.info(f"🔑 Issued {len(tokens)} download tokens for order {order.order_number}")
        return tokens

    @staticmethod
    async def _unique_secret(uow: UnitOfWork, taken: Set[str]) -> str:
        for _ in range(MAX_TOKEN_ATTEMPTS):
            secret = DownloadToken.generate_secret()
            if secret not in taken and not await uow.tokens.token_exists(secret):
                return secret
            logger.warning("Download token collision, regenerating")
        raise ConflictError("Could not generate a unique download token")


class DownloadService:
    """
    Download access guard and token management.

    A download is granted by a single conditional UPDATE that increments the
    count only while the token is active, unexpired and under its limit, so
    concurrent requests can never exceed download_limit.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        storage: IFileStorage,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._storage = storage
        self._clock = clock

    async def check_and_consume(
        self,
        token: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> DownloadGrantDTO:
        """
        Validate a token and consume one download.

        Raises:
            TokenNotFoundError, TokenRevokedError, TokenExpiredError,
            DownloadLimitExceededError: Token not usable (checked in this order)
            ExternalDependencyError: File could not be located; nothing consumed
        """
        now = self._clock()
        uow = create_uow(self._session_factory)
        async with uow:
            # The conditional update must be the first statement of the transaction.
            consumed = await uow.tokens.try_consume(token, now, ip_address, user_agent)
            current = await uow.tokens.get_by_token(token)

            if not consumed:
                if current is None:
                    logger.warning("Download attempt with unknown token")
                    raise TokenNotFoundError("Download token not found")
                current.ensure_usable(now)
                raise DownloadLimitExceededError(
                    "Download limit reached", download_limit=current.download_limit
                )

            product = await uow.products.get_product(current.product_id)
            if product is None or not product.file_ref:
                raise ExternalDependencyError(
                    f"No file registered for product {current.product_id}", dependency="storage"
                )
            location = await self._storage.resolve(product.file_ref)
            await uow.commit()

        logger.info(
            f"⬇️ Download {current.download_count}/{current.download_limit} "
            f"for order {current.order_id} product {current.product_id}"
        )
        return DownloadGrantDTO(
            token_id=current.id,
            order_id=current.order_id,
            product_id=current.product_id,
            file_ref=product.file_ref,
            location=location,
            file_name=posixpath.basename(product.file_ref),
            download_count=current.download_count,
            download_limit=current.download_limit,
            remaining_downloads=current.remaining_downloads,
            expires_at=current.expires_at,
        )

    async def list_order_downloads(self, order_id: str, buyer_id: str) -> List[DownloadTokenDTO]:
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id)
            if order is None or order.buyer_id != buyer_id:
                raise NotFoundError(f"Order {order_id} not found")
            tokens = await uow.tokens.list_by_order(order_id)
        return [DownloadTokenDTO.from_domain(token) for token in tokens]

    async def revoke_token(self, token_id: str, actor_id: str, is_admin: bool = False) -> DownloadTokenDTO:
        """Revoke a token. Allowed for administrators and the seller of the product."""
        uow = create_uow(self._session_factory)
        async with uow:
            token = await uow.tokens.get(token_id)
            if token is None:
                raise NotFoundError(f"Download token {token_id} not found")

            if not is_admin:
                order = await uow.orders.get(token.order_id)
                sellers = {item.seller_id for item in order.items if item.product_id == token.product_id}
                if actor_id not in sellers:
                    raise ValidationError(
                        "Only the seller of the product or an administrator can revoke a download token"
                    )

            token.revoke()
            await uow.tokens.revoke(token_id)
            await uow.commit()

        logger.info(f"Download token {token_id} revoked by {actor_id}")
        return DownloadTokenDTO.from_domain(token)

    async def deactivate_expired_tokens(self) -> int:
        """Maintenance: flag expired tokens inactive. The guard rejects them regardless."""
        uow = create_uow(self._session_factory)
        async with uow:
            count = await uow.tokens.deactivate_expired(self._clock())
            await uow.commit()
        logger.info(f"🧹 Deactivated {count} expired download tokens")
        return count

    async def seller_download_stats(self, seller_id: str) -> SellerDownloadStatsDTO:
        uow = create_uow(self._session_factory)
        async with uow:
            stats = await uow.tokens.stats_for_seller(seller_id, self._clock())
        return SellerDownloadStatsDTO(seller_id=seller_id, **stats)
