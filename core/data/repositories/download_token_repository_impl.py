"""SQLAlchemy implementation of DownloadTokenRepository."""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import and_, case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.download_token import DownloadToken
from core.domain.exceptions import ConflictError
from core.domain.repositories.download_token_repository import DownloadTokenRepository

from ..mappers import DownloadTokenMapper
from ..models.download_token_model import DownloadTokenModel
from ..models.order_model import OrderItemModel


class SqlAlchemyDownloadTokenRepository(DownloadTokenRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_all(self, tokens: List[DownloadToken]) -> None:
        self._session.add_all([DownloadTokenMapper.to_persistence(t) for t in tokens])
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConflictError("Download token already issued") from exc

    async def token_exists(self, token: str) -> bool:
        result = await self._session.execute(
            select(DownloadTokenModel.id).where(DownloadTokenModel.token == token)
        )
        return result.scalar_one_or_none() is not None

    async def get_by_token(self, token: str) -> Optional[DownloadToken]:
        result = await self._session.execute(
            select(DownloadTokenModel).where(DownloadTokenModel.token == token)
        )
        model = result.scalar_one_or_none()
        return DownloadTokenMapper.to_domain(model) if model else None

    async def get(self, token_id: str) -> Optional[DownloadToken]:
        model = await self._session.get(DownloadTokenModel, token_id)
        return DownloadTokenMapper.to_domain(model) if model else None

    async def list_by_order(self, order_id: str) -> List[DownloadToken]:
        result = await self._session.execute(
            select(DownloadTokenModel)
            .where(DownloadTokenModel.order_id == order_id)
            .order_by(DownloadTokenModel.created_at, DownloadTokenModel.product_id)
        )
        return [DownloadTokenMapper.to_domain(model) for model in result.scalars().all()]

    async def try_consume(
        self,
        token: str,
        now: datetime,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> bool:
        result = await self._session.execute(
            update(DownloadTokenModel)
            .where(
                DownloadTokenModel.token == token,
                DownloadTokenModel.is_active.is_(True),
                DownloadTokenModel.expires_at > now,
                DownloadTokenModel.download_count < DownloadTokenModel.download_limit,
            )
            .values(
                download_count=DownloadTokenModel.download_count + 1,
                last_download_at=now,
                last_ip_address=ip_address,
                last_user_agent=user_agent,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def revoke(self, token_id: str) -> None:
        await self._session.execute(
            update(DownloadTokenModel)
            .where(DownloadTokenModel.id == token_id)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )

    async def deactivate_expired(self, now: datetime) -> int:
        result = await self._session.execute(
            update(DownloadTokenModel)
            .where(DownloadTokenModel.is_active.is_(True), DownloadTokenModel.expires_at <= now)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def stats_for_seller(self, seller_id: str, now: datetime) -> Dict[str, int]:
        usable = and_(
            DownloadTokenModel.is_active.is_(True),
            DownloadTokenModel.expires_at > now,
            DownloadTokenModel.download_count < DownloadTokenModel.download_limit,
        )
        result = await self._session.execute(
            select(
                func.count(DownloadTokenModel.id),
                func.coalesce(func.sum(DownloadTokenModel.download_count), 0),
                func.coalesce(func.sum(case((usable, 1), else_=0)), 0),
                func.coalesce(
                    func.sum(
                        case(
                            (DownloadTokenModel.download_count >= DownloadTokenModel.download_limit, 1),
                            else_=0,
                        )
                    ),
                    0,
                ),
            )
            .select_from(DownloadTokenModel)
            .join(
                OrderItemModel,
                and_(
                    OrderItemModel.order_id == DownloadTokenModel.order_id,
                    OrderItemModel.product_id == DownloadTokenModel.product_id,
                ),
            )
            .where(OrderItemModel.seller_id == seller_id)
        )
        total, downloads, active, exhausted = result.one()
        return {
            "total_tokens": int(total),
            "total_downloads": int(downloads),
            "active_tokens": int(active),
            "exhausted_tokens": int(exhausted),
        }
