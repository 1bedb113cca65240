"""Product catalog backed by the products table."""

from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.application.interfaces import IProductCatalog
from core.domain.entities.product import Product
from core.domain.enums import ProductStatus

from ..mappers import ProductMapper
from ..models.product_model import ProductModel


class SqlAlchemyProductCatalog(IProductCatalog):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_product(self, product_id: str) -> Optional[Product]:
        model = await self._session.get(ProductModel, product_id)
        return ProductMapper.to_domain(model) if model else None

    async def get_products(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        ids = list(product_ids)
        if not ids:
            return {}
        result = await self._session.execute(select(ProductModel).where(ProductModel.id.in_(ids)))
        return {model.id: ProductMapper.to_domain(model) for model in result.scalars().all()}

    async def add(self, product: Product) -> None:
        """Seed or register a listing (catalog management lives elsewhere)."""
        self._session.add(ProductMapper.to_persistence(product))
        await self._session.flush()

    async def set_status(self, product_id: str, status: ProductStatus) -> None:
        model = await self._session.get(ProductModel, product_id)
        if model is not None:
            model.status = status.value
            await self._session.flush()
