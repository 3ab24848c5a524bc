"""
SQLAlchemy Implementation of Product Repository.
"""

from typing import Optional

from sqlalchemy import select

from app.domain.models.product import Product
from app.domain.repositories.product_repository import ProductRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    async def get_by_external_id(self, external_id: str) -> Optional[Product]:
        result = await self.db.execute(select(Product).where(Product.external_id == external_id))
        return result.scalars().first()
