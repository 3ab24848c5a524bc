"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.repositories.base import BaseRepository
from app.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: AsyncSession, model: Type[ModelType]):
        self.db = db
        self.model = model

    @property
    def dialect_name(self) -> str:
        return self.db.get_bind().dialect.name

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        return await self.db.get(self.model, id)

    async def list(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        result = await self.db.execute(
            select(self.model).order_by(self.model.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def add(self, obj: ModelType) -> ModelType:
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def delete_all(self) -> int:
        result = await self.db.execute(delete(self.model))
        return result.rowcount or 0
