"""
SQLAlchemy Implementation of Order Repository.
"""

from typing import List, Optional

from sqlalchemy import select

from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.repositories.order_repository import OrderRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyOrderRepository(SQLAlchemyRepository[Order], OrderRepository):
    """Order repository implementation using SQLAlchemy."""

    async def get_by_bill_number(self, bill_number: str) -> Optional[Order]:
        result = await self.db.execute(select(Order).where(Order.bill_number == bill_number))
        return result.scalars().first()

    async def add_items(self, items: List[OrderItem]) -> None:
        if not items:
            return
        self.db.add_all(items)
        await self.db.flush()

    async def list_bill_numbers(self) -> List[str]:
        result = await self.db.execute(select(Order.bill_number).order_by(Order.id))
        return [str(bill_number).strip() for bill_number in result.scalars().all()]
