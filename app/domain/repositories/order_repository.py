"""
Order Repository Interface.
Defines data access for orders and their line items.
"""

from typing import List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem


class OrderRepository(BaseRepository[Order]):
    """Interface for Order-specific operations."""

    async def get_by_bill_number(self, bill_number: str) -> Optional[Order]:
        """Get the order persisted under a bill number."""
        ...

    async def add_items(self, items: List[OrderItem]) -> None:
        """Bulk-insert line items of a freshly added order."""
        ...

    async def list_bill_numbers(self) -> List[str]:
        """Get every persisted bill number, oldest order first."""
        ...
