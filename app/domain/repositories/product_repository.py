"""
Product Repository Interface.
Defines data access for the product master.
"""

from typing import Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.product import Product


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    async def get_by_external_id(self, external_id: str) -> Optional[Product]:
        """Get the master record for an external product identifier."""
        ...
