"""
Customer Repository Interface.
Defines the lookups used to resolve customer identity.
"""

from typing import Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.customer import Customer


class CustomerRepository(BaseRepository[Customer]):
    """Interface for Customer-specific operations."""

    async def find_by_phone(self, phone: str) -> Optional[Customer]:
        """Get the customer whose phone list contains the normalized phone."""
        ...

    async def find_by_email(self, email: str) -> Optional[Customer]:
        """Get the customer whose primary email equals the given one."""
        ...
