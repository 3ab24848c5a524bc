"""
Base Repository Interface.
Defines the standard contract for data access operations.

Repositories never commit: they run inside the transaction opened by the
caller, which decides whether the unit of work commits or rolls back.
"""

from typing import List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic data access."""

    async def get_by_id(self, id: int) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    async def list(self, skip: int = 0, limit: int = 100) -> List[T]:
        """List entities with pagination."""
        ...

    async def add(self, obj: T) -> T:
        """Stage a new or modified entity and flush it."""
        ...

    async def delete_all(self) -> int:
        """Delete every row of the entity, returning the count."""
        ...
