"""
API Dependencies.

Shared collaborators live on ``app.state`` (set up by the application
lifespan) so tests can swap the database and job registry per app.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.services.import_service import IngestionService


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database sessions."""
    async with session_factory() as session:
        yield session


def get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion_service
