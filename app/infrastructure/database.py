"""Database engine and async session management."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import get_settings

settings = get_settings()


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    engine_kwargs = {"echo": echo}
    if database_url.startswith("postgresql"):
        engine_kwargs.update({"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True})
    return create_async_engine(database_url, **engine_kwargs)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
SessionLocal = build_session_factory(engine)


async def create_all_tables(bind: AsyncEngine) -> None:
    """Create tables for every imported model (dev only; no migrations are shipped)."""
    # Import all models so they are registered on Base.metadata
    from app.domain.models import customer, order, order_item, product  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
