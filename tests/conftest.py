"""
Pytest configuration and fixtures.

Every test gets its own in-memory SQLite database (aiosqlite, StaticPool so
all sessions share the one connection) and its own job registry.
"""

from typing import Any, AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.application.services.import_service import IngestionService
from app.application.services.job_tracker import JobTracker
from app.config import get_settings
from app.infrastructure.database import Base
from tests.helpers.order_exports import EXPORT_HEADERS

# Import all models to register them with Base.metadata
from app.domain.models.customer import Customer  # noqa: F401
from app.domain.models.order import Order  # noqa: F401
from app.domain.models.order_item import OrderItem  # noqa: F401
from app.domain.models.product import Product  # noqa: F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def fetch_all(session_factory: async_sessionmaker[AsyncSession]) -> Callable:
    """Read every row of a model in a fresh session, ordered by id."""

    async def _fetch_all(model):
        async with session_factory() as session:
            result = await session.execute(select(model).order_by(model.id))
            return list(result.scalars().all())

    return _fetch_all


@pytest.fixture
def job_tracker() -> JobTracker:
    return JobTracker()


@pytest.fixture
def ingestion_service(session_factory, job_tracker) -> IngestionService:
    return IngestionService(session_factory, job_tracker)


@pytest.fixture
def write_order_export(tmp_path) -> Callable[..., str]:
    """Write export rows to an .xlsx file and return its path."""

    def _write(rows: list[dict[str, Any]], name: str = "orders.xlsx") -> str:
        wb = Workbook()
        ws = wb.active
        ws.append(EXPORT_HEADERS)
        for row in rows:
            ws.append([row.get(header) for header in EXPORT_HEADERS])
        path = tmp_path / name
        wb.save(path)
        return str(path)

    return _write


@pytest.fixture
async def client(session_factory, job_tracker, ingestion_service, tmp_path, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """Test client bound to the per-test database and job registry."""
    from app.main import app

    monkeypatch.setattr(get_settings(), "UPLOAD_DIR", str(tmp_path / "uploads"))
    app.state.session_factory = session_factory
    app.state.job_tracker = job_tracker
    app.state.ingestion_service = ingestion_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
