"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_settings
from app.infrastructure.database import engine, SessionLocal, create_all_tables
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import AppError, global_exception_handler
from app.application.services.import_service import IngestionService
from app.application.services.job_tracker import JobTracker

# Import all models so SQLAlchemy knows about them
from app.domain.models.customer import Customer
from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.models.product import Product

# Import routers
from app.interfaces.api.imports import router as imports_router
from app.interfaces.api.reconciliation import router as reconciliation_router
from app.interfaces.api.purge import router as purge_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting order ingestion service...", env=settings.ENVIRONMENT)

    # Create DB tables (no migration tooling is shipped)
    await create_all_tables(engine)
    logger.info("Database tables created/verified")

    job_tracker = JobTracker()
    app.state.session_factory = SessionLocal
    app.state.job_tracker = job_tracker
    app.state.ingestion_service = IngestionService(SessionLocal, job_tracker)

    yield

    # Runs cannot be cancelled mid-way; let the running ones finish
    await app.state.ingestion_service.wait_for_all()
    await engine.dispose()
    logger.info("Order ingestion service stopped")


app = FastAPI(
    title="Order Ingestion Service",
    description="Bulk order import with customer identity merging and bill-number reconciliation",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)

# AppError subclasses carry their own HTTP status; anything else is a 500
app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(imports_router)
app.include_router(reconciliation_router)
app.include_router(purge_router)


@app.get("/")
def root():
    return {
        "name": "Order Ingestion Service",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
