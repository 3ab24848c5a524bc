"""Purge service — delete every order, customer and product in one transaction."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models.customer import Customer
from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.models.product import Product
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository

logger = structlog.get_logger(__name__)

# Children first so foreign keys never point at deleted rows
PURGE_ORDER = (OrderItem, Order, Customer, Product)


async def purge_all_data(db: AsyncSession) -> dict[str, int]:
    """Delete all ingested data; returns deleted row counts per table."""
    deleted: dict[str, int] = {}
    try:
        for model in PURGE_ORDER:
            deleted[model.__tablename__] = await SQLAlchemyRepository(db, model).delete_all()
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Database purge failed")
        raise

    logger.warning("All order data purged", **deleted)
    return deleted
