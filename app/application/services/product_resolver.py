"""Product resolver — find or create the master record for a line item."""

import structlog

from app.config import get_settings
from app.core.exceptions import MissingProductKeyError
from app.domain.models.product import Product
from app.domain.repositories.product_repository import ProductRepository
from app.domain.schemas.order import OrderLineItem

settings = get_settings()
logger = structlog.get_logger(__name__)


async def resolve_product(repo: ProductRepository, item: OrderLineItem) -> Product:
    """Look up the product by Product Id (or Item #), creating it on first sight."""
    external_id = item.external_product_id
    if not external_id:
        raise MissingProductKeyError(item.item_name)

    product = await repo.get_by_external_id(external_id)
    if product is not None:
        return product

    logger.debug("Creating product master", external_id=external_id)
    return await repo.add(
        Product(
            external_id=external_id,
            item_name=item.item_name or settings.PRODUCT_PLACEHOLDER,
            hsn_code=item.hsn_code,
        )
    )
