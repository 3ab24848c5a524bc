"""Order committer — write one order aggregate in a single transaction.

Steps, all inside one transaction:
1. resolve (find/merge/create) the customer
2. skip the order when its bill number is already stored (rollback)
3. insert the order with coerced amounts
4. resolve the product master of every line item
5. bulk-insert the line items and commit

Any failure rolls back the whole order and is reported as FAILED; the caller
moves on to the next aggregate.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import pytz
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.services.customer_resolver import resolve_customer
from app.application.services.product_resolver import resolve_product
from app.config import get_settings
from app.core.exceptions import AppError, DuplicateOrderError
from app.domain.models.customer import Customer
from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.models.product import Product
from app.domain.schemas.job import CommitOutcome
from app.domain.schemas.order import OrderAggregate
from app.infrastructure.repositories.customer_repository import SQLAlchemyCustomerRepository
from app.infrastructure.repositories.order_repository import SQLAlchemyOrderRepository
from app.infrastructure.repositories.product_repository import SQLAlchemyProductRepository

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

ZERO = Decimal("0")
_CURRENCY_PREFIX = re.compile(r"^(₹|rs\.?|inr|\$)", re.IGNORECASE)

# Each date layout, optionally followed by a time after a space or an ISO "T"
DATE_FORMATS = tuple(
    f"{day}{time}"
    for day in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%m/%d/%Y")
    for time in ("", " %H:%M", " %H:%M:%S", "T%H:%M", "T%H:%M:%S")
)


def get_current_date() -> date:
    """Get current date in the configured timezone."""
    return datetime.now(tz).date()


def to_decimal(value: Any) -> Decimal:
    """Coerce an amount cell; missing or unparseable values become 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        # '₹1,234.50' / 'Rs. 1,234.50' → '1234.50'
        s = _CURRENCY_PREFIX.sub("", str(value).strip())
        s = re.sub(r"[,\s]", "", s)
        try:
            result = Decimal(s)
        except InvalidOperation:
            return ZERO
    return result if result.is_finite() else ZERO


def to_quantity(value: Any) -> int:
    """Whole units, truncated toward zero; invalid quantities become 0."""
    return int(to_decimal(value))


def parse_order_date(value: Any) -> date:
    """Parse the order date from a sheet cell, defaulting to today."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is not None:
        s = str(value).strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(s, fmt).date()
            except ValueError:
                continue
    return get_current_date()


def build_order(aggregate: OrderAggregate, customer_id: int) -> Order:
    return Order(
        bill_number=aggregate.bill_number,
        order_number=aggregate.order_number,
        order_date=parse_order_date(aggregate.order_date),
        cart_discount_amount=to_decimal(aggregate.cart_discount_amount),
        order_subtotal_amount=to_decimal(aggregate.order_subtotal_amount),
        order_total_tax_amount=to_decimal(aggregate.order_total_tax_amount),
        order_total_amount=to_decimal(aggregate.order_total_amount),
        payment_method=aggregate.payment_method,
        transaction_id=aggregate.transaction_id,
        customer_id=customer_id,
    )


class OrderCommitter:
    """Commit order aggregates one transaction at a time."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def commit(self, aggregate: OrderAggregate) -> CommitOutcome:
        """Persist one aggregate, classifying it as inserted, duplicate or failed."""
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await self._write(session, aggregate)
        except DuplicateOrderError:
            logger.info("Skipping duplicate order", bill_number=aggregate.bill_number)
            return CommitOutcome.DUPLICATE
        except AppError as exc:
            logger.warning("Failed to import order", bill_number=aggregate.bill_number, error=exc.message)
            return CommitOutcome.FAILED
        except Exception as exc:
            logger.exception("Failed to import order", bill_number=aggregate.bill_number, error=str(exc))
            return CommitOutcome.FAILED

        return CommitOutcome.INSERTED

    async def _write(self, session: AsyncSession, aggregate: OrderAggregate) -> Order:
        customers = SQLAlchemyCustomerRepository(session, Customer)
        orders = SQLAlchemyOrderRepository(session, Order)
        products = SQLAlchemyProductRepository(session, Product)

        customer = await resolve_customer(customers, aggregate)

        if await orders.get_by_bill_number(aggregate.bill_number) is not None:
            raise DuplicateOrderError(aggregate.bill_number)

        order = await orders.add(build_order(aggregate, customer.id))

        items = []
        for item in aggregate.items:
            product = await resolve_product(products, item)
            items.append(
                OrderItem(
                    item_hash=item.item_hash or item.product_id or "N/A",
                    quantity=to_quantity(item.quantity),
                    unit_cost_at_sale=to_decimal(item.unit_cost_at_sale),
                    gst_rate=to_decimal(item.gst_rate),
                    order_line_tax=to_decimal(item.order_line_tax),
                    order_id=order.id,
                    product_id=product.id,
                )
            )

        await orders.add_items(items)
        return order
