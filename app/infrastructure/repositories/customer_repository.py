"""
SQLAlchemy Implementation of Customer Repository.
"""

import json
from typing import Optional

from sqlalchemy import func, select, true, type_coerce
from sqlalchemy.dialects.postgresql import JSONB

from app.domain.models.customer import Customer
from app.domain.repositories.customer_repository import CustomerRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCustomerRepository(SQLAlchemyRepository[Customer], CustomerRepository):
    """Customer repository implementation using SQLAlchemy."""

    async def find_by_phone(self, phone: str) -> Optional[Customer]:
        """Get the first customer (lowest id) whose all_phones array contains the phone."""
        dialect = self.dialect_name
        if dialect == "postgresql":
            stmt = select(Customer).where(type_coerce(Customer.all_phones, JSONB).contains([phone]))
        elif dialect == "mysql":
            stmt = select(Customer).where(func.json_contains(Customer.all_phones, json.dumps(phone)) == 1)
        else:
            # SQLite: expand the array with json_each and join it back to its row
            phones = func.json_each(Customer.all_phones).table_valued("value").alias("phones")
            stmt = select(Customer).join(phones, true()).where(phones.c.value == phone)

        result = await self.db.execute(stmt.order_by(Customer.id).limit(1))
        return result.scalars().first()

    async def find_by_email(self, email: str) -> Optional[Customer]:
        result = await self.db.execute(select(Customer).where(Customer.email == email))
        return result.scalars().first()
