"""Customer domain model — maps to the 'customers' table."""

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from app.infrastructure.database import Base

# Contact lists are JSON arrays; JSONB on PostgreSQL so containment (@>) is indexable
ContactList = JSON().with_variant(JSONB(), "postgresql")


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Identity — email is the only stable lookup key and never changes
    email = Column(String(255), unique=True, nullable=False, index=True)
    all_emails = Column(ContactList, nullable=False, default=list)
    all_phones = Column(ContactList, nullable=False, default=list)

    # Latest-known billing details (overwritten on every matching import)
    party_name = Column(String(255), nullable=False)
    company_billing = Column(String(255), nullable=False)
    gst_number = Column(String(15), nullable=True)
    state_name = Column(String(100), nullable=False)
    address = Column(Text, nullable=False)
    pincode = Column(String(10), nullable=False)
    country = Column(String(100), nullable=False)
    customer_user_id = Column(String(50), nullable=True)
    customer_username = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Customer {self.email} - {self.party_name}>"
