"""Order domain model — one invoice per bill number."""

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey
from sqlalchemy.sql import func

from app.infrastructure.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bill_number = Column(String(50), unique=True, nullable=False, index=True)
    order_number = Column(String(50), nullable=True)
    order_date = Column(Date, nullable=False, index=True)

    cart_discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    order_subtotal_amount = Column(Numeric(10, 2), nullable=False, default=0)
    order_total_tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    order_total_amount = Column(Numeric(10, 2), nullable=False, default=0)

    payment_method = Column(String(50), nullable=True)
    transaction_id = Column(String(255), nullable=True)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Order {self.bill_number} - {self.order_total_amount}>"
