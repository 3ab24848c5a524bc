"""Order line item — immutable once written alongside its order."""

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey

from app.infrastructure.database import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_hash = Column(String(50), nullable=False)  # Item # as exported, kept for reconciliation
    quantity = Column(Integer, nullable=False, default=0)
    unit_cost_at_sale = Column(Numeric(10, 2), nullable=False, default=0)
    gst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    order_line_tax = Column(Numeric(10, 2), nullable=False, default=0)

    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    def __repr__(self):
        return f"<OrderItem {self.item_hash} x{self.quantity}>"
