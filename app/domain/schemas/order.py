"""Pydantic schemas for order aggregates built from export rows."""

from typing import Any, Optional

from pydantic import BaseModel


class OrderLineItem(BaseModel):
    product_id: Optional[str] = None
    item_hash: Optional[str] = None
    item_name: Optional[str] = None
    hsn_code: Optional[str] = None
    gst_rate: Any = None
    quantity: Any = None
    unit_cost_at_sale: Any = None
    order_line_tax: Any = None

    @property
    def external_product_id(self) -> Optional[str]:
        """Catalog key of the line: Product Id, falling back to Item #."""
        return self.product_id or self.item_hash


class OrderAggregate(BaseModel):
    """All rows of one bill number, before persistence.

    Order-level fields come from the first row seen for the bill; numeric
    fields stay raw here and are coerced when the order is committed.
    """

    bill_number: str
    order_number: Optional[str] = None
    order_date: Any = None

    customer_user_id: Optional[str] = None
    customer_username: Optional[str] = None
    party_name: Optional[str] = None
    company_billing: Optional[str] = None
    gst_number: Optional[str] = None
    state_name: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    cart_discount_amount: Any = None
    order_subtotal_amount: Any = None
    order_total_tax_amount: Any = None
    order_total_amount: Any = None
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None

    items: list[OrderLineItem] = []
