"""Order export reader and row grouper.

Handles:
- Reading .xlsx (first sheet, cached formula results) and .csv exports
- Mapping export column labels to canonical order fields
- Cleaning cells (blanks, spreadsheet error markers, integral floats)
- Dropping rows without a bill number or total amount
- Grouping line-item rows into one aggregate per bill number
"""

from collections.abc import Iterable, Mapping
from typing import IO, Any, Optional, Union

import pandas as pd
import structlog

from app.core.exceptions import MalformedRowError
from app.domain.schemas.order import OrderAggregate, OrderLineItem

logger = structlog.get_logger(__name__)

# Column mapping: export column label → canonical field name
COLUMN_MAP = {
    "Bill Number": "bill_number",
    "Order Number": "order_number",
    "Order Date": "order_date",
    "Customer User ID": "customer_user_id",
    "Customer Username": "customer_username",
    "Party Name": "party_name",
    "Company (Billing)": "company_billing",
    "GST Number": "gst_number",
    "State Name": "state_name",
    "Address": "address",
    "Pincode": "pincode",
    "Country": "country",
    "Email": "email",
    "Phone": "phone",
    "Item #": "item_hash",
    "Product Id": "product_id",
    "Item Name": "item_name",
    "HSN Code": "hsn_code",
    "GST Rate": "gst_rate",
    "Quantity": "quantity",
    "Item Cost": "item_cost",
    "Order Line Tax": "order_line_tax",
    "Cart Discount Amount": "cart_discount_amount",
    "Order Subtotal Amount": "order_subtotal_amount",
    "Order Total Tax Amount": "order_total_tax_amount",
    "Order Total Amount": "order_total_amount",
    "Payment Method": "payment_method",
    "Transaction ID": "transaction_id",
}

_COLUMN_LOOKUP = {label.upper(): field for label, field in COLUMN_MAP.items()}

ORDER_TEXT_FIELDS = (
    "order_number",
    "customer_user_id",
    "customer_username",
    "party_name",
    "company_billing",
    "gst_number",
    "state_name",
    "address",
    "pincode",
    "country",
    "email",
    "phone",
    "payment_method",
    "transaction_id",
)

ORDER_AMOUNT_FIELDS = (
    "cart_discount_amount",
    "order_subtotal_amount",
    "order_total_tax_amount",
    "order_total_amount",
)

_ERROR_MARKERS = {"#REF!", "#ERROR!", "#DIV/0!", "#N/A", "#VALUE!", "#NAME?", "#NULL!", "#NUM!", "nan", "NaN"}


def _clean_column_name(col: Any) -> Any:
    """Strip whitespace from column names."""
    return col.strip() if isinstance(col, str) else col


def _clean_cell(value: Any) -> Any:
    """Return None for empty cells, blanks and spreadsheet error markers."""
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, str):
        s = value.strip()
        if not s or s in _ERROR_MARKERS:
            return None
        return s
    return value


def _to_text(value: Any) -> Optional[str]:
    """Render a cell as text; 9876543210.0 read from a sheet becomes '9876543210'."""
    value = _clean_cell(value)
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip() or None


def map_row(raw: Mapping[Any, Any]) -> dict[str, Any]:
    """Map one raw row (column label → cell) to canonical fields, dropping unmapped columns."""
    row: dict[str, Any] = {}
    for label, value in raw.items():
        if not isinstance(label, str):
            continue
        field = _COLUMN_LOOKUP.get(_clean_column_name(label).upper())
        if field is not None:
            row[field] = _clean_cell(value)
    return row


def _validate_row(row_number: int, row: Mapping[str, Any]) -> str:
    """Return the row's bill number or raise MalformedRowError."""
    bill_number = _to_text(row.get("bill_number"))
    missing = []
    if not bill_number:
        missing.append("Bill Number")
    if row.get("order_total_amount") is None:
        missing.append("Order Total Amount")
    if missing:
        raise MalformedRowError(row_number, missing)
    return bill_number


def _line_item(row: Mapping[str, Any]) -> OrderLineItem:
    return OrderLineItem(
        product_id=_to_text(row.get("product_id")),
        item_hash=_to_text(row.get("item_hash")),
        item_name=_to_text(row.get("item_name")),
        hsn_code=_to_text(row.get("hsn_code")),
        gst_rate=row.get("gst_rate"),
        quantity=row.get("quantity"),
        unit_cost_at_sale=row.get("item_cost"),
        order_line_tax=row.get("order_line_tax"),
    )


def _order_aggregate(bill_number: str, row: Mapping[str, Any]) -> OrderAggregate:
    fields: dict[str, Any] = {field: _to_text(row.get(field)) for field in ORDER_TEXT_FIELDS}
    fields.update({field: row.get(field) for field in ORDER_AMOUNT_FIELDS})
    return OrderAggregate(bill_number=bill_number, order_date=row.get("order_date"), **fields)


def group_order_rows(rows: Iterable[Mapping[Any, Any]], first_row_number: int = 2) -> list[OrderAggregate]:
    """
    Group export rows into one aggregate per bill number.

    Order-level fields are taken from the first row of each bill; every valid
    row adds one line item. Aggregates come out in order of first appearance.
    Row numbers in warnings start at ``first_row_number`` (row 1 is the header).
    """
    orders: dict[str, OrderAggregate] = {}

    for row_number, raw in enumerate(rows, start=first_row_number):
        row = map_row(raw)
        try:
            bill_number = _validate_row(row_number, row)
        except MalformedRowError as exc:
            logger.warning("Skipping malformed row", **exc.details)
            continue

        order = orders.get(bill_number)
        if order is None:
            order = orders[bill_number] = _order_aggregate(bill_number, row)
        order.items.append(_line_item(row))

    return list(orders.values())


def read_csv_with_encoding(source: Union[str, IO]) -> pd.DataFrame:
    """Try to read CSV with multiple encodings and separators; every cell stays text.

    ``source`` is a path or a seekable binary file; files are rewound before each attempt.
    """
    encodings = ["utf-8", "utf-8-sig", "latin-1", "cp1252"]
    separators = [",", ";", "\t"]

    for encoding in encodings:
        for sep in separators:
            if hasattr(source, "seek"):
                source.seek(0)
            try:
                df = pd.read_csv(source, encoding=encoding, sep=sep, dtype=str)
                if len(df.columns) > 1:
                    return df
            except (UnicodeDecodeError, pd.errors.ParserError):
                continue

    if hasattr(source, "seek"):
        source.seek(0)
    return pd.read_csv(source, encoding="latin-1", sep=",", dtype=str, on_bad_lines="skip")


def read_order_rows(file_path: str) -> list[dict[str, Any]]:
    """
    Read an order export into a list of rows (column label → cell value).

    XLSX cells are read with openpyxl's cached values, so formula cells yield
    their computed result. Raises on unreadable or unsupported files.
    """
    ext = file_path.rsplit(".", 1)[-1].lower() if "." in file_path else ""
    if ext == "xlsx":
        df = pd.read_excel(file_path, engine="openpyxl", sheet_name=0, dtype=object)
    elif ext == "csv":
        df = read_csv_with_encoding(file_path)
    else:
        raise ValueError(f"Unsupported order export type: .{ext}")

    df.columns = [_clean_column_name(c) for c in df.columns]
    df = df.dropna(how="all")
    return df.to_dict(orient="records")
