"""
Unit tests for numeric and date coercion applied when an order is written.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from app.application.services import order_committer
from app.application.services.order_committer import parse_order_date, to_decimal, to_quantity


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1180.00", Decimal("1180.00")),
        (1180, Decimal("1180")),
        (99.5, Decimal("99.5")),
        ("₹1,234.50", Decimal("1234.50")),
        ("Rs. 250", Decimal("250")),
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        ("NaN", Decimal("0")),
        (True, Decimal("0")),
    ],
)
def test_to_decimal(raw, expected):
    assert to_decimal(raw) == expected


@pytest.mark.parametrize("raw, expected", [("3", 3), (2.9, 2), ("2.7", 2), ("lots", 0), (None, 0)])
def test_to_quantity(raw, expected):
    assert to_quantity(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        (datetime(2025, 10, 1, 14, 30), date(2025, 10, 1)),
        (date(2025, 10, 1), date(2025, 10, 1)),
        ("2025-10-01", date(2025, 10, 1)),
        ("01/10/2025", date(2025, 10, 1)),
        ("2025-10-01 09:15:00", date(2025, 10, 1)),
        ("2025-10-01 09:15", date(2025, 10, 1)),
        ("2025-10-01T09:15:00", date(2025, 10, 1)),
        ("01-10-2025 09:15:00", date(2025, 10, 1)),
        ("01/10/2025 09:15", date(2025, 10, 1)),
        ("10/31/2025 18:00:00", date(2025, 10, 31)),
    ],
)
def test_parse_order_date(raw, expected):
    assert parse_order_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "someday"])
def test_missing_order_date_defaults_to_today(raw, monkeypatch):
    monkeypatch.setattr(order_committer, "get_current_date", lambda: date(2025, 1, 31))

    assert parse_order_date(raw) == date(2025, 1, 31)
