"""
Unit tests for phone normalization used as the primary customer lookup key.
"""

import pytest

from app.application.services.customer_resolver import normalize_phone


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+91 98765-43210", "9876543210"),
        ("9876543210", "9876543210"),
        ("(+91) 98765 43210", "9876543210"),
        ("919876543210", "9876543210"),
        # Ten digits starting with 91 are a local number, not a prefix
        ("9123456789", "9123456789"),
        # Leading trunk zero is kept; only the national prefix is stripped
        ("09876543210", "09876543210"),
        ("", ""),
        (None, ""),
        ("n/a", ""),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_both_spellings_normalize_to_the_same_key():
    assert normalize_phone("+91 98765-43210") == normalize_phone("9876543210")
