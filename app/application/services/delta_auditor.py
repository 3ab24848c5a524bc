"""Delta auditor — compare a source list of bill numbers with the stored orders.

Source-only bill numbers are *missing* (still to import), stored-only ones are
*extra* (entered manually or imported from another source). Matching is exact
after trimming; each source bill number is classified on first occurrence.
"""

from collections.abc import Iterable
from typing import IO, Any, Union

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.order_grouper import read_csv_with_encoding
from app.config import get_settings
from app.core.exceptions import BusinessRuleViolationException
from app.domain.models.order import Order
from app.domain.schemas.reconciliation import DeltaAuditResult
from app.infrastructure.repositories.order_repository import SQLAlchemyOrderRepository

settings = get_settings()


def _clean_bill_number(value: Any) -> str:
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return ""
    return str(value).strip()


def audit_bill_numbers(source: Iterable[Any], persisted: Iterable[Any]) -> DeltaAuditResult:
    """Classify source bill numbers as matched or missing, and list unmatched stored ones."""
    unmatched = dict.fromkeys(b for b in map(_clean_bill_number, persisted) if b)
    persisted_count = len(unmatched)

    seen: set[str] = set()
    matched = 0
    missing: list[str] = []

    for bill_number in map(_clean_bill_number, source):
        if not bill_number or bill_number in seen:
            continue
        seen.add(bill_number)

        if bill_number in unmatched:
            matched += 1
            del unmatched[bill_number]
        else:
            missing.append(bill_number)

    return DeltaAuditResult(
        source_count=len(seen),
        persisted_count=persisted_count,
        matched_count=matched,
        missing=missing,
        extra=list(unmatched),
    )


async def run_delta_audit(db: AsyncSession, source_bill_numbers: Iterable[Any]) -> DeltaAuditResult:
    """Audit source bill numbers against every order in the database."""
    repo = SQLAlchemyOrderRepository(db, Order)
    persisted = await repo.list_bill_numbers()
    return audit_bill_numbers(source_bill_numbers, persisted)


def read_source_bill_numbers(source: Union[str, IO], column: str | None = None) -> list[str]:
    """Read the bill-number column of a CSV export (one row per line item)."""
    column = column or settings.RECONCILIATION_BILL_COLUMN
    df = read_csv_with_encoding(source)
    df.columns = [c.strip() if isinstance(c, str) else c for c in df.columns]

    if column not in df.columns:
        raise BusinessRuleViolationException(
            f"Column '{column}' not found in source export",
            {"column": column, "columns": [str(c) for c in df.columns]},
        )
    return [b for b in map(_clean_bill_number, df[column].tolist()) if b]
