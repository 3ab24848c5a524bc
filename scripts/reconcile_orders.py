"""Compare the bill numbers of a CSV order export with the orders in the database.

Usage: python scripts/reconcile_orders.py wc-orders-report-export.csv [--column "Invoice Number"]
"""

import argparse
import asyncio
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.application.services.delta_auditor import read_source_bill_numbers, run_delta_audit
from app.config import get_settings
from app.core.logging import configure_logging
from app.infrastructure.database import SessionLocal, engine


async def reconcile(csv_path: str, column: str) -> int:
    if not os.path.exists(csv_path):
        print(f"ERROR: CSV file not found at path: {csv_path}")
        return 1

    bill_numbers = read_source_bill_numbers(csv_path, column)
    try:
        async with SessionLocal() as db:
            result = await run_delta_audit(db, bill_numbers)
    finally:
        await engine.dispose()

    if result.persisted_count == 0:
        print("WARNING: Database returned zero imported bill numbers. Analysis may be inaccurate.")

    print("ORDER DATA RECONCILIATION")
    print(f"Unique orders in CSV:     {result.source_count}")
    print(f"Orders currently in DB:   {result.persisted_count}")
    print(f"Orders matched:           {result.matched_count}")

    print(f"\nMissing in DB ({len(result.missing)}): in the CSV but not imported")
    if result.missing:
        print(", ".join(result.missing))

    print(f"\nExtra in DB ({len(result.extra)}): imported but not in this CSV")
    if result.extra:
        print(", ".join(result.extra))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("csv_path", help="CSV export with one row per order line item")
    parser.add_argument("--column", default=get_settings().RECONCILIATION_BILL_COLUMN, help="Bill number column")
    args = parser.parse_args()

    configure_logging()
    return asyncio.run(reconcile(args.csv_path, args.column))


if __name__ == "__main__":
    sys.exit(main())
