"""Reconciliation API routes — compare an export's bill numbers with stored orders."""

import io

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.delta_auditor import read_source_bill_numbers, run_delta_audit
from app.domain.schemas.reconciliation import DeltaAuditRequest, DeltaAuditResult
from app.interfaces.deps import get_db

router = APIRouter(prefix="/api/reconciliation", tags=["Reconciliation"])


@router.post("/delta", response_model=DeltaAuditResult)
async def delta_audit(
    payload: DeltaAuditRequest,
    db: AsyncSession = Depends(get_db),
):
    return await run_delta_audit(db, payload.bill_numbers)


@router.post("/delta/upload", response_model=DeltaAuditResult)
async def delta_audit_upload(
    source_file: UploadFile = File(..., alias="sourceFile"),
    db: AsyncSession = Depends(get_db),
):
    """Run the audit over the bill-number column of an uploaded CSV export."""
    if not source_file.filename or not source_file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only .csv files are accepted.")

    content = await source_file.read()
    bill_numbers = read_source_bill_numbers(io.BytesIO(content))
    return await run_delta_audit(db, bill_numbers)
