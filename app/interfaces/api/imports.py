"""Order import API routes — start an import and poll its progress."""

import os
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.config import get_settings
from app.application.services.import_service import IngestionService
from app.domain.schemas.job import ImportAccepted, JobState
from app.interfaces.deps import get_ingestion_service

settings = get_settings()
router = APIRouter(prefix="/api", tags=["Order Imports"])

ALLOWED_EXTENSIONS = ("xlsx", "csv")


@router.post("/import-orders", status_code=status.HTTP_202_ACCEPTED, response_model=ImportAccepted)
async def import_orders(
    order_file: UploadFile = File(..., alias="orderFile"),
    service: IngestionService = Depends(get_ingestion_service),
):
    """Save the uploaded export and start importing it in the background."""
    if not order_file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    ext = order_file.filename.rsplit(".", 1)[-1].lower() if "." in order_file.filename else ""
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only .xlsx and .csv files are accepted.")

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    safe_name = f"{uuid.uuid4().hex}_{os.path.basename(order_file.filename)}"
    file_path = os.path.join(settings.UPLOAD_DIR, safe_name)

    with open(file_path, "wb") as f:
        f.write(await order_file.read())

    job_id = service.start_ingestion(file_path)
    return ImportAccepted(message="Import started successfully in the background.", job_id=job_id)


@router.get("/import-status/{job_id}", response_model=JobState)
async def import_status(
    job_id: str,
    service: IngestionService = Depends(get_ingestion_service),
):
    return service.get_job_state(job_id)
