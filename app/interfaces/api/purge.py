"""Purge API route — wipe all imported orders, customers and products."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.purge_service import purge_all_data
from app.domain.schemas.reconciliation import PurgeResult
from app.interfaces.deps import get_db

router = APIRouter(prefix="/api", tags=["Maintenance"])


@router.delete("/purge-data", response_model=PurgeResult)
async def purge_data(db: AsyncSession = Depends(get_db)):
    deleted = await purge_all_data(db)
    return PurgeResult(
        message="All order, customer, product, and item data has been successfully deleted.",
        deleted=deleted,
    )
