"""Pydantic schemas for ingestion job progress."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CommitOutcome(str, Enum):
    """How one order aggregate ended up after its transaction."""

    INSERTED = "INSERTED"
    DUPLICATE = "DUPLICATE"
    FAILED = "FAILED"


class JobStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class JobSummary(BaseModel):
    total_processed: int = 0
    successful_inserts: int = 0
    failed_inserts: int = 0
    skipped_duplicates: int = 0


class JobState(BaseModel):
    status: JobStatus = JobStatus.PENDING
    summary: JobSummary = Field(default_factory=JobSummary)
    error: Optional[str] = None


class ImportAccepted(BaseModel):
    message: str
    job_id: str
