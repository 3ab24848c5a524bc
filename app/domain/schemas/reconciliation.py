"""Pydantic schemas for bill-number reconciliation and data purge."""

from pydantic import BaseModel


class DeltaAuditRequest(BaseModel):
    bill_numbers: list[str]


class DeltaAuditResult(BaseModel):
    source_count: int
    persisted_count: int
    matched_count: int
    missing: list[str]
    extra: list[str]


class PurgeResult(BaseModel):
    message: str
    deleted: dict[str, int]
