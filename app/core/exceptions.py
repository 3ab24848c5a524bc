"""
Exception taxonomy and global exception handling for the application.
Standardizes error responses using Problem Details for HTTP APIs (RFC 7807).

Per-order errors (missing identity key, missing product key, duplicate order)
are caught by the order committer and turned into job counters. Run-level
errors (``RunFailureError``) mark the job FAILED and propagate to the caller
of the run.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class JobNotFoundException(EntityNotFoundException):
    """No ingestion job is registered under the requested id."""
    def __init__(self, job_id: str):
        super().__init__("Job ID not found.", {"job_id": job_id})


class BusinessRuleViolationException(AppError):
    """Business logic violation error."""
    def __init__(self, message: str = "Business rule violation", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


class MalformedRowError(BusinessRuleViolationException):
    """A source row has no bill number or no total amount."""
    def __init__(self, row_number: int, missing: list[str]):
        super().__init__(
            f"Row {row_number} is missing {', '.join(missing)}",
            {"row_number": row_number, "missing": missing},
        )


class MissingIdentityKeyError(BusinessRuleViolationException):
    """A new customer profile cannot be created without an email."""
    def __init__(self, party_name: Optional[str] = None):
        super().__init__(
            f"Missing primary unique key (Email) for new customer creation from party: {party_name}",
            {"party_name": party_name},
        )


class MissingProductKeyError(BusinessRuleViolationException):
    """A line item carries neither a product id nor an item number."""
    def __init__(self, item_name: Optional[str] = None):
        super().__init__(
            f"Product Id/Item # is missing for item: {item_name}",
            {"item_name": item_name},
        )


class DuplicateOrderError(AppError):
    """The bill number is already persisted; the order is skipped, not failed."""
    def __init__(self, bill_number: str):
        super().__init__(
            f"Order {bill_number} already exists",
            status.HTTP_409_CONFLICT,
            {"bill_number": bill_number},
        )


class RunFailureError(AppError):
    """The source could not be read or grouped; the whole run is aborted."""
    def __init__(self, job_id: str, message: str):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, {"job_id": job_id})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.__class__.__name__,
                    "message": exc.message,
                    "details": exc.details,
                    "path": request.url.path,
                }
            },
        )

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "InternalServerError",
                "message": "An unexpected error occurred. Please try again later.",
                "path": request.url.path,
            }
        },
    )
