"""
Middleware configuration for the application.
Includes Correlation ID setup, request logging and CORS.
"""

import time
from typing import Callable

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import get_settings

logger = structlog.get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its outcome and timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            # Traceback is logged once, by the global exception handler
            logger.error(
                "Request failed",
                error=repr(exc),
                method=request.method,
                path=request.url.path,
                process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    """Setup all middleware for the application.

    Starlette runs middleware in reverse order of addition, so the
    correlation id middleware is added last to wrap everything else.
    """
    settings = get_settings()

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        update_request_header=True,
    )
