"""
Domain errors and global exception handlers: prevents stack-trace leakage to clients.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class ReconcilerError(Exception):
    """Base class for errors raised by the reconciliation engine."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReconcilerError):
    """Malformed input detected before any work is attempted."""

    status_code = 400


class NotFoundError(ReconcilerError):
    status_code = 404


class ProcessingError(ReconcilerError):
    """A processing run aborted part-way; committed days are kept."""

    def __init__(self, message: str, processed_count: int = 0):
        super().__init__(message)
        self.processed_count = processed_count


# ── Handlers ────────────────────────────────────────────────────────
async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
    )


async def _reconciler_error_handler(_request: Request, exc: ReconcilerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "success": False},
    )


async def _processing_error_handler(_request: Request, exc: ProcessingError) -> JSONResponse:
    logger.error("Attendance processing failed: %s", exc.message)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Failed to process attendance",
            "error": exc.message,
            "processed_count": exc.processed_count,
            "success": False,
        },
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content={"detail": "Database constraint violation", "success": False},
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal database error", "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ProcessingError, _processing_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ReconcilerError, _reconciler_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
