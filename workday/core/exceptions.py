"""
Domain errors raised by the accounting engine, and the global exception
handlers that turn them (and everything else) into JSON responses
without leaking stack traces to clients.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


# ── Domain errors ───────────────────────────────────────────────────
class DomainError(Exception):
    """Base class for user-facing business rule violations."""

    status_code = 400
    message = "Request violates a business rule"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def code(self) -> str:
        return type(self).__name__

    @property
    def detail(self) -> str:
        return str(self)


class AlreadyCheckedIn(DomainError):
    message = "Already checked in today"


class NoCheckInFound(DomainError):
    message = "No check-in found for today"


class AlreadyCheckedOut(DomainError):
    message = "Already checked out today"


class InvalidDateRange(DomainError):
    message = "Invalid date range"


class InvalidTimeRange(DomainError):
    message = "Invalid time range"


class MonthlyLimitExceeded(DomainError):
    def __init__(self, remaining: int, limit: int) -> None:
        self.remaining = remaining
        self.limit = limit
        super().__init__(
            f"Cannot request more than {limit} days of leave per month. "
            f"You have {remaining} days remaining."
        )


class NotFound(DomainError):
    status_code = 404
    message = "Record not found"


class EmployeeNotFound(NotFound):
    message = "Employee not found"


class LeaveRequestNotFound(NotFound):
    message = "Leave request not found"


class AlreadyDecided(DomainError):
    status_code = 409
    message = "Leave request has already been decided"


class EmployeeHasRecords(DomainError):
    status_code = 409
    message = "Employee has attendance, leave or permission records"


class DuplicateEmployee(DomainError):
    status_code = 409
    message = "Employee already registered"


# ── Handlers ────────────────────────────────────────────────────────
async def _domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
    content = {"detail": exc.detail, "error": exc.code, "success": False}
    if isinstance(exc, MonthlyLimitExceeded):
        content["remaining_days"] = exc.remaining
    return JSONResponse(status_code=exc.status_code, content=content)


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
        headers=getattr(exc, "headers", None),
    )


async def _rate_limit_handler(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}", "success": False},
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
    app.add_exception_handler(DomainError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
