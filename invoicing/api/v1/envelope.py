# invoicing/api/v1/envelope.py
"""
Response envelope shared by every v1 endpoint.

    {
        "status": "ok" | "error",
        "data": <payload>,
        "message": <optional string>,
        "errors": <optional list of detail dicts>
    }

Domain exceptions are turned into enveloped error responses by
``register_error_handlers``.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from invoicing.domain.errors import (
    CounterpartyNotFound,
    InvalidStatusTransition,
    InvoiceNotFound,
    InvoiceNumberConflict,
    InvoicingError,
)

logger = logging.getLogger("api.v1.envelope")

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    status: str = "ok"
    data: T | None = None
    message: str | None = None
    errors: list[dict[str, Any]] | None = None


class PaginatedData(BaseModel, Generic[T]):
    items: list[T]
    total: int
    limit: int
    offset: int
    has_more: bool


class PaginationParams(BaseModel):
    """Query parameters for paginated endpoints (use as Depends)."""

    limit: int = Field(default=20, ge=1, le=100, description="Items per page")
    offset: int = Field(default=0, ge=0, description="Number of items to skip")


def ok(data: Any = None, message: str | None = None) -> dict:
    return ApiResponse(status="ok", data=data, message=message).model_dump()


def error(message: str, errors: list[dict[str, Any]] | None = None, status: str = "error") -> dict:
    return ApiResponse(status=status, message=message, errors=errors).model_dump()


def paginated(items: list, total: int, limit: int, offset: int) -> dict:
    page = PaginatedData(
        items=items,
        total=total,
        limit=limit,
        offset=offset,
        has_more=(offset + limit) < total,
    )
    return ApiResponse(status="ok", data=page).model_dump()


# ---------------------------------------------------------------------------
# Domain error -> HTTP status
# ---------------------------------------------------------------------------

_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (CounterpartyNotFound, status.HTTP_404_NOT_FOUND),
    (InvoiceNotFound, status.HTTP_404_NOT_FOUND),
    (InvalidStatusTransition, status.HTTP_409_CONFLICT),
    (InvoiceNumberConflict, status.HTTP_409_CONFLICT),
    (ValueError, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def http_status_for(exc: Exception) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    async def _handle(request: Request, exc: Exception) -> JSONResponse:
        code = http_status_for(exc)
        logger.info("%s %s -> %d: %s", request.method, request.url.path, code, exc)
        return JSONResponse(
            status_code=code,
            content=error(str(exc), errors=[{"type": type(exc).__name__}]),
        )

    app.add_exception_handler(InvoicingError, _handle)
    app.add_exception_handler(ValueError, _handle)
