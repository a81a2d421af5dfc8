"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Ce module fournit l'exception `APIError`, l'enveloppe `{code, message, trace_id, details}` et les
gestionnaires enregistrés sur l'application FastAPI.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eduplatform.core.http_constants import HTTP_ERROR_CODES, HTTP_INTERNAL_SERVER_ERROR

log = structlog.get_logger(__name__)


@dataclass
class ErrorEnvelope:
    """Standard error envelope for API responses."""

    code: str
    message: str
    trace_id: str | None = None
    details: dict[str, Any] | None = None

    def to_content(self) -> dict[str, Any]:
        """Sérialise l'enveloppe en omettant `details` quand il est vide."""
        content = asdict(self)
        if not self.details:
            content.pop("details")
        return content


class APIError(HTTPException):
    """Custom API error with standard envelope."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize an API error with standardized envelope."""
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.trace_id = trace_id
        self.details = details


class ErrorCodes:
    """Standard error codes for the API."""

    BAD_REQUEST = "BAD_REQUEST"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"


def create_error_response(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(status_code=status_code, content=envelope.to_content())


def extract_trace_id(request: Request) -> str | None:
    """Récupère l'identifiant de trace (en-tête X-Trace-ID, sinon celui posé par le middleware)."""
    trace_id = request.headers.get("X-Trace-ID")
    if trace_id:
        return trace_id
    return getattr(request.state, "request_id", None)


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions with standard envelope."""
    trace_id = extract_trace_id(request) or exc.trace_id
    log.warning("api_error", code=exc.code, status_code=exc.status_code, error_message=exc.message)
    return create_error_response(
        exc.status_code,
        ErrorEnvelope(code=exc.code, message=exc.message, trace_id=trace_id, details=exc.details),
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException with standard envelope."""
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    log.warning("http_exception", code=code, status_code=exc.status_code)
    return create_error_response(
        exc.status_code,
        ErrorEnvelope(code=code, message=str(exc.detail), trace_id=extract_trace_id(request)),
    )


async def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic exceptions with standard envelope."""
    log.error("unexpected_error", exception_type=type(exc).__name__, exc_info=exc)
    return create_error_response(
        HTTP_INTERNAL_SERVER_ERROR,
        ErrorEnvelope(
            code=ErrorCodes.INTERNAL_ERROR,
            message="An unexpected error occurred",
            trace_id=extract_trace_id(request),
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Branche les gestionnaires d'erreurs standard sur l'application."""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_exception)
