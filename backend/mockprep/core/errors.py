"""Application error taxonomy and the FastAPI handlers that render it.

Services raise :class:`AppError` subclasses; nothing below the API layer
knows about HTTP responses. Every failure leaves the service in the same
envelope::

    {"success": false, "error": "<message>", "reason": "<code>", "details": [...]}
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a structured failure response."""

    status_code: int = 400
    reason: str = "bad_request"

    def __init__(
        self,
        message: str,
        *,
        reason: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "reason": self.reason,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationFailed(AppError):
    reason = "validation_failed"


class UploadRejected(ValidationFailed):
    reason = "upload_rejected"


class AlreadyExists(AppError):
    reason = "already_exists"


class NotAuthenticated(AppError):
    status_code = 401
    reason = "not_authenticated"


class InvalidCredentials(NotAuthenticated):
    reason = "invalid_credentials"


class AccessDenied(AppError):
    status_code = 403
    reason = "access_denied"


class NotFoundError(AppError):
    status_code = 404
    reason = "not_found"


class FeedbackNotAvailable(NotFoundError):
    reason = "feedback_not_available"


class InterviewStateError(AppError):
    """Operation refused because of the interview's current status."""

    reason = "invalid_state"


class SlotUnavailable(AppError):
    status_code = 409
    reason = "slot_unavailable"


def _field_path(loc: tuple) -> str:
    # Drop the leading "body"/"query"/"path" segment FastAPI prepends.
    parts = [str(p) for p in loc]
    if parts and parts[0] in {"body", "query", "path", "header", "form"}:
        parts = parts[1:]
    return ".".join(parts) or "body"


def validation_details(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into ``{"field", "message"}`` pairs."""
    return [
        {"field": _field_path(tuple(err.get("loc", ()))), "message": err.get("msg", "")}
        for err in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain and framework errors into the response envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(
            "%s: %s",
            exc.reason,
            exc.message,
            extra={"path": request.url.path, "status": exc.status_code},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = validation_details(list(exc.errors()))
        logger.warning("validation failed", extra={"path": request.url.path, "details": details})
        return JSONResponse(
            status_code=400,
            content=ValidationFailed("Validation failed", details=details).to_payload(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        reason = "not_found" if exc.status_code == 404 else "http_error"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail), "reason": reason},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error during %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "reason": "server_error"},
        )
