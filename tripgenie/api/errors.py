"""
Exception handlers.

Every failure is turned into the response envelope so the web client can
always render a message. Diagnostics are attached only outside production.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from tripgenie.shared.config import get_settings
from tripgenie.shared.errors import PipelineError, RequestValidationFailed


logger = logging.getLogger(__name__)


# pydantic error types reported as a missing field
_MISSING_TYPES = ("missing", "string_too_short")


def error_response(
    status_code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build an error envelope, dropping `details` in production."""
    content: Dict[str, Any] = {"success": False, "error": message}
    if details and not get_settings().is_production:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _field_path(loc: tuple) -> str:
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) or "body"


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Summarize pydantic errors as one sentence naming the offending fields."""
    missing = []
    invalid = []
    for err in errors:
        path = _field_path(tuple(err.get("loc", ())))
        target = missing if err.get("type") in _MISSING_TYPES else invalid
        if path not in target:
            target.append(path)

    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    return f"Invalid request fields: {', '.join(invalid)}"


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed | {type(exc).__name__}: {exc.message}")
    details = dict(exc.details)
    details.setdefault("error_type", type(exc).__name__)
    field = getattr(exc, "field", None)
    if field:
        details.setdefault("field", field)
    return error_response(exc.status_code, exc.message, details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = describe_validation_errors(errors)
    logger.warning(f"{request.method} {request.url.path} rejected | {message}")
    failure = RequestValidationFailed(
        message,
        details={"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]},
    )
    return await pipeline_error_handler(request, failure)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} rate limited | limit={exc.detail}")
    return error_response(
        429,
        "Too many requests. Please try again later.",
        {"limit": str(exc.detail)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} failed unexpectedly: {exc}")
    return error_response(500, "Internal server error", {"error_type": type(exc).__name__})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
