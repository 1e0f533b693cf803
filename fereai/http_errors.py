# fereai/http_errors.py
import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fereai.errors import (
    EmptyResponseError,
    FereAIError,
    MalformedResponseError,
    MissingConfigurationError,
    TransportError,
    UnsupportedAgentError,
    UnsupportedFunctionalityError,
)

log = logging.getLogger(__name__)

# (status, error code) per provider failure; first isinstance match wins
_FEREAI_STATUS: tuple[tuple[type[FereAIError], int, str], ...] = (
    (UnsupportedAgentError, 400, "unsupported_agent"),
    (UnsupportedFunctionalityError, 400, "unsupported_functionality"),
    (MissingConfigurationError, 503, "missing_configuration"),
    (TransportError, 502, "upstream_transport_error"),
    (EmptyResponseError, 502, "upstream_empty_response"),
    (MalformedResponseError, 502, "upstream_malformed_response"),
)


def _base_payload(error: str, message: str, request: Request, detail: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "error": error,
        "message": message,
        "path": request.url.path,
        "method": request.method,
    }

    if detail is not None:
        payload["detail"] = detail

    return payload


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Raised when Pydantic/FastAPI request body/query/path validation fails.
    """
    log.info("422 validation_error at %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=422,
        content=_base_payload(
            error="validation_error",
            message="The request failed validation.",
            request=request,
            detail=exc.errors(),
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handles explicit HTTPException (404, 504, etc.) raised by routes or dependencies.
    """
    if exc.status_code >= 500:
        log.error(
            "HTTP %s at %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail
        )
    else:
        log.warning(
            "HTTP %s at %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail
        )

    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    detail = None if isinstance(exc.detail, str) else exc.detail

    return JSONResponse(
        status_code=exc.status_code,
        content=_base_payload(
            error="http_error",
            message=str(message),
            request=request,
            detail=detail,
        ),
    )


async def fereai_exception_handler(request: Request, exc: FereAIError):
    """
    Maps provider failures to HTTP: caller mistakes -> 4xx, missing config -> 503,
    backend socket failures -> 502.
    """
    status, code = 500, "fereai_error"
    for cls, cls_status, cls_code in _FEREAI_STATUS:
        if isinstance(exc, cls):
            status, code = cls_status, cls_code
            break

    log.warning("%s %s at %s %s: %s", status, code, request.method, request.url.path, exc)
    detail = {"missing": list(exc.missing)} if isinstance(exc, MissingConfigurationError) else None
    return JSONResponse(
        status_code=status,
        content=_base_payload(error=code, message=str(exc), request=request, detail=detail),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Last-resort handler for any unhandled exceptions. Returns a 500 without leaking internals.
    """
    log.exception("Unhandled error at %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=_base_payload(
            error="internal_server_error",
            message="An unexpected error occurred.",
            request=request,
        ),
    )
