"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that turn domain errors,
HTTP errors and request validation failures into application/problem+json
responses.
"""

from __future__ import annotations

from typing import Any, Dict
import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from formpath.errors import FatalExportError, FormPathError
from formpath.http.error_mapping import lookup

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(status: int, title: str, detail: str = "", headers: Dict[str, str] | None = None, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"title": title, "status": status}
    if detail:
        body["detail"] = detail
    body.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


async def handle_formpath_error(request: Request, exc: FormPathError) -> JSONResponse:  # noqa: D401
    mapping = lookup(exc)
    status = int(mapping["status"])
    if status >= 500:
        logger.error("domain_error code=%s path=%s", exc.code, request.url.path, exc_info=exc)
    else:
        logger.info("domain_error code=%s status=%s path=%s", exc.code, status, request.url.path)
    headers = {"Retry-After": "30"} if isinstance(exc, FatalExportError) else None
    return problem_response(
        status,
        str(mapping["title"]),
        str(exc),
        headers=headers,
        code=exc.code,
        document_id=getattr(exc, "document_id", None),
        question_id=getattr(exc, "question_id", None),
    )


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(getattr(exc, "status_code", 500) or 500)
    if isinstance(exc.detail, dict):
        return JSONResponse(exc.detail, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=exc.headers)
    return problem_response(status, "Error", str(exc.detail or ""), headers=exc.headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    return problem_response(
        422,
        "Invalid Request",
        "Request validation failed",
        code="REQUEST_INVALID",
        errors=[{"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")} for e in exc.errors()],
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return problem_response(500, "Internal Server Error")


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "handle_formpath_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
