"""Error handlers for the FastAPI transport layer.

Every error body has the shape ``{"status": "error", "reason": ...}``.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..app_services.errors import NotFoundError
from ..todo import StoreUnavailableError
from ..util.log import Log
from .schemas import ErrorResponse

log = Log.create({"service": "server.errors"})

NOT_FOUND_REASON = "Resource was not found."
BAD_REQUEST_REASON = "Request body is malformed."
INTERNAL_ERROR_REASON = "Internal server error."


def _error_response(
    *,
    status_code: int,
    reason: str,
    details: dict[str, object] | list[object] | str | None = None,
    request_id: str | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(reason=reason, details=details)
    response = JSONResponse(
        payload.model_dump(exclude_none=True),
        status_code=status_code,
        headers=dict(headers) if headers else None,
    )
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


def not_found_response(request_id: str | None = None) -> JSONResponse:
    """The uniform 404 body used for missing records and unmatched routes."""
    return _error_response(status_code=404, reason=NOT_FOUND_REASON, request_id=request_id)


def _validation_details(exc: RequestValidationError) -> list[object]:
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    def request_id(request: Request) -> str | None:
        rid = getattr(request.state, "request_id", None)
        if isinstance(rid, str) and rid:
            return rid
        return None

    def log_failure(request: Request, exc: BaseException) -> None:
        log.error(
            "request failed",
            {
                "request_id": request_id(request),
                "method": request.method,
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "error": str(exc),
                "traceback": "".join(
                    traceback.format_exception(type(exc), exc, exc.__traceback__)
                ),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # a method not served on a known path is an unmatched route too
        if exc.status_code in (404, 405):
            return not_found_response(request_id(request))
        return _error_response(
            status_code=exc.status_code,
            reason=str(exc.detail),
            request_id=request_id(request),
            headers=exc.headers,
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return not_found_response(request_id(request))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        # an id that does not parse never matches a record
        if any(error.get("loc", ())[:1] == ("path",) for error in exc.errors()):
            return not_found_response(request_id(request))
        return _error_response(
            status_code=400,
            reason=BAD_REQUEST_REASON,
            details=_validation_details(exc),
            request_id=request_id(request),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return _error_response(
            status_code=400,
            reason=str(exc),
            request_id=request_id(request),
        )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        log_failure(request, exc)
        return _error_response(
            status_code=500,
            reason=INTERNAL_ERROR_REASON,
            request_id=request_id(request),
        )

    @app.exception_handler(Exception)
    async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
        log_failure(request, exc)
        return _error_response(
            status_code=500,
            reason=INTERNAL_ERROR_REASON,
            request_id=request_id(request),
        )
