"""Error envelope and request id handling for the HTTP API."""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from food_system.domain.errors import FoodSystemError, RateLimitExceededError

_logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    422: "UNPROCESSABLE_ENTITY",
    429: "TOO_MANY_REQUESTS",
    500: "INTERNAL_SERVER_ERROR",
    501: "NOT_IMPLEMENTED",
    503: "SERVICE_UNAVAILABLE",
}


def request_id(request: Request) -> str:
    """Return the id assigned to the current request."""
    return getattr(request.state, "request_id", None) or "unknown"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    details: dict[str, object] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the uniform ``{success: false, error: {...}}`` envelope."""
    error: dict[str, object] = {
        "message": message,
        "code": _ERROR_CODES.get(status_code, "ERROR"),
        "type": "client_error" if status_code < 500 else "server_error",
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "requestId": request_id(request),
    }
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


def install_error_handling(app: FastAPI, environment: str) -> None:
    """Register exception handlers and the request id middleware."""

    @app.middleware("http")
    async def assign_request_id(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(
            uuid4()
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            _logger.exception(
                "Unhandled error",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "request_id": request.state.request_id,
                },
            )
            message = "Internal server error"
            if environment == "local":
                message = f"{message}: {exc}"
            response = error_response(request, 500, message)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response

    @app.exception_handler(FoodSystemError)
    async def handle_domain_error(
        request: Request, exc: FoodSystemError
    ) -> JSONResponse:
        log = _logger.error if exc.status_code >= 500 else _logger.warning
        log(
            "Request failed: %s",
            exc.message,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": exc.status_code,
                "request_id": request_id(request),
            },
        )
        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after_seconds)}
        return error_response(
            request, exc.status_code, exc.message, exc.details, headers
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        return error_response(
            request, 400, "Request validation failed", {"errors": errors}
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(
            request, exc.status_code, str(exc.detail), headers=exc.headers
        )
