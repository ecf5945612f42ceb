"""
API Middleware - Request tracing and error responses for the search API.

Provides:
- Request context: trace id, response time header and one access log line
- Error responses keyed by the error taxonomy, with retry hints for an
  unreachable listing store
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from tripmarket.config.errors import ErrorCode, TripMarketError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time-Ms"

# Caller-supplied ids are echoed into headers and logs, so keep them short and plain
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]{1,64}")

_ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.STORAGE_CONNECTION_FAILED: 503,
    ErrorCode.STORAGE_READ_FAILED: 502,
    ErrorCode.CONFIG_MISSING: 503,
}

# Seconds a client should wait before retrying when the store is unreachable
STORE_RETRY_AFTER = 5


def error_status(code: ErrorCode) -> int:
    """HTTP status for an error code; anything unmapped is a 500."""
    return _ERROR_STATUS.get(code, 500)


def _request_id(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    return supplied if _VALID_REQUEST_ID.fullmatch(supplied) else str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with a trace id and time it.

    The id comes from ``X-Request-ID`` when the caller sends a usable one,
    otherwise a UUID4 is generated. Both the id and the elapsed time are
    returned as response headers.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.2f}"
        logger.info(
            "%s %s -> %d in %.2fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Render TripMarketError and unexpected exceptions as JSON error bodies."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except TripMarketError as e:
            return _taxonomy_error(request, e)
        except Exception as e:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception("Unhandled error on %s [%s]: %s", request.url.path, request_id, e)
            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "code": ErrorCode.INTERNAL_ERROR.value,
                        "message": "Internal server error",
                        "details": {},
                    },
                    "request_id": request_id,
                },
            )


def _taxonomy_error(request: Request, error: TripMarketError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    status = error_status(error.code)
    logger.error(
        "%s on %s [%s]: %s %s",
        error.code.value,
        request.url.path,
        request_id,
        error.message,
        error.details,
    )

    headers = {}
    if error.code is ErrorCode.STORAGE_CONNECTION_FAILED:
        headers["Retry-After"] = str(STORE_RETRY_AFTER)

    return JSONResponse(
        status_code=status,
        content={"error": error.to_dict(), "request_id": request_id},
        headers=headers,
    )
