"""Middleware for the HealthWatch API"""

import asyncio
import logging
import time
import uuid
from typing import Callable, Dict, List, Tuple, Type

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from healthwatch.api.models import ErrorResponse
from healthwatch.exceptions import (
    AlertNotFound,
    AuthenticationError,
    ConfigurationError,
    HealthWatchException,
    OperationCancelled,
    OracleError,
    ValidationError
)
from healthwatch.metrics import ERROR_COUNT, REQUEST_COUNT, REQUEST_DURATION

logger = logging.getLogger(__name__)

# First match wins, so subclasses precede their bases
ERROR_STATUS_CODES: List[Tuple[Type[HealthWatchException], int]] = [
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AlertNotFound, 404),
    (OperationCancelled, 409),
    (OracleError, 503),
    (ConfigurationError, 503),
]


def status_code_for(exc: Exception) -> int:
    """HTTP status for a HealthWatch error; anything else is a 500."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Dict = None
) -> JSONResponse:
    """
    Create standardized error response.

    Args:
        request: Original request
        status_code: HTTP status code
        error: Error type
        message: Error message
        details: Optional additional details

    Returns:
        JSONResponse with error information
    """
    request_id = getattr(request.state, "request_id", "unknown")
    ERROR_COUNT.labels(error_type=error).inc()

    body = ErrorResponse(error=error, message=message, details=details or {})

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Error response",
        extra={
            "request_id": request_id,
            "status_code": status_code,
            "error": error,
            "error_message": message
        }
    )

    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers={"X-Request-ID": request_id}
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and records request metrics.

    Adds X-Request-ID and X-Response-Time headers to the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "response_time_ms": round((time.time() - start_time) * 1000, 2)
                },
                exc_info=True
            )
            raise

        elapsed_time = time.time() - start_time
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status=str(response.status_code)
        ).inc()
        REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(elapsed_time)

        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "response_time_ms": round(elapsed_time * 1000, 2)
            }
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_time:.3f}s"
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Last line of error handling.

    HealthWatch errors are normally turned into responses by the exception
    handlers in app.py; this catches request timeouts and anything that
    escapes them.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except HealthWatchException as e:
            return error_response(
                request,
                status_code=status_code_for(e),
                error=type(e).__name__,
                message=e.message,
                details=e.details
            )

        except TimeoutError as e:
            return error_response(
                request,
                status_code=504,
                error="TimeoutError",
                message=str(e)
            )

        except Exception as e:
            logger.error(f"Unhandled exception: {e}", exc_info=True)
            return error_response(
                request,
                status_code=500,
                error="InternalServerError",
                message="An unexpected error occurred"
            )


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Bounds the time a request may take."""

    def __init__(self, app: ASGIApp, timeout_seconds: float = 30.0):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(
                f"Request timeout after {time.time() - start_time:.3f}s "
                f"(limit: {self.timeout_seconds}s)"
            )
            raise TimeoutError(f"Request exceeded timeout of {self.timeout_seconds}s")


def cors_config() -> Dict:
    """CORS settings for the dashboard frontend."""
    return {
        "allow_origins": ["*"],
        "allow_credentials": True,
        "allow_methods": ["*"],
        "allow_headers": ["*"],
    }
