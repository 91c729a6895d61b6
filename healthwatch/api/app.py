"""Main FastAPI application with middleware and error handlers"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from healthwatch import __version__
from healthwatch.api.endpoints import router
from healthwatch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    TimeoutMiddleware,
    cors_config,
    error_response,
    status_code_for
)
from healthwatch.config import settings
from healthwatch.exceptions import HealthWatchException
from healthwatch.integration import get_integration, reset_integration
from healthwatch.logging_config import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Create main application
app = FastAPI(
    title="HealthWatch Alert Triage API",
    description="Field reports, outbreak risk scoring and alert triage for community health",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(CORSMiddleware, **cors_config())

# Starlette wraps in reverse order: the last middleware added is outermost
app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.api.request_timeout)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(HealthWatchException)
async def healthwatch_exception_handler(
    request: Request,
    exc: HealthWatchException
) -> JSONResponse:
    """
    Map HealthWatch errors to HTTP responses.

    Validation 400, authentication 401, unknown alert 404, cancelled
    request 409, oracle failure 503.
    """
    return error_response(
        request,
        status_code=status_code_for(exc),
        error=type(exc).__name__,
        message=exc.message,
        details=exc.details
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and parameters are 400s."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        }
        for error in exc.errors()
    ]
    return error_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        error="ValidationError",
        message="Request validation failed",
        details={"validation_errors": errors}
    )


app.include_router(router)


@app.on_event("startup")
async def startup_event():
    """Create the triage service."""
    logger.info("Starting HealthWatch API...")
    integration = get_integration()
    health = integration.health_check()
    logger.info(f"System health check: {health['overall_status']}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cancel in-flight oracle requests."""
    logger.info("Shutting down HealthWatch API...")
    reset_integration()
    logger.info("HealthWatch API shutdown complete")


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness check."""
    return {
        "status": "healthy",
        "service": "HealthWatch API",
        "version": __version__
    }


@app.get("/metrics", tags=["Monitoring"])
async def metrics():
    """Prometheus metrics in text format."""
    return PlainTextResponse(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@app.get("/", tags=["Root"])
async def root():
    return {
        "service": "HealthWatch Alert Triage API",
        "version": __version__,
        "status": "operational",
        "documentation": "/docs"
    }
