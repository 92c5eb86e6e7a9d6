"""Brocante API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from brocante.api.health import router as health_router
from brocante.api.middleware import setup_middleware
from brocante.api.products import router as products_router
from brocante.api.users import router as users_router
from brocante.domain.exceptions import (
    DomainError,
    InvalidPriceError,
    InvalidSortError,
    ProductNotAvailableError,
    ProductNotFoundError,
)
from brocante.infrastructure.config import settings
from brocante.infrastructure.database import engine
from brocante.infrastructure.logging import configure_logging

configure_logging(settings.log_level)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting Brocante API",
        version=settings.api_version,
        debug=settings.debug,
        page_size=settings.catalog_page_size,
    )

    yield

    logger.info("Shutting down Brocante API")
    await engine.dispose()


app = FastAPI(
    title="Brocante API",
    description="Second-hand marketplace catalog backend",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(users_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================

# Domain error -> (HTTP status, error code)
DOMAIN_ERROR_STATUS: dict[type[DomainError], tuple[int, str]] = {
    ProductNotFoundError: (status.HTTP_404_NOT_FOUND, "PRODUCT_NOT_FOUND"),
    ProductNotAvailableError: (status.HTTP_409_CONFLICT, "PRODUCT_NOT_AVAILABLE"),
    InvalidSortError: (status.HTTP_400_BAD_REQUEST, "INVALID_SORT"),
    InvalidPriceError: (status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_PRICE"),
}


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to HTTP responses."""
    request_id = getattr(request.state, "request_id", None)
    status_code, error_code = DOMAIN_ERROR_STATUS.get(
        type(exc), (status.HTTP_400_BAD_REQUEST, "DOMAIN_ERROR")
    )

    logger.info(
        "Domain error",
        path=request.url.path,
        error_code=error_code,
        error=exc.message,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": exc.message,
            "details": exc.details,
            "request_id": request_id,
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
    )
