"""Catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.health import router as health_router
from app.api.middleware import setup_middleware
from app.api.products import router as products_router
from app.api.products import sellers_router
from app.catalog.seed import load_seed_data
from app.domain.exceptions import (
    DomainError,
    EntityNotFoundError,
    InvalidPaginationError,
    NoMatchingProductsError,
    ProductAlreadyExistsError,
)
from app.infrastructure.config import settings
from app.infrastructure.database import async_session_factory, create_tables
from app.infrastructure.logging_config import configure_logging

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting Catalog API",
        version=settings.api_version,
        debug=settings.debug,
    )

    await create_tables()

    if settings.seed_on_startup:
        async with async_session_factory() as session:
            result = await load_seed_data(session)
        logger.info("Seed check complete", **result)

    yield

    # Shutdown
    logger.info("Shutting down Catalog API")


app = FastAPI(
    title="Catalog API",
    description="Product catalog with per-user seller blacklists",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(sellers_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


DOMAIN_ERROR_STATUS: dict[type[DomainError], int] = {
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    NoMatchingProductsError: status.HTTP_404_NOT_FOUND,
    ProductAlreadyExistsError: status.HTTP_409_CONFLICT,
    InvalidPaginationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to HTTP responses with consistent format."""
    request_id = getattr(request.state, "request_id", None)
    status_code = DOMAIN_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)

    logger.info(
        "Domain error",
        path=request.url.path,
        error_code=exc.error_code,
        status_code=status_code,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
            "request_id": request_id,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions, including routing 404/405, with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    # Extract error details from exception
    default_code = HTTPStatus(exc.status_code).name
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", default_code)
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = default_code
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
        headers=getattr(exc, "headers", None),
    )

