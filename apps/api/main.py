"""FastAPI application main entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.api.deps import get_engine
from apps.api.v1.endpoints import admin, cart, downloads, orders, payments, reviews
from core.data.database import create_tables
from core.domain.exceptions import (
    ConflictError,
    DownloadLimitExceededError,
    EntitlementError,
    ExternalDependencyError,
    FurniblesError,
    InvalidStateTransition,
    NotFoundError,
    PurchaseNotVerifiedError,
    TokenExpiredError,
    TokenNotFoundError,
    TokenRevokedError,
    ValidationError,
)
from core.infrastructure.logging import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


# First match wins: subclasses before their bases.
ERROR_STATUS_CODES = (
    (PurchaseNotVerifiedError, status.HTTP_403_FORBIDDEN),
    (TokenNotFoundError, status.HTTP_404_NOT_FOUND),
    (TokenExpiredError, status.HTTP_410_GONE),
    (TokenRevokedError, status.HTTP_410_GONE),
    (DownloadLimitExceededError, status.HTTP_403_FORBIDDEN),
    (EntitlementError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateTransition, status.HTTP_409_CONFLICT),
    (ExternalDependencyError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_code_for(exc: FurniblesError) -> int:
    for exc_type, code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = get_engine()
    await create_tables(engine)
    logger.info("✅ Furnibles API started")
    yield
    await engine.dispose()
    logger.info("Furnibles API stopped")


app = FastAPI(
    title="Furnibles API",
    description="Furnibles marketplace order, download and review API",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(cart.router, prefix="/api/v1")
app.include_router(orders.router, prefix="/api/v1")
app.include_router(payments.router, prefix="/api/v1")
app.include_router(downloads.router, prefix="/api/v1")
app.include_router(reviews.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


@app.exception_handler(FurniblesError)
async def furnibles_error_handler(request: Request, exc: FurniblesError) -> JSONResponse:
    """Map domain errors to HTTP status codes.

    Args:
        request: FastAPI request
        exc: Domain error

    Returns:
        JSONResponse with the error code and message
    """
    code = status_code_for(exc)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=code, content={"detail": exc.to_dict()})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle ValueError exceptions.

    Args:
        request: FastAPI request
        exc: ValueError exception

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"code": "validation_error", "message": str(exc)}},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions without leaking storage details."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
