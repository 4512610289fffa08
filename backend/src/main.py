"""DocFlow Backend - Main FastAPI Application

Document routing and tracking service.

This module creates and configures the main FastAPI application, including:
- The processes router (documents, routing, history, dashboard)
- Middleware (request ID correlation, CORS)
- Exception handlers
- Health endpoint
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from database import engine
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from processes.router import router as processes_router

settings = get_settings()

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

_docs_enabled = settings.ENVIRONMENT != "production"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("DocFlow API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Status transition policy: {settings.STATUS_TRANSITION_POLICY}")

    yield

    logger.info("DocFlow API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="DocFlow API",
    description="Document routing and tracking between organizational areas",
    version="0.1.0",
    debug=settings.DEBUG,
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    openapi_url="/openapi.json" if _docs_enabled else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request ID Middleware (must be first for proper correlation)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with field-level details."""
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(processes_router, prefix="/api/v1")


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/health", tags=["health"])
def health() -> JSONResponse:
    """Liveness check including database connectivity."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "error"},
        )
    return JSONResponse(content={"status": "ok", "database": "ok"})


@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "DocFlow API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if _docs_enabled else None,
    }


def create_app() -> FastAPI:
    """Return the configured FastAPI application (used by tests and ASGI servers)."""
    return app


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
