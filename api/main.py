"""
FastAPI application for the Filmorate API.

Films, users, likes and friendships, plus the read-only genre and MPA
catalogs. Schema setup and other admin operations are handled via CLI.
"""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_config
from api.exceptions import (
    APIError,
    api_error_handler,
    database_error_handler,
    domain_error_handler,
    generic_exception_handler,
)
from api.logging_config import (
    logger,
    generate_request_id,
    set_request_id,
    get_request_id,
)
from filmorate import __version__
from filmorate.exceptions import FilmorateError
from filmorate.utils import setup_logger

# Import routers
from api.routers import films, users, genres, mpa

config = get_config()

# Services and storage log under "filmorate.*"
setup_logger("filmorate", config.log_dir, config.log_level)

# Create FastAPI app
app = FastAPI(
    title="Filmorate API",
    description="REST API for films, users, likes and friendships",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Register exception handlers
app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(FilmorateError, domain_error_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# An empty ALLOWED_ORIGINS leaves the API open to every origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log all HTTP requests with timing and response status."""
    set_request_id(generate_request_id())

    # Skip logging for health checks and docs
    skip_paths = {"/health", "/", "/api/docs", "/api/redoc", "/api/openapi.json"}
    if request.url.path in skip_paths:
        return await call_next(request)

    start_time = time.time()
    client_ip = request.client.host if request.client else "unknown"

    logger.info(
        f"Request started: {request.method} {request.url.path} "
        f"from {client_ip}"
    )

    try:
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        log_msg = (
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration_ms:.2f}ms"
        )

        if response.status_code >= 500:
            logger.error(log_msg)
        elif response.status_code >= 400:
            logger.warning(log_msg)
        else:
            logger.info(log_msg)

        # Add request ID to response headers for debugging
        response.headers["X-Request-ID"] = get_request_id()
        return response

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Request failed: {request.method} {request.url.path} "
            f"duration={duration_ms:.2f}ms error={str(e)}"
        )
        raise


app.include_router(films.router, prefix="/api/v1", tags=["Films"])
app.include_router(users.router, prefix="/api/v1", tags=["Users"])
app.include_router(genres.router, prefix="/api/v1", tags=["Genres"])
app.include_router(mpa.router, prefix="/api/v1", tags=["MPA"])


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint points at the docs."""
    return {
        "message": "Filmorate API",
        "version": __version__,
        "docs": "/api/docs",
        "redoc": "/api/redoc",
    }


@app.get("/health", include_in_schema=False)
async def health():
    """Simple health check endpoint."""
    return {"status": "ok"}
