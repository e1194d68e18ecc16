# src/microblog/main.py
"""Main entry point for the Microblog application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from microblog.api.v1 import auth_router, posts_router, users_router
from microblog.api.v1.errors import GENERIC_FAILURE, error_detail, status_for
from microblog.core.settings import settings
from microblog.db.session import create_tables
from microblog.services.errors import MicroblogError, StorageError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Short posts, likes and feeds",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.exception_handler(MicroblogError)
async def handle_service_error(request: Request, exc: MicroblogError) -> JSONResponse:
    """Render service errors as ``{"detail": {"reason": ..., "message": ...}}``."""
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    headers = {"WWW-Authenticate": "Bearer"} if exc.reason == "login_required" else None
    return JSONResponse(
        status_code=status_for(exc),
        content={"detail": error_detail(exc)},
        headers=headers,
    )


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log unexpected database failures without leaking them to the caller."""
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": dict(GENERIC_FAILURE)})


@app.on_event("startup")
async def on_startup() -> None:
    create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "feed": "/api/v1/feed",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("microblog.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
