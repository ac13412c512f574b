# src/reeltalk/main.py
"""Main entry point for the Reeltalk application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from reeltalk.api.v1 import (
    auth_router,
    posts_router,
    system_router,
    titles_router,
    topics_router,
)
from reeltalk.core.errors import ReeltalkError
from reeltalk.core.settings import settings
from reeltalk.services.tmdb import close_tmdb_client

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Reeltalk API",
    description="Movie and TV discovery with threaded discussions",
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
app.include_router(titles_router, prefix="/api/v1")
app.include_router(topics_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.exception_handler(ReeltalkError)
async def reeltalk_error_handler(request: Request, exc: ReeltalkError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_tmdb_client()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Reeltalk API",
        "version": settings.app_version,
        "description": "Movie and TV discovery with threaded discussions",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("reeltalk.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
