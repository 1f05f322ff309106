# src/gridchat/main.py
"""Main entry point for the gridchat application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from gridchat.api.v1 import (
    auth_router,
    grid_router,
    heatmap_router,
    messages_router,
    profiles_router,
    votes_router,
)
from gridchat.api.v1.dependencies import register_exception_handlers
from gridchat.core.logging_config import configure_logging
from gridchat.core.settings import settings
from gridchat.db.session import create_tables

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="gridchat API",
    description="Location-scoped, day-partitioned discussion threads",
    version=settings.app_version,
    debug=settings.debug,
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

register_exception_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(profiles_router, prefix="/api/v1")
app.include_router(grid_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(heatmap_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, str]:
    return {"name": settings.app_name, "version": settings.app_version}


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    create_tables()
    logger.info(
        "%s %s started with the %s reaction model",
        settings.app_name,
        settings.app_version,
        settings.reaction_model,
    )
