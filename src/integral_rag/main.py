"""
Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, and provides a test-friendly application
factory.
"""

from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator

from fastapi import FastAPI

from .core.errors import unhandled_exception_handler
from .db import async_engine, init_models
from .logging_config import setup_logging

from .api import (
    embed_routes,
    health_routes,
    query_routes,
)


logger = logging.getLogger("rag.app")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Create tables before the first request, release the pool on shutdown.
    """
    logger.info("Starting integral-rag")
    await init_models()
    logger.info("Available endpoints:")
    logger.info("  POST /embed - Load and embed data from CSV files")
    logger.info("  POST /query - Query for relevant content based on a prompt")
    logger.info("  GET /stats - Content table counts")
    logger.info("  GET /health - Health check endpoint")

    yield

    logger.info("Shutting down integral-rag")
    await async_engine.dispose()


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    setup_logging()

    app = FastAPI(
        title="integral-rag",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_routes.router)
    app.include_router(embed_routes.router)
    app.include_router(query_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn)
# ---------------------------------------------------------------------

app = create_app()
