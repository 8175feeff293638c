"""
kindql - Runtime-generated GraphQL schemas over a dynamically typed record store

FastAPI application entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from kindql import __version__
from kindql.app.api import graphql_router
from kindql.app.dependencies import get_settings, initialize_services, shutdown_services

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting kindql services...")
    try:
        await initialize_services()
        logger.info("kindql services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down kindql services...")
    await shutdown_services()


settings = get_settings()

app = FastAPI(
    title="kindql",
    description="GraphQL schema generated at runtime from a configurable kind catalog",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

app.include_router(graphql_router)


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint with service info."""
    return {
        "service": settings.service_name,
        "version": __version__,
        "status": "running",
    }


@app.get("/health", tags=["health"])
def health_check() -> dict[str, Any]:
    """
    Health check endpoint.

    Reports the configured kinds and the number of stored records.
    """
    from kindql.app.dependencies import get_config_provider, get_store

    try:
        configuration = get_config_provider().get_configuration()
        return {
            "status": "healthy",
            "kinds": configuration.kind_ids(),
            "records": len(get_store()),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kindql.app.main:app",
        host="127.0.0.1",
        port=8080,
        reload=settings.debug,
    )
