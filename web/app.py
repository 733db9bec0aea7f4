"""FastAPI application factory and main app.

This module creates the FastAPI application with all routers included.
Web routes are thin proxies to core APIs.
"""

from __future__ import annotations

from fastapi import FastAPI

from go_lambda_builder import __version__
from web.routers import builds, config, health


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application.
    """
    application = FastAPI(
        title="Go Lambda Builder API",
        description="HTTP API for compiling Go HTTP handlers into Lambda artifacts",
        version=__version__,
    )

    # Include routers
    application.include_router(health.router, tags=["health"])
    application.include_router(config.router, prefix="/config", tags=["config"])
    application.include_router(builds.router, prefix="/builds", tags=["builds"])

    return application


# Create the default application instance
app = create_app()
