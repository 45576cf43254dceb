# ABOUTME: FastAPI application factory with database lifespan.
# ABOUTME: Main entry point for the analytics JSON API.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from newsletter_analytics import __version__
from newsletter_analytics.db.session import close_db, init_db
from newsletter_analytics.logging_config import configure_logging
from newsletter_analytics.web.routes import analytics, api

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context for database setup/teardown."""
    configure_logging()
    logger.info("app_startup")
    await init_db()
    yield
    logger.info("app_shutdown")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Newsletter Analytics",
        description="Engagement, health, and content analytics for newsletter operations",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(api.router)
    app.include_router(analytics.router)

    return app


# Application instance for uvicorn
app = create_app()
