# ABOUTME: FastAPI dependency injection for database sessions and analytics services.
# ABOUTME: Provides reusable dependencies for route handlers.

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_analytics.db.session import get_db_session
from newsletter_analytics.services import Analytics, build_analytics

# Type aliases for common dependencies
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_analytics(session: DbSession) -> AsyncGenerator[Analytics]:
    """Get analytics services bound to the request session."""
    yield build_analytics(session)


AnalyticsDep = Annotated[Analytics, Depends(get_analytics)]
