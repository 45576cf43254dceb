# ABOUTME: Routes module initialization.
# ABOUTME: Exports all route modules for FastAPI app.

from newsletter_analytics.web.routes import analytics, api

__all__ = ["analytics", "api"]
