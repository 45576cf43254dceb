# ABOUTME: Main package for the newsletter analytics engine.
# ABOUTME: Exports settings access and the analytics service factory.

from newsletter_analytics.config import get_settings
from newsletter_analytics.services import Analytics, build_analytics

__version__ = "0.1.0"

__all__ = [
    "Analytics",
    "__version__",
    "build_analytics",
    "get_settings",
]
