# ABOUTME: Database module initialization.
# ABOUTME: Exports ORM models and session helpers for the fact store.

from newsletter_analytics.db.models import (
    Base,
    Category,
    Click,
    ContentItem,
    NewsletterDraft,
    NewsletterSend,
    RiskLevel,
    Source,
    Subscriber,
    SubscriberEvent,
)
from newsletter_analytics.db.session import get_session, init_db

__all__ = [
    "Base",
    "Category",
    "Click",
    "ContentItem",
    "NewsletterDraft",
    "NewsletterSend",
    "RiskLevel",
    "Source",
    "Subscriber",
    "SubscriberEvent",
    "get_session",
    "init_db",
]
