# ABOUTME: Wires repositories and analytics services onto a single database session.
# ABOUTME: Used by the CLI and by FastAPI dependencies.

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_analytics.config import Settings, get_settings
from newsletter_analytics.db.repository import (
    ClickRepository,
    ContentRepository,
    NewsletterDraftRepository,
    NewsletterSendRepository,
    SubscriberEventRepository,
    SubscriberRepository,
)
from newsletter_analytics.services.audience import AudienceService
from newsletter_analytics.services.clicks import ClickAnalyticsService
from newsletter_analytics.services.content import ContentIntelligenceService
from newsletter_analytics.services.engagement import EngagementService
from newsletter_analytics.services.events import EventTracker
from newsletter_analytics.services.health import HealthService
from newsletter_analytics.services.newsletters import NewsletterComparisonService
from newsletter_analytics.services.overview import OverviewService
from newsletter_analytics.services.sources import SourceReliabilityService
from newsletter_analytics.services.subscribers import SubscriberAnalyticsService


@dataclass
class Analytics:
    """All analytics services bound to one session."""

    engagement: EngagementService
    health: HealthService
    sources: SourceReliabilityService
    subscribers: SubscriberAnalyticsService
    content: ContentIntelligenceService
    newsletters: NewsletterComparisonService
    events: EventTracker
    overview: OverviewService
    audience: AudienceService
    clicks: ClickAnalyticsService


def build_analytics(session: AsyncSession, settings: Settings | None = None) -> Analytics:
    """Create every analytics service on top of the given session."""
    settings = settings or get_settings()

    subscriber_repo = SubscriberRepository(session)
    send_repo = NewsletterSendRepository(session)
    click_repo = ClickRepository(session)
    content_repo = ContentRepository(session)
    draft_repo = NewsletterDraftRepository(session)
    event_repo = SubscriberEventRepository(session)

    sources = SourceReliabilityService(content_repo)
    newsletters = NewsletterComparisonService(draft_repo, send_repo, click_repo)

    return Analytics(
        engagement=EngagementService(
            subscriber_repo, send_repo, click_repo, window_days=settings.engagement_window_days
        ),
        health=HealthService(send_repo, click_repo),
        sources=sources,
        subscribers=SubscriberAnalyticsService(
            subscriber_repo, list_limit=settings.subscriber_list_limit
        ),
        content=ContentIntelligenceService(
            content_repo, sources, top_sources_limit=settings.top_sources_limit
        ),
        newsletters=newsletters,
        events=EventTracker(event_repo, subscriber_repo),
        overview=OverviewService(
            subscriber_repo,
            send_repo,
            click_repo,
            content_repo,
            draft_repo,
            newsletters,
            newsletter_scan_limit=settings.overview_newsletter_scan_limit,
        ),
        audience=AudienceService(
            subscriber_repo, send_repo, top_cities_limit=settings.top_cities_limit
        ),
        clicks=ClickAnalyticsService(
            click_repo, send_repo, top_clicked_limit=settings.top_clicked_limit
        ),
    )
