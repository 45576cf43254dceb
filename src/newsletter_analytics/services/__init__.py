# ABOUTME: Services module initialization.
# ABOUTME: Exports the analytics services and the session-bound service factory.

from newsletter_analytics.services.audience import AudienceService
from newsletter_analytics.services.clicks import ClickAnalyticsService
from newsletter_analytics.services.content import ContentIntelligenceService
from newsletter_analytics.services.engagement import EngagementService
from newsletter_analytics.services.events import EventTracker
from newsletter_analytics.services.factory import Analytics, build_analytics
from newsletter_analytics.services.health import HealthService
from newsletter_analytics.services.newsletters import NewsletterComparisonService
from newsletter_analytics.services.overview import OverviewService
from newsletter_analytics.services.sources import SourceReliabilityService
from newsletter_analytics.services.subscribers import SubscriberAnalyticsService

__all__ = [
    "Analytics",
    "AudienceService",
    "ClickAnalyticsService",
    "ContentIntelligenceService",
    "EngagementService",
    "EventTracker",
    "HealthService",
    "NewsletterComparisonService",
    "OverviewService",
    "SourceReliabilityService",
    "SubscriberAnalyticsService",
    "build_analytics",
]
