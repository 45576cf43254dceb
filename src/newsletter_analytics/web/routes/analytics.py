# ABOUTME: JSON analytics routes for the admin dashboard.
# ABOUTME: Store failures surface as 503, unknown event references as 404, anything else as 500.

from collections.abc import Awaitable
from typing import Annotated, TypeVar

import structlog
from fastapi import APIRouter, HTTPException, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from newsletter_analytics.config import get_settings
from newsletter_analytics.models import (
    ClickAnalytics,
    ComprehensiveOverview,
    ContentIntelligence,
    EngagementResult,
    HealthDetails,
    LocationAudienceAnalytics,
    NewsletterSummary,
    RiskUpdateResult,
    SourceReliability,
    SubscriberSummary,
    TrackedEvent,
    TrackEventRequest,
)
from newsletter_analytics.web.dependencies import AnalyticsDep
from newsletter_analytics.web.middleware.oidc import OIDCVerified

router = APIRouter(prefix="/api/analytics", tags=["analytics"])
log = structlog.get_logger()

T = TypeVar("T")

TimeRange = Annotated[int, Query(alias="timeRange", ge=1, le=get_settings().max_window_days)]
Limit = Annotated[int, Query(ge=1, le=100)]


async def _fetch(report: str, query: Awaitable[T]) -> T:
    """Await a report query, mapping failures to HTTP errors."""
    try:
        return await query
    except SQLAlchemyError as e:
        log.exception("analytics_store_error", report=report)
        raise HTTPException(status_code=503, detail=f"Failed to fetch {report}") from e
    except Exception as e:
        log.exception("analytics_report_failed", report=report)
        raise HTTPException(status_code=500, detail=f"Failed to fetch {report}") from e


@router.get("/health", response_model=HealthDetails)
async def email_health(analytics: AnalyticsDep, time_range: TimeRange = 30):
    """Composite email health score with delivery breakdowns."""
    return await _fetch("health metrics", analytics.health.get_health_details(time_range))


@router.get("/subscribers", response_model=SubscriberSummary)
async def subscriber_analytics(analytics: AnalyticsDep, time_range: TimeRange = 30):
    """Growth series, churn, and risk distribution."""
    return await _fetch(
        "subscriber analytics", analytics.subscribers.get_subscriber_summary(time_range)
    )


@router.get("/subscribers/{subscriber_id}/engagement", response_model=EngagementResult)
async def subscriber_engagement(subscriber_id: int, analytics: AnalyticsDep):
    """Live engagement score and tier for one subscriber."""
    return await _fetch(
        "subscriber engagement", analytics.engagement.get_engagement(subscriber_id)
    )


@router.get("/sources/{source_id}/reliability", response_model=SourceReliability)
async def source_reliability(source_id: int, analytics: AnalyticsDep):
    """Reliability score of one content source."""
    return await _fetch(
        "source reliability", analytics.sources.get_source_reliability(source_id)
    )


@router.get("/content-intelligence", response_model=ContentIntelligence)
async def content_intelligence(analytics: AnalyticsDep, time_range: TimeRange = 30):
    """Top sources, category trends, and content freshness."""
    return await _fetch(
        "content intelligence", analytics.content.get_content_intelligence(time_range)
    )


@router.get("/newsletters", response_model=NewsletterSummary)
async def newsletter_comparison(analytics: AnalyticsDep, limit: Limit = 10):
    """Per-issue performance of recently sent newsletters."""
    return await _fetch(
        "newsletter comparison", analytics.newsletters.get_newsletter_summary(limit)
    )


@router.get("/comprehensive", response_model=ComprehensiveOverview)
async def comprehensive_overview(analytics: AnalyticsDep, time_range: TimeRange = 30):
    """Dashboard overview of users, articles, categories, and issues."""
    return await _fetch(
        "comprehensive overview", analytics.overview.get_comprehensive_overview(time_range)
    )


@router.get("/clicks", response_model=ClickAnalytics)
async def click_analytics(analytics: AnalyticsDep, time_range: TimeRange = 7):
    """Most clicked content, click breakdowns, and email click funnel."""
    return await _fetch("click analytics", analytics.clicks.get_click_analytics(time_range))


@router.get("/location", response_model=LocationAudienceAnalytics)
async def location_audience(analytics: AnalyticsDep, time_range: TimeRange = 30):
    """Geographic and audience segment breakdowns."""
    return await _fetch(
        "location/audience analytics",
        analytics.audience.get_location_audience_analytics(time_range),
    )


@router.post("/events", response_model=TrackedEvent, status_code=201)
async def track_event(payload: TrackEventRequest, analytics: AnalyticsDep):
    """Append a subscriber event."""
    try:
        event = await analytics.events.track_subscriber_event(
            payload.subscriber_id,
            payload.event_type,
            newsletter_send_id=payload.newsletter_send_id,
            metadata=payload.metadata,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except IntegrityError as e:
        log.warning(
            "event_tracking_unknown_reference",
            subscriber_id=payload.subscriber_id,
            newsletter_send_id=payload.newsletter_send_id,
        )
        raise HTTPException(
            status_code=404, detail="Subscriber or newsletter send not found"
        ) from e
    except SQLAlchemyError as e:
        log.exception("event_tracking_failed", subscriber_id=payload.subscriber_id)
        raise HTTPException(status_code=503, detail="Failed to track event") from e

    return TrackedEvent(
        id=event.id,
        subscriber_id=event.subscriber_id,
        event_type=event.event_type,
        newsletter_send_id=event.newsletter_send_id,
        created_at=event.created_at,
    )


@router.post("/risk-levels/recompute", response_model=RiskUpdateResult)
async def recompute_risk_levels(analytics: AnalyticsDep, caller: OIDCVerified):
    """Recompute engagement scores and risk tiers for all active subscribers.

    Protected by OIDC verification when a scheduler audience is configured.
    """
    log.info("api_risk_recompute_start", caller=caller)
    return await _fetch("risk levels", analytics.engagement.update_risk_levels())
