# ABOUTME: Pydantic models for analytics results and API payloads.
# ABOUTME: Attributes are snake_case; JSON serialization uses camelCase aliases.

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AnalyticsModel(BaseModel):
    """Base for every analytics payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Engagement / risk


class EngagementResult(AnalyticsModel):
    """Live engagement score of one subscriber with its tier."""

    subscriber_id: int
    score: int
    risk_level: str


class RiskUpdateResult(AnalyticsModel):
    """Outcome of a risk recomputation batch."""

    processed: int
    distribution: dict[str, int] = Field(default_factory=dict)


# Health


class HealthScore(AnalyticsModel):
    """Composite health score and its component rates (percent, 2 dp)."""

    score: int = 0
    delivery_rate: float = 0.0
    open_rate: float = 0.0
    click_through_rate: float = 0.0
    bounce_rate: float = 0.0


class BounceReason(AnalyticsModel):
    reason: str
    count: int


class DeviceCount(AnalyticsModel):
    device: str
    count: int


class EmailClientCount(AnalyticsModel):
    client: str
    count: int


class DailyHealth(AnalyticsModel):
    """Health score of the sends made during one day bucket."""

    date: str
    score: int


class HealthDetails(HealthScore):
    """Health score plus deliverability breakdowns and a daily score trend."""

    spam_complaints: int = 0
    bounces_by_reason: list[BounceReason] = Field(default_factory=list)
    device_breakdown: list[DeviceCount] = Field(default_factory=list)
    email_client_breakdown: list[EmailClientCount] = Field(default_factory=list)
    daily_trend: list[DailyHealth] = Field(default_factory=list)
    time_range: int


# Sources


class SourceReliability(AnalyticsModel):
    source_id: int
    reliability: int


# Subscribers


class GrowthPoint(AnalyticsModel):
    """Signups and unsubscribes for one day bucket."""

    date: str
    new_subscribers: int
    unsubscribed: int
    net_growth: int


class RiskBucket(AnalyticsModel):
    risk_level: str
    count: int


class SubscriberSnapshot(AnalyticsModel):
    email: str
    engagement_score: int | None = None
    risk_level: str | None = None
    last_engaged_at: datetime | None = None
    created_at: datetime | None = None


class EngagementBucket(AnalyticsModel):
    score: int
    count: int


class CohortPoint(AnalyticsModel):
    """Active subscribers who signed up in one calendar month."""

    month: str
    count: int
    avg_engagement: int


class SubscriberSummary(AnalyticsModel):
    """Subscriber dashboard: growth, churn, stored engagement, and risk tiers."""

    growth_data: list[GrowthPoint]
    total_subscribers: int
    churn_rate: float
    avg_engagement_score: int
    engagement_distribution: list[EngagementBucket] = Field(default_factory=list)
    risk_distribution: list[RiskBucket]
    cohort_data: list[CohortPoint] = Field(default_factory=list)
    top_engaged: list[SubscriberSnapshot]
    at_risk: list[SubscriberSnapshot]
    time_range: int


# Content intelligence


class TopSource(AnalyticsModel):
    name: str
    clicks: int
    articles: int
    reliability: int


class CategoryTrend(AnalyticsModel):
    category: str
    clicks: int
    growth: int


class ContentIntelligence(AnalyticsModel):
    """Top sources, category click trends, and average content age at send."""

    top_sources: list[TopSource]
    category_trends: list[CategoryTrend]
    content_freshness: int
    time_range: int


# Newsletters


class NewsletterPerformance(AnalyticsModel):
    """Per-issue rates. Click rate counts every click event, not unique clickers."""

    id: int
    subject: str
    sent_at: datetime | None
    recipients: int
    open_rate: float
    click_rate: float
    engagement_score: int


class NewsletterSummary(AnalyticsModel):
    newsletters: list[NewsletterPerformance]
    best_performer: NewsletterPerformance | None
    avg_open_rate: float
    avg_click_rate: float


# Comprehensive overview


class UserEngagement(AnalyticsModel):
    total_subscribers: int
    users_who_opened: int
    users_who_clicked: int
    open_percentage: float
    click_percentage: float


class ArticleEngagement(AnalyticsModel):
    total_articles_sent: int
    unique_articles_clicked: int
    total_clicks: int
    clicked_percentage: float
    avg_clicks_per_article: float


class CategoryPerformance(AnalyticsModel):
    category: str
    articles_sent: int
    unique_articles_clicked: int
    total_clicks: int
    click_rate: float


class NewsletterMetrics(AnalyticsModel):
    total_newsletters_sent: int
    avg_open_rate: float
    avg_click_rate: float


class ComprehensiveOverview(AnalyticsModel):
    user_engagement: UserEngagement
    article_engagement: ArticleEngagement
    category_performance: list[CategoryPerformance]
    newsletter_metrics: NewsletterMetrics


# Clicks


class ClickedContent(AnalyticsModel):
    content_id: int
    title: str
    link: str
    source_type: str
    category_name: str
    click_count: int


class CategoryClicks(AnalyticsModel):
    category_name: str
    click_count: int


class SourceTypeClicks(AnalyticsModel):
    source_type: str
    click_count: int


class DailyClicks(AnalyticsModel):
    date: str
    click_count: int


class EmailClickStats(AnalyticsModel):
    """Send and email click totals with rates in percent (2 dp)."""

    total_sent: int
    total_opened: int
    total_clicks: int
    unique_clickers: int
    open_rate: float
    click_through_rate: float
    click_to_open_rate: float


class ClickAnalytics(AnalyticsModel):
    """Click report: most clicked content, click breakdowns, and email funnel."""

    top_clicked: list[ClickedContent]
    clicks_by_category: list[CategoryClicks]
    clicks_by_source: list[SourceTypeClicks]
    total_clicks: int
    unique_users: int
    clicks_over_time: list[DailyClicks]
    email_stats: EmailClickStats
    time_range: int


# Location / audience


class CountryStats(AnalyticsModel):
    country: str
    country_name: str | None
    subscriber_count: int
    open_rate: float
    click_rate: float


class CityStats(AnalyticsModel):
    city: str
    country: str | None
    subscriber_count: int
    engagement_score: int


class AudienceSegment(AnalyticsModel):
    audience: str
    count: int
    percentage: float
    avg_engagement_score: int


class CompanySizeBucket(AnalyticsModel):
    company_size: str
    count: int
    percentage: float


class LocationAudienceAnalytics(AnalyticsModel):
    """Population-share breakdowns; percentages are relative to all active subscribers."""

    geographic_distribution: list[CountryStats]
    top_cities: list[CityStats]
    audience_segments: list[AudienceSegment]
    company_size_breakdown: list[CompanySizeBucket]


# Events


class TrackEventRequest(AnalyticsModel):
    subscriber_id: int
    event_type: str = Field(min_length=1, max_length=50)
    newsletter_send_id: int | None = None
    metadata: dict[str, Any] | None = None


class TrackedEvent(AnalyticsModel):
    id: int | None
    subscriber_id: int
    event_type: str
    newsletter_send_id: int | None
    created_at: datetime | None
