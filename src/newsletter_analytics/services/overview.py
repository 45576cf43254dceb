# ABOUTME: Comprehensive overview of subscriber, article, category, and issue metrics.
# ABOUTME: Newsletter averages reuse the per-newsletter comparison and are reduced in memory.

from datetime import datetime

import structlog

from newsletter_analytics.db.repository import (
    ClickRepository,
    ContentRepository,
    NewsletterDraftRepository,
    NewsletterSendRepository,
    SubscriberRepository,
)
from newsletter_analytics.models import (
    ArticleEngagement,
    CategoryPerformance,
    ComprehensiveOverview,
    NewsletterMetrics,
    UserEngagement,
)
from newsletter_analytics.scoring import mean, percentage, round_rate
from newsletter_analytics.services.content import UNCATEGORIZED
from newsletter_analytics.services.newsletters import NewsletterComparisonService
from newsletter_analytics.utils.windows import window_start

log = structlog.get_logger()


class OverviewService:
    """Builds the dashboard-ready comprehensive overview payload."""

    def __init__(
        self,
        subscribers: SubscriberRepository,
        sends: NewsletterSendRepository,
        clicks: ClickRepository,
        content: ContentRepository,
        drafts: NewsletterDraftRepository,
        newsletters: NewsletterComparisonService,
        newsletter_scan_limit: int = 100,
    ) -> None:
        self.subscribers = subscribers
        self.sends = sends
        self.clicks = clicks
        self.content = content
        self.drafts = drafts
        self.newsletters = newsletters
        self.newsletter_scan_limit = newsletter_scan_limit

    async def get_comprehensive_overview(
        self, window_days: int = 30, now: datetime | None = None
    ) -> ComprehensiveOverview:
        """Compose the overview for the trailing window.

        Subscriber percentages are relative to all active subscribers; article
        percentages to distinct articles sent in the window. A failing sub-query
        fails the whole overview.
        """
        since = window_start(window_days, now)

        user_engagement = await self._user_engagement(since)
        article_engagement = await self._article_engagement(since)
        category_performance = await self._category_performance(since)
        newsletter_metrics = await self._newsletter_metrics(since)

        log.debug("comprehensive_overview_computed", window_days=window_days)
        return ComprehensiveOverview(
            user_engagement=user_engagement,
            article_engagement=article_engagement,
            category_performance=category_performance,
            newsletter_metrics=newsletter_metrics,
        )

    async def _user_engagement(self, since: datetime) -> UserEngagement:
        total = await self.subscribers.count_active()
        opened = await self.sends.count_distinct_openers(since)
        clicked = await self.clicks.count_unique_clickers(since)

        return UserEngagement(
            total_subscribers=total,
            users_who_opened=opened,
            users_who_clicked=clicked,
            open_percentage=percentage(opened, total),
            click_percentage=percentage(clicked, total),
        )

    async def _article_engagement(self, since: datetime) -> ArticleEngagement:
        articles_sent = await self.content.count_sent_since(since)
        articles_clicked = await self.clicks.count_unique_content_clicked(since)
        total_clicks = await self.clicks.count_for_sends_since(since)

        return ArticleEngagement(
            total_articles_sent=articles_sent,
            unique_articles_clicked=articles_clicked,
            total_clicks=total_clicks,
            clicked_percentage=percentage(articles_clicked, articles_sent),
            avg_clicks_per_article=total_clicks / articles_sent if articles_sent else 0.0,
        )

    async def _category_performance(self, since: datetime) -> list[CategoryPerformance]:
        rows = await self.content.category_performance(since)

        categories = []
        for row in rows:
            articles_sent = int(row.articles_sent or 0)
            clicked = int(row.unique_articles_clicked or 0)
            categories.append(
                CategoryPerformance(
                    category=row.category_name or UNCATEGORIZED,
                    articles_sent=articles_sent,
                    unique_articles_clicked=clicked,
                    total_clicks=row.total_clicks,
                    click_rate=percentage(clicked, articles_sent),
                )
            )
        return categories

    async def _newsletter_metrics(self, since: datetime) -> NewsletterMetrics:
        sent_count = await self.drafts.count_sent_since(since)

        comparisons = await self.newsletters.get_newsletter_comparison(self.newsletter_scan_limit)
        recent = [n for n in comparisons if n.sent_at is not None and n.sent_at >= since]

        return NewsletterMetrics(
            total_newsletters_sent=sent_count,
            avg_open_rate=round_rate(mean(n.open_rate for n in recent)),
            avg_click_rate=round_rate(mean(n.click_rate for n in recent)),
        )
