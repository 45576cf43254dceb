# ABOUTME: Click analytics report over clicks made in a trailing window.
# ABOUTME: Ranks clicked content, breaks clicks down, and summarizes the email funnel.

from datetime import datetime

import structlog

from newsletter_analytics.db.repository import ClickRepository, NewsletterSendRepository
from newsletter_analytics.models import (
    CategoryClicks,
    ClickAnalytics,
    ClickedContent,
    DailyClicks,
    EmailClickStats,
    SourceTypeClicks,
)
from newsletter_analytics.scoring import percentage, round_rate
from newsletter_analytics.services.content import UNCATEGORIZED
from newsletter_analytics.utils.windows import utcnow, window_start

log = structlog.get_logger()

UNKNOWN_SOURCE_TYPE = "unknown"


class ClickAnalyticsService:
    """Reports which content gets clicked and how email sends convert to clicks.

    Unlike the health and overview reports, this report windows clicks by the
    time they were made, not by the send time.
    """

    def __init__(
        self,
        clicks: ClickRepository,
        sends: NewsletterSendRepository,
        top_clicked_limit: int = 20,
    ) -> None:
        self.clicks = clicks
        self.sends = sends
        self.top_clicked_limit = top_clicked_limit

    async def get_email_stats(self, since: datetime) -> EmailClickStats:
        """Send, open, and email click counts with funnel rates.

        Only clicks tied to a newsletter send count here. Every rate is 0 when
        its denominator is 0.
        """
        sends = await self.sends.delivery_stats(since)
        email_clicks = await self.clicks.email_click_stats(since)

        return EmailClickStats(
            total_sent=sends.total,
            total_opened=sends.opened,
            total_clicks=email_clicks.total,
            unique_clickers=email_clicks.unique_clickers,
            open_rate=round_rate(percentage(sends.opened, sends.total)),
            click_through_rate=round_rate(percentage(email_clicks.total, sends.total)),
            click_to_open_rate=round_rate(percentage(email_clicks.total, sends.opened)),
        )

    async def get_click_analytics(
        self, window_days: int = 7, now: datetime | None = None
    ) -> ClickAnalytics:
        """Full click report for the trailing window.

        Args:
            window_days: Size of the trailing window in days.
            now: End of the window (defaults to the current time).

        Returns:
            Top clicked content, per-category, per-source-type and per-day click
            counts, totals, and email funnel stats.
        """
        now = now or utcnow()
        since = window_start(window_days, now)

        top = await self.clicks.top_clicked_content(since, self.top_clicked_limit)
        by_category = await self.clicks.clicks_by_category(since)
        by_source = await self.clicks.clicks_by_source_type(since)
        total_clicks = await self.clicks.count_since(since)
        unique_users = await self.clicks.count_unique_subscribers_since(since)
        daily = await self.clicks.daily_counts(since)
        email_stats = await self.get_email_stats(since)

        log.debug(
            "click_analytics_computed",
            window_days=window_days,
            total_clicks=total_clicks,
            unique_users=unique_users,
        )

        return ClickAnalytics(
            top_clicked=[
                ClickedContent(
                    content_id=row.content_id,
                    title=row.title,
                    link=row.link,
                    source_type=row.source_type or UNKNOWN_SOURCE_TYPE,
                    category_name=row.category_name or UNCATEGORIZED,
                    click_count=row.click_count,
                )
                for row in top
            ],
            clicks_by_category=[
                CategoryClicks(
                    category_name=row.category_name or UNCATEGORIZED, click_count=row.click_count
                )
                for row in by_category
            ],
            clicks_by_source=[
                SourceTypeClicks(
                    source_type=row.source_type or UNKNOWN_SOURCE_TYPE,
                    click_count=row.click_count,
                )
                for row in by_source
            ],
            total_clicks=total_clicks,
            unique_users=unique_users,
            clicks_over_time=[
                DailyClicks(date=row.day.date().isoformat(), click_count=row.click_count)
                for row in daily
            ],
            email_stats=email_stats,
            time_range=window_days,
        )
