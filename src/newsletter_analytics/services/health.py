# ABOUTME: System-wide newsletter health score and deliverability breakdowns.
# ABOUTME: Combines delivery, open, click-through, and bounce rates over a trailing window.

from datetime import datetime

import structlog

from newsletter_analytics.db.repository import ClickRepository, NewsletterSendRepository
from newsletter_analytics.models import (
    BounceReason,
    DailyHealth,
    DeviceCount,
    EmailClientCount,
    HealthDetails,
    HealthScore,
)
from newsletter_analytics.scoring import health_score, percentage, round_rate
from newsletter_analytics.utils.windows import daily_buckets, utcnow, window_start

log = structlog.get_logger()

UNKNOWN = "unknown"
TREND_MAX_DAYS = 30


def _score_from(stats, unique_clickers: int) -> HealthScore:
    delivery_rate = percentage(stats.delivered, stats.total)
    open_rate = percentage(stats.opened, stats.delivered)
    click_through_rate = percentage(unique_clickers, stats.delivered)
    bounce_rate = percentage(stats.bounced, stats.total)

    return HealthScore(
        score=health_score(delivery_rate, open_rate, click_through_rate, bounce_rate),
        delivery_rate=round_rate(delivery_rate),
        open_rate=round_rate(open_rate),
        click_through_rate=round_rate(click_through_rate),
        bounce_rate=round_rate(bounce_rate),
    )


class HealthService:
    """Computes the composite health score from send and click facts."""

    def __init__(self, sends: NewsletterSendRepository, clicks: ClickRepository) -> None:
        self.sends = sends
        self.clicks = clicks

    async def calculate_health_score(
        self, window_days: int = 30, now: datetime | None = None
    ) -> HealthScore:
        """Compute health over the trailing window.

        Click-through counts distinct subscribers who clicked, not click events.
        With no sends in the window every field is 0.

        Args:
            window_days: Size of the trailing window in days.
            now: End of the window (defaults to the current time).

        Returns:
            Integer composite score with component rates rounded to 2 dp.
        """
        since = window_start(window_days, now)

        stats = await self.sends.delivery_stats(since)
        if stats.total == 0:
            return HealthScore()

        unique_clickers = await self.clicks.count_unique_clickers(since)
        health = _score_from(stats, unique_clickers)
        log.debug(
            "health_score_computed", window_days=window_days, score=health.score, sends=stats.total
        )
        return health

    async def get_daily_trend(
        self, window_days: int = 30, now: datetime | None = None
    ) -> list[DailyHealth]:
        """Health score of each day bucket, oldest first.

        Covers the last ``min(window_days, 30)`` days. A day without sends scores 0.
        """
        trend = []
        for start, end in daily_buckets(min(window_days, TREND_MAX_DAYS), now):
            stats = await self.sends.delivery_stats_between(start, end)
            score = 0
            if stats.total:
                unique_clickers = await self.clicks.count_unique_clickers_between(start, end)
                score = _score_from(stats, unique_clickers).score
            trend.append(DailyHealth(date=start.date().isoformat(), score=score))
        return trend

    async def get_health_details(
        self, window_days: int = 30, now: datetime | None = None
    ) -> HealthDetails:
        """Health score plus spam complaints, bounce reasons, open breakdowns, and trend."""
        now = now or utcnow()
        health = await self.calculate_health_score(window_days, now)
        since = window_start(window_days, now)

        spam_complaints = await self.sends.count_spam_complaints(since)
        bounces = await self.sends.bounces_by_status(since)
        devices = await self.sends.opened_by_device(since)
        clients = await self.sends.opened_by_email_client(since)
        trend = await self.get_daily_trend(window_days, now)

        return HealthDetails(
            **health.model_dump(),
            spam_complaints=spam_complaints,
            bounces_by_reason=[BounceReason(reason=row.status, count=row.total) for row in bounces],
            device_breakdown=[
                DeviceCount(device=row.device_type or UNKNOWN, count=row.total) for row in devices
            ],
            email_client_breakdown=[
                EmailClientCount(client=row.email_client or UNKNOWN, count=row.total)
                for row in clients
            ],
            daily_trend=trend,
            time_range=window_days,
        )
