# ABOUTME: Subscriber growth time series and subscriber dashboard summary.
# ABOUTME: Growth buckets are zero-filled so charts always get a contiguous series.

from datetime import datetime

import structlog

from newsletter_analytics.db.models import RiskLevel, Subscriber
from newsletter_analytics.db.repository import SubscriberRepository
from newsletter_analytics.models import (
    CohortPoint,
    EngagementBucket,
    GrowthPoint,
    RiskBucket,
    SubscriberSnapshot,
    SubscriberSummary,
)
from newsletter_analytics.scoring import percentage, round_half_up, round_rate
from newsletter_analytics.utils.windows import daily_buckets, utcnow, window_start

log = structlog.get_logger()


def _snapshot(subscriber: Subscriber) -> SubscriberSnapshot:
    return SubscriberSnapshot(
        email=subscriber.email,
        engagement_score=subscriber.engagement_score,
        risk_level=subscriber.risk_level,
        last_engaged_at=subscriber.last_engaged_at,
        created_at=subscriber.created_at,
    )


class SubscriberAnalyticsService:
    """Reports subscriber growth, churn, and stored engagement distribution."""

    def __init__(self, subscribers: SubscriberRepository, list_limit: int = 20) -> None:
        self.subscribers = subscribers
        self.list_limit = list_limit

    async def get_subscriber_growth(
        self, days: int = 30, now: datetime | None = None
    ) -> list[GrowthPoint]:
        """Daily signups, unsubscribes, and net growth, oldest first.

        Always returns exactly ``days`` entries. Unsubscribes are inactive
        subscribers whose row was last updated inside the bucket, which also
        counts unrelated updates to already-inactive rows.
        """
        growth = []
        for start, end in daily_buckets(days, now):
            new_count = await self.subscribers.count_created_between(start, end)
            unsub_count = await self.subscribers.count_unsubscribed_between(start, end)
            growth.append(
                GrowthPoint(
                    date=start.date().isoformat(),
                    new_subscribers=new_count,
                    unsubscribed=unsub_count,
                    net_growth=new_count - unsub_count,
                )
            )
        return growth

    async def get_subscriber_summary(
        self, window_days: int = 30, now: datetime | None = None
    ) -> SubscriberSummary:
        """Growth series with churn, stored engagement, and monthly signup cohorts."""
        now = now or utcnow()
        since = window_start(window_days, now)

        growth = await self.get_subscriber_growth(window_days, now)
        total_active = await self.subscribers.count_active()
        churned = await self.subscribers.count_unsubscribed_since(since)
        avg_engagement = await self.subscribers.average_engagement_score()
        distribution = await self.subscribers.engagement_distribution()
        risk_rows = await self.subscribers.risk_distribution()
        cohorts = await self.subscribers.monthly_cohorts(since)
        top_engaged = await self.subscribers.list_top_engaged(self.list_limit)
        at_risk = await self.subscribers.list_at_risk(self.list_limit)

        # Base approximates the population at window start
        churn_rate = percentage(churned, total_active + churned)

        return SubscriberSummary(
            growth_data=growth,
            total_subscribers=total_active,
            churn_rate=round_rate(churn_rate),
            avg_engagement_score=round_half_up(float(avg_engagement or 0)),
            engagement_distribution=[
                EngagementBucket(score=row.score, count=row.subscriber_count)
                for row in distribution
            ],
            risk_distribution=[
                RiskBucket(risk_level=row.risk_level or RiskLevel.ACTIVE.value, count=row.total)
                for row in risk_rows
            ],
            cohort_data=[
                CohortPoint(
                    month=row.month,
                    count=row.subscriber_count,
                    avg_engagement=round_half_up(float(row.avg_engagement or 0)),
                )
                for row in cohorts
            ],
            top_engaged=[_snapshot(s) for s in top_engaged],
            at_risk=[_snapshot(s) for s in at_risk],
            time_range=window_days,
        )
