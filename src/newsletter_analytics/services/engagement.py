# ABOUTME: Per-subscriber engagement scoring and the risk tier recomputation batch.
# ABOUTME: Scores come from opens and clicks in a trailing window and overwrite stored fields.

from collections import Counter
from datetime import datetime

import structlog

from newsletter_analytics.db.repository import (
    ClickRepository,
    NewsletterSendRepository,
    SubscriberRepository,
)
from newsletter_analytics.models import EngagementResult, RiskUpdateResult
from newsletter_analytics.scoring import classify_risk, engagement_score
from newsletter_analytics.utils.windows import utcnow, window_start

log = structlog.get_logger()

ENGAGEMENT_WINDOW_DAYS = 30


class EngagementService:
    """Computes engagement scores and maintains stored risk tiers."""

    def __init__(
        self,
        subscribers: SubscriberRepository,
        sends: NewsletterSendRepository,
        clicks: ClickRepository,
        window_days: int = ENGAGEMENT_WINDOW_DAYS,
    ) -> None:
        self.subscribers = subscribers
        self.sends = sends
        self.clicks = clicks
        self.window_days = window_days

    async def calculate_engagement_score(
        self, subscriber_id: int, now: datetime | None = None
    ) -> int:
        """Score a subscriber's activity over the trailing window.

        An unknown subscriber simply has no activity and scores 0.

        Args:
            subscriber_id: Subscriber to score.
            now: End of the window (defaults to the current time).

        Returns:
            Integer score in [0, 100].
        """
        since = window_start(self.window_days, now)

        opens = await self.sends.count_opened_for_subscriber(subscriber_id, since)
        total_clicks = await self.clicks.count_for_subscriber(subscriber_id, since)
        unique_clicks = await self.clicks.count_distinct_content_for_subscriber(
            subscriber_id, since
        )

        return engagement_score(opens, total_clicks, unique_clicks)

    async def get_engagement(self, subscriber_id: int) -> EngagementResult:
        """Live score and tier for one subscriber, without persisting anything."""
        score = await self.calculate_engagement_score(subscriber_id)
        return EngagementResult(
            subscriber_id=subscriber_id,
            score=score,
            risk_level=classify_risk(score).value,
        )

    async def update_risk_levels(self, now: datetime | None = None) -> RiskUpdateResult:
        """Recompute and overwrite score and risk tier for every active subscriber.

        Each subscriber is committed on its own: a failure part-way leaves earlier
        subscribers updated and later ones stale. Rerunning is safe because every
        write is a full replace computed from facts.
        """
        now = now or utcnow()
        subscriber_ids = await self.subscribers.list_active_ids()
        log.info("risk_update_start", subscribers=len(subscriber_ids))

        distribution: Counter[str] = Counter()
        for subscriber_id in subscriber_ids:
            score = await self.calculate_engagement_score(subscriber_id, now=now)
            risk_level = classify_risk(score)

            await self.subscribers.update_engagement(subscriber_id, score, risk_level, now)
            await self.subscribers.commit()

            distribution[risk_level.value] += 1
            log.debug(
                "risk_level_updated",
                subscriber_id=subscriber_id,
                score=score,
                risk_level=risk_level.value,
            )

        log.info("risk_update_complete", processed=len(subscriber_ids), **distribution)
        return RiskUpdateResult(processed=len(subscriber_ids), distribution=dict(distribution))
