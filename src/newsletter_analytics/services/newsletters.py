# ABOUTME: Per-newsletter performance comparison across recent sent issues.
# ABOUTME: Click rate is click events per recipient, unlike the health score's unique CTR.

import structlog

from newsletter_analytics.db.repository import (
    ClickRepository,
    NewsletterDraftRepository,
    NewsletterSendRepository,
)
from newsletter_analytics.models import NewsletterPerformance, NewsletterSummary
from newsletter_analytics.scoring import (
    mean,
    newsletter_engagement_score,
    percentage,
    round_rate,
)

log = structlog.get_logger()


class NewsletterComparisonService:
    """Compares open and click performance of recently sent newsletters."""

    def __init__(
        self,
        drafts: NewsletterDraftRepository,
        sends: NewsletterSendRepository,
        clicks: ClickRepository,
    ) -> None:
        self.drafts = drafts
        self.sends = sends
        self.clicks = clicks

    async def get_newsletter_comparison(self, limit: int = 10) -> list[NewsletterPerformance]:
        """Rates for up to ``limit`` most recently sent newsletters, newest first.

        A newsletter without recipients reports 0 for both rates.
        """
        if limit <= 0:
            raise ValueError(f"Limit must be positive, got {limit}")

        newsletters = await self.drafts.list_recent_sent(limit)

        results = []
        for newsletter in newsletters:
            recipients = await self.sends.count_for_draft(newsletter.id)
            opens = await self.sends.count_opened_for_draft(newsletter.id)
            clicks = await self.clicks.count_for_draft(newsletter.id)

            open_rate = percentage(opens, recipients)
            click_rate = percentage(clicks, recipients)

            results.append(
                NewsletterPerformance(
                    id=newsletter.id,
                    subject=newsletter.subject,
                    sent_at=newsletter.sent_at,
                    recipients=recipients,
                    open_rate=round_rate(open_rate),
                    click_rate=round_rate(click_rate),
                    engagement_score=newsletter_engagement_score(open_rate, click_rate),
                )
            )

        log.debug("newsletter_comparison_computed", newsletters=len(results))
        return results

    async def get_newsletter_summary(self, limit: int = 10) -> NewsletterSummary:
        """Comparison list with the best performer and unweighted average rates."""
        newsletters = await self.get_newsletter_comparison(limit)

        best = None
        for newsletter in newsletters:
            if best is None or newsletter.engagement_score > best.engagement_score:
                best = newsletter

        return NewsletterSummary(
            newsletters=newsletters,
            best_performer=best,
            avg_open_rate=round_rate(mean(n.open_rate for n in newsletters)),
            avg_click_rate=round_rate(mean(n.click_rate for n in newsletters)),
        )
