# ABOUTME: Content intelligence report: top sources, category click trends, freshness.
# ABOUTME: Only content with a send time inside the window is considered.

from datetime import datetime

import structlog

from newsletter_analytics.db.repository import ContentRepository
from newsletter_analytics.models import CategoryTrend, ContentIntelligence, TopSource
from newsletter_analytics.scoring import round_half_up
from newsletter_analytics.services.sources import SourceReliabilityService
from newsletter_analytics.utils.windows import window_start

log = structlog.get_logger()

UNKNOWN_SOURCE = "Unknown"
UNCATEGORIZED = "Uncategorized"

# Period-over-period category growth is not computed yet; consumers get a fixed 0.
CATEGORY_GROWTH_NOT_IMPLEMENTED = 0


class ContentIntelligenceService:
    """Reports which sources and categories drive clicks and how fresh sent content is."""

    def __init__(
        self,
        content: ContentRepository,
        reliability: SourceReliabilityService,
        top_sources_limit: int = 10,
    ) -> None:
        self.content = content
        self.reliability = reliability
        self.top_sources_limit = top_sources_limit

    async def get_content_intelligence(
        self, window_days: int = 30, now: datetime | None = None
    ) -> ContentIntelligence:
        """Build the content intelligence report for the trailing window.

        Args:
            window_days: Size of the trailing window in days.
            now: End of the window (defaults to the current time).

        Returns:
            Top sources by clicks with reliability, per-category clicks ordered by
            clicks descending, and the average publish-to-send age in whole days
            (0 when nothing was sent).
        """
        since = window_start(window_days, now)

        source_rows = await self.content.top_sources_by_clicks(since, self.top_sources_limit)
        top_sources = []
        for row in source_rows:
            reliability = (
                await self.reliability.calculate_source_reliability(row.source_id)
                if row.source_id
                else 0
            )
            top_sources.append(
                TopSource(
                    name=row.source_name or UNKNOWN_SOURCE,
                    clicks=row.clicks,
                    articles=int(row.articles),
                    reliability=reliability,
                )
            )

        category_rows = await self.content.category_clicks(since)
        category_trends = [
            CategoryTrend(
                category=row.category_name or UNCATEGORIZED,
                clicks=row.clicks,
                growth=CATEGORY_GROWTH_NOT_IMPLEMENTED,
            )
            for row in category_rows
        ]

        avg_age = await self.content.average_age_at_send_days(since)
        freshness = round_half_up(float(avg_age or 0))

        log.debug(
            "content_intelligence_computed",
            window_days=window_days,
            sources=len(top_sources),
            categories=len(category_trends),
        )
        return ContentIntelligence(
            top_sources=top_sources,
            category_trends=category_trends,
            content_freshness=freshness,
            time_range=window_days,
        )
