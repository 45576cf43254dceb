# ABOUTME: Content source reliability scoring.
# ABOUTME: Blends curation acceptance rate with average clicks per accepted article.

import structlog

from newsletter_analytics.db.models import ContentStatus
from newsletter_analytics.db.repository import ContentRepository
from newsletter_analytics.models import SourceReliability
from newsletter_analytics.scoring import percentage, source_reliability_score

log = structlog.get_logger()


class SourceReliabilityService:
    """Scores sources on demand; nothing is stored between calls."""

    def __init__(self, content: ContentRepository) -> None:
        self.content = content

    async def calculate_source_reliability(self, source_id: int) -> int:
        """Score a source from 0 to 100.

        A source with no articles scores 0 without running the click join.
        """
        total = await self.content.count_for_source(source_id)
        if total == 0:
            return 0

        accepted = await self.content.count_for_source(source_id, ContentStatus.ACCEPTED)
        acceptance_rate = percentage(accepted, total)

        avg_engagement = await self.content.average_clicks_per_item(source_id)
        score = source_reliability_score(acceptance_rate, float(avg_engagement or 0))

        log.debug(
            "source_reliability_computed",
            source_id=source_id,
            articles=total,
            accepted=accepted,
            score=score,
        )
        return score

    async def get_source_reliability(self, source_id: int) -> SourceReliability:
        return SourceReliability(
            source_id=source_id,
            reliability=await self.calculate_source_reliability(source_id),
        )
