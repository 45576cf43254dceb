# ABOUTME: Location and audience rollups: countries, cities, segments, company sizes.
# ABOUTME: Null profile values are excluded; shares are relative to all active subscribers.

from datetime import datetime

import structlog

from newsletter_analytics.db.repository import NewsletterSendRepository, SubscriberRepository
from newsletter_analytics.models import (
    AudienceSegment,
    CityStats,
    CompanySizeBucket,
    CountryStats,
    LocationAudienceAnalytics,
)
from newsletter_analytics.scoring import percentage, round_half_up, round_rate
from newsletter_analytics.utils.windows import window_start

log = structlog.get_logger()


class AudienceService:
    """Breaks the active subscriber base down by geography and profile."""

    def __init__(
        self,
        subscribers: SubscriberRepository,
        sends: NewsletterSendRepository,
        top_cities_limit: int = 20,
    ) -> None:
        self.subscribers = subscribers
        self.sends = sends
        self.top_cities_limit = top_cities_limit

    async def get_location_audience_analytics(
        self, window_days: int = 30, now: datetime | None = None
    ) -> LocationAudienceAnalytics:
        """Build the four breakdowns.

        Country open/click rates use sends in the window; click rate is unique
        clickers over total sends to that country. Segment and company-size
        percentages are population shares of all active subscribers.
        """
        since = window_start(window_days, now)

        countries = await self._geographic_distribution(since)
        cities = await self._top_cities()

        total_active = await self.subscribers.count_active()
        segments = await self._audience_segments(total_active)
        company_sizes = await self._company_sizes(total_active)

        log.debug(
            "location_audience_computed",
            countries=len(countries),
            cities=len(cities),
            segments=len(segments),
        )
        return LocationAudienceAnalytics(
            geographic_distribution=countries,
            top_cities=cities,
            audience_segments=segments,
            company_size_breakdown=company_sizes,
        )

    async def _geographic_distribution(self, since: datetime) -> list[CountryStats]:
        rows = await self.subscribers.country_counts()

        countries = []
        for row in rows:
            if row.country is None:
                continue
            stats = await self.sends.country_stats(row.country, since)
            clickers = await self.sends.count_unique_clickers_for_country(row.country, since)
            countries.append(
                CountryStats(
                    country=row.country,
                    country_name=row.country_name,
                    subscriber_count=row.subscriber_count,
                    open_rate=round_rate(percentage(stats.opened, stats.total)),
                    click_rate=round_rate(percentage(clickers, stats.total)),
                )
            )
        return countries

    async def _top_cities(self) -> list[CityStats]:
        rows = await self.subscribers.top_cities(self.top_cities_limit)
        return [
            CityStats(
                city=row.city,
                country=row.country,
                subscriber_count=row.subscriber_count,
                engagement_score=round_half_up(float(row.avg_engagement or 0)),
            )
            for row in rows
            if row.city is not None
        ]

    async def _audience_segments(self, total_active: int) -> list[AudienceSegment]:
        rows = await self.subscribers.audience_counts()
        return [
            AudienceSegment(
                audience=row.audience,
                count=row.subscriber_count,
                percentage=round_rate(percentage(row.subscriber_count, total_active)),
                avg_engagement_score=round_half_up(float(row.avg_engagement or 0)),
            )
            for row in rows
            if row.audience is not None
        ]

    async def _company_sizes(self, total_active: int) -> list[CompanySizeBucket]:
        rows = await self.subscribers.company_size_counts()
        return [
            CompanySizeBucket(
                company_size=row.company_size,
                count=row.subscriber_count,
                percentage=round_rate(percentage(row.subscriber_count, total_active)),
            )
            for row in rows
            if row.company_size is not None
        ]
