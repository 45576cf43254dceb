# ABOUTME: Tests for the content intelligence report.
# ABOUTME: Covers source reliability lookup, category fallbacks, and freshness rounding.

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from newsletter_analytics.services.content import (
    CATEGORY_GROWTH_NOT_IMPLEMENTED,
    ContentIntelligenceService,
)
from newsletter_analytics.services.sources import SourceReliabilityService


@pytest.fixture
def reliability() -> AsyncMock:
    """Create a mock SourceReliabilityService."""
    service = AsyncMock(spec=SourceReliabilityService)
    service.calculate_source_reliability = AsyncMock(return_value=55)
    return service


@pytest.fixture
def service(content_repo, reliability) -> ContentIntelligenceService:
    """Create a ContentIntelligenceService with mocked dependencies."""
    return ContentIntelligenceService(content_repo, reliability, top_sources_limit=3)


class TestContentIntelligence:
    """Tests for ContentIntelligenceService.get_content_intelligence."""

    async def test_empty_window(self, service, now) -> None:
        """Nothing sent yields empty lists and zero freshness."""
        report = await service.get_content_intelligence(30, now=now)

        assert report.top_sources == []
        assert report.category_trends == []
        assert report.content_freshness == 0
        assert report.time_range == 30

    async def test_top_sources_with_reliability(
        self, service, content_repo, reliability, now
    ) -> None:
        """Each top source carries its reliability score."""
        content_repo.top_sources_by_clicks.return_value = [
            SimpleNamespace(source_id=1, source_name="Wire", clicks=12, articles=4),
            SimpleNamespace(source_id=None, source_name=None, clicks=2, articles=1),
        ]

        report = await service.get_content_intelligence(30, now=now)

        assert [s.name for s in report.top_sources] == ["Wire", "Unknown"]
        assert report.top_sources[0].reliability == 55
        assert report.top_sources[1].reliability == 0
        reliability.calculate_source_reliability.assert_awaited_once_with(1)

    async def test_top_sources_limit(self, service, content_repo, now) -> None:
        """The configured limit is passed to the store."""
        await service.get_content_intelligence(30, now=now)

        assert content_repo.top_sources_by_clicks.await_args.args[1] == 3

    async def test_category_growth_placeholder(self, service, content_repo, now) -> None:
        """Categories fall back to Uncategorized and growth is the fixed placeholder."""
        content_repo.category_clicks.return_value = [
            SimpleNamespace(category_name="Policy", clicks=9),
            SimpleNamespace(category_name=None, clicks=1),
        ]

        report = await service.get_content_intelligence(30, now=now)

        assert [c.category for c in report.category_trends] == ["Policy", "Uncategorized"]
        assert {c.growth for c in report.category_trends} == {CATEGORY_GROWTH_NOT_IMPLEMENTED}

    async def test_freshness_rounds_half_up(self, service, content_repo, now) -> None:
        """Average age in days is rounded to the nearest whole day."""
        content_repo.average_age_at_send_days.return_value = 2.5

        report = await service.get_content_intelligence(30, now=now)

        assert report.content_freshness == 3

    async def test_camel_case_payload(self, service, now) -> None:
        """Serialized keys match the dashboard contract."""
        payload = (await service.get_content_intelligence(30, now=now)).model_dump(by_alias=True)

        assert set(payload) == {"topSources", "categoryTrends", "contentFreshness", "timeRange"}
