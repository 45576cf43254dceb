# ABOUTME: Tests for the comprehensive analytics overview.
# ABOUTME: Checks percentage bases, category fallbacks, and newsletter averaging.

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from newsletter_analytics.models import NewsletterPerformance
from newsletter_analytics.services.newsletters import NewsletterComparisonService
from newsletter_analytics.services.overview import OverviewService


def _performance(days_ago: int, now, open_rate: float, click_rate: float):
    return NewsletterPerformance(
        id=days_ago,
        subject=f"Issue {days_ago}",
        sent_at=now - timedelta(days=days_ago),
        recipients=10,
        open_rate=open_rate,
        click_rate=click_rate,
        engagement_score=0,
    )


@pytest.fixture
def newsletters() -> AsyncMock:
    """Create a mock NewsletterComparisonService."""
    service = AsyncMock(spec=NewsletterComparisonService)
    service.get_newsletter_comparison = AsyncMock(return_value=[])
    return service


@pytest.fixture
def service(
    subscriber_repo, send_repo, click_repo, content_repo, draft_repo, newsletters
) -> OverviewService:
    """Create an OverviewService with mocked dependencies."""
    return OverviewService(
        subscriber_repo, send_repo, click_repo, content_repo, draft_repo, newsletters
    )


class TestComprehensiveOverview:
    """Tests for OverviewService.get_comprehensive_overview."""

    async def test_empty_store(self, service, now) -> None:
        """An empty store yields zeros everywhere."""
        overview = await service.get_comprehensive_overview(30, now=now)

        assert overview.user_engagement.total_subscribers == 0
        assert overview.user_engagement.open_percentage == 0
        assert overview.article_engagement.avg_clicks_per_article == 0
        assert overview.category_performance == []
        assert overview.newsletter_metrics.avg_open_rate == 0

    async def test_user_percentages(
        self, service, subscriber_repo, send_repo, click_repo, now
    ) -> None:
        """Openers and clickers are shares of active subscribers."""
        subscriber_repo.count_active.return_value = 200
        send_repo.count_distinct_openers.return_value = 50
        click_repo.count_unique_clickers.return_value = 20

        overview = await service.get_comprehensive_overview(30, now=now)

        assert overview.user_engagement.open_percentage == 25.0
        assert overview.user_engagement.click_percentage == 10.0

    async def test_article_engagement(self, service, content_repo, click_repo, now) -> None:
        """Clicked share and clicks per article use articles sent in the window."""
        content_repo.count_sent_since.return_value = 8
        click_repo.count_unique_content_clicked.return_value = 2
        click_repo.count_for_sends_since.return_value = 12

        articles = (await service.get_comprehensive_overview(30, now=now)).article_engagement

        assert articles.clicked_percentage == 25.0
        assert articles.avg_clicks_per_article == 1.5

    async def test_category_performance(self, service, content_repo, now) -> None:
        """Null categories are Uncategorized; click rate is clicked over sent."""
        content_repo.category_performance.return_value = [
            SimpleNamespace(
                category_id=None,
                category_name=None,
                articles_sent=4,
                total_clicks=3,
                unique_articles_clicked=1,
            )
        ]

        [category] = (await service.get_comprehensive_overview(30, now=now)).category_performance

        assert category.category == "Uncategorized"
        assert category.click_rate == 25.0

    async def test_newsletter_average_only_counts_window(
        self, service, newsletters, draft_repo, now
    ) -> None:
        """Issues sent before the window are excluded from the averages."""
        draft_repo.count_sent_since.return_value = 2
        newsletters.get_newsletter_comparison.return_value = [
            _performance(1, now, 40.0, 10.0),
            _performance(5, now, 20.0, 5.0),
            _performance(60, now, 90.0, 90.0),
        ]

        metrics = (await service.get_comprehensive_overview(30, now=now)).newsletter_metrics

        assert metrics.total_newsletters_sent == 2
        assert metrics.avg_open_rate == 30.0
        assert metrics.avg_click_rate == 7.5
        newsletters.get_newsletter_comparison.assert_awaited_once_with(100)

    async def test_subquery_failure_fails_overview(self, service, newsletters, now) -> None:
        """A failing newsletter comparison fails the whole overview."""
        newsletters.get_newsletter_comparison.side_effect = OperationalError(
            "SELECT", {}, Exception("db down")
        )

        with pytest.raises(OperationalError):
            await service.get_comprehensive_overview(30, now=now)
