# ABOUTME: Tests for engagement scoring and the risk level batch.
# ABOUTME: Uses mocked repositories to check window queries, writes, and commits.

from datetime import timedelta
from unittest.mock import call

import pytest
from sqlalchemy.exc import OperationalError

from newsletter_analytics.db.models import RiskLevel
from newsletter_analytics.services.engagement import EngagementService


def _db_down() -> OperationalError:
    return OperationalError("SELECT", {}, Exception("db down"))


@pytest.fixture
def service(subscriber_repo, send_repo, click_repo) -> EngagementService:
    """Create an EngagementService with mocked repositories."""
    return EngagementService(subscriber_repo, send_repo, click_repo)


class TestCalculateEngagementScore:
    """Tests for EngagementService.calculate_engagement_score."""

    async def test_distinct_and_repeat_clicks(self, service, click_repo, now) -> None:
        """Four clicks over two articles score 2*3 + 2*5."""
        click_repo.count_for_subscriber.return_value = 4
        click_repo.count_distinct_content_for_subscriber.return_value = 2

        score = await service.calculate_engagement_score(7, now=now)

        assert score == 16

    async def test_queries_use_trailing_window(
        self, service, send_repo, click_repo, now
    ) -> None:
        """All facts are scoped to the 30 days before now."""
        await service.calculate_engagement_score(7, now=now)

        since = now - timedelta(days=30)
        send_repo.count_opened_for_subscriber.assert_awaited_once_with(7, since)
        click_repo.count_for_subscriber.assert_awaited_once_with(7, since)
        click_repo.count_distinct_content_for_subscriber.assert_awaited_once_with(7, since)

    async def test_unknown_subscriber_scores_zero(self, service, now) -> None:
        """A subscriber without facts has score 0."""
        assert await service.calculate_engagement_score(999, now=now) == 0

    async def test_store_failure_propagates(self, service, send_repo, now) -> None:
        """Query failures are not turned into a zero score."""
        send_repo.count_opened_for_subscriber.side_effect = _db_down()

        with pytest.raises(OperationalError):
            await service.calculate_engagement_score(7, now=now)

    async def test_custom_window(self, subscriber_repo, send_repo, click_repo, now) -> None:
        """The engagement window is configurable."""
        service = EngagementService(subscriber_repo, send_repo, click_repo, window_days=7)

        await service.calculate_engagement_score(1, now=now)

        send_repo.count_opened_for_subscriber.assert_awaited_once_with(
            1, now - timedelta(days=7)
        )


class TestGetEngagement:
    """Tests for EngagementService.get_engagement."""

    async def test_returns_score_and_tier(self, service, send_repo, subscriber_repo) -> None:
        """Live lookups classify without persisting."""
        send_repo.count_opened_for_subscriber.return_value = 5

        result = await service.get_engagement(3)

        assert result.subscriber_id == 3
        assert result.score == 5
        assert result.risk_level == "churned"
        subscriber_repo.update_engagement.assert_not_awaited()


class TestUpdateRiskLevels:
    """Tests for EngagementService.update_risk_levels."""

    async def test_updates_every_active_subscriber(
        self, service, subscriber_repo, send_repo, now
    ) -> None:
        """Each active subscriber gets its score and tier written and committed."""
        subscriber_repo.list_active_ids.return_value = [1, 2, 3]
        send_repo.count_opened_for_subscriber.side_effect = [0, 12, 40]

        result = await service.update_risk_levels(now=now)

        assert result.processed == 3
        assert result.distribution == {"dormant": 1, "at_risk": 1, "active": 1}
        subscriber_repo.update_engagement.assert_has_awaits(
            [
                call(1, 0, RiskLevel.DORMANT, now),
                call(2, 12, RiskLevel.AT_RISK, now),
                call(3, 40, RiskLevel.ACTIVE, now),
            ]
        )
        assert subscriber_repo.commit.await_count == 3

    async def test_no_active_subscribers(self, service, subscriber_repo, now) -> None:
        """An empty base processes nothing."""
        result = await service.update_risk_levels(now=now)

        assert result.processed == 0
        assert result.distribution == {}
        subscriber_repo.update_engagement.assert_not_awaited()

    async def test_rerun_writes_same_values(
        self, service, subscriber_repo, send_repo, now
    ) -> None:
        """Running twice over unchanged facts writes identical values."""
        subscriber_repo.list_active_ids.return_value = [1]
        send_repo.count_opened_for_subscriber.return_value = 8

        await service.update_risk_levels(now=now)
        await service.update_risk_levels(now=now)

        first, second = subscriber_repo.update_engagement.await_args_list
        assert first == second

    async def test_failure_keeps_earlier_commits(
        self, service, subscriber_repo, send_repo, now
    ) -> None:
        """A failure part-way leaves already committed subscribers updated."""
        subscriber_repo.list_active_ids.return_value = [1, 2]
        send_repo.count_opened_for_subscriber.side_effect = [3, _db_down()]

        with pytest.raises(OperationalError):
            await service.update_risk_levels(now=now)

        subscriber_repo.update_engagement.assert_awaited_once_with(
            1, 3, RiskLevel.CHURNED, now
        )
        subscriber_repo.commit.assert_awaited_once()
