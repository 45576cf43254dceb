# ABOUTME: Pytest fixtures and configuration for newsletter analytics tests.
# ABOUTME: Provides mock settings, mocked repositories, and a fixed clock.

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from newsletter_analytics.config import Settings


def row(**fields) -> SimpleNamespace:
    """Stand-in for a SQLAlchemy result Row with named columns."""
    return SimpleNamespace(**fields)


@pytest.fixture
def mock_settings() -> Settings:
    """Create mock settings for testing."""
    return Settings(
        db_host="db.test",
        db_port=5433,
        db_name="analytics_test",
        db_user="tester",
        db_password=SecretStr("test-password"),
        log_level="DEBUG",
        top_sources_limit=5,
        top_cities_limit=3,
        subscriber_list_limit=4,
    )


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant for window calculations."""
    return datetime(2026, 10, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def subscriber_repo() -> AsyncMock:
    """Create a mock SubscriberRepository."""
    repo = AsyncMock()
    repo.list_active_ids = AsyncMock(return_value=[])
    repo.count_active = AsyncMock(return_value=0)
    repo.count_created_between = AsyncMock(return_value=0)
    repo.count_unsubscribed_between = AsyncMock(return_value=0)
    repo.count_unsubscribed_since = AsyncMock(return_value=0)
    repo.average_engagement_score = AsyncMock(return_value=None)
    repo.engagement_distribution = AsyncMock(return_value=[])
    repo.risk_distribution = AsyncMock(return_value=[])
    repo.monthly_cohorts = AsyncMock(return_value=[])
    repo.list_top_engaged = AsyncMock(return_value=[])
    repo.list_at_risk = AsyncMock(return_value=[])
    repo.country_counts = AsyncMock(return_value=[])
    repo.top_cities = AsyncMock(return_value=[])
    repo.audience_counts = AsyncMock(return_value=[])
    repo.company_size_counts = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def send_repo() -> AsyncMock:
    """Create a mock NewsletterSendRepository."""
    repo = AsyncMock()
    repo.count_opened_for_subscriber = AsyncMock(return_value=0)
    repo.delivery_stats = AsyncMock(
        return_value=row(total=0, delivered=0, bounced=0, opened=0)
    )
    repo.delivery_stats_between = AsyncMock(
        return_value=row(total=0, delivered=0, bounced=0, opened=0)
    )
    repo.count_distinct_openers = AsyncMock(return_value=0)
    repo.count_for_draft = AsyncMock(return_value=0)
    repo.count_opened_for_draft = AsyncMock(return_value=0)
    repo.country_stats = AsyncMock(return_value=row(total=0, opened=0))
    repo.count_unique_clickers_for_country = AsyncMock(return_value=0)
    repo.count_spam_complaints = AsyncMock(return_value=0)
    repo.bounces_by_status = AsyncMock(return_value=[])
    repo.opened_by_device = AsyncMock(return_value=[])
    repo.opened_by_email_client = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def click_repo() -> AsyncMock:
    """Create a mock ClickRepository."""
    repo = AsyncMock()
    repo.count_for_subscriber = AsyncMock(return_value=0)
    repo.count_distinct_content_for_subscriber = AsyncMock(return_value=0)
    repo.count_unique_clickers = AsyncMock(return_value=0)
    repo.count_unique_clickers_between = AsyncMock(return_value=0)
    repo.count_unique_content_clicked = AsyncMock(return_value=0)
    repo.count_for_sends_since = AsyncMock(return_value=0)
    repo.count_for_draft = AsyncMock(return_value=0)
    repo.top_clicked_content = AsyncMock(return_value=[])
    repo.clicks_by_category = AsyncMock(return_value=[])
    repo.clicks_by_source_type = AsyncMock(return_value=[])
    repo.count_since = AsyncMock(return_value=0)
    repo.count_unique_subscribers_since = AsyncMock(return_value=0)
    repo.daily_counts = AsyncMock(return_value=[])
    repo.email_click_stats = AsyncMock(return_value=row(total=0, unique_clickers=0))
    return repo


@pytest.fixture
def content_repo() -> AsyncMock:
    """Create a mock ContentRepository."""
    repo = AsyncMock()
    repo.count_for_source = AsyncMock(return_value=0)
    repo.average_clicks_per_item = AsyncMock(return_value=None)
    repo.top_sources_by_clicks = AsyncMock(return_value=[])
    repo.category_clicks = AsyncMock(return_value=[])
    repo.category_performance = AsyncMock(return_value=[])
    repo.count_sent_since = AsyncMock(return_value=0)
    repo.average_age_at_send_days = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def draft_repo() -> AsyncMock:
    """Create a mock NewsletterDraftRepository."""
    repo = AsyncMock()
    repo.list_recent_sent = AsyncMock(return_value=[])
    repo.count_sent_since = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def event_repo() -> AsyncMock:
    """Create a mock SubscriberEventRepository that echoes appended events."""
    repo = AsyncMock()
    next_id = iter(range(1, 1000))

    async def append(event):
        event.id = next(next_id)
        return event

    repo.append = AsyncMock(side_effect=append)
    return repo


@pytest.fixture
def mock_session() -> AsyncMock:
    """Create a mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    return session
