# ABOUTME: Tests for the analytics API routes.
# ABOUTME: Verifies payload shape, query validation, and error status mapping.

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from newsletter_analytics.config import Settings, get_settings
from newsletter_analytics.db.models import SubscriberEvent
from newsletter_analytics.models import (
    ClickAnalytics,
    EmailClickStats,
    EngagementResult,
    HealthDetails,
    NewsletterSummary,
    RiskUpdateResult,
)


@pytest.fixture
def analytics() -> SimpleNamespace:
    """Create analytics services backed by AsyncMocks."""
    return SimpleNamespace(
        engagement=AsyncMock(),
        health=AsyncMock(),
        sources=AsyncMock(),
        subscribers=AsyncMock(),
        content=AsyncMock(),
        newsletters=AsyncMock(),
        events=AsyncMock(),
        overview=AsyncMock(),
        audience=AsyncMock(),
        clicks=AsyncMock(),
    )


@pytest.fixture
def client(analytics):
    """Create a test client with mocked dependencies."""
    from newsletter_analytics.web.app import create_app
    from newsletter_analytics.web.dependencies import get_analytics

    with (
        patch("newsletter_analytics.web.app.init_db", new_callable=AsyncMock),
        patch("newsletter_analytics.web.app.close_db", new_callable=AsyncMock),
    ):
        app = create_app()

    app.dependency_overrides[get_analytics] = lambda: analytics

    return TestClient(app, raise_server_exceptions=False)


def _db_down() -> OperationalError:
    return OperationalError("SELECT", {}, Exception("db down"))


class TestServiceHealth:
    """Tests for GET /api/health."""

    def test_health_check(self, client) -> None:
        """Liveness check reports healthy."""
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestEmailHealth:
    """Tests for GET /api/analytics/health."""

    def test_returns_camel_case(self, client, analytics) -> None:
        """Payload uses camelCase keys."""
        analytics.health.get_health_details.return_value = HealthDetails(
            score=71, delivery_rate=95.0, time_range=30
        )

        response = client.get("/api/analytics/health")

        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 71
        assert body["deliveryRate"] == 95.0
        assert body["timeRange"] == 30

    def test_time_range_forwarded(self, client, analytics) -> None:
        """The timeRange query parameter selects the window."""
        analytics.health.get_health_details.return_value = HealthDetails(time_range=7)

        client.get("/api/analytics/health?timeRange=7")

        analytics.health.get_health_details.assert_awaited_once_with(7)

    @pytest.mark.parametrize("value", ["0", "366", "abc"])
    def test_invalid_time_range(self, client, value: str) -> None:
        """Out-of-range windows are rejected before any query."""
        response = client.get(f"/api/analytics/health?timeRange={value}")

        assert response.status_code == 422

    def test_store_failure_is_503(self, client, analytics) -> None:
        """Store errors are reported, not replaced by zeros."""
        analytics.health.get_health_details.side_effect = _db_down()

        response = client.get("/api/analytics/health")

        assert response.status_code == 503
        assert response.json() == {"detail": "Failed to fetch health metrics"}

    def test_unexpected_failure_is_500(self, client, analytics) -> None:
        """Other failures are server errors."""
        analytics.health.get_health_details.side_effect = RuntimeError("boom")

        response = client.get("/api/analytics/health")

        assert response.status_code == 500

    def test_max_window_comes_from_settings(self, client, analytics) -> None:
        """The largest accepted window is the configured maximum."""
        analytics.health.get_health_details.return_value = HealthDetails(time_range=1)
        max_days = get_settings().max_window_days

        ok = client.get(f"/api/analytics/health?timeRange={max_days}")
        too_long = client.get(f"/api/analytics/health?timeRange={max_days + 1}")

        assert ok.status_code == 200
        assert too_long.status_code == 422


class TestClickAnalytics:
    """Tests for GET /api/analytics/clicks."""

    def test_defaults_to_one_week(self, client, analytics) -> None:
        """Without timeRange the click report covers 7 days."""
        analytics.clicks.get_click_analytics.return_value = ClickAnalytics(
            top_clicked=[],
            clicks_by_category=[],
            clicks_by_source=[],
            total_clicks=4,
            unique_users=2,
            clicks_over_time=[],
            email_stats=EmailClickStats(
                total_sent=10,
                total_opened=5,
                total_clicks=4,
                unique_clickers=2,
                open_rate=50.0,
                click_through_rate=40.0,
                click_to_open_rate=80.0,
            ),
            time_range=7,
        )

        response = client.get("/api/analytics/clicks")

        assert response.status_code == 200
        body = response.json()
        assert body["uniqueUsers"] == 2
        assert body["emailStats"]["clickToOpenRate"] == 80.0
        analytics.clicks.get_click_analytics.assert_awaited_once_with(7)

    def test_store_failure_is_503(self, client, analytics) -> None:
        """Store errors name the click report."""
        analytics.clicks.get_click_analytics.side_effect = _db_down()

        response = client.get("/api/analytics/clicks?timeRange=30")

        assert response.status_code == 503
        assert response.json() == {"detail": "Failed to fetch click analytics"}


class TestNewsletters:
    """Tests for GET /api/analytics/newsletters."""

    def test_limit_forwarded(self, client, analytics) -> None:
        """The limit query parameter caps the comparison."""
        analytics.newsletters.get_newsletter_summary.return_value = NewsletterSummary(
            newsletters=[], best_performer=None, avg_open_rate=0, avg_click_rate=0
        )

        response = client.get("/api/analytics/newsletters?limit=3")

        assert response.status_code == 200
        assert response.json()["bestPerformer"] is None
        analytics.newsletters.get_newsletter_summary.assert_awaited_once_with(3)

    def test_limit_bounds(self, client) -> None:
        """Limits above 100 are rejected."""
        assert client.get("/api/analytics/newsletters?limit=101").status_code == 422


class TestSubscriberEngagement:
    """Tests for GET /api/analytics/subscribers/{id}/engagement."""

    def test_returns_score(self, client, analytics) -> None:
        """Live score and tier for one subscriber."""
        analytics.engagement.get_engagement.return_value = EngagementResult(
            subscriber_id=5, score=16, risk_level="at_risk"
        )

        response = client.get("/api/analytics/subscribers/5/engagement")

        assert response.json() == {"subscriberId": 5, "score": 16, "riskLevel": "at_risk"}


class TestTrackEvent:
    """Tests for POST /api/analytics/events."""

    def test_tracks_event(self, client, analytics) -> None:
        """Events are appended and echoed back."""
        created = datetime(2026, 10, 15, tzinfo=UTC)
        analytics.events.track_subscriber_event.return_value = SubscriberEvent(
            id=9, subscriber_id=1, event_type="clicked", newsletter_send_id=4, created_at=created
        )

        response = client.post(
            "/api/analytics/events",
            json={"subscriberId": 1, "eventType": "clicked", "newsletterSendId": 4},
        )

        assert response.status_code == 201
        assert response.json()["id"] == 9
        analytics.events.track_subscriber_event.assert_awaited_once_with(
            1, "clicked", newsletter_send_id=4, metadata=None
        )

    def test_missing_event_type(self, client) -> None:
        """Event type is required."""
        response = client.post("/api/analytics/events", json={"subscriberId": 1})

        assert response.status_code == 422

    def test_blank_event_type(self, client, analytics) -> None:
        """Service validation errors become 422."""
        analytics.events.track_subscriber_event.side_effect = ValueError("event_type is required")

        response = client.post(
            "/api/analytics/events", json={"subscriberId": 1, "eventType": " "}
        )

        assert response.status_code == 422

    def test_unknown_subscriber_is_404(self, client, analytics) -> None:
        """A foreign key violation means the subscriber or send does not exist."""
        analytics.events.track_subscriber_event.side_effect = IntegrityError(
            "INSERT", {}, Exception("violates foreign key constraint")
        )

        response = client.post(
            "/api/analytics/events", json={"subscriberId": 404, "eventType": "opened"}
        )

        assert response.status_code == 404

    def test_store_failure_is_503(self, client, analytics) -> None:
        """Other store errors are reported as unavailable."""
        analytics.events.track_subscriber_event.side_effect = _db_down()

        response = client.post(
            "/api/analytics/events", json={"subscriberId": 1, "eventType": "opened"}
        )

        assert response.status_code == 503


class TestRecomputeRiskLevels:
    """Tests for POST /api/analytics/risk-levels/recompute."""

    def test_runs_batch_without_audience(self, client, analytics) -> None:
        """With no scheduler audience configured the batch runs unauthenticated."""
        analytics.engagement.update_risk_levels.return_value = RiskUpdateResult(
            processed=2, distribution={"active": 2}
        )

        with patch(
            "newsletter_analytics.web.middleware.oidc.get_settings",
            return_value=Settings(scheduler_audience=""),
        ):
            response = client.post("/api/analytics/risk-levels/recompute")

        assert response.status_code == 200
        assert response.json() == {"processed": 2, "distribution": {"active": 2}}

    def test_requires_token_with_audience(self, client, analytics) -> None:
        """A configured audience demands a bearer token."""
        with patch(
            "newsletter_analytics.web.middleware.oidc.get_settings",
            return_value=Settings(scheduler_audience="https://analytics.test"),
        ):
            response = client.post("/api/analytics/risk-levels/recompute")

        assert response.status_code == 401
        analytics.engagement.update_risk_levels.assert_not_awaited()

    def test_rejects_invalid_token(self, client, analytics) -> None:
        """Tokens that fail verification are rejected."""
        with (
            patch(
                "newsletter_analytics.web.middleware.oidc.get_settings",
                return_value=Settings(scheduler_audience="https://analytics.test"),
            ),
            patch(
                "newsletter_analytics.web.middleware.oidc.id_token.verify_oauth2_token",
                side_effect=ValueError("bad signature"),
            ),
        ):
            response = client.post(
                "/api/analytics/risk-levels/recompute",
                headers={"Authorization": "Bearer not-a-jwt"},
            )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid OIDC token"
