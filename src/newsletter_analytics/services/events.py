# ABOUTME: Append-only subscriber event tracking.
# ABOUTME: Open and click events also refresh the subscriber's last engagement time.

import json
from datetime import datetime
from typing import Any

import structlog

from newsletter_analytics.db.models import SubscriberEvent
from newsletter_analytics.db.repository import SubscriberEventRepository, SubscriberRepository
from newsletter_analytics.utils.windows import utcnow

log = structlog.get_logger()

ENGAGEMENT_EVENTS = frozenset({"opened", "clicked"})


class EventTracker:
    """Records subscriber lifecycle events."""

    def __init__(
        self, events: SubscriberEventRepository, subscribers: SubscriberRepository
    ) -> None:
        self.events = events
        self.subscribers = subscribers

    async def track_subscriber_event(
        self,
        subscriber_id: int,
        event_type: str,
        newsletter_send_id: int | None = None,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> SubscriberEvent:
        """Append one event row.

        Args:
            subscriber_id: Subscriber the event belongs to.
            event_type: Event name, e.g. "opened", "clicked", "unsubscribed".
            newsletter_send_id: Optional send the event relates to.
            metadata: Optional payload, stored as a JSON string.
            now: Event time (defaults to the current time).

        Returns:
            The inserted event.

        Raises:
            ValueError: If event_type is empty.
        """
        event_type = event_type.strip()
        if not event_type:
            raise ValueError("event_type is required")

        now = now or utcnow()
        event = SubscriberEvent(
            subscriber_id=subscriber_id,
            event_type=event_type,
            newsletter_send_id=newsletter_send_id,
            event_metadata=json.dumps(metadata) if metadata is not None else None,
            created_at=now,
        )
        saved = await self.events.append(event)

        if event_type in ENGAGEMENT_EVENTS:
            await self.subscribers.touch_last_engaged(subscriber_id, now)

        log.info(
            "subscriber_event_tracked",
            subscriber_id=subscriber_id,
            event_type=event_type,
            id=saved.id,
        )
        return saved
