# ABOUTME: Trailing time window helpers shared by the analytics services.
# ABOUTME: Windows are anchored on the current UTC instant, not midnight.

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def window_start(days: int, now: datetime | None = None) -> datetime:
    """Start of the trailing window of ``days`` days ending at ``now``.

    Raises:
        ValueError: If days is not positive.
    """
    if days <= 0:
        raise ValueError(f"Window must be at least one day, got {days}")
    return (now or utcnow()) - timedelta(days=days)


def daily_buckets(days: int, now: datetime | None = None) -> list[tuple[datetime, datetime]]:
    """Split the trailing window into ``days`` contiguous [start, end) day buckets.

    Buckets are ordered oldest first and the last one ends at ``now``.
    """
    start = window_start(days, now)
    return [
        (start + timedelta(days=offset), start + timedelta(days=offset + 1))
        for offset in range(days)
    ]
