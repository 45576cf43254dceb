# ABOUTME: Pure scoring formulas for engagement, risk, health, reliability, and newsletters.
# ABOUTME: Every rate helper returns 0 for a zero denominator instead of raising or NaN.

import math
from collections.abc import Iterable

from newsletter_analytics.db.models import RiskLevel

MAX_SCORE = 100

# Engagement: opens are weak (pre-fetch), unique clicks strong, repeat clicks strongest
OPEN_WEIGHT = 1
UNIQUE_CLICK_WEIGHT = 3
REPEAT_CLICK_WEIGHT = 5

# Risk tier thresholds, evaluated in order after the score == 0 dormant check
CHURNED_BELOW = 10
AT_RISK_BELOW = 30

# Health composite
DELIVERY_WEIGHT = 0.4
OPEN_RATE_WEIGHT = 0.3
CLICK_THROUGH_WEIGHT = 0.2
LOW_BOUNCE_WEIGHT = 0.1

# Source reliability: acceptance maps to 0-60, avg clicks (rarely above ~10) to 0-40
ACCEPTANCE_WEIGHT = 0.6
ENGAGEMENT_MULTIPLIER = 4

# Newsletter comparison: a click is worth four opens per recipient
NEWSLETTER_OPEN_WEIGHT = 0.5
NEWSLETTER_CLICK_WEIGHT = 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative values."""
    return math.floor(value + 0.5)


def round_rate(value: float) -> float:
    """Round a rate to 2 decimal places (half up)."""
    return math.floor(value * 100 + 0.5) / 100


def percentage(numerator: float, denominator: float) -> float:
    """Return numerator / denominator * 100, or 0.0 when the denominator is 0."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


def mean(values: Iterable[float]) -> float:
    """Unweighted mean, 0.0 for an empty input."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def engagement_score(opens: int, total_clicks: int, unique_clicks: int) -> int:
    """Score a subscriber's recent activity on a 0-100 scale.

    Args:
        opens: Opened sends in the window.
        total_clicks: All click events in the window.
        unique_clicks: Distinct content items clicked in the window.

    Returns:
        ``opens*1 + unique*3 + repeat*5`` capped at 100, where repeat clicks are
        the clicks beyond the first on each item.
    """
    repeat_clicks = max(0, total_clicks - unique_clicks)
    score = (
        opens * OPEN_WEIGHT
        + unique_clicks * UNIQUE_CLICK_WEIGHT
        + repeat_clicks * REPEAT_CLICK_WEIGHT
    )
    return min(MAX_SCORE, score)


def classify_risk(score: int) -> RiskLevel:
    """Map an engagement score to its risk tier.

    Dormant (exactly 0) is checked before the generic churn threshold.
    """
    if score == 0:
        return RiskLevel.DORMANT
    if score < CHURNED_BELOW:
        return RiskLevel.CHURNED
    if score < AT_RISK_BELOW:
        return RiskLevel.AT_RISK
    return RiskLevel.ACTIVE


def health_score(
    delivery_rate: float, open_rate: float, click_through_rate: float, bounce_rate: float
) -> int:
    """Composite system health from unrounded component rates, capped at 100."""
    score = round_half_up(
        delivery_rate * DELIVERY_WEIGHT
        + open_rate * OPEN_RATE_WEIGHT
        + click_through_rate * CLICK_THROUGH_WEIGHT
        + (100 - bounce_rate) * LOW_BOUNCE_WEIGHT
    )
    return min(MAX_SCORE, score)


def source_reliability_score(acceptance_rate: float, avg_engagement: float) -> int:
    """Combine acceptance rate and average clicks per accepted item, capped at 100."""
    score = round_half_up(
        acceptance_rate * ACCEPTANCE_WEIGHT + avg_engagement * ENGAGEMENT_MULTIPLIER
    )
    return min(MAX_SCORE, score)


def newsletter_engagement_score(open_rate: float, click_rate: float) -> int:
    """Per-issue engagement from open and click rates (not capped)."""
    return round_half_up(open_rate * NEWSLETTER_OPEN_WEIGHT + click_rate * NEWSLETTER_CLICK_WEIGHT)
