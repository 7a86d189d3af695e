"""Place rating service.

Rating (1.0-5.0, one decimal; 0 when a place has no posts) is a weighted blend
of four 0-5 sub-scores computed from the place's posts:

- Engagement (0.4): average engagement units per post, 50 units = 5 stars
- Popularity (0.3): log-scaled post count, 10 posts ~ 4.0, 50+ posts = 5.0
- Recency (0.2): average one-year linear freshness
- Save rate (0.1): share of engagement coming from saves
"""

from collections.abc import Iterable, Mapping
import math
from typing import Any

from blabberly.services.numeric import current_millis, recency_fraction, round_half_up
from blabberly.services.records import EngagementRecord, as_records

ENGAGEMENT_UNITS_FOR_MAX = 50
POPULARITY_LOG_BASE_POSTS = 50

_WEIGHTS = {
    "engagement": 0.4,
    "popularity": 0.3,
    "recency": 0.2,
    "save_rate": 0.1,
}

MIN_RATING = 1.0
MAX_RATING = 5.0


def calculate_place_rating(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
    now_ms: int | None = None,
) -> float:
    """Calculate the 0-5 quality rating of a place from its posts.

    Args:
        posts: All known posts for the place.
        now_ms: Reference time in epoch millis (defaults to now).

    Returns:
        0 for no posts, otherwise a value in [1.0, 5.0] rounded to 0.1.
    """
    records = as_records(posts)
    if not records:
        return 0.0
    now = current_millis() if now_ms is None else now_ms

    total_engagement = 0.0
    total_saves = 0
    total_recency = 0.0
    for post in records:
        total_engagement += post.engagement
        total_saves += post.saves
        total_recency += recency_fraction(post.created_at.millis, now)

    n = len(records)
    avg_engagement = total_engagement / n

    engagement_score = min(5.0, (avg_engagement / ENGAGEMENT_UNITS_FOR_MAX) * 5)
    popularity_score = min(
        5.0, (math.log10(n + 1) / math.log10(POPULARITY_LOG_BASE_POSTS + 1)) * 5
    )
    recency_score = (total_recency / n) * 5
    save_rate_score = (
        min(5.0, ((total_saves * 3) / total_engagement) * 5) if total_engagement > 0 else 0.0
    )

    weighted = (
        engagement_score * _WEIGHTS["engagement"]
        + popularity_score * _WEIGHTS["popularity"]
        + recency_score * _WEIGHTS["recency"]
        + save_rate_score * _WEIGHTS["save_rate"]
    )

    # Any place with posts gets at least one star
    return round_half_up(max(MIN_RATING, min(MAX_RATING, weighted)), 1)
