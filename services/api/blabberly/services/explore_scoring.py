"""Scoring functions for the Explore sections.

Trending (per post):
    engagementDensity * 0.5 + velocityBoost * 0.3 + uniqueEngagers * 0.2
    - engagementDensity = engagement units per hour (hours floored at 0.1, uncapped)
    - velocityBoost = linear decay over 48 hours
    - uniqueEngagers = min(likes + comments, 100) / 100

Top spot (per aggregated place):
    rating/5 * 0.5 + totalPosts/100 * 0.2 + recentShare * 0.2 + saveRate * 0.1

New place (first seen this week, eligibility decided by the caller):
    firstPostEngagement/50 * 0.6 + postsThisWeek/10 * 0.4

Category (personalized ordering of the explore categories):
    tasteMatch * 0.4 + totalEngagement/500 * 0.4 + avgRecency * 0.2

Every normalized term is capped at 1.0 except the trending density.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from blabberly.services.numeric import clamp, current_millis, hours_between, safe_number
from blabberly.services.records import EngagementRecord, as_record, as_records

MIN_HOURS_OLD = 0.1
VELOCITY_WINDOW_HOURS = 48
ENGAGER_CAP = 100

SPOT_POSTS_FOR_MAX = 100
NEW_PLACE_ENGAGEMENT_FOR_MAX = 50
NEW_PLACE_POSTS_FOR_MAX = 10
CATEGORY_ENGAGEMENT_FOR_MAX = 500


@dataclass(frozen=True)
class ScoredPost:
    post: EngagementRecord
    score: float


@dataclass(frozen=True)
class CategoryStats:
    """Live activity for one category token."""

    token: str
    label: str = ""
    post_count: int = 0
    total_engagement: float = 0.0
    avg_recency: float = 0.0

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> CategoryStats:
        """Build stats from a mapping (camelCase or snake_case keys)."""

        def pick(*keys: str) -> Any:
            for key in keys:
                if raw.get(key) is not None:
                    return raw[key]
            return None

        token = pick("token")
        label = pick("label")
        return cls(
            token="" if token is None else str(token).strip(),
            label="" if label is None else str(label).strip(),
            post_count=max(0, int(safe_number(pick("post_count", "postCount")))),
            total_engagement=safe_number(pick("total_engagement", "totalEngagement")),
            avg_recency=safe_number(pick("avg_recency", "avgRecency")),
        )


@dataclass(frozen=True)
class RankedCategory:
    token: str
    label: str
    post_count: int
    score: float
    taste_match: bool


# ============================================================
# Trending
# ============================================================


def calculate_trending_score(
    post: EngagementRecord | Mapping[str, Any],
    now_ms: int | None = None,
) -> float:
    """Trending score for a single post (relative ordering only, no fixed scale)."""
    record = as_record(post)
    now = current_millis() if now_ms is None else now_ms
    hours_old = max(hours_between(record.created_at.millis, now), MIN_HOURS_OLD)

    engagement_score = record.engagement / hours_old
    velocity_boost = max(0.0, 1 - hours_old / VELOCITY_WINDOW_HOURS)
    unique_engagers = min(record.likes + record.comments_count, ENGAGER_CAP) / ENGAGER_CAP

    return engagement_score * 0.5 + velocity_boost * 0.3 + unique_engagers * 0.2


def rank_trending(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
    now_ms: int | None = None,
) -> list[ScoredPost]:
    """Rank posts by trending score, highest first."""
    now = current_millis() if now_ms is None else now_ms
    scored = [ScoredPost(post=p, score=calculate_trending_score(p, now)) for p in as_records(posts)]
    return sorted(scored, key=lambda s: s.score, reverse=True)


# ============================================================
# Top spots
# ============================================================


def calculate_spot_score(
    *,
    rating: float = 0,
    total_posts: int = 0,
    recent_posts: int = 0,
    total_saves: int = 0,
    total_engagement: float = 0,
) -> float:
    """Score an aggregated place for the Top Spots section (0-1).

    Args:
        rating: Place rating on the 0-5 scale.
        total_posts: Posts considered for the place.
        recent_posts: Posts from the last 7 days.
        total_saves: Sum of saves.
        total_engagement: Sum of engagement units.
    """
    rating = max(0.0, safe_number(rating))
    total_posts = max(0.0, safe_number(total_posts))
    recent_posts = max(0.0, safe_number(recent_posts))
    total_saves = max(0.0, safe_number(total_saves))
    total_engagement = max(0.0, safe_number(total_engagement))

    place_score = min(1.0, rating / 5)
    popularity_score = min(1.0, total_posts / SPOT_POSTS_FOR_MAX)
    trending_score = min(1.0, recent_posts / max(total_posts, 1))
    save_rate = min(1.0, (total_saves * 3) / total_engagement) if total_engagement > 0 else 0.0

    return place_score * 0.5 + popularity_score * 0.2 + trending_score * 0.2 + save_rate * 0.1


# ============================================================
# New this week
# ============================================================


def calculate_new_place_score(
    *,
    first_post_engagement: float = 0,
    total_posts_in_week: int = 0,
) -> float:
    """Score a newly discovered place (0-1)."""
    engagement_norm = min(1.0, max(0.0, safe_number(first_post_engagement)) / NEW_PLACE_ENGAGEMENT_FOR_MAX)
    post_count_norm = min(1.0, max(0.0, safe_number(total_posts_in_week)) / NEW_PLACE_POSTS_FOR_MAX)
    return engagement_norm * 0.6 + post_count_norm * 0.4


# ============================================================
# Categories
# ============================================================


def as_category(value: CategoryStats | Mapping[str, Any] | None) -> CategoryStats | None:
    """Coerce a category entry; anything but stats or a mapping gives None."""
    if isinstance(value, CategoryStats):
        return value
    if isinstance(value, Mapping):
        return CategoryStats.from_raw(value)
    return None


def calculate_category_score(
    category: CategoryStats | Mapping[str, Any],
    taste_prefs: Collection[str] = (),
) -> float:
    """Score a category for the viewer (0-1); taste matches get a flat 0.4."""
    category = as_category(category)
    if category is None:
        return 0.0
    taste_match = 1.0 if category.token in (taste_prefs or ()) else 0.0
    engagement_norm = min(
        1.0, max(0.0, safe_number(category.total_engagement)) / CATEGORY_ENGAGEMENT_FOR_MAX
    )
    recency_norm = clamp(category.avg_recency, 0.0, 1.0)
    return taste_match * 0.4 + engagement_norm * 0.4 + recency_norm * 0.2


def rank_categories(
    categories: Iterable[CategoryStats | Mapping[str, Any]] | None,
    taste_prefs: Collection[str] = (),
) -> list[RankedCategory]:
    """Order categories for the viewer, highest score first.

    Entries that are neither stats nor mappings are skipped.
    """
    if categories is None or isinstance(categories, (str, bytes, Mapping)):
        return []
    prefs = set(taste_prefs or ())
    try:
        stats = [c for c in map(as_category, categories) if c is not None]
    except TypeError:
        return []
    ranked = [
        RankedCategory(
            token=c.token,
            label=c.label or c.token,
            post_count=c.post_count,
            score=calculate_category_score(c, prefs),
            taste_match=c.token in prefs,
        )
        for c in stats
    ]
    return sorted(ranked, key=lambda r: r.score, reverse=True)
