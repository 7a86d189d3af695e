"""Feed ordering by engagement density or recency.

engagementScore = (likes + comments*2 + saves*3) / hoursOld

Comments count double and saves triple. Very new posts use a 0.1 hour floor.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from blabberly.services.explore_scoring import MIN_HOURS_OLD, ScoredPost
from blabberly.services.numeric import current_millis, hours_between
from blabberly.services.records import EngagementRecord, as_record, as_records


def calculate_engagement_score(
    post: EngagementRecord | Mapping[str, Any],
    now_ms: int | None = None,
) -> float:
    record = as_record(post)
    now = current_millis() if now_ms is None else now_ms
    hours_old = max(hours_between(record.created_at.millis, now), MIN_HOURS_OLD)
    return record.engagement / hours_old


def rank_by_engagement(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
    now_ms: int | None = None,
) -> list[ScoredPost]:
    """Local feed: highest engagement per hour first."""
    now = current_millis() if now_ms is None else now_ms
    scored = [ScoredPost(post=p, score=calculate_engagement_score(p, now)) for p in as_records(posts)]
    return sorted(scored, key=lambda s: s.score, reverse=True)


def rank_by_recency(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
) -> list[EngagementRecord]:
    """Friends feed: newest first."""
    return sorted(as_records(posts), key=lambda p: p.created_at.millis, reverse=True)
