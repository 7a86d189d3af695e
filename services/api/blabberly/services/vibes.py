"""Vibe (tag) frequency aggregation for a place."""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from blabberly.services.records import EngagementRecord, as_records


@dataclass(frozen=True)
class VibeCount:
    tag: str
    count: int


def aggregate_vibes(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
) -> list[VibeCount]:
    """Count tags across posts (case-insensitive), most frequent first."""
    counts: Counter[str] = Counter()
    for post in as_records(posts):
        counts.update(post.normalized_tags())

    # Counter keeps insertion order, so ties stay in first-seen order
    vibes = [VibeCount(tag=tag, count=count) for tag, count in counts.items()]
    return sorted(vibes, key=lambda v: v.count, reverse=True)
