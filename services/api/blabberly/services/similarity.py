"""Similar-place discovery.

similarity =
    sharedVisitors * 0.4 +
    sharedTags * 0.3 +
    priceTierMatch * 0.2 +
    proximity * 0.1

- sharedVisitors: authors who posted at both places, 5 shared authors (or all
  of the target's, if fewer) = 1.0
- sharedTags: same overlap measure over lowercased tags
- priceTierMatch: 1 - |avg price difference| / 50, neutral 0.5 without prices
- proximity: 1 when both places are in the same city (case-insensitive)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from blabberly.services.records import EngagementRecord, PlaceAggregate, as_records

OVERLAP_CAP = 5
PRICE_SIMILARITY_RANGE = 50.0
NEUTRAL_PRICE_SCORE = 0.5

_WEIGHTS = {
    "shared_visitors": 0.4,
    "shared_tags": 0.3,
    "price": 0.2,
    "proximity": 0.1,
}


@dataclass(frozen=True)
class SimilarPlace:
    restaurant: str
    city: str
    score: float
    post_count: int
    shared_visitors: float = 0.0
    shared_tags: float = 0.0
    price_match: float = NEUTRAL_PRICE_SCORE
    proximity: float = 0.0


@dataclass(frozen=True)
class _PlaceProfile:
    visitors: frozenset[str]
    tags: frozenset[str]
    avg_price: float | None
    city: str


def _profile(posts: list[EngagementRecord]) -> _PlaceProfile:
    visitors = {p.author_id for p in posts if p.author_id}
    tags: set[str] = set()
    prices: list[float] = []
    for p in posts:
        tags.update(p.normalized_tags())
        if p.price is not None:
            prices.append(p.price)
    avg_price = sum(prices) / len(prices) if prices else None
    return _PlaceProfile(
        visitors=frozenset(visitors),
        tags=frozenset(tags),
        avg_price=avg_price,
        city=posts[0].city if posts else "",
    )


def _capped_overlap(target: frozenset[str], candidate: frozenset[str]) -> float:
    if not target:
        return 0.0
    shared = len(target & candidate)
    return min(1.0, shared / min(len(target), OVERLAP_CAP))


def _price_match(target_avg: float | None, candidate_avg: float | None) -> float:
    if target_avg is None or candidate_avg is None:
        return NEUTRAL_PRICE_SCORE
    diff = abs(target_avg - candidate_avg)
    return max(0.0, 1 - diff / PRICE_SIMILARITY_RANGE)


def _proximity(target_city: str, candidate_city: str) -> float:
    if not target_city or not candidate_city:
        return 0.0
    return 1.0 if target_city.lower() == candidate_city.lower() else 0.0


def _candidate_posts(candidate: PlaceAggregate | Mapping[str, Any]) -> tuple[str, list[EngagementRecord]]:
    if isinstance(candidate, PlaceAggregate):
        return candidate.restaurant, as_records(candidate.posts)
    if isinstance(candidate, Mapping):
        return str(candidate.get("restaurant") or ""), as_records(candidate.get("posts"))
    return "", []


def find_similar_places(
    target_posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
    candidates: Iterable[PlaceAggregate | Mapping[str, Any]] | None,
) -> list[SimilarPlace]:
    """Score candidate places against the target place, most similar first.

    Candidates without posts are skipped.
    """
    targets = as_records(target_posts)
    if not targets or candidates is None or isinstance(candidates, (str, bytes, Mapping)):
        return []
    try:
        places = list(candidates)
    except TypeError:
        return []
    target = _profile(targets)

    results: list[SimilarPlace] = []
    for candidate in places:
        restaurant, posts = _candidate_posts(candidate)
        if not posts:
            continue
        other = _profile(posts)

        shared_visitors = _capped_overlap(target.visitors, other.visitors)
        shared_tags = _capped_overlap(target.tags, other.tags)
        price_match = _price_match(target.avg_price, other.avg_price)
        proximity = _proximity(target.city, other.city)

        score = (
            shared_visitors * _WEIGHTS["shared_visitors"]
            + shared_tags * _WEIGHTS["shared_tags"]
            + price_match * _WEIGHTS["price"]
            + proximity * _WEIGHTS["proximity"]
        )
        results.append(
            SimilarPlace(
                restaurant=restaurant,
                city=other.city,
                score=score,
                post_count=len(posts),
                shared_visitors=shared_visitors,
                shared_tags=shared_tags,
                price_match=price_match,
                proximity=proximity,
            )
        )

    return sorted(results, key=lambda r: r.score, reverse=True)
