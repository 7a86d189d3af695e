"""Search relevance scoring.

searchScore =
    matchQuality * 0.4 +
    prefixBonus * 0.3 +
    relevance * 0.2 +
    proximity * 0.1

Match quality, first hit wins:
- exact (whole text equals query)          1.0
- prefix (text starts with query)          0.75
- word-boundary substring ("taco" in "The Taco Stand")  0.6
- plain substring ("aco" in "Taco")        0.3
- no match                                 0 (whole score is 0)

prefixBonus is 1 for exact and prefix matches. Relevance is entity specific
(rating, followers, engagement). Proximity is always 0 at this layer: no geo
input is available, so callers pass nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
import re
from typing import Any

from blabberly.services.numeric import clamp, safe_number
from blabberly.services.records import EngagementRecord, as_record

FOLLOWERS_FOR_MAX = 1000
ENGAGEMENT_UNITS_FOR_MAX = 100


class MatchType(Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    WORD_BOUNDARY = "word_boundary"
    SUBSTRING = "substring"
    NONE = "none"


_MATCH_SCORES = {
    MatchType.EXACT: 1.0,
    MatchType.PREFIX: 0.75,
    MatchType.WORD_BOUNDARY: 0.6,
    MatchType.SUBSTRING: 0.3,
    MatchType.NONE: 0.0,
}


def normalize_query(text: Any) -> str:
    if text is None:
        return ""
    return str(text).strip().lower()


def classify_match(query: str, text: str) -> MatchType:
    """Classify how `query` matches `text` (both already normalized)."""
    if not query or not text:
        return MatchType.NONE
    if text == query:
        return MatchType.EXACT
    if text.startswith(query):
        return MatchType.PREFIX
    if query not in text:
        return MatchType.NONE
    if re.search(r"\b" + re.escape(query), text):
        return MatchType.WORD_BOUNDARY
    return MatchType.SUBSTRING


def calculate_search_score(
    query: Any,
    text: Any,
    relevance: float = 0,
    proximity: float = 0,
) -> float:
    """Score how well `text` answers `query`, blended with quality signals (0-1)."""
    match = classify_match(normalize_query(query), normalize_query(text))
    if match is MatchType.NONE:
        return 0.0

    prefix_bonus = 1.0 if match in (MatchType.EXACT, MatchType.PREFIX) else 0.0
    return (
        _MATCH_SCORES[match] * 0.4
        + prefix_bonus * 0.3
        + clamp(relevance, 0.0, 1.0) * 0.2
        + clamp(proximity, 0.0, 1.0) * 0.1
    )


def score_place_result(query: Any, restaurant: Any, rating: float = 0) -> float:
    """Score a place by name; relevance is the 0-5 rating scaled to 0-1."""
    relevance = min(1.0, max(0.0, safe_number(rating)) / 5)
    return calculate_search_score(query, restaurant, relevance)


def score_user_result(
    query: Any,
    handle: Any = "",
    display_name: Any = "",
    followers_count: int = 0,
) -> float:
    """Score a user by the better of handle and display-name matches."""
    relevance = min(1.0, max(0.0, safe_number(followers_count)) / FOLLOWERS_FOR_MAX)
    return max(
        calculate_search_score(query, handle, relevance),
        calculate_search_score(query, display_name or "", relevance),
    )


def score_post_result(query: Any, post: EngagementRecord | Mapping[str, Any]) -> float:
    """Score a post by the best of its dish, restaurant and caption matches."""
    record = as_record(post)
    relevance = min(1.0, record.engagement / ENGAGEMENT_UNITS_FOR_MAX)
    return max(
        calculate_search_score(query, record.dish, relevance),
        calculate_search_score(query, record.restaurant, relevance),
        calculate_search_score(query, record.caption, relevance),
    )
