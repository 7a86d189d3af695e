"""Must-try dish ranking.

dishScore = mentions * 0.5 + avgEngagement * 0.3 + recency * 0.2

- mentions: log-scaled mention count, saturates around 20 mentions
- avgEngagement: engagement units per post, 100 = 1.0
- recency: average one-year linear freshness
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import math
from typing import Any

from blabberly.services.numeric import current_millis, recency_fraction, round_half_up
from blabberly.services.records import EngagementRecord, as_records

MENTIONS_FOR_MAX = 20
ENGAGEMENT_UNITS_FOR_MAX = 100


@dataclass(frozen=True)
class DishRanking:
    dish: str
    mentions: int
    avg_likes: int
    avg_saves: int
    score: float
    price: float | None = None


def rank_must_try_items(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
    now_ms: int | None = None,
) -> list[DishRanking]:
    """Rank dishes mentioned across a place's posts, best first."""
    records = as_records(posts)
    if not records:
        return []
    now = current_millis() if now_ms is None else now_ms

    by_dish: dict[str, list[EngagementRecord]] = {}
    for post in records:
        dish = post.dish.strip()
        if dish:
            by_dish.setdefault(dish, []).append(post)

    items: list[DishRanking] = []
    for dish, dish_posts in by_dish.items():
        n = len(dish_posts)
        total_likes = sum(p.likes for p in dish_posts)
        total_saves = sum(p.saves for p in dish_posts)
        total_engagement = sum(p.engagement for p in dish_posts)
        total_recency = sum(recency_fraction(p.created_at.millis, now) for p in dish_posts)

        mention_score = min(1.0, math.log10(n + 1) / math.log10(MENTIONS_FOR_MAX + 1))
        engagement_score = min(1.0, (total_engagement / n) / ENGAGEMENT_UNITS_FOR_MAX)
        recency_score = total_recency / n

        items.append(
            DishRanking(
                dish=dish,
                mentions=n,
                avg_likes=int(round_half_up(total_likes / n)),
                avg_saves=int(round_half_up(total_saves / n)),
                score=mention_score * 0.5 + engagement_score * 0.3 + recency_score * 0.2,
                price=dish_posts[0].price,
            )
        )

    return sorted(items, key=lambda item: item.score, reverse=True)
