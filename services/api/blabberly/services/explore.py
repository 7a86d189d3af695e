"""Explore page service.

Sections (all computed from the posts of the last `explore_window_days`):
1. Trending posts - top posts by trending score
2. Top spots - places aggregated from recent posts, ranked by spot score
3. Categories - tag activity merged into the fixed category list, personalized
4. New this week - places whose earliest visible post is inside the window
   and that have at least 2 posts, ranked by new-place score

The recent-posts fetch is shared by every section and cached together with
the section results for `explore_cache_ttl_seconds`. Category ordering depends
on the viewer, so only the raw category counts are cached.

"New this week" is an approximation: only recent posts are loaded, so a place
whose older posts fall outside the window looks new.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass
import logging

from blabberly.services.explore_scoring import (
    CategoryStats,
    RankedCategory,
    ScoredPost,
    calculate_new_place_score,
    calculate_spot_score,
    rank_categories,
    rank_trending,
)
from blabberly.services.numeric import MS_PER_DAY, current_millis, recency_fraction
from blabberly.services.place_rating import calculate_place_rating
from blabberly.services.records import EngagementRecord, group_by_place
from blabberly.settings import Settings, get_settings
from blabberly.stores.cache import ResultCache
from blabberly.stores.posts import DataSourceError, PostSource

logger = logging.getLogger("uvicorn.error")

MIN_POSTS_FOR_NEW_PLACE = 2

# Categories shown on the Explore page, in default order
EXPLORE_CATEGORIES: tuple[tuple[str, str], ...] = (
    # Food
    ("tacos", "Tacos"),
    ("pizza", "Pizza"),
    ("sushi", "Sushi"),
    ("burgers", "Burgers"),
    ("brunch", "Brunch"),
    ("seafood", "Seafood"),
    ("bbq", "BBQ"),
    ("ramen", "Ramen"),
    ("street_food", "Street Food"),
    # Drinks
    ("craft_cocktails", "Cocktail Bars"),
    ("wine", "Wine Bars"),
    ("craft_beer", "Breweries"),
    ("coffee", "Coffee Shops"),
    # Vibes
    ("rooftop", "Rooftops"),
    ("date_night", "Date Night"),
    ("late_night", "Late Night"),
    ("outdoor_patio", "Outdoor Dining"),
    ("desserts", "Desserts"),
)

# Cache keys
KEY_RECENT_POSTS = "recentPosts"
KEY_TRENDING = "trending"
KEY_TOP_SPOTS = "topSpots"
KEY_CATEGORY_COUNTS = "categoryCounts"
KEY_NEW_THIS_WEEK = "newThisWeek"


@dataclass(frozen=True)
class TopSpot:
    restaurant: str
    city: str
    rating: float
    total_posts: int
    recent_posts: int
    score: float
    video_url: str | None = None


@dataclass(frozen=True)
class NewPlace:
    restaurant: str
    city: str
    post_count: int
    score: float
    video_url: str | None = None


# ============================================================
# Pure section builders
# ============================================================


def build_top_spots(
    posts: Iterable[EngagementRecord],
    now_ms: int,
    *,
    window_days: int = 7,
    limit: int = 12,
) -> list[TopSpot]:
    """Aggregate posts by restaurant and rank places by spot score."""
    window_ms = window_days * MS_PER_DAY
    spots: list[TopSpot] = []
    for place in group_by_place(posts):
        place_posts = place.posts
        recent = sum(1 for p in place_posts if now_ms - p.created_at.millis < window_ms)
        rating = calculate_place_rating(place_posts, now_ms)
        score = calculate_spot_score(
            rating=rating,
            total_posts=len(place_posts),
            recent_posts=recent,
            total_saves=sum(p.saves for p in place_posts),
            total_engagement=sum(p.engagement for p in place_posts),
        )
        spots.append(
            TopSpot(
                restaurant=place.restaurant,
                city=place.city,
                rating=rating,
                total_posts=len(place_posts),
                recent_posts=recent,
                score=score,
                video_url=place.video_url,
            )
        )
    spots.sort(key=lambda s: s.score, reverse=True)
    return spots[:limit]


def select_new_this_week(
    posts: Iterable[EngagementRecord],
    now_ms: int,
    *,
    window_days: int = 7,
    limit: int = 8,
) -> list[NewPlace]:
    """Pick places first seen inside the window with enough posts, best first."""
    window_ms = window_days * MS_PER_DAY
    new_places: list[NewPlace] = []
    for place in group_by_place(posts):
        if len(place.posts) < MIN_POSTS_FOR_NEW_PLACE:
            continue
        first_post = min(place.posts, key=lambda p: p.created_at.millis)
        if now_ms - first_post.created_at.millis > window_ms:
            continue
        score = calculate_new_place_score(
            first_post_engagement=first_post.engagement,
            total_posts_in_week=len(place.posts),
        )
        new_places.append(
            NewPlace(
                restaurant=place.restaurant,
                city=place.city,
                post_count=len(place.posts),
                score=score,
                video_url=place.video_url,
            )
        )
    new_places.sort(key=lambda p: p.score, reverse=True)
    return new_places[:limit]


def count_categories(
    posts: Iterable[EngagementRecord],
    now_ms: int,
    *,
    window_days: int = 7,
) -> list[CategoryStats]:
    """Per-tag post count, engagement and average freshness over the window."""
    totals: dict[str, list[float]] = {}
    for post in posts:
        recency = recency_fraction(post.created_at.millis, now_ms, horizon_days=window_days)
        for tag in post.normalized_tags():
            entry = totals.setdefault(tag, [0, 0.0, 0.0])
            entry[0] += 1
            entry[1] += post.engagement
            entry[2] += recency
    return [
        CategoryStats(
            token=tag,
            post_count=int(count),
            total_engagement=engagement,
            avg_recency=recency_sum / count if count else 0.0,
        )
        for tag, (count, engagement, recency_sum) in totals.items()
    ]


def merge_categories(counts: Iterable[CategoryStats]) -> list[CategoryStats]:
    """Overlay live counts onto the fixed explore category list."""
    by_token = {c.token: c for c in counts}
    merged = []
    for token, label in EXPLORE_CATEGORIES:
        live = by_token.get(token)
        merged.append(
            CategoryStats(
                token=token,
                label=label,
                post_count=live.post_count if live else 0,
                total_engagement=live.total_engagement if live else 0.0,
                avg_recency=live.avg_recency if live else 0.0,
            )
        )
    return merged


# ============================================================
# Service
# ============================================================


class ExploreService:
    """Explore sections over a PostSource, memoized in a ResultCache."""

    def __init__(
        self,
        source: PostSource,
        *,
        cache: ResultCache | None = None,
        settings: Settings | None = None,
        clock_ms: Callable[[], int] = current_millis,
    ) -> None:
        self.settings = settings or get_settings()
        self.source = source
        self.cache = cache if cache is not None else ResultCache(self.settings.explore_cache_ttl_seconds)
        self._clock_ms = clock_ms

    async def load_recent_posts(self) -> list[EngagementRecord]:
        """Posts from the explore window, shared by every section."""
        cached = self.cache.get(KEY_RECENT_POSTS)
        if cached is not None:
            return cached

        try:
            posts = await self.source.fetch_recent_posts(
                self.settings.explore_window_days,
                self.settings.explore_recent_posts_limit,
            )
        except DataSourceError as e:
            logger.warning(f"[explore] failed to load recent posts: {e}")
            return []

        logger.info(f"[explore] loaded {len(posts)} recent posts")
        self.cache.set(KEY_RECENT_POSTS, posts)
        return posts

    async def load_trending_posts(self) -> list[ScoredPost]:
        cached = self.cache.get(KEY_TRENDING)
        if cached is not None:
            return cached

        posts = await self.load_recent_posts()
        ranked = rank_trending(posts, self._clock_ms())[: self.settings.trending_limit]
        if posts:
            self.cache.set(KEY_TRENDING, ranked)
        return ranked

    async def load_top_spots(self) -> list[TopSpot]:
        cached = self.cache.get(KEY_TOP_SPOTS)
        if cached is not None:
            return cached

        posts = await self.load_recent_posts()
        spots = build_top_spots(
            posts,
            self._clock_ms(),
            window_days=self.settings.explore_window_days,
            limit=self.settings.top_spots_limit,
        )
        if posts:
            self.cache.set(KEY_TOP_SPOTS, spots)
        return spots

    async def load_category_counts(self) -> list[CategoryStats]:
        cached = self.cache.get(KEY_CATEGORY_COUNTS)
        if cached is not None:
            return cached

        posts = await self.load_recent_posts()
        counts = count_categories(posts, self._clock_ms(), window_days=self.settings.explore_window_days)
        if posts:
            self.cache.set(KEY_CATEGORY_COUNTS, counts)
        return counts

    async def load_categories(self, taste_prefs: Collection[str] = ()) -> list[RankedCategory]:
        """Explore categories ordered for the viewer's taste preferences."""
        counts = await self.load_category_counts()
        return rank_categories(merge_categories(counts), taste_prefs)

    async def load_new_this_week(self) -> list[NewPlace]:
        cached = self.cache.get(KEY_NEW_THIS_WEEK)
        if cached is not None:
            return cached

        posts = await self.load_recent_posts()
        new_places = select_new_this_week(
            posts,
            self._clock_ms(),
            window_days=self.settings.explore_window_days,
            limit=self.settings.new_this_week_limit,
        )
        if posts:
            self.cache.set(KEY_NEW_THIS_WEEK, new_places)
        return new_places
