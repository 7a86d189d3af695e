"""Place detail service.

A place has no stored document of its own: everything on the place page is
derived from the posts that name it.

- rating: calculate_place_rating
- must-try items: rank_must_try_items
- vibes: aggregate_vibes
- best time to visit: analyze_best_time (None when no post has a timestamp)
- similar places: other restaurants in the same city, scored by find_similar_places
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
import logging
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from blabberly.services.best_time import BestTimeAnalysis, analyze_best_time
from blabberly.services.dishes import DishRanking, rank_must_try_items
from blabberly.services.numeric import current_millis
from blabberly.services.place_rating import calculate_place_rating
from blabberly.services.records import EngagementRecord, group_by_place
from blabberly.services.similarity import SimilarPlace, find_similar_places
from blabberly.services.vibes import VibeCount, aggregate_vibes
from blabberly.settings import Settings, get_settings
from blabberly.stores.posts import DataSourceError, PostSource

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class PlaceDetail:
    name: str
    slug: str
    city: str
    rating: float
    must_try_items: list[DishRanking] = field(default_factory=list)
    vibes: list[VibeCount] = field(default_factory=list)
    best_time: BestTimeAnalysis | None = None
    visitor_count: int = 0
    total_posts: int = 0
    total_likes: int = 0
    total_saves: int = 0
    posts: list[EngagementRecord] = field(default_factory=list)


def slugify(name: str | None) -> str:
    """URL-safe slug: "The Gilded Fox" -> "the-gilded-fox"."""
    slug = re.sub(r"[^a-z0-9]+", "-", str(name or "").strip().lower())
    return slug.strip("-")


def unslugify(slug: str | None) -> str:
    """Reverse of slugify, minus casing: "the-gilded-fox" -> "the gilded fox"."""
    return str(slug or "").replace("-", " ").strip()


def build_place_detail(
    name: str,
    posts: list[EngagementRecord],
    now_ms: int,
    tz: tzinfo = timezone.utc,
) -> PlaceDetail:
    """Aggregate everything the place page shows from the place's posts."""
    display_name = posts[0].restaurant if posts and posts[0].restaurant else name
    return PlaceDetail(
        name=display_name,
        slug=slugify(display_name),
        city=next((p.city for p in posts if p.city), ""),
        rating=calculate_place_rating(posts, now_ms),
        must_try_items=rank_must_try_items(posts, now_ms),
        vibes=aggregate_vibes(posts),
        best_time=analyze_best_time(posts, tz),
        visitor_count=len({p.author_id for p in posts if p.author_id}),
        total_posts=len(posts),
        total_likes=sum(p.likes for p in posts),
        total_saves=sum(p.saves for p in posts),
        posts=posts,
    )


class PlaceService:
    def __init__(
        self,
        source: PostSource,
        *,
        settings: Settings | None = None,
        clock_ms: Callable[[], int] = current_millis,
    ) -> None:
        self.settings = settings or get_settings()
        self.source = source
        self._clock_ms = clock_ms

    def _tz(self) -> tzinfo:
        try:
            return ZoneInfo(self.settings.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {self.settings.timezone!r}, using UTC")
            return timezone.utc

    async def load_posts_for_place(self, name: str) -> list[EngagementRecord]:
        if not name:
            return []
        try:
            return await self.source.fetch_posts_for_place(name, self.settings.place_posts_limit)
        except DataSourceError as e:
            logger.warning(f"[places] failed to load posts for {name!r}: {e}")
            return []

    async def load_place_data(self, slug: str) -> PlaceDetail | None:
        """Place page data for a slug, or None when nothing was ever posted there."""
        name = unslugify(slug)
        posts = await self.load_posts_for_place(name)
        if not posts:
            return None
        return build_place_detail(name, posts, self._clock_ms(), self._tz())

    async def load_similar_places(
        self,
        restaurant: str,
        city: str,
        target_posts: list[EngagementRecord],
        top_n: int | None = None,
    ) -> list[SimilarPlace]:
        """Most similar other places in the same city."""
        if not city or not target_posts:
            return []
        top_n = top_n or self.settings.similar_places_limit

        try:
            city_posts = await self.source.fetch_posts_in_city(city, self.settings.city_posts_limit)
        except DataSourceError as e:
            logger.warning(f"[places] failed to load posts in {city!r}: {e}")
            return []

        candidates = group_by_place(city_posts, exclude=restaurant)
        return find_similar_places(target_posts, candidates)[:top_n]
