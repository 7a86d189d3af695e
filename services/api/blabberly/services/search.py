"""Search across places, users and posts.

Flow per entity type:
1. Normalize the query (trim, lowercase); empty query -> []
2. Return the cached result for "<type>:<query>" if still fresh
3. Fetch loosely matching rows from the data source
4. Score with the search relevance scorers, sort and cache the full list;
   callers get the first `limit` entries

Places are derived from posts grouped by restaurant name; only restaurants whose
name contains the query are kept. Users and posts are kept only when they
score above 0.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
import logging

from blabberly.services.numeric import current_millis
from blabberly.services.place_rating import calculate_place_rating
from blabberly.services.records import EngagementRecord, group_by_place
from blabberly.services.search_scoring import (
    normalize_query,
    score_place_result,
    score_post_result,
    score_user_result,
)
from blabberly.settings import Settings, get_settings
from blabberly.stores.cache import (
    PREFIX_SEARCH_PLACES,
    PREFIX_SEARCH_POSTS,
    PREFIX_SEARCH_USERS,
    ResultCache,
)
from blabberly.stores.posts import DataSourceError, PostSource

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class PlaceResult:
    restaurant: str
    city: str
    rating: float
    total_posts: int
    score: float
    video_url: str | None = None


@dataclass(frozen=True)
class UserResult:
    uid: str
    handle: str
    display_name: str
    photo_url: str | None
    followers_count: int
    score: float


@dataclass(frozen=True)
class PostResult:
    post: EngagementRecord
    score: float


@dataclass(frozen=True)
class SearchResults:
    places: list[PlaceResult] = field(default_factory=list)
    users: list[UserResult] = field(default_factory=list)
    posts: list[PostResult] = field(default_factory=list)


def _dedupe(posts: list[EngagementRecord]) -> list[EngagementRecord]:
    seen: set[str] = set()
    unique = []
    for post in posts:
        if post.id and post.id in seen:
            continue
        seen.add(post.id)
        unique.append(post)
    return unique


class SearchService:
    """Entity search over a PostSource, memoized per query in a ResultCache."""

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
        self.cache = cache if cache is not None else ResultCache(self.settings.search_cache_ttl_seconds)
        self._clock_ms = clock_ms

    def _limit(self, limit: int | None) -> int:
        return limit if limit is not None and limit > 0 else self.settings.search_results_limit

    async def search_places(self, query: str, limit: int | None = None) -> list[PlaceResult]:
        """Places whose name contains the query, best match first."""
        q = normalize_query(query)
        if not q:
            return []
        limit = self._limit(limit)

        cache_key = f"{PREFIX_SEARCH_PLACES}{q}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached[:limit]

        try:
            posts = await self.source.fetch_posts_by_restaurant(q, self.settings.search_place_fetch_limit)
        except DataSourceError as e:
            logger.warning(f"[search] place query failed for {q!r}: {e}")
            return []

        now = self._clock_ms()
        results = []
        for place in group_by_place(_dedupe(posts)):
            if q not in place.restaurant.lower():
                continue
            rating = calculate_place_rating(place.posts, now)
            results.append(
                PlaceResult(
                    restaurant=place.restaurant,
                    city=place.city,
                    rating=rating,
                    total_posts=len(place.posts),
                    score=score_place_result(q, place.restaurant, rating),
                    video_url=place.video_url,
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        logger.info(f"[search] {cache_key!r} -> {len(results)} results")
        self.cache.set(cache_key, results)
        return results[:limit]

    async def search_users(self, query: str, limit: int | None = None) -> list[UserResult]:
        """Users by handle prefix, ranked by handle/display-name match and followers."""
        q = normalize_query(query)
        if not q:
            return []
        limit = self._limit(limit)

        cache_key = f"{PREFIX_SEARCH_USERS}{q}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached[:limit]

        try:
            users = await self.source.fetch_users_by_handle(q, self.settings.search_user_fetch_limit)
        except DataSourceError as e:
            logger.warning(f"[search] user query failed for {q!r}: {e}")
            return []

        results = []
        for user in users:
            if not user.uid:
                continue
            score = score_user_result(q, user.handle, user.display_name, user.followers_count)
            if score > 0:
                results.append(
                    UserResult(
                        uid=user.uid,
                        handle=user.handle,
                        display_name=user.display_name,
                        photo_url=user.photo_url,
                        followers_count=user.followers_count,
                        score=score,
                    )
                )

        results.sort(key=lambda r: r.score, reverse=True)
        logger.info(f"[search] {cache_key!r} -> {len(results)} results")
        self.cache.set(cache_key, results)
        return results[:limit]

    async def search_posts(self, query: str, limit: int | None = None) -> list[PostResult]:
        """Posts matching by dish, restaurant or caption."""
        q = normalize_query(query)
        if not q:
            return []
        limit = self._limit(limit)

        cache_key = f"{PREFIX_SEARCH_POSTS}{q}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached[:limit]

        try:
            posts = await self.source.fetch_posts_by_dish(q, self.settings.search_post_fetch_limit)
        except DataSourceError as e:
            logger.warning(f"[search] post query failed for {q!r}: {e}")
            return []

        results = []
        for post in _dedupe(posts):
            score = score_post_result(q, post)
            if score > 0:
                results.append(PostResult(post=post, score=score))

        results.sort(key=lambda r: r.score, reverse=True)
        logger.info(f"[search] {cache_key!r} -> {len(results)} results")
        self.cache.set(cache_key, results)
        return results[:limit]

    async def search_all(self, query: str, limit: int | None = None) -> SearchResults:
        """Run the three entity searches concurrently."""
        if not normalize_query(query):
            return SearchResults()
        places, users, posts = await asyncio.gather(
            self.search_places(query, limit),
            self.search_users(query, limit),
            self.search_posts(query, limit),
        )
        return SearchResults(places=places, users=users, posts=posts)
