"""Service providers for route dependencies.

Explore and search keep their result caches for the life of the process, so
those services are built once. Tests swap any of these through
`app.dependency_overrides`.
"""

from functools import lru_cache

from blabberly.services.explore import ExploreService
from blabberly.services.feed import FeedService
from blabberly.services.places import PlaceService
from blabberly.services.search import SearchService
from blabberly.stores.posts import PostSource, SqlPostSource


@lru_cache
def get_post_source() -> PostSource:
    return SqlPostSource()


@lru_cache
def get_explore_service() -> ExploreService:
    return ExploreService(get_post_source())


@lru_cache
def get_search_service() -> SearchService:
    return SearchService(get_post_source())


def get_place_service() -> PlaceService:
    return PlaceService(get_post_source())


def get_feed_service() -> FeedService:
    return FeedService(get_post_source())
