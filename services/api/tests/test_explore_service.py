"""Tests for the Explore service (sections, caching, failure handling)."""

import pytest

from blabberly.services.explore import (
    EXPLORE_CATEGORIES,
    ExploreService,
    count_categories,
    merge_categories,
    select_new_this_week,
)
from blabberly.services.explore_scoring import calculate_new_place_score
from blabberly.stores.cache import ResultCache

from helpers import NOW_MS, FakePostSource, make_post


def _posts():
    return [
        make_post(id="t1", restaurant="Taco Stand", likes=10, hours_ago=30, tags=("tacos",)),
        make_post(id="t2", restaurant="Taco Stand", likes=40, hours_ago=2, tags=("Tacos",)),
        make_post(id="r1", restaurant="Ramen Bar", likes=50, hours_ago=20, tags=("ramen", "late_night")),
        make_post(id="r2", restaurant="Ramen Bar", likes=5, hours_ago=6, tags=("ramen",)),
        make_post(id="r3", restaurant="Ramen Bar", likes=8, hours_ago=3),
        make_post(id="p1", restaurant="Pizza Place", likes=90, hours_ago=5, tags=("pizza",)),
        make_post(id="old", restaurant="Pizza Place", likes=500, hours_ago=24 * 10),
    ]


@pytest.fixture
def source() -> FakePostSource:
    return FakePostSource(_posts())


@pytest.fixture
def service(source, settings, clock_ms) -> ExploreService:
    return ExploreService(source, settings=settings, clock_ms=clock_ms)


def test_new_this_week_requires_two_posts():
    recent = [p for p in _posts() if p.id != "old"]
    places = select_new_this_week(recent, NOW_MS)

    assert [p.restaurant for p in places] == ["Ramen Bar", "Taco Stand"]
    ramen, taco = places
    assert ramen.post_count == 3
    assert ramen.score == pytest.approx(
        calculate_new_place_score(first_post_engagement=50, total_posts_in_week=3)
    )
    assert taco.score == pytest.approx(
        calculate_new_place_score(first_post_engagement=10, total_posts_in_week=2)
    )


def test_new_this_week_skips_places_first_seen_before_window():
    posts = [
        make_post(id="a", restaurant="Old Diner", hours_ago=24 * 8),
        make_post(id="b", restaurant="Old Diner", hours_ago=1),
    ]
    assert select_new_this_week(posts, NOW_MS) == []


def test_count_categories_normalizes_tags():
    counts = {c.token: c for c in count_categories(_posts()[:2], NOW_MS)}
    assert counts["tacos"].post_count == 2
    assert counts["tacos"].total_engagement == 50
    assert 0 < counts["tacos"].avg_recency < 1


def test_merge_categories_keeps_fixed_order():
    merged = merge_categories(count_categories(_posts(), NOW_MS))
    assert [c.token for c in merged] == [token for token, _ in EXPLORE_CATEGORIES]
    by_token = {c.token: c for c in merged}
    assert by_token["ramen"].post_count == 2
    assert by_token["ramen"].label == "Ramen"
    assert by_token["sushi"].post_count == 0


@pytest.mark.asyncio
async def test_trending_excludes_posts_outside_window(service: ExploreService):
    trending = await service.load_trending_posts()
    ids = [s.post.id for s in trending]
    assert "old" not in ids
    assert len(ids) == 6
    scores = [s.score for s in trending]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
async def test_top_spots(service: ExploreService):
    spots = await service.load_top_spots()
    assert {s.restaurant for s in spots} == {"Taco Stand", "Ramen Bar", "Pizza Place"}
    assert [s.score for s in spots] == sorted((s.score for s in spots), reverse=True)
    for spot in spots:
        assert spot.recent_posts == spot.total_posts
        assert 1.0 <= spot.rating <= 5.0


@pytest.mark.asyncio
async def test_categories_boost_taste(service: ExploreService):
    categories = await service.load_categories(["pizza"])
    assert len(categories) == len(EXPLORE_CATEGORIES)
    assert categories[0].token == "pizza"
    assert categories[0].taste_match is True


@pytest.mark.asyncio
async def test_sections_share_one_fetch(service: ExploreService, source: FakePostSource):
    await service.load_trending_posts()
    await service.load_top_spots()
    await service.load_new_this_week()
    await service.load_categories()
    await service.load_categories(["tacos"])

    assert [name for name, _ in source.calls] == ["recent"]


@pytest.mark.asyncio
async def test_cache_expires(source, settings, clock_ms):
    now = [0.0]
    cache = ResultCache(ttl_seconds=settings.explore_cache_ttl_seconds, clock=lambda: now[0])
    service = ExploreService(source, cache=cache, settings=settings, clock_ms=clock_ms)

    await service.load_trending_posts()
    now[0] += settings.explore_cache_ttl_seconds
    await service.load_trending_posts()

    assert len(source.calls) == 2


@pytest.mark.asyncio
async def test_failed_fetch_is_not_cached(service: ExploreService, source: FakePostSource):
    source.fail = True
    assert await service.load_trending_posts() == []
    assert await service.load_top_spots() == []

    source.fail = False
    trending = await service.load_trending_posts()
    assert len(trending) == 6


@pytest.mark.asyncio
async def test_empty_source(settings, clock_ms):
    service = ExploreService(FakePostSource(), settings=settings, clock_ms=clock_ms)
    assert await service.load_new_this_week() == []
    categories = await service.load_categories()
    assert all(c.post_count == 0 for c in categories)
