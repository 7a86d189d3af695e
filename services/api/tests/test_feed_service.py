import pytest

from blabberly.services.engagement import calculate_engagement_score, rank_by_engagement, rank_by_recency
from blabberly.services.feed import FeedMode, FeedService

from helpers import NOW_MS, FakePostSource, make_post


def test_engagement_score_per_hour():
    post = make_post(likes=10, comments=2, saves=1, hours_ago=2)
    assert calculate_engagement_score(post, NOW_MS) == pytest.approx(17 / 2)


def test_engagement_score_hour_floor():
    post = make_post(likes=1, hours_ago=0)
    assert calculate_engagement_score(post, NOW_MS) == pytest.approx(10)


def test_rank_by_engagement_and_recency():
    posts = [
        make_post(id="slow", likes=10, hours_ago=10),
        make_post(id="fast", likes=10, hours_ago=1),
        make_post(id="newest", likes=0, hours_ago=0.5),
    ]
    assert [s.post.id for s in rank_by_engagement(posts, NOW_MS)] == ["fast", "slow", "newest"]
    assert [p.id for p in rank_by_recency(posts)] == ["newest", "fast", "slow"]


@pytest.fixture
def source() -> FakePostSource:
    return FakePostSource(
        [
            make_post(id="a", likes=50, hours_ago=20),
            make_post(id="b", likes=5, hours_ago=1),
            make_post(id="c", likes=100, hours_ago=24 * 30),
        ]
    )


@pytest.mark.asyncio
async def test_feed_modes(source, settings, clock_ms):
    service = FeedService(source, settings=settings, clock_ms=clock_ms)

    engagement = await service.load_feed(FeedMode.ENGAGEMENT)
    assert [s.post.id for s in engagement] == ["b", "a"]

    recency = await service.load_feed(FeedMode.RECENCY, limit=1)
    assert [s.post.id for s in recency] == ["b"]
    assert recency[0].score == recency[0].post.created_at.millis


@pytest.mark.asyncio
async def test_feed_failure_is_empty(source, settings, clock_ms):
    source.fail = True
    service = FeedService(source, settings=settings, clock_ms=clock_ms)
    assert await service.load_feed() == []
