"""Test helpers: a fixed clock, a post factory and an in-memory PostSource."""

from datetime import datetime, timezone
from typing import Any

from blabberly.services.numeric import MS_PER_DAY, MS_PER_HOUR, Timestamp
from blabberly.services.records import EngagementRecord, UserRecord
from blabberly.stores.posts import DataSourceError

# Wednesday 2024-06-05 12:00 UTC
NOW = datetime(2024, 6, 5, 12, 0, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)


def make_post(
    *,
    id: str = "p1",
    restaurant: str = "Taco Stand",
    city: str = "Austin",
    author_id: str = "u1",
    dish: str = "Al Pastor",
    hours_ago: float = 1,
    likes: int = 10,
    comments: int = 0,
    saves: int = 0,
    tags: tuple[str, ...] = (),
    price: float | None = None,
    caption: str = "",
) -> EngagementRecord:
    return EngagementRecord(
        id=id,
        author_id=author_id,
        restaurant=restaurant,
        city=city,
        dish=dish,
        price=price,
        tags=tags,
        likes=likes,
        comments_count=comments,
        saves=saves,
        created_at=Timestamp.from_millis(NOW_MS - hours_ago * MS_PER_HOUR),
        caption=caption,
    )


def _match_rank(value: str, query: str) -> int:
    value = value.lower()
    if value == query:
        return 0
    if value.startswith(query):
        return 1
    return 2


class FakePostSource:
    """In-memory PostSource mirroring SqlPostSource's filters and ordering."""

    def __init__(
        self,
        posts: list[EngagementRecord] | None = None,
        users: list[UserRecord] | None = None,
        now_ms: int = NOW_MS,
    ) -> None:
        self.posts = list(posts or [])
        self.users = list(users or [])
        self.now_ms = now_ms
        self.fail = False
        self.calls: list[tuple[str, Any]] = []

    def _check(self, name: str, arg: Any) -> None:
        self.calls.append((name, arg))
        if self.fail:
            raise DataSourceError(f"{name} unavailable")

    def _newest(self, posts: list[EngagementRecord], limit: int) -> list[EngagementRecord]:
        return sorted(posts, key=lambda p: p.created_at.millis, reverse=True)[:limit]

    def _text_search(self, field: str, query: str, limit: int) -> list[EngagementRecord]:
        q = query.strip().lower()
        matches = [p for p in self.posts if q in getattr(p, field).lower()]
        matches = self._newest(matches, len(matches))
        return sorted(matches, key=lambda p: (_match_rank(getattr(p, field), q), getattr(p, field)))[:limit]

    async def fetch_recent_posts(self, window_days: int, limit: int) -> list[EngagementRecord]:
        self._check("recent", window_days)
        since = self.now_ms - window_days * MS_PER_DAY
        return self._newest([p for p in self.posts if p.created_at.millis >= since], limit)

    async def fetch_posts_for_place(self, name: str, limit: int) -> list[EngagementRecord]:
        self._check("place", name)
        return self._newest([p for p in self.posts if p.restaurant.lower() == name.strip().lower()], limit)

    async def fetch_posts_in_city(self, city: str, limit: int) -> list[EngagementRecord]:
        self._check("city", city)
        return self._newest([p for p in self.posts if p.city == city], limit)

    async def fetch_posts_by_restaurant(self, query: str, limit: int) -> list[EngagementRecord]:
        self._check("restaurant", query)
        return self._text_search("restaurant", query, limit)

    async def fetch_posts_by_dish(self, query: str, limit: int) -> list[EngagementRecord]:
        self._check("dish", query)
        return self._text_search("dish", query, limit)

    async def fetch_users_by_handle(self, query: str, limit: int) -> list[UserRecord]:
        self._check("users", query)
        matches = [u for u in self.users if u.handle.lower().startswith(query)]
        return sorted(matches, key=lambda u: u.followers_count, reverse=True)[:limit]
