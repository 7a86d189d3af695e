"""Validated records handed to the scoring core.

Rows coming out of the data source are normalized exactly once here:
numeric counters become non-negative ints, prices become floats or None,
tags become a tuple of strings, and created_at becomes a Timestamp.
Scorers accept either these records or raw mappings; raw mappings go through
the same `from_raw` pass via `as_records`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from blabberly.services.numeric import UNKNOWN_TIME, Timestamp, engagement_units, safe_number


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _count(value: Any) -> int:
    return max(0, int(safe_number(value)))


def _price(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = safe_number(value, fallback=-1)
    return float(number) if number >= 0 else None


def _tags(value: Any) -> tuple[str, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return ()
    return tuple(str(tag) for tag in value if tag is not None)


@dataclass(frozen=True)
class EngagementRecord:
    """A post with its engagement counters."""

    id: str = ""
    author_id: str = ""
    restaurant: str = ""
    city: str = ""
    dish: str = ""
    price: float | None = None
    tags: tuple[str, ...] = ()
    likes: int = 0
    comments_count: int = 0
    saves: int = 0
    created_at: Timestamp = UNKNOWN_TIME
    video_url: str | None = None
    caption: str = ""
    author_handle: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> EngagementRecord:
        """Build a record from a store row (camelCase or snake_case keys)."""
        if not isinstance(raw, Mapping):
            return cls()
        return cls(
            id=_text(_pick(raw, "id", "_docId", "post_id")),
            author_id=_text(_pick(raw, "author_id", "authorId")),
            restaurant=_text(_pick(raw, "restaurant")),
            city=_text(_pick(raw, "city")),
            dish=_text(_pick(raw, "dish")),
            price=_price(_pick(raw, "price")),
            tags=_tags(_pick(raw, "tags")),
            likes=_count(_pick(raw, "likes")),
            comments_count=_count(_pick(raw, "comments_count", "commentsCount")),
            saves=_count(_pick(raw, "saves")),
            created_at=Timestamp.coerce(_pick(raw, "created_at", "createdAt")),
            video_url=_text(_pick(raw, "video_url", "videoURL")) or None,
            caption=_text(_pick(raw, "caption")),
            author_handle=_text(_pick(raw, "author_handle", "authorHandle")),
        )

    @property
    def engagement(self) -> float:
        return engagement_units(self.likes, self.comments_count, self.saves)

    def normalized_tags(self) -> list[str]:
        """Tags trimmed and lowercased, empties dropped."""
        out = []
        for tag in self.tags:
            t = tag.strip().lower()
            if t:
                out.append(t)
        return out


@dataclass(frozen=True)
class UserRecord:
    """Public profile fields needed for user search."""

    uid: str = ""
    handle: str = ""
    display_name: str = ""
    photo_url: str | None = None
    followers_count: int = 0

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> UserRecord:
        if not isinstance(raw, Mapping):
            return cls()
        return cls(
            uid=_text(_pick(raw, "uid", "id")),
            handle=_text(_pick(raw, "handle")),
            display_name=_text(_pick(raw, "display_name", "displayName")),
            photo_url=_text(_pick(raw, "photo_url", "photoURL")) or None,
            followers_count=_count(_pick(raw, "followers_count", "followersCount")),
        )


@dataclass
class PlaceAggregate:
    """Posts grouped under one restaurant name (exact, case-sensitive key)."""

    restaurant: str
    city: str = ""
    video_url: str | None = None
    posts: list[EngagementRecord] = field(default_factory=list)


def as_record(post: EngagementRecord | Mapping[str, Any]) -> EngagementRecord:
    if isinstance(post, EngagementRecord):
        return post
    return EngagementRecord.from_raw(post)


def as_records(posts: Iterable[EngagementRecord | Mapping[str, Any]] | None) -> list[EngagementRecord]:
    """Normalize a collection of posts; None or a non-iterable yields []."""
    if posts is None or isinstance(posts, (str, bytes, Mapping)):
        return []
    try:
        return [as_record(p) for p in posts if p is not None]
    except TypeError:
        return []


def group_by_place(
    posts: Iterable[EngagementRecord | Mapping[str, Any]] | None,
    *,
    exclude: str | None = None,
) -> list[PlaceAggregate]:
    """Group posts by restaurant, keeping first-seen order.

    Posts without a restaurant are skipped; `exclude` drops one restaurant in
    any casing, since place pages merge casings under one slug.
    """
    excluded = (exclude or "").strip().lower()
    places: dict[str, PlaceAggregate] = {}
    for post in as_records(posts):
        name = post.restaurant
        if not name or (excluded and name.lower() == excluded):
            continue
        place = places.get(name)
        if place is None:
            place = PlaceAggregate(restaurant=name, city=post.city, video_url=post.video_url)
            places[name] = place
        place.posts.append(post)
    return list(places.values())
