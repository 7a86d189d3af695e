"""Post/user data source.

The scoring core never queries storage itself. Services receive a PostSource
and await its fetches; every row is normalized into an EngagementRecord /
UserRecord right here, so nothing unvalidated reaches the scorers.

Text-predicate fetches are loose (case-insensitive substring);
the search scorers decide what actually matches. The row limit is applied
after ordering by match quality (exact name, then prefix, then substring).

Place pages are case-insensitive: "Taco Stand" and "TACO STAND" share one
slug, so their posts are merged into a single page, and neither shows up
as a similar place of the other.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol

from sqlalchemy import Select, case, func, select
from sqlalchemy.exc import SQLAlchemyError

from blabberly.models import Post, User
from blabberly.services.records import EngagementRecord, UserRecord
from blabberly.stores.postgres import get_session


class DataSourceError(RuntimeError):
    pass


class PostSource(Protocol):
    """Read-only access to posts and users."""

    async def fetch_recent_posts(self, window_days: int, limit: int) -> list[EngagementRecord]: ...

    async def fetch_posts_for_place(self, name: str, limit: int) -> list[EngagementRecord]: ...

    async def fetch_posts_in_city(self, city: str, limit: int) -> list[EngagementRecord]: ...

    async def fetch_posts_by_restaurant(self, query: str, limit: int) -> list[EngagementRecord]: ...

    async def fetch_posts_by_dish(self, query: str, limit: int) -> list[EngagementRecord]: ...

    async def fetch_users_by_handle(self, query: str, limit: int) -> list[UserRecord]: ...


def post_to_record(post: Post) -> EngagementRecord:
    """Convert an ORM row into the validated scoring record."""
    return EngagementRecord.from_raw(
        {
            "id": post.post_id,
            "author_id": post.author_id,
            "author_handle": post.author_handle,
            "restaurant": post.restaurant,
            "city": post.city,
            "dish": post.dish,
            "price": post.price,
            "caption": post.caption,
            "tags": post.tags,
            "video_url": post.video_url,
            "likes": post.likes,
            "comments_count": post.comments_count,
            "saves": post.saves,
            "created_at": post.created_at,
        }
    )


def user_to_record(user: User) -> UserRecord:
    return UserRecord.from_raw(
        {
            "uid": user.uid,
            "handle": user.handle,
            "display_name": user.display_name,
            "photo_url": user.photo_url,
            "followers_count": user.followers_count,
        }
    )


def _escape_like(query: str) -> str:
    return query.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def text_search_statement(column, query: str, limit: int) -> Select:
    """Posts whose `column` contains `query`, best name matches first.

    Exact names sort before prefix matches, which sort before other substring
    matches, so the row limit never crowds out a better name.
    """
    q = query.strip().lower()
    escaped = _escape_like(query)
    lowered = func.lower(column)
    match_rank = case(
        (lowered == q, 0),
        (lowered.like(f"{escaped}%", escape="\\"), 1),
        else_=2,
    )
    return (
        select(Post)
        .where(column.ilike(f"%{escaped}%", escape="\\"))
        .order_by(match_rank, column, Post.created_at.desc())
        .limit(limit)
    )


class SqlPostSource:
    """PostSource backed by the async SQLAlchemy session."""

    async def _posts(self, stmt) -> list[EngagementRecord]:
        try:
            async with get_session() as session:
                result = await session.execute(stmt)
                return [post_to_record(p) for p in result.scalars().all()]
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            raise DataSourceError(f"Post query failed: {e}") from e

    async def fetch_recent_posts(self, window_days: int, limit: int) -> list[EngagementRecord]:
        since = datetime.now(timezone.utc) - timedelta(days=window_days)
        stmt = (
            select(Post)
            .where(Post.created_at >= since)
            .order_by(Post.created_at.desc())
            .limit(limit)
        )
        return await self._posts(stmt)

    async def fetch_posts_for_place(self, name: str, limit: int) -> list[EngagementRecord]:
        # Slugs lose casing, so match the name case-insensitively
        stmt = (
            select(Post)
            .where(func.lower(Post.restaurant) == name.strip().lower())
            .order_by(Post.created_at.desc())
            .limit(limit)
        )
        return await self._posts(stmt)

    async def fetch_posts_in_city(self, city: str, limit: int) -> list[EngagementRecord]:
        stmt = (
            select(Post)
            .where(Post.city == city)
            .order_by(Post.created_at.desc())
            .limit(limit)
        )
        return await self._posts(stmt)

    async def fetch_posts_by_restaurant(self, query: str, limit: int) -> list[EngagementRecord]:
        return await self._posts(text_search_statement(Post.restaurant, query, limit))

    async def fetch_posts_by_dish(self, query: str, limit: int) -> list[EngagementRecord]:
        return await self._posts(text_search_statement(Post.dish, query, limit))

    async def fetch_users_by_handle(self, query: str, limit: int) -> list[UserRecord]:
        pattern = f"{_escape_like(query)}%"
        stmt = (
            select(User)
            .where(func.lower(User.handle).like(pattern, escape="\\"))
            .order_by(User.followers_count.desc())
            .limit(limit)
        )
        try:
            async with get_session() as session:
                result = await session.execute(stmt)
                return [user_to_record(u) for u in result.scalars().all()]
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            raise DataSourceError(f"User query failed: {e}") from e
