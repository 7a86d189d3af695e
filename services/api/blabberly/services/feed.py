"""Home feed ordering over recent posts.

Modes:
- "engagement": local feed, engagement units per hour
- "recency": friends feed, newest first
"""

from collections.abc import Callable
from enum import Enum
import logging

from blabberly.services.engagement import rank_by_engagement, rank_by_recency
from blabberly.services.explore_scoring import ScoredPost
from blabberly.services.numeric import current_millis
from blabberly.settings import Settings, get_settings
from blabberly.stores.posts import DataSourceError, PostSource

logger = logging.getLogger("uvicorn.error")


class FeedMode(str, Enum):
    ENGAGEMENT = "engagement"
    RECENCY = "recency"


class FeedService:
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

    async def load_feed(self, mode: FeedMode = FeedMode.ENGAGEMENT, limit: int = 20) -> list[ScoredPost]:
        """Recent posts ordered for the given feed mode.

        Recency-ordered entries carry the post's created_at millis as their score.
        """
        try:
            posts = await self.source.fetch_recent_posts(
                self.settings.explore_window_days,
                self.settings.explore_recent_posts_limit,
            )
        except DataSourceError as e:
            logger.warning(f"[feed] failed to load posts: {e}")
            return []

        if mode is FeedMode.RECENCY:
            ranked = [ScoredPost(post=p, score=float(p.created_at.millis)) for p in rank_by_recency(posts)]
        else:
            ranked = rank_by_engagement(posts, self._clock_ms())
        return ranked[:limit]
