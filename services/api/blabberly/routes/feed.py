"""Home feed endpoint.

GET /v1/feed?mode=engagement|recency
"""

from fastapi import APIRouter, Depends, Query

from blabberly.routes.deps import get_feed_service
from blabberly.routes.explore import post_card
from blabberly.schemas import FeedResponse
from blabberly.services.feed import FeedMode, FeedService

router = APIRouter()


@router.get("", response_model=FeedResponse)
async def get_feed(
    mode: FeedMode = Query(default=FeedMode.ENGAGEMENT, description="Feed ordering"),
    limit: int = Query(default=20, ge=1, le=100),
    service: FeedService = Depends(get_feed_service),
) -> FeedResponse:
    ranked = await service.load_feed(mode, limit)
    return FeedResponse(mode=mode.value, posts=[post_card(s.post, s.score) for s in ranked])
