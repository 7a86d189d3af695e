"""Explore page endpoints.

GET /v1/explore/trending       - Trending posts of the last week
GET /v1/explore/top-spots      - Places ranked by spot score
GET /v1/explore/new-this-week  - Places first seen this week
GET /v1/explore/categories     - Explore categories ordered for ?taste=

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends, Query

from blabberly.routes.deps import get_explore_service
from blabberly.schemas import (
    CategoriesResponse,
    CategoryOut,
    NewPlaceOut,
    NewThisWeekResponse,
    PostCard,
    TopSpotOut,
    TopSpotsResponse,
    TrendingResponse,
)
from blabberly.services.explore import ExploreService
from blabberly.services.records import EngagementRecord

router = APIRouter()


def post_card(post: EngagementRecord, score: float) -> PostCard:
    return PostCard(
        post_id=post.id,
        author_id=post.author_id,
        author_handle=post.author_handle,
        restaurant=post.restaurant,
        city=post.city,
        dish=post.dish,
        caption=post.caption,
        price=post.price,
        tags=list(post.tags),
        likes=post.likes,
        comments_count=post.comments_count,
        saves=post.saves,
        created_at_ms=post.created_at.millis,
        video_url=post.video_url,
        score=max(0.0, score),
    )


@router.get("/trending", response_model=TrendingResponse)
async def get_trending(service: ExploreService = Depends(get_explore_service)) -> TrendingResponse:
    scored = await service.load_trending_posts()
    return TrendingResponse(posts=[post_card(s.post, s.score) for s in scored])


@router.get("/top-spots", response_model=TopSpotsResponse)
async def get_top_spots(service: ExploreService = Depends(get_explore_service)) -> TopSpotsResponse:
    spots = await service.load_top_spots()
    return TopSpotsResponse(
        spots=[
            TopSpotOut(
                restaurant=s.restaurant,
                city=s.city,
                rating=s.rating,
                total_posts=s.total_posts,
                recent_posts=s.recent_posts,
                spot_score=s.score,
                video_url=s.video_url,
            )
            for s in spots
        ]
    )


@router.get("/new-this-week", response_model=NewThisWeekResponse)
async def get_new_this_week(
    service: ExploreService = Depends(get_explore_service),
) -> NewThisWeekResponse:
    places = await service.load_new_this_week()
    return NewThisWeekResponse(
        places=[
            NewPlaceOut(
                restaurant=p.restaurant,
                city=p.city,
                post_count=p.post_count,
                score=p.score,
                video_url=p.video_url,
            )
            for p in places
        ]
    )


@router.get("/categories", response_model=CategoriesResponse)
async def get_categories(
    taste: list[str] = Query(
        default=[],
        description="Taste preference tokens of the viewer (repeatable)",
        examples=[["tacos", "rooftop"]],
    ),
    service: ExploreService = Depends(get_explore_service),
) -> CategoriesResponse:
    """Get explore categories, taste matches boosted."""
    prefs = [t.strip().lower() for t in taste if t.strip()]
    ranked = await service.load_categories(prefs)
    return CategoriesResponse(
        categories=[
            CategoryOut(
                token=c.token,
                label=c.label,
                post_count=c.post_count,
                score=c.score,
                taste_match=c.taste_match,
            )
            for c in ranked
        ]
    )
