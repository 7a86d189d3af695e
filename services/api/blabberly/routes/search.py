"""Search endpoints.

GET /v1/search?q=         - Places, users and posts at once
GET /v1/search/places?q=  - Places by name
GET /v1/search/users?q=   - Users by handle / display name
GET /v1/search/posts?q=   - Posts by dish, restaurant or caption
"""

from fastapi import APIRouter, Depends, Query

from blabberly.routes.deps import get_search_service
from blabberly.routes.explore import post_card
from blabberly.schemas import (
    PlaceResultOut,
    PlaceSearchResponse,
    PostCard,
    PostSearchResponse,
    SearchAllResponse,
    UserResultOut,
    UserSearchResponse,
)
from blabberly.services.places import slugify
from blabberly.services.search import PlaceResult, PostResult, SearchService, UserResult

router = APIRouter()


def _place_out(r: PlaceResult) -> PlaceResultOut:
    return PlaceResultOut(
        restaurant=r.restaurant,
        slug=slugify(r.restaurant),
        city=r.city,
        rating=r.rating,
        total_posts=r.total_posts,
        score=r.score,
        video_url=r.video_url,
    )


def _user_out(r: UserResult) -> UserResultOut:
    return UserResultOut(
        uid=r.uid,
        handle=r.handle,
        display_name=r.display_name,
        photo_url=r.photo_url,
        followers_count=r.followers_count,
        score=r.score,
    )


def _posts_out(results: list[PostResult]) -> list[PostCard]:
    return [post_card(r.post, r.score) for r in results]


@router.get("", response_model=SearchAllResponse)
async def search_all(
    q: str = Query(default="", max_length=100, description="Search text"),
    limit: int | None = Query(default=None, ge=1, le=50, description="Max results per type"),
    service: SearchService = Depends(get_search_service),
) -> SearchAllResponse:
    results = await service.search_all(q, limit)
    return SearchAllResponse(
        query=q,
        places=[_place_out(r) for r in results.places],
        users=[_user_out(r) for r in results.users],
        posts=_posts_out(results.posts),
    )


@router.get("/places", response_model=PlaceSearchResponse)
async def search_places(
    q: str = Query(default="", max_length=100),
    limit: int | None = Query(default=None, ge=1, le=50),
    service: SearchService = Depends(get_search_service),
) -> PlaceSearchResponse:
    results = await service.search_places(q, limit)
    return PlaceSearchResponse(query=q, places=[_place_out(r) for r in results])


@router.get("/users", response_model=UserSearchResponse)
async def search_users(
    q: str = Query(default="", max_length=100),
    limit: int | None = Query(default=None, ge=1, le=50),
    service: SearchService = Depends(get_search_service),
) -> UserSearchResponse:
    results = await service.search_users(q, limit)
    return UserSearchResponse(query=q, users=[_user_out(r) for r in results])


@router.get("/posts", response_model=PostSearchResponse)
async def search_posts(
    q: str = Query(default="", max_length=100),
    limit: int | None = Query(default=None, ge=1, le=50),
    service: SearchService = Depends(get_search_service),
) -> PostSearchResponse:
    results = await service.search_posts(q, limit)
    return PostSearchResponse(query=q, posts=_posts_out(results))
