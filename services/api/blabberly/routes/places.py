"""Place detail endpoints.

GET /v1/places/{slug}          - Rating, must-try items, vibes, best time, totals
GET /v1/places/{slug}/similar  - Similar places in the same city
"""

from fastapi import APIRouter, Depends, HTTPException, Path

from blabberly.routes.deps import get_place_service
from blabberly.schemas import (
    BestTimeOut,
    BucketOut,
    DishOut,
    PlaceDetailResponse,
    SimilarPlaceOut,
    SimilarPlacesResponse,
    VibeOut,
)
from blabberly.services.best_time import BestTimeAnalysis
from blabberly.services.places import PlaceDetail, PlaceService, slugify

router = APIRouter()


async def _load_place(service: PlaceService, slug: str) -> PlaceDetail:
    place = await service.load_place_data(slug)
    if place is None:
        raise HTTPException(status_code=404, detail=f"Place not found: {slug}")
    return place


def _best_time_out(analysis: BestTimeAnalysis | None) -> BestTimeOut | None:
    if analysis is None:
        return None
    return BestTimeOut(
        best_day=analysis.best_day,
        best_time=analysis.best_time,
        day_distribution=[BucketOut(label=b.label, count=b.count, percent=b.percent) for b in analysis.day_distribution],
        time_distribution=[BucketOut(label=b.label, count=b.count, percent=b.percent) for b in analysis.time_distribution],
    )


@router.get("/{slug}", response_model=PlaceDetailResponse)
async def get_place(
    slug: str = Path(..., min_length=1, max_length=120, pattern=r"^[a-z0-9-]+$", description="Place slug"),
    service: PlaceService = Depends(get_place_service),
) -> PlaceDetailResponse:
    """Get the place page aggregated from the posts that name it.

    Raises 404 when no post mentions the place.
    """
    place = await _load_place(service, slug)
    return PlaceDetailResponse(
        name=place.name,
        slug=place.slug,
        city=place.city,
        rating=place.rating,
        must_try_items=[
            DishOut(
                dish=d.dish,
                mentions=d.mentions,
                avg_likes=d.avg_likes,
                avg_saves=d.avg_saves,
                score=d.score,
                price=d.price,
            )
            for d in place.must_try_items
        ],
        vibes=[VibeOut(tag=v.tag, count=v.count) for v in place.vibes],
        best_time=_best_time_out(place.best_time),
        visitor_count=place.visitor_count,
        total_posts=place.total_posts,
        total_likes=place.total_likes,
        total_saves=place.total_saves,
    )


@router.get("/{slug}/similar", response_model=SimilarPlacesResponse)
async def get_similar_places(
    slug: str = Path(..., min_length=1, max_length=120, pattern=r"^[a-z0-9-]+$", description="Place slug"),
    service: PlaceService = Depends(get_place_service),
) -> SimilarPlacesResponse:
    place = await _load_place(service, slug)
    similar = await service.load_similar_places(place.name, place.city, place.posts)
    return SimilarPlacesResponse(
        places=[
            SimilarPlaceOut(
                restaurant=s.restaurant,
                slug=slugify(s.restaurant),
                city=s.city,
                score=s.score,
                post_count=s.post_count,
            )
            for s in similar
        ]
    )
