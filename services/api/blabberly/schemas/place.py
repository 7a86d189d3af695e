"""Schemas for the place detail endpoints (/v1/places/*)."""

from pydantic import BaseModel, Field


class DishOut(BaseModel):
    dish: str
    mentions: int = Field(ge=1)
    avg_likes: int = Field(alias="avgLikes", ge=0)
    avg_saves: int = Field(alias="avgSaves", ge=0)
    score: float = Field(ge=0)
    price: float | None = None

    model_config = {"populate_by_name": True}


class VibeOut(BaseModel):
    tag: str
    count: int = Field(ge=1)


class BucketOut(BaseModel):
    label: str
    count: int = Field(ge=0)
    percent: int = Field(ge=0, le=100)


class BestTimeOut(BaseModel):
    best_day: str = Field(alias="bestDay")
    best_time: str = Field(alias="bestTime")
    day_distribution: list[BucketOut] = Field(alias="dayDistribution")
    time_distribution: list[BucketOut] = Field(alias="timeDistribution")

    model_config = {"populate_by_name": True}


class PlaceDetailResponse(BaseModel):
    """Response payload for GET /v1/places/{slug}."""

    name: str
    slug: str
    city: str
    rating: float = Field(ge=0, le=5)
    must_try_items: list[DishOut] = Field(alias="mustTryItems")
    vibes: list[VibeOut]
    best_time: BestTimeOut | None = Field(alias="bestTime", default=None)
    visitor_count: int = Field(alias="visitorCount", ge=0)
    total_posts: int = Field(alias="totalPosts", ge=0)
    total_likes: int = Field(alias="totalLikes", ge=0)
    total_saves: int = Field(alias="totalSaves", ge=0)

    model_config = {"populate_by_name": True}


class SimilarPlaceOut(BaseModel):
    restaurant: str
    slug: str
    city: str
    score: float = Field(ge=0)
    post_count: int = Field(alias="postCount", ge=1)

    model_config = {"populate_by_name": True}


class SimilarPlacesResponse(BaseModel):
    places: list[SimilarPlaceOut]
