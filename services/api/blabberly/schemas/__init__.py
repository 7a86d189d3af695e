"""Pydantic schemas for API request/response validation."""

from blabberly.schemas.common import ErrorDetail, ErrorResponse
from blabberly.schemas.explore import (
    CategoriesResponse,
    CategoryOut,
    FeedResponse,
    NewPlaceOut,
    NewThisWeekResponse,
    PostCard,
    TopSpotOut,
    TopSpotsResponse,
    TrendingResponse,
)
from blabberly.schemas.place import (
    BestTimeOut,
    BucketOut,
    DishOut,
    PlaceDetailResponse,
    SimilarPlaceOut,
    SimilarPlacesResponse,
    VibeOut,
)
from blabberly.schemas.search import (
    PlaceResultOut,
    PlaceSearchResponse,
    PostSearchResponse,
    SearchAllResponse,
    UserResultOut,
    UserSearchResponse,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "CategoriesResponse",
    "CategoryOut",
    "FeedResponse",
    "NewPlaceOut",
    "NewThisWeekResponse",
    "PostCard",
    "TopSpotOut",
    "TopSpotsResponse",
    "TrendingResponse",
    "BestTimeOut",
    "BucketOut",
    "DishOut",
    "PlaceDetailResponse",
    "SimilarPlaceOut",
    "SimilarPlacesResponse",
    "VibeOut",
    "PlaceResultOut",
    "PlaceSearchResponse",
    "PostSearchResponse",
    "SearchAllResponse",
    "UserResultOut",
    "UserSearchResponse",
]
