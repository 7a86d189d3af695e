"""Schemas for the search endpoints (/v1/search*)."""

from pydantic import BaseModel, Field

from blabberly.schemas.explore import PostCard


class PlaceResultOut(BaseModel):
    restaurant: str
    slug: str
    city: str
    rating: float = Field(ge=0, le=5)
    total_posts: int = Field(alias="totalPosts", ge=0)
    score: float = Field(ge=0)
    video_url: str | None = Field(alias="videoURL", default=None)

    model_config = {"populate_by_name": True}


class UserResultOut(BaseModel):
    uid: str
    handle: str
    display_name: str = Field(alias="displayName", default="")
    photo_url: str | None = Field(alias="photoURL", default=None)
    followers_count: int = Field(alias="followersCount", ge=0)
    score: float = Field(ge=0)

    model_config = {"populate_by_name": True}


class PlaceSearchResponse(BaseModel):
    query: str
    places: list[PlaceResultOut]


class UserSearchResponse(BaseModel):
    query: str
    users: list[UserResultOut]


class PostSearchResponse(BaseModel):
    query: str
    posts: list[PostCard]


class SearchAllResponse(BaseModel):
    """Response payload for GET /v1/search (all entity types)."""

    query: str
    places: list[PlaceResultOut]
    users: list[UserResultOut]
    posts: list[PostCard]
