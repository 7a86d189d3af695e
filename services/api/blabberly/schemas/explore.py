"""Schemas for the Explore endpoints (/v1/explore/*) and the feed."""

from pydantic import BaseModel, Field


class PostCard(BaseModel):
    """A post as shown in feeds and post search results."""

    post_id: str = Field(alias="postId")
    author_id: str = Field(alias="authorId")
    author_handle: str = Field(alias="authorHandle", default="")
    restaurant: str
    city: str
    dish: str
    caption: str = ""
    price: float | None = None
    tags: list[str] = Field(default_factory=list)
    likes: int = Field(ge=0)
    comments_count: int = Field(alias="commentsCount", ge=0)
    saves: int = Field(ge=0)
    created_at_ms: int = Field(alias="createdAtMs", ge=0)
    video_url: str | None = Field(alias="videoURL", default=None)
    score: float = Field(ge=0)

    model_config = {"populate_by_name": True}


class TopSpotOut(BaseModel):
    restaurant: str
    city: str
    rating: float = Field(ge=0, le=5)
    total_posts: int = Field(alias="totalPosts", ge=0)
    recent_posts: int = Field(alias="recentPosts", ge=0)
    spot_score: float = Field(alias="spotScore", ge=0)
    video_url: str | None = Field(alias="videoURL", default=None)

    model_config = {"populate_by_name": True}


class NewPlaceOut(BaseModel):
    restaurant: str
    city: str
    post_count: int = Field(alias="postCount", ge=0)
    score: float = Field(ge=0)
    video_url: str | None = Field(alias="videoURL", default=None)

    model_config = {"populate_by_name": True}


class CategoryOut(BaseModel):
    token: str
    label: str
    post_count: int = Field(alias="postCount", ge=0)
    score: float = Field(ge=0)
    taste_match: bool = Field(alias="tasteMatch")

    model_config = {"populate_by_name": True}


class TrendingResponse(BaseModel):
    posts: list[PostCard]


class TopSpotsResponse(BaseModel):
    spots: list[TopSpotOut]


class NewThisWeekResponse(BaseModel):
    places: list[NewPlaceOut]


class CategoriesResponse(BaseModel):
    categories: list[CategoryOut]


class FeedResponse(BaseModel):
    mode: str
    posts: list[PostCard]
