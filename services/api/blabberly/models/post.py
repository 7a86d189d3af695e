"""Post model.

A post is a user's check-in at a restaurant: dish, optional price, vibe tags
and engagement counters. Places are not stored; they are derived by grouping
posts on the restaurant name.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from blabberly.stores.postgres import Base


def generate_post_id() -> str:
    """Generate unique post ID."""
    return str(uuid4())


class Post(Base):
    """User post about a dish at a restaurant."""

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_city_created_at", "city", "created_at"),
        Index("ix_posts_restaurant_created_at", "restaurant", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # Public post ID (used in URLs)
    post_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        default=generate_post_id,
    )

    # Author
    author_id: Mapped[str] = mapped_column(String(128), index=True)
    author_handle: Mapped[str | None] = mapped_column(String(100))

    # Place
    restaurant: Mapped[str] = mapped_column(String(200))
    city: Mapped[str | None] = mapped_column(String(100))

    # Content
    dish: Mapped[str | None] = mapped_column(String(200), index=True)
    price: Mapped[float | None] = mapped_column()
    caption: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    video_url: Mapped[str | None] = mapped_column(Text)

    # Engagement counters
    likes: Mapped[int] = mapped_column(default=0)
    comments_count: Mapped[int] = mapped_column(default=0)
    saves: Mapped[int] = mapped_column(default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Post {self.post_id} @ {self.restaurant}>"
