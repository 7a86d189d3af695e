"""SQLAlchemy ORM models.

Models represent database tables:
- posts: User posts with dish, tags and engagement counters
- users: Public user profiles (handle search)
"""

from blabberly.models.post import Post
from blabberly.models.user import User

__all__ = ["Post", "User"]
