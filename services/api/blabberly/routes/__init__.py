"""API routes."""

from fastapi import APIRouter

from blabberly.routes import explore, feed, places, search

api_router = APIRouter()

# Explore page sections
api_router.include_router(explore.router, prefix="/v1/explore", tags=["explore"])

# Search (places, users, posts)
api_router.include_router(search.router, prefix="/v1/search", tags=["search"])

# Place detail pages
api_router.include_router(places.router, prefix="/v1/places", tags=["places"])

# Home feed
api_router.include_router(feed.router, prefix="/v1/feed", tags=["feed"])
