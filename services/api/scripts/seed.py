#!/usr/bin/env python3
"""Seed database with demo data.

Creates:
- Demo users (handle search)
- Demo posts across a few restaurants in two cities, spread over the last
  two weeks so every Explore section has something to show

Seed script is idempotent: users are matched by uid, posts by post_id.

Usage:
    cd services/api
    python -m scripts.seed
"""

import asyncio
from datetime import datetime, timedelta, timezone
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blabberly.models import Post, User
from blabberly.stores.postgres import close_db, create_tables, get_session, init_db

load_dotenv()

# ============================================================
# Users
# ============================================================

USERS = [
    {"uid": "demo-maria", "handle": "mariaeats", "display_name": "Maria Lopez", "followers_count": 1840},
    {"uid": "demo-kenji", "handle": "kenjislurps", "display_name": "Kenji Sato", "followers_count": 620},
    {"uid": "demo-ada", "handle": "ada.brunches", "display_name": "Ada Okafor", "followers_count": 95},
    {"uid": "demo-sam", "handle": "samtacos", "display_name": "Sam Rivera", "followers_count": 12},
]

# ============================================================
# Posts (hours_ago is relative to seeding time)
# ============================================================

POSTS = [
    # Austin - Taco Stand
    {"post_id": "demo-1", "author": "demo-maria", "restaurant": "Taco Stand", "city": "Austin", "dish": "Al Pastor", "price": 4.5, "tags": ["tacos", "late_night", "street_food"], "likes": 84, "comments": 9, "saves": 21, "hours_ago": 3},
    {"post_id": "demo-2", "author": "demo-sam", "restaurant": "Taco Stand", "city": "Austin", "dish": "Al Pastor", "price": 4.5, "tags": ["tacos"], "likes": 31, "comments": 2, "saves": 6, "hours_ago": 40},
    {"post_id": "demo-3", "author": "demo-kenji", "restaurant": "Taco Stand", "city": "Austin", "dish": "Horchata", "price": 3.0, "tags": ["late_night"], "likes": 12, "comments": 1, "saves": 0, "hours_ago": 150},
    # Austin - Ramen Bar
    {"post_id": "demo-4", "author": "demo-kenji", "restaurant": "Ramen Bar", "city": "Austin", "dish": "Tonkotsu", "price": 16.0, "tags": ["ramen", "date_night"], "likes": 140, "comments": 22, "saves": 40, "hours_ago": 20},
    {"post_id": "demo-5", "author": "demo-maria", "restaurant": "Ramen Bar", "city": "Austin", "dish": "Spicy Miso", "price": 17.0, "tags": ["ramen"], "likes": 56, "comments": 4, "saves": 11, "hours_ago": 60},
    # Austin - The Rooftop
    {"post_id": "demo-6", "author": "demo-ada", "restaurant": "The Rooftop", "city": "Austin", "dish": "Mimosa Flight", "price": 22.0, "tags": ["brunch", "rooftop", "craft_cocktails"], "likes": 73, "comments": 6, "saves": 18, "hours_ago": 26},
    {"post_id": "demo-7", "author": "demo-maria", "restaurant": "The Rooftop", "city": "Austin", "dish": "Chicken & Waffles", "price": 19.0, "tags": ["brunch", "rooftop"], "likes": 45, "comments": 3, "saves": 9, "hours_ago": 24 * 12},
    # Portland - Coffee Lab
    {"post_id": "demo-8", "author": "demo-ada", "restaurant": "Coffee Lab", "city": "Portland", "dish": "Cortado", "price": 4.0, "tags": ["coffee"], "likes": 22, "comments": 1, "saves": 3, "hours_ago": 8},
]


async def seed_database() -> None:
    """Seed database with demo data."""
    await init_db()
    await create_tables()

    try:
        async with get_session() as session:
            print("Seeding database...")

            print("\nCreating users...")
            handles = await seed_users(session)

            print("\nCreating posts...")
            await seed_posts(session, handles)

        print("\nDatabase seeded successfully!")
    finally:
        await close_db()


async def seed_users(session: AsyncSession) -> dict[str, str]:
    """Seed users and return mapping of uid -> handle."""
    handles: dict[str, str] = {}

    for user_def in USERS:
        result = await session.execute(select(User).where(User.uid == user_def["uid"]))
        existing = result.scalar_one_or_none()
        handles[user_def["uid"]] = user_def["handle"]

        if existing:
            print(f"  - @{user_def['handle']} (exists)")
            continue

        session.add(User(**user_def))
        print(f"  + @{user_def['handle']}")

    await session.flush()
    return handles


async def seed_posts(session: AsyncSession, handles: dict[str, str]) -> None:
    now = datetime.now(timezone.utc)

    for post_def in POSTS:
        result = await session.execute(select(Post).where(Post.post_id == post_def["post_id"]))
        if result.scalar_one_or_none():
            print(f"  - {post_def['post_id']} (exists)")
            continue

        session.add(
            Post(
                post_id=post_def["post_id"],
                author_id=post_def["author"],
                author_handle=handles.get(post_def["author"]),
                restaurant=post_def["restaurant"],
                city=post_def["city"],
                dish=post_def["dish"],
                price=post_def["price"],
                tags=post_def["tags"],
                likes=post_def["likes"],
                comments_count=post_def["comments"],
                saves=post_def["saves"],
                created_at=now - timedelta(hours=post_def["hours_ago"]),
            )
        )
        print(f"  + {post_def['post_id']} {post_def['dish']} @ {post_def['restaurant']}")


if __name__ == "__main__":
    asyncio.run(seed_database())
