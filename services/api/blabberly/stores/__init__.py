"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: engine, sessions, the post/user data source
- Result cache: in-process TTL memoization for explore and search

No business/ranking logic in stores - that belongs in services.
"""
