"""Business logic services.

Scoring modules (numeric, place_rating, dishes, vibes, similarity, best_time,
explore_scoring, search_scoring, engagement) are pure: no I/O, explicit clock.
Caller services (explore, search, places, feed) fetch through a PostSource,
score, slice and cache. Routes call the caller services only.
"""
