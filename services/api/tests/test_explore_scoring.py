"""Tests for explore section scorers."""

import pytest

from blabberly.services.explore_scoring import (
    CategoryStats,
    calculate_category_score,
    calculate_new_place_score,
    calculate_spot_score,
    calculate_trending_score,
    rank_categories,
    rank_trending,
)

from helpers import NOW_MS, make_post


class TestTrending:
    def test_one_hour_old_post(self):
        post = make_post(likes=10, hours_ago=1)
        expected = 10 * 0.5 + (1 - 1 / 48) * 0.3 + 0.1 * 0.2
        assert calculate_trending_score(post, NOW_MS) == pytest.approx(expected)

    def test_brand_new_post_uses_hour_floor(self):
        post = make_post(likes=1, hours_ago=0)
        expected = (1 / 0.1) * 0.5 + (1 - 0.1 / 48) * 0.3 + 0.01 * 0.2
        assert calculate_trending_score(post, NOW_MS) == pytest.approx(expected)

    def test_velocity_boost_gone_after_two_days(self):
        post = make_post(likes=0, hours_ago=72)
        assert calculate_trending_score(post, NOW_MS) == 0.0

    def test_accepts_raw_mappings(self):
        raw = {"likes": 10, "created_at": NOW_MS}
        assert calculate_trending_score(raw, NOW_MS) > 0

    def test_rank_trending_orders_by_score(self):
        posts = [
            make_post(id="old", likes=100, hours_ago=40),
            make_post(id="hot", likes=50, hours_ago=1),
            make_post(id="cold", likes=0, hours_ago=100),
        ]
        assert [s.post.id for s in rank_trending(posts, NOW_MS)] == ["hot", "old", "cold"]

    def test_rank_trending_empty(self):
        assert rank_trending(None, NOW_MS) == []


class TestSpotScore:
    def test_max(self):
        score = calculate_spot_score(
            rating=5, total_posts=100, recent_posts=100, total_saves=10, total_engagement=30
        )
        assert score == pytest.approx(1.0)

    def test_zero(self):
        assert calculate_spot_score() == 0.0

    def test_components(self):
        score = calculate_spot_score(
            rating=4, total_posts=10, recent_posts=5, total_saves=2, total_engagement=60
        )
        assert score == pytest.approx(0.8 * 0.5 + 0.1 * 0.2 + 0.5 * 0.2 + 0.1 * 0.1)

    def test_bad_inputs_are_neutralized(self):
        assert calculate_spot_score(rating=float("nan"), total_posts=-3) == 0.0


class TestNewPlaceScore:
    def test_half(self):
        assert calculate_new_place_score(first_post_engagement=25, total_posts_in_week=5) == pytest.approx(0.5)

    def test_caps(self):
        assert calculate_new_place_score(first_post_engagement=500, total_posts_in_week=50) == pytest.approx(1.0)


class TestCategories:
    def test_taste_match_adds_flat_boost(self):
        stats = CategoryStats(token="tacos", label="Tacos", post_count=3, total_engagement=250, avg_recency=0.5)
        assert calculate_category_score(stats, ["tacos"]) == pytest.approx(0.7)
        assert calculate_category_score(stats) == pytest.approx(0.3)

    def test_rank_categories_personalizes(self):
        categories = [
            CategoryStats(token="pizza", label="Pizza", total_engagement=100),
            CategoryStats(token="sushi", label="Sushi", total_engagement=100),
            CategoryStats(token="ramen", label="Ramen"),
        ]
        ranked = rank_categories(categories, ["ramen"])

        assert [c.token for c in ranked] == ["ramen", "pizza", "sushi"]
        assert ranked[0].taste_match is True
        assert ranked[1].taste_match is False

    def test_label_falls_back_to_token(self):
        [ranked] = rank_categories([CategoryStats(token="bbq")])
        assert ranked.label == "bbq"

    def test_raw_mapping_scores_like_stats(self):
        raw = {"token": "tacos", "totalEngagement": 250, "avgRecency": 0.5}
        assert calculate_category_score(raw, ["tacos"]) == pytest.approx(0.7)
        assert calculate_category_score({"token": "tacos", "total_engagement": 250}) == pytest.approx(0.2)

    def test_unusable_category_scores_zero(self):
        assert calculate_category_score(None, ["tacos"]) == 0.0
        assert calculate_category_score(5) == 0.0

    def test_rank_categories_skips_malformed_entries(self):
        ranked = rank_categories([{"token": "tacos", "postCount": "3"}, 5, None, "pizza"], ["tacos"])
        assert [(c.token, c.label, c.post_count, c.taste_match) for c in ranked] == [("tacos", "tacos", 0, True)]

    @pytest.mark.parametrize("categories", [None, 5, "tacos", {"token": "tacos"}])
    def test_rank_categories_rejects_non_collections(self, categories):
        assert rank_categories(categories) == []
