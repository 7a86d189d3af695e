import pytest

from blabberly.services.records import PlaceAggregate
from blabberly.services.similarity import NEUTRAL_PRICE_SCORE, find_similar_places

from helpers import make_post


def test_place_compared_with_itself_scores_one():
    posts = [
        make_post(id="1", author_id="a", tags=("tacos",), price=10),
        make_post(id="2", author_id="b", tags=("late_night",), price=14),
    ]
    candidate = PlaceAggregate(restaurant="Taco Stand", city="Austin", posts=posts)

    [result] = find_similar_places(posts, [candidate])

    assert result.shared_visitors == 1.0
    assert result.shared_tags == 1.0
    assert result.price_match == 1.0
    assert result.proximity == 1.0
    assert result.score == pytest.approx(1.0)


def test_overlap_saturates_at_five_shared():
    target = [make_post(id=str(i), author_id=f"u{i}") for i in range(8)]
    candidate = {"restaurant": "Other", "posts": [make_post(id=f"o{i}", restaurant="Other", author_id=f"u{i}") for i in range(5)]}

    [result] = find_similar_places(target, [candidate])
    assert result.shared_visitors == 1.0


def test_price_is_neutral_without_prices():
    target = [make_post(id="1", price=20)]
    candidate = PlaceAggregate(restaurant="Other", posts=[make_post(id="2", restaurant="Other")])

    [result] = find_similar_places(target, [candidate])
    assert result.price_match == NEUTRAL_PRICE_SCORE


def test_price_difference_decays_linearly():
    target = [make_post(id="1", price=10)]
    candidate = PlaceAggregate(restaurant="Other", posts=[make_post(id="2", restaurant="Other", price=35)])

    [result] = find_similar_places(target, [candidate])
    assert result.price_match == pytest.approx(0.5)


def test_different_city_has_no_proximity():
    target = [make_post(id="1", city="Austin")]
    candidate = PlaceAggregate(restaurant="Other", posts=[make_post(id="2", restaurant="Other", city="austin")])
    far = PlaceAggregate(restaurant="Far", posts=[make_post(id="3", restaurant="Far", city="Dallas")])

    results = find_similar_places(target, [far, candidate])
    assert [r.restaurant for r in results] == ["Other", "Far"]
    assert results[0].proximity == 1.0
    assert results[1].proximity == 0.0


def test_empty_inputs():
    assert find_similar_places([], [PlaceAggregate(restaurant="x", posts=[make_post()])]) == []
    assert find_similar_places([make_post()], []) == []
    assert find_similar_places([make_post()], [PlaceAggregate(restaurant="empty")]) == []


@pytest.mark.parametrize("candidates", [None, 5, "Other", {"restaurant": "Other"}])
def test_candidates_that_are_not_collections_give_nothing(candidates):
    assert find_similar_places([make_post()], candidates) == []


def test_malformed_candidates_are_skipped():
    other = {"restaurant": "Other", "posts": [make_post(id="2", restaurant="Other")]}
    results = find_similar_places([make_post()], iter([5, None, other]))
    assert [r.restaurant for r in results] == ["Other"]
