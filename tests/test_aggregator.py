from decimal import Decimal

import pytest

from schemas.tender import CategoryScore
from scoring.aggregator import (
    aggregate_overall_score,
    build_evaluation,
    finalize_evaluation,
    missing_required_categories,
    recommendation_for,
    round_half_up,
)
from scoring.errors import AggregationError, ConfigurationError, MissingScoreError

from factories import make_bidder, make_category, make_tender


def scores(**values):
    return {category_id: CategoryScore(score=score) for category_id, score in values.items()}


@pytest.mark.parametrize("value, expected", [
    ("82.5", 83),
    ("72.0", 72),
    ("72.49", 72),
    ("0.5", 1),
    ("99.5", 100),
])
def test_round_half_up(value, expected):
    assert round_half_up(Decimal(value)) == expected


def test_fully_scored_weighted_mean():
    overall = aggregate_overall_score(
        scores(technical=80, commercial=60),
        {"technical": 60, "commercial": 40},
    )

    assert overall == 72


def test_partial_scores_weight_only_evaluated_categories():
    overall = aggregate_overall_score(
        scores(a=90, b=70),
        {"a": 50, "b": 30, "c": 20},
    )

    # (90*50 + 70*30) / 80 = 82.5
    assert overall == 83


def test_scores_without_weight_are_ignored():
    overall = aggregate_overall_score(
        scores(a=90, extra=10),
        {"a": 100},
    )

    assert overall == 90


def test_no_scores_raises_aggregation_error():
    with pytest.raises(AggregationError):
        aggregate_overall_score({}, {"a": 50, "b": 50})


def test_only_zero_weight_scores_raise_aggregation_error():
    with pytest.raises(AggregationError):
        aggregate_overall_score(scores(a=80), {"a": 0, "b": 100})


def test_recommendation_template():
    assert recommendation_for("Atlas", 72) == (
        "Based on AI evaluation, Atlas achieved an overall score of 72/100."
    )


def test_build_evaluation_is_deterministic():
    category_scores = scores(technical=80, commercial=60)
    weights = {"technical": 60, "commercial": 40}

    first = build_evaluation("b1", "Atlas", category_scores, weights)
    second = build_evaluation("b1", "Atlas", category_scores, weights)

    assert first == second
    assert first.overall_score == 72
    assert first.category_scores == category_scores


def test_finalize_evaluation_for_fully_scored_bidder():
    bidder = make_bidder("b1", "Atlas", scores={"technical": 80, "commercial": 60})
    tender = make_tender(
        [make_category("technical", 60), make_category("commercial", 40)],
        [bidder],
    )

    evaluation = finalize_evaluation(tender, bidder)

    assert evaluation.bidder_id == "b1"
    assert evaluation.overall_score == 72
    assert evaluation.recommendation.endswith("72/100.")


def test_finalize_allows_unscored_optional_category():
    bidder = make_bidder("b1", scores={"a": 90, "b": 70})
    tender = make_tender(
        [make_category("a", 50), make_category("b", 30), make_category("c", 20, required=False)],
        [bidder],
    )

    assert finalize_evaluation(tender, bidder).overall_score == 83


def test_finalize_rejects_unbalanced_weights():
    bidder = make_bidder("b1", scores={"a": 80, "b": 80})
    tender = make_tender([make_category("a", 30), make_category("b", 30)], [bidder])

    with pytest.raises(ConfigurationError) as exc_info:
        finalize_evaluation(tender, bidder)

    assert exc_info.value.total == 60


def test_finalize_uses_matrix_overrides():
    bidder = make_bidder("b1", scores={"a": 100, "b": 50})
    tender = make_tender(
        [make_category("a", 50), make_category("b", 50)],
        [bidder],
        criteria={"a": 80, "b": 20},
    )

    assert finalize_evaluation(tender, bidder).overall_score == 90


def test_finalize_lists_missing_required_categories():
    bidder = make_bidder("b1", scores={"a": 80})
    tender = make_tender(
        [make_category("a", 40), make_category("b", 30), make_category("c", 30)],
        [bidder],
    )

    assert missing_required_categories(tender, bidder) == ["b", "c"]
    with pytest.raises(MissingScoreError) as exc_info:
        finalize_evaluation(tender, bidder)

    assert exc_info.value.bidder_id == "b1"
    assert exc_info.value.category_ids == ["b", "c"]


def test_finalize_without_any_scores_raises_aggregation_error():
    bidder = make_bidder("b1")
    tender = make_tender(
        [make_category("a", 50, required=False), make_category("b", 50, required=False)],
        [bidder],
    )

    with pytest.raises(AggregationError):
        finalize_evaluation(tender, bidder)
