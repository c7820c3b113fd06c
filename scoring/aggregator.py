"""
Bidder Evaluation Aggregator

Combines per-category scores into a single weighted overall score.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping

from schemas.tender import Bidder, BidderEvaluation, CategoryScore, Tender
from scoring.errors import AggregationError, MissingScoreError
from scoring.weights import effective_weights, ensure_balanced

RECOMMENDATION_TEMPLATE = (
    "Based on AI evaluation, {bidder_name} achieved an overall score of {score}/100."
)


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def aggregate_overall_score(
    category_scores: Mapping[str, CategoryScore],
    weights: Mapping[str, int]
) -> int:
    """
    Weighted mean of the evaluated categories, rounded half-up.

    Only categories present in ``category_scores`` contribute, to both the
    numerator and the denominator. Scored categories without a weight entry
    are left out.

    Raises:
        AggregationError: If the evaluated categories carry no weight at all
    """
    numerator = Decimal(0)
    denominator = Decimal(0)

    for category_id, category_score in category_scores.items():
        weight = weights.get(category_id)
        if weight is None:
            continue
        numerator += Decimal(str(category_score.score)) * weight
        denominator += weight

    if denominator == 0:
        raise AggregationError("No weighted category has been evaluated")

    overall = round_half_up(numerator / denominator)
    return max(0, min(100, overall))


def recommendation_for(bidder_name: str, overall_score: int) -> str:
    return RECOMMENDATION_TEMPLATE.format(bidder_name=bidder_name, score=overall_score)


def build_evaluation(
    bidder_id: str,
    bidder_name: str,
    category_scores: Mapping[str, CategoryScore],
    weights: Mapping[str, int]
) -> BidderEvaluation:
    """
    Produce a fresh BidderEvaluation from a bidder's category scores.

    The result is a full replacement for any earlier evaluation; the same
    inputs always give the same score and recommendation.
    """
    overall = aggregate_overall_score(category_scores, weights)
    return BidderEvaluation(
        bidder_id=bidder_id,
        category_scores=dict(category_scores),
        overall_score=overall,
        recommendation=recommendation_for(bidder_name, overall),
    )


def missing_required_categories(tender: Tender, bidder: Bidder) -> list[str]:
    """Ids of required categories the bidder has no score for, in tender order."""
    return [
        category.id
        for category in tender.categories
        if category.required and category.id not in bidder.category_scores
    ]


def finalize_evaluation(tender: Tender, bidder: Bidder) -> BidderEvaluation:
    """
    Build the final evaluation for a bidder of a tender.

    Raises:
        ConfigurationError: If the tender's effective weights do not sum to 100
        MissingScoreError: If a required category has not been scored
        AggregationError: If no weighted category has been scored
    """
    weights = effective_weights(tender.categories, tender.scoring_matrix)
    ensure_balanced(weights)

    missing = missing_required_categories(tender, bidder)
    if missing:
        raise MissingScoreError(bidder.id, missing)

    scored = {
        category_id: score
        for category_id, score in bidder.category_scores.items()
        if category_id in weights
    }
    return build_evaluation(bidder.id, bidder.name, scored, weights)
