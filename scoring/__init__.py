"""
Scoring Package

Weight validation, weighted aggregation and bidder ranking for tenders.
"""

from scoring.errors import (
    ScoringError,
    ConfigurationError,
    AggregationError,
    MissingScoreError,
    ExternalEvaluationFailure,
)
from scoring.weights import (
    REQUIRED_TOTAL,
    WeightBalance,
    validate_weights,
    effective_weights,
    ensure_balanced,
)
from scoring.aggregator import (
    round_half_up,
    aggregate_overall_score,
    recommendation_for,
    build_evaluation,
    missing_required_categories,
    finalize_evaluation,
)
from scoring.ranking import (
    OVERALL_SCORE,
    NAME,
    SortDirection,
    RankedBidder,
    evaluated_bidders,
    rank_bidders,
)
from scoring.progress import (
    BidderProgress,
    submission_progress,
    bidder_progress,
)
from scoring.report import ComparisonSummary, score_band, summarize

__all__ = [
    # Errors
    "ScoringError",
    "ConfigurationError",
    "AggregationError",
    "MissingScoreError",
    "ExternalEvaluationFailure",
    # Weights
    "REQUIRED_TOTAL",
    "WeightBalance",
    "validate_weights",
    "effective_weights",
    "ensure_balanced",
    # Aggregation
    "round_half_up",
    "aggregate_overall_score",
    "recommendation_for",
    "build_evaluation",
    "missing_required_categories",
    "finalize_evaluation",
    # Ranking
    "OVERALL_SCORE",
    "NAME",
    "SortDirection",
    "RankedBidder",
    "evaluated_bidders",
    "rank_bidders",
    # Progress
    "BidderProgress",
    "submission_progress",
    "bidder_progress",
    # Report
    "ComparisonSummary",
    "score_band",
    "summarize",
]
