"""
Scoring Errors

Typed failures raised by the scoring core. Nothing in the core returns a
sentinel score; every unusable input ends in one of these.
"""

from typing import Iterable, Optional


class ScoringError(Exception):
    """Base class for scoring failures."""
    pass


class ConfigurationError(ScoringError):
    """Category weights are unusable for scoring (unbalanced or inconsistent)."""

    def __init__(self, message: str, total: Optional[int] = None):
        self.total = total
        super().__init__(message)


class AggregationError(ScoringError):
    """No weighted category has been evaluated, so no overall score exists."""
    pass


class MissingScoreError(ScoringError):
    """A category the caller relies on has no CategoryScore for a bidder."""

    def __init__(self, bidder_id: str, category_ids: Iterable[str]):
        self.bidder_id = bidder_id
        self.category_ids = list(category_ids)
        super().__init__(
            f"Bidder {bidder_id} has no score for categories: {', '.join(self.category_ids)}"
        )


class ExternalEvaluationFailure(ScoringError):
    """The document evaluator failed or returned malformed data."""
    pass
