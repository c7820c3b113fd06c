"""
Category Weight Validation

Decides whether a tender's category weights are usable for scoring and
resolves the effective weight of each category.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Union

from schemas.tender import DocumentCategory, ScoringMatrix
from scoring.errors import ConfigurationError

REQUIRED_TOTAL = 100

WeightInput = Union[Mapping[str, int], Iterable[tuple[str, int]]]


@dataclass(frozen=True)
class WeightBalance:
    """Outcome of validating a weight table."""
    balanced: bool
    total: int
    weights: dict[str, int] = field(default_factory=dict)

    @property
    def message(self) -> Optional[str]:
        if self.balanced:
            return None
        return f"Total weight must equal {REQUIRED_TOTAL}%. Current total: {self.total}%"


def _as_pairs(weights: WeightInput) -> list[tuple[str, int]]:
    if isinstance(weights, Mapping):
        return list(weights.items())
    return list(weights)


def validate_weights(weights: WeightInput) -> WeightBalance:
    """
    Check that a set of (category id, weight) pairs sums to exactly 100.

    An empty set is never balanced.

    Raises:
        ConfigurationError: If a weight is negative
    """
    pairs = _as_pairs(weights)
    for category_id, weight in pairs:
        if weight < 0:
            raise ConfigurationError(
                f"Weight for category {category_id} must not be negative"
            )

    table = dict(pairs)
    total = sum(weight for _, weight in pairs)
    return WeightBalance(balanced=total == REQUIRED_TOTAL, total=total, weights=table)


def effective_weights(
    categories: Iterable[DocumentCategory],
    scoring_matrix: Optional[ScoringMatrix] = None
) -> dict[str, int]:
    """
    Resolve the weight each category scores with.

    A scoring-matrix entry overrides the category's stored weight.

    Raises:
        ConfigurationError: If the matrix names a category the tender does not have
    """
    weights = {category.id: category.weight for category in categories}
    criteria = scoring_matrix.criteria if scoring_matrix else {}

    unknown = sorted(set(criteria) - set(weights))
    if unknown:
        raise ConfigurationError(
            f"Scoring matrix references unknown categories: {', '.join(unknown)}"
        )

    weights.update(criteria)
    return weights


def ensure_balanced(weights: WeightInput) -> WeightBalance:
    """Validate weights and fail when they cannot be used for scoring."""
    balance = validate_weights(weights)
    if not balance.balanced:
        raise ConfigurationError(balance.message, total=balance.total)
    return balance
