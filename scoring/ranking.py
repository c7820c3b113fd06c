"""
Comparison Ranker

Orders evaluated bidders of a tender and measures each one against the
bidder currently in first place.
"""

import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Union

from pyuca import Collator

from schemas.tender import Bidder
from scoring.errors import MissingScoreError

OVERALL_SCORE = "overall_score"
NAME = "name"

Number = Union[int, float]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class RankedBidder:
    """One row of a ranked comparison."""
    rank: int
    bidder: Bidder
    value: Optional[Number]
    delta: Optional[Number]
    category_deltas: dict[str, Number] = field(default_factory=dict)

    @property
    def overall_score(self) -> int:
        return self.bidder.evaluation.overall_score


def evaluated_bidders(bidders: Iterable[Bidder]) -> list[Bidder]:
    """Bidders with an evaluation holding at least one category score."""
    return [
        bidder for bidder in bidders
        if bidder.evaluation is not None and bidder.evaluation.category_scores
    ]


_collator: Optional[Collator] = None


def _name_key(bidder: Bidder) -> tuple:
    """Unicode collation key: accents and case only break ties between equal letters."""
    global _collator
    if _collator is None:
        _collator = Collator()
    return _collator.sort_key(unicodedata.normalize("NFKC", bidder.name))


def _numeric_value(bidder: Bidder, sort_key: str) -> Number:
    evaluation = bidder.evaluation
    if sort_key == OVERALL_SCORE:
        return evaluation.overall_score

    category_score = evaluation.category_scores.get(sort_key)
    if category_score is None:
        raise MissingScoreError(bidder.id, [sort_key])
    return category_score.score


def _category_deltas(bidder: Bidder, leader: Bidder) -> dict[str, Number]:
    own = bidder.evaluation.category_scores
    top = leader.evaluation.category_scores
    return {
        category_id: score.score - top[category_id].score
        for category_id, score in own.items()
        if category_id in top
    }


def rank_bidders(
    bidders: Iterable[Bidder],
    sort_key: str = OVERALL_SCORE,
    direction: Union[SortDirection, str] = SortDirection.DESC
) -> list[RankedBidder]:
    """
    Sort evaluated bidders and annotate each with its gap to row 0.

    Args:
        bidders: Candidate bidders; those without an evaluation are dropped
        sort_key: ``overall_score``, ``name`` or a category id
        direction: ``asc`` or ``desc``

    Returns:
        Ranked rows. Equal values keep their input order in either direction.
        ``delta`` is own value minus the first row's value for numeric keys
        and None for the name key.

    Raises:
        MissingScoreError: If sorting by a category a bidder was not scored in
    """
    direction = SortDirection(direction)
    candidates = evaluated_bidders(bidders)
    descending = direction == SortDirection.DESC

    if sort_key == NAME:
        ordered = sorted(candidates, key=_name_key, reverse=descending)
        values = [None] * len(ordered)
    else:
        keyed = [(_numeric_value(bidder, sort_key), bidder) for bidder in candidates]
        keyed.sort(key=lambda pair: pair[0], reverse=descending)
        ordered = [bidder for _, bidder in keyed]
        values = [value for value, _ in keyed]

    if not ordered:
        return []

    leader = ordered[0]
    top_value = values[0]
    return [
        RankedBidder(
            rank=position + 1,
            bidder=bidder,
            value=value,
            delta=None if value is None else value - top_value,
            category_deltas=_category_deltas(bidder, leader),
        )
        for position, (bidder, value) in enumerate(zip(ordered, values))
    ]
