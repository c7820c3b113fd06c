"""
Comparison Report

Summary figures shown alongside a ranked comparison.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from scoring.aggregator import round_half_up
from scoring.ranking import RankedBidder


def score_band(score: float) -> str:
    """Qualitative band for a 0-100 score."""
    if score >= 80:
        return "excellent"
    if score >= 70:
        return "good"
    if score >= 60:
        return "fair"
    return "poor"


@dataclass(frozen=True)
class ComparisonSummary:
    evaluated_count: int
    average_score: Optional[int]
    top_performer: Optional[RankedBidder]


def summarize(ranked: Sequence[RankedBidder]) -> ComparisonSummary:
    """
    Aggregate figures for a ranking.

    The top performer is the highest overall score regardless of the
    current sort order; ties go to the earlier row.
    """
    if not ranked:
        return ComparisonSummary(evaluated_count=0, average_score=None, top_performer=None)

    total = sum(row.overall_score for row in ranked)
    average = round_half_up(Decimal(total) / len(ranked))

    top = ranked[0]
    for row in ranked[1:]:
        if row.overall_score > top.overall_score:
            top = row

    return ComparisonSummary(
        evaluated_count=len(ranked),
        average_score=average,
        top_performer=top,
    )
