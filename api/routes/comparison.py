"""
Comparison Router

Ranked side-by-side comparison of a tender's evaluated bidders.
"""

from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from schemas.tender import Tender
from scoring.ranking import OVERALL_SCORE, RankedBidder, SortDirection, rank_bidders
from scoring.report import score_band, summarize
from api.dependencies import load_tender

router = APIRouter(prefix="/tenders/{tender_id}", tags=["Comparison"])

Number = Union[int, float]


class ComparisonRow(BaseModel):
    rank: int
    bidder_id: str
    bidder_name: str
    overall_score: int
    value: Optional[Number] = None
    delta: Optional[Number] = None
    category_scores: Dict[str, float]
    category_deltas: Dict[str, Number]
    band: str
    recommendation: str


class ComparisonSummaryResponse(BaseModel):
    evaluated_count: int
    average_score: Optional[int] = None
    top_performer: Optional[ComparisonRow] = None


class ComparisonResponse(BaseModel):
    sort: str
    direction: SortDirection
    rows: List[ComparisonRow]
    summary: ComparisonSummaryResponse


def comparison_row(row: RankedBidder) -> ComparisonRow:
    evaluation = row.bidder.evaluation
    return ComparisonRow(
        rank=row.rank,
        bidder_id=row.bidder.id,
        bidder_name=row.bidder.name,
        overall_score=evaluation.overall_score,
        value=row.value,
        delta=row.delta,
        category_scores={
            category_id: score.score
            for category_id, score in evaluation.category_scores.items()
        },
        category_deltas=row.category_deltas,
        band=score_band(evaluation.overall_score),
        recommendation=evaluation.recommendation
    )


@router.get("/comparison", response_model=ComparisonResponse)
async def compare_bidders(
    sort: str = Query(OVERALL_SCORE, description="overall_score, name or a category id"),
    direction: SortDirection = Query(SortDirection.DESC),
    tender: Tender = Depends(load_tender)
):
    """
    Rank the tender's evaluated bidders.

    Bidders without a stored evaluation are left out. Sorting by a
    category some evaluated bidder was not scored in fails with 409.
    """
    ranked = rank_bidders(tender.bidders, sort_key=sort, direction=direction)
    summary = summarize(ranked)

    top = summary.top_performer
    return ComparisonResponse(
        sort=sort,
        direction=direction,
        rows=[comparison_row(row) for row in ranked],
        summary=ComparisonSummaryResponse(
            evaluated_count=summary.evaluated_count,
            average_score=summary.average_score,
            top_performer=comparison_row(top) if top else None
        )
    )
