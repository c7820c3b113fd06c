"""Builders for in-memory tender entities and a scripted document evaluator."""

from __future__ import annotations

from typing import Optional

from schemas.tender import (
    Bidder,
    BidderDocument,
    BidderEvaluation,
    CategoryScore,
    DocumentCategory,
    ScoringMatrix,
    Tender,
)
from services.evaluator import DocumentEvaluator

TENDER_ID = "tender-1"


def make_category(category_id: str, weight: int, required: bool = True) -> DocumentCategory:
    return DocumentCategory(
        id=category_id,
        tender_id=TENDER_ID,
        name=category_id.title(),
        weight=weight,
        required=required,
    )


def make_document(bidder_id: str, category_id: str, name: str = "doc.pdf") -> BidderDocument:
    return BidderDocument(
        id=f"{bidder_id}-{category_id}-{name}",
        bidder_id=bidder_id,
        category_id=category_id,
        name=name,
        url=f"http://files/{name}",
    )


def make_bidder(
    bidder_id: str,
    name: Optional[str] = None,
    scores: Optional[dict[str, float]] = None,
    documents: Optional[list[str]] = None,
    overall: Optional[int] = None,
) -> Bidder:
    """
    ``scores`` become stored category scores. Passing ``overall`` also
    attaches a finalised evaluation carrying those scores.
    """
    category_scores = {
        category_id: CategoryScore(score=score) for category_id, score in (scores or {}).items()
    }
    evaluation = None
    if overall is not None:
        evaluation = BidderEvaluation(
            bidder_id=bidder_id,
            category_scores=category_scores,
            overall_score=overall,
            recommendation=f"{name or bidder_id} scored {overall}",
        )
    return Bidder(
        id=bidder_id,
        tender_id=TENDER_ID,
        name=name or bidder_id,
        documents=[make_document(bidder_id, category_id) for category_id in documents or []],
        category_scores=category_scores,
        evaluation=evaluation,
    )


def make_tender(
    categories: list[DocumentCategory],
    bidders: Optional[list[Bidder]] = None,
    criteria: Optional[dict[str, int]] = None,
) -> Tender:
    matrix = ScoringMatrix(tender_id=TENDER_ID, criteria=criteria) if criteria is not None else None
    return Tender(
        id=TENDER_ID,
        ref_no="PRJ-2026-ABCD-TND-ABC",
        project_id="project-1",
        name="Main Works",
        categories=categories,
        scoring_matrix=matrix,
        bidders=bidders or [],
    )


class FakeEvaluator(DocumentEvaluator):
    """Returns preset scores per category name and records every call."""

    def __init__(self):
        self.scores: dict[str, dict[str, float]] = {}
        self.calls: list[tuple[str, dict[str, list[str]]]] = []
        self.error: Exception | None = None

    def set_scores(self, category_name: str, scores: dict[str, float]) -> None:
        self.scores[category_name] = scores

    async def evaluate(self, category, documents):
        self.calls.append((
            category.name,
            {bidder_id: [doc.name for doc in docs] for bidder_id, docs in documents.items()},
        ))
        if self.error is not None:
            raise self.error
        preset = self.scores.get(category.name, {})
        return {
            bidder_id: CategoryScore(score=score, summary=f"{category.name} reviewed")
            for bidder_id, score in preset.items()
            if bidder_id in documents
        }
