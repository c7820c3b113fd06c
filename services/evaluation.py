"""
Evaluation Service

Runs category evaluations through a document evaluator and finalises
bidder evaluations with the scoring core.
"""

from dataclasses import dataclass, field

from config.logging_config import get_logger
from schemas.tender import BidderEvaluation, CategoryScore, DocumentCategory, Tender
from scoring.aggregator import finalize_evaluation
from services.evaluator import DocumentEvaluator
from services.tender_storage import TenderStorage

logger = get_logger("evaluation")


@dataclass(frozen=True)
class CategoryEvaluationOutcome:
    """Result of evaluating one category across a tender's bidders."""
    tender_id: str
    category_id: str
    scores: dict[str, CategoryScore] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tender_id": self.tender_id,
            "category_id": self.category_id,
            "scores": {
                bidder_id: score.model_dump() for bidder_id, score in self.scores.items()
            },
            "missing": self.missing,
            "skipped": self.skipped,
        }


async def evaluate_category(
    storage: TenderStorage,
    evaluator: DocumentEvaluator,
    tender: Tender,
    category: DocumentCategory
) -> CategoryEvaluationOutcome:
    """
    Score one category for every bidder that submitted documents for it.

    Returned scores overwrite earlier ones. Bidders the evaluator did not
    return are listed in ``missing`` and keep whatever score they had.
    Bidders with no documents in the category are not sent at all.

    Raises:
        ExternalEvaluationFailure: Nothing is stored in that case
    """
    documents = {}
    skipped = []
    for bidder in tender.bidders:
        bidder_docs = bidder.documents_for(category.id)
        if bidder_docs:
            documents[bidder.id] = bidder_docs
        else:
            skipped.append(bidder.id)

    if not documents:
        logger.info(f"No submissions for category {category.id}; nothing to evaluate")
        return CategoryEvaluationOutcome(
            tender_id=tender.id,
            category_id=category.id,
            skipped=skipped,
        )

    scores = await evaluator.evaluate(category, documents)
    missing = [bidder_id for bidder_id in documents if bidder_id not in scores]
    if missing:
        logger.warning(
            f"Evaluator returned no result for {len(missing)} bidder(s) in category {category.id}"
        )

    if scores:
        await storage.save_category_scores(category.id, scores)

    return CategoryEvaluationOutcome(
        tender_id=tender.id,
        category_id=category.id,
        scores=scores,
        missing=missing,
        skipped=skipped,
    )


async def finalize_bidder(
    storage: TenderStorage,
    tender: Tender,
    bidder_id: str
) -> BidderEvaluation:
    """
    Aggregate a bidder's category scores and replace its stored evaluation.

    Raises:
        KeyError: If the bidder is not part of the tender
        ConfigurationError, MissingScoreError, AggregationError: Nothing is
            stored in those cases
    """
    bidder = tender.get_bidder(bidder_id)
    if bidder is None:
        raise KeyError(bidder_id)

    evaluation = finalize_evaluation(tender, bidder)
    stored = await storage.replace_bidder_evaluation(evaluation)
    logger.info(f"Finalised bidder {bidder_id} at {stored.overall_score}/100")
    return stored
