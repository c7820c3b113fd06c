"""
Bidder Progress

Derives where a bidder stands in the submission/evaluation lifecycle.
Nothing here enforces transitions; it only reads documents and scores.
"""

from decimal import Decimal
from enum import Enum

from schemas.tender import Bidder, Tender
from scoring.aggregator import round_half_up


class BidderProgress(str, Enum):
    NO_DOCUMENTS = "no_documents"
    PARTIALLY_SUBMITTED = "partially_submitted"
    FULLY_SUBMITTED = "fully_submitted"
    PARTIALLY_EVALUATED = "partially_evaluated"
    FULLY_EVALUATED = "fully_evaluated"


def submitted_category_ids(tender: Tender, bidder: Bidder) -> set[str]:
    """Tender categories with at least one uploaded document."""
    uploaded = {document.category_id for document in bidder.documents}
    return {category.id for category in tender.categories if category.id in uploaded}


def scored_category_ids(tender: Tender, bidder: Bidder) -> set[str]:
    return {
        category.id for category in tender.categories
        if category.id in bidder.category_scores
    }


def submission_progress(tender: Tender, bidder: Bidder) -> int:
    """Percent of the tender's categories the bidder has submitted documents for."""
    if not tender.categories:
        return 0
    submitted = len(submitted_category_ids(tender, bidder))
    return round_half_up(Decimal(submitted * 100) / len(tender.categories))


def bidder_progress(tender: Tender, bidder: Bidder) -> BidderProgress:
    total = len(tender.categories)
    scored = len(scored_category_ids(tender, bidder))

    if total and scored == total:
        return BidderProgress.FULLY_EVALUATED
    if scored:
        return BidderProgress.PARTIALLY_EVALUATED

    submitted = len(submitted_category_ids(tender, bidder))
    if total and submitted == total:
        return BidderProgress.FULLY_SUBMITTED
    if submitted:
        return BidderProgress.PARTIALLY_SUBMITTED
    return BidderProgress.NO_DOCUMENTS
