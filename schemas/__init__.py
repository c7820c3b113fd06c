"""
Tender Evaluation - Pydantic Schemas

Domain entities shared by the storage layer, scoring core and API.
"""

from schemas.tender import (
    ProjectType,
    TenderStatus,
    TenderDocumentCategory,
    DocumentCategory,
    ScoringMatrix,
    CategoryScore,
    BidderEvaluation,
    BidderDocument,
    TenderDocument,
    Bidder,
    Tender,
    Project,
)

__all__ = [
    "ProjectType",
    "TenderStatus",
    "TenderDocumentCategory",
    "DocumentCategory",
    "ScoringMatrix",
    "CategoryScore",
    "BidderEvaluation",
    "BidderDocument",
    "TenderDocument",
    "Bidder",
    "Tender",
    "Project",
]
