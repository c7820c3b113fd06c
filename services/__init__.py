"""
Tender Evaluation - Services Package

Storage, document processing, evaluation and copilot services.
"""

from services.document_processor import (
    DocumentProcessor,
    get_processor,
)
from services.file_storage import FileStorage, StoredFile, get_file_storage
from services.tender_storage import TenderStorage, get_tender_storage
from services.evaluator import (
    DocumentEvaluator,
    HttpDocumentEvaluator,
    CrewDocumentEvaluator,
    get_evaluator,
)
from services.evaluation import (
    CategoryEvaluationOutcome,
    evaluate_category,
    finalize_bidder,
)
from services.copilot import CopilotClient, CopilotReply, get_copilot_client

__all__ = [
    "DocumentProcessor",
    "get_processor",
    "FileStorage",
    "StoredFile",
    "get_file_storage",
    "TenderStorage",
    "get_tender_storage",
    "DocumentEvaluator",
    "HttpDocumentEvaluator",
    "CrewDocumentEvaluator",
    "get_evaluator",
    "CategoryEvaluationOutcome",
    "evaluate_category",
    "finalize_bidder",
    "CopilotClient",
    "CopilotReply",
    "get_copilot_client",
]
