"""
Tender Evaluation - Agents Package

CrewAI agent that scores bidder submissions per category.
"""

from agents.base import get_llm, get_default_llm, validate_json_output
from agents.document_evaluation_agent import (
    create_document_evaluation_agent,
    create_document_evaluation_task,
    evaluate_submission
)

__all__ = [
    # Base
    "get_llm",
    "get_default_llm",
    "validate_json_output",
    # Document evaluation
    "create_document_evaluation_agent",
    "create_document_evaluation_task",
    "evaluate_submission",
]
