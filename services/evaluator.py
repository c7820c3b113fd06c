"""
Document Evaluator Backends

Scores the documents bidders submitted for one category. Two backends:

- ``HttpDocumentEvaluator`` posts to an external evaluation API
- ``CrewDocumentEvaluator`` runs the CrewAI document-evaluation agent locally

Both return bidder id -> CategoryScore and raise ExternalEvaluationFailure
on any transport or shape problem, so callers never store partial garbage.
"""

import asyncio
import re
from abc import ABC, abstractmethod
from typing import Mapping, Optional, Sequence

import httpx
from pydantic import ValidationError

from config.settings import settings, EvaluatorBackend
from config.logging_config import get_logger
from schemas.tender import BidderDocument, CategoryScore, DocumentCategory
from scoring.errors import ExternalEvaluationFailure

logger = get_logger("evaluator")


def category_slug(name: str) -> str:
    """``"Health and Safety"`` -> ``"health-and-safety"``."""
    return re.sub(r"\s+", "-", name.strip().lower())


def parse_category_score(bidder_id: str, payload) -> CategoryScore:
    """Validate one evaluator result."""
    if not isinstance(payload, dict):
        raise ExternalEvaluationFailure(
            f"Evaluator result for bidder {bidder_id} is not an object"
        )
    try:
        # Strict: "80" or true is not a score
        return CategoryScore.model_validate(payload, strict=True)
    except ValidationError as e:
        raise ExternalEvaluationFailure(
            f"Malformed evaluator result for bidder {bidder_id}: {e.errors()[0]['msg']}"
        ) from e


class DocumentEvaluator(ABC):
    """Scores one category for a set of bidders."""

    @abstractmethod
    async def evaluate(
        self,
        category: DocumentCategory,
        documents: Mapping[str, Sequence[BidderDocument]]
    ) -> dict[str, CategoryScore]:
        """
        Args:
            category: Category being evaluated
            documents: Bidder id -> that bidder's documents for the category

        Returns:
            Bidder id -> score for every bidder the evaluator returned

        Raises:
            ExternalEvaluationFailure: On transport errors or malformed results
        """


class HttpDocumentEvaluator(DocumentEvaluator):
    """Client for the external ``/evaluate/{category}`` API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.evaluator_url).rstrip("/")
        self.timeout = timeout or settings.evaluator_timeout
        self.transport = transport

    def build_payload(
        self,
        category: DocumentCategory,
        documents: Mapping[str, Sequence[BidderDocument]]
    ) -> dict:
        return {
            "category_id": category.id,
            "category_name": category.name,
            "documents": [
                {"name": doc.name, "url": doc.url, "bidder_id": bidder_id}
                for bidder_id, bidder_docs in documents.items()
                for doc in bidder_docs
            ],
        }

    async def evaluate(
        self,
        category: DocumentCategory,
        documents: Mapping[str, Sequence[BidderDocument]]
    ) -> dict[str, CategoryScore]:
        url = f"{self.base_url}/evaluate/{category_slug(category.name)}"
        payload = self.build_payload(category, documents)
        logger.info(
            f"Evaluating category '{category.name}' "
            f"({len(payload['documents'])} documents, {len(documents)} bidders)"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            raise ExternalEvaluationFailure(
                f"Evaluator returned {e.response.status_code} for category '{category.name}'"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalEvaluationFailure(f"Evaluator request failed: {e}") from e
        except ValueError as e:
            raise ExternalEvaluationFailure("Evaluator response is not valid JSON") from e

        if not isinstance(body, dict):
            raise ExternalEvaluationFailure("Evaluator response must map bidder ids to results")

        scores = {}
        for bidder_id, result in body.items():
            if bidder_id not in documents:
                logger.warning(f"Ignoring result for unknown bidder {bidder_id}")
                continue
            scores[bidder_id] = parse_category_score(bidder_id, result)

        return scores


class CrewDocumentEvaluator(DocumentEvaluator):
    """Scores each bidder's submission with the local CrewAI agent."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport

    async def _load_texts(
        self,
        client: httpx.AsyncClient,
        documents: Sequence[BidderDocument]
    ) -> list[dict]:
        from services.document_processor import get_processor

        processor = get_processor()
        texts = []
        for doc in documents:
            response = await client.get(doc.url)
            response.raise_for_status()
            try:
                text = processor.process_bytes(response.content, doc.name)["text"]
            except ValueError as e:
                logger.warning(f"Skipping {doc.name}: {e}")
                text = ""
            texts.append({"name": doc.name, "text": text})
        return texts

    async def evaluate(
        self,
        category: DocumentCategory,
        documents: Mapping[str, Sequence[BidderDocument]]
    ) -> dict[str, CategoryScore]:
        from agents.document_evaluation_agent import evaluate_submission

        scores = {}
        try:
            async with httpx.AsyncClient(timeout=settings.evaluator_timeout, transport=self.transport) as client:
                for bidder_id, bidder_docs in documents.items():
                    texts = await self._load_texts(client, bidder_docs)
                    logger.info(f"Agent scoring bidder {bidder_id} on '{category.name}'")
                    try:
                        result = await asyncio.to_thread(
                            evaluate_submission, category.name, category.description, texts
                        )
                    except Exception as e:
                        logger.error(f"Agent failed on bidder {bidder_id}: {e}")
                        raise ExternalEvaluationFailure(f"Document agent failed: {e}") from e
                    scores[bidder_id] = parse_category_score(bidder_id, result)
        except httpx.HTTPError as e:
            raise ExternalEvaluationFailure(f"Could not download submission: {e}") from e
        except ValueError as e:
            raise ExternalEvaluationFailure(f"Agent output rejected: {e}") from e

        return scores


def get_evaluator() -> DocumentEvaluator:
    """FastAPI dependency returning the configured evaluator backend."""
    if settings.evaluator_backend == EvaluatorBackend.CREW:
        return CrewDocumentEvaluator()
    return HttpDocumentEvaluator()
