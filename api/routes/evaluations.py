"""
Evaluations Router

Category evaluation through the document evaluator, and finalising a
bidder's weighted evaluation.
"""

from typing import Dict, List

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.logging_config import get_logger
from database.models import User
from schemas.tender import BidderEvaluation, CategoryScore, Tender
from api.auth.dependencies import get_current_active_user
from api.dependencies import get_owner_storage, load_tender
from api.middleware.error_handler import NotFoundError
from api.middleware.rate_limit import limiter, LIMIT_EVALUATION
from services.evaluation import evaluate_category, finalize_bidder
from services.evaluator import DocumentEvaluator, get_evaluator
from services.tender_storage import TenderStorage
from workers.queue import enqueue_category_evaluation

logger = get_logger("api.evaluations")

router = APIRouter(prefix="/tenders/{tender_id}", tags=["Evaluations"])


class CategoryEvaluationResponse(BaseModel):
    tender_id: str
    category_id: str
    scores: Dict[str, CategoryScore]
    missing: List[str]
    skipped: List[str]


class JobAccepted(BaseModel):
    job_id: str
    status: str = "queued"


@router.post(
    "/categories/{category_id}/evaluate",
    response_model=CategoryEvaluationResponse,
    responses={202: {"model": JobAccepted}}
)
@limiter.limit(LIMIT_EVALUATION)
async def evaluate_tender_category(
    request: Request,
    category_id: str,
    background: bool = Query(False, description="Queue the evaluation on the worker"),
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage),
    evaluator: DocumentEvaluator = Depends(get_evaluator),
    current_user: User = Depends(get_current_active_user)
):
    """
    Score one category for every bidder with documents in it.

    With ``background=true`` the work is queued and a job id is returned;
    poll ``/api/jobs/{job_id}`` for the outcome.
    """
    category = tender.get_category(category_id)
    if category is None:
        raise NotFoundError("Category not found")

    if background:
        job_id = await enqueue_category_evaluation(
            tender.id, category.id, str(current_user.id)
        )
        logger.info(f"Queued evaluation job {job_id} for category {category.id}")
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content=JobAccepted(job_id=job_id).model_dump()
        )

    outcome = await evaluate_category(storage, evaluator, tender, category)
    return CategoryEvaluationResponse(**outcome.to_dict())


@router.post("/bidders/{bidder_id}/evaluation", response_model=BidderEvaluation)
async def finalize_bidder_evaluation(
    bidder_id: str,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage)
):
    """Aggregate the bidder's category scores and replace its evaluation."""
    if tender.get_bidder(bidder_id) is None:
        raise NotFoundError("Bidder not found")
    return await finalize_bidder(storage, tender, bidder_id)


@router.get("/bidders/{bidder_id}/evaluation", response_model=BidderEvaluation)
async def get_bidder_evaluation(
    bidder_id: str,
    tender: Tender = Depends(load_tender)
):
    bidder = tender.get_bidder(bidder_id)
    if bidder is None:
        raise NotFoundError("Bidder not found")
    if bidder.evaluation is None:
        raise NotFoundError("Bidder has not been evaluated")
    return bidder.evaluation
