"""
Evaluation Worker

Background job that evaluates one tender category.
"""

import json
from typing import Optional

from config.logging_config import get_logger
from scoring.errors import ScoringError
from workers.queue import update_job_status

logger = get_logger("workers.evaluation")


async def run_category_evaluation_job(
    ctx: dict,
    job_id: str,
    tender_id: str,
    category_id: str,
    owner_id: Optional[str] = None
):
    """
    Evaluate a category for all of a tender's bidders.

    Args:
        ctx: ARQ context with Redis connection
        job_id: Unique job identifier
        tender_id: Tender to evaluate
        category_id: Category to evaluate
        owner_id: Storage scope
    """
    redis = ctx["redis"]

    # Import here to avoid circular imports
    from services.evaluation import evaluate_category
    from services.evaluator import get_evaluator
    from services.tender_storage import get_tender_storage

    await update_job_status(redis, job_id, status="running")
    logger.info(f"Starting evaluation job {job_id} for category {category_id}")

    try:
        storage = get_tender_storage(owner_id)
        tender = await storage.get_tender_by_id(tender_id)
        if tender is None:
            raise LookupError("Tender not found")
        category = tender.get_category(category_id)
        if category is None:
            raise LookupError("Category not found")

        outcome = await evaluate_category(storage, get_evaluator(), tender, category)

    except (ScoringError, LookupError) as e:
        logger.error(f"Evaluation job {job_id} failed: {e}")
        await update_job_status(redis, job_id, status="failed", error=str(e))
        return {"status": "failed", "error": str(e)}
    except Exception as e:
        logger.exception(f"Evaluation job {job_id} crashed: {e}")
        await update_job_status(redis, job_id, status="failed", error=f"Unexpected error: {e}")
        return {"status": "failed", "error": str(e)}

    result = outcome.to_dict()
    await update_job_status(redis, job_id, status="completed", result=json.dumps(result))
    logger.info(f"Evaluation job {job_id} completed")

    return {"status": "completed", "job_id": job_id, **result}
