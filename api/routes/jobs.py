"""
Jobs Router

Status of queued background evaluations.
"""

from fastapi import APIRouter, Depends

from database.models import User
from api.auth.dependencies import get_current_active_user
from api.middleware.error_handler import NotFoundError
from workers.queue import get_job_status

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("/{job_id}")
async def job_status(
    job_id: str,
    current_user: User = Depends(get_current_active_user)
):
    """Current status of a background job, with its result once completed."""
    job = await get_job_status(job_id)
    if job is None or job.get("owner_id") not in ("", str(current_user.id)):
        raise NotFoundError("Job not found")

    job.pop("owner_id", None)
    return job
