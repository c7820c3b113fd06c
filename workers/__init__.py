"""
Workers Package

Category evaluations queued on arq and run outside the request cycle.
Job progress lives in a Redis hash so the API can report it.
"""

from workers.queue import enqueue_category_evaluation, get_job_status, close_redis_pool
from workers.evaluation import run_category_evaluation_job
from workers.settings import WorkerSettings

__all__ = [
    "enqueue_category_evaluation",
    "get_job_status",
    "close_redis_pool",
    "run_category_evaluation_job",
    "WorkerSettings",
]
