"""
Job Queue Service

Helper functions to enqueue evaluation jobs and check their status.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from arq import create_pool
from arq.connections import ArqRedis

from workers.settings import get_redis_settings

JOB_TTL_SECONDS = 86400


# Module-level connection pool
_redis_pool: Optional[ArqRedis] = None


async def get_redis_pool() -> ArqRedis:
    """Get or create Redis connection pool."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = await create_pool(get_redis_settings())
    return _redis_pool


async def close_redis_pool():
    """Close the Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.close()
        _redis_pool = None


def job_key(job_id: str) -> str:
    return f"job:{job_id}"


async def update_job_status(redis, job_id: str, **fields) -> None:
    """Merge fields into the job hash and refresh its TTL."""
    mapping = {key: "" if value is None else str(value) for key, value in fields.items()}
    mapping["updated_at"] = datetime.now(timezone.utc).isoformat()
    await redis.hset(job_key(job_id), mapping=mapping)
    await redis.expire(job_key(job_id), JOB_TTL_SECONDS)


async def enqueue_category_evaluation(
    tender_id: str,
    category_id: str,
    owner_id: Optional[str] = None
) -> str:
    """
    Enqueue a category evaluation.

    Args:
        tender_id: Tender the category belongs to
        category_id: Category to evaluate
        owner_id: Owner whose storage scope the job runs in

    Returns:
        Job ID for tracking
    """
    job_id = str(uuid.uuid4())
    redis = await get_redis_pool()

    await update_job_status(
        redis,
        job_id,
        job_id=job_id,
        kind="category_evaluation",
        tender_id=tender_id,
        category_id=category_id,
        owner_id=owner_id,
        status="queued",
        error=None,
        result=None,
        created_at=datetime.now(timezone.utc).isoformat(),
    )

    await redis.enqueue_job(
        "run_category_evaluation_job",
        job_id,
        tender_id,
        category_id,
        owner_id,
        _job_id=job_id
    )

    return job_id


async def get_job_status(job_id: str) -> Optional[Dict[str, Any]]:
    """
    Get job status from Redis.

    Returns:
        Job status dict or None if not found
    """
    redis = await get_redis_pool()

    status = await redis.hgetall(job_key(job_id))
    if not status:
        return None

    result = {}
    for key, value in status.items():
        k = key.decode() if isinstance(key, bytes) else key
        v = value.decode() if isinstance(value, bytes) else value
        result[k] = v

    result["result"] = json.loads(result["result"]) if result.get("result") else None
    result["error"] = result.get("error") or None
    return result
