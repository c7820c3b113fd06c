"""
ARQ Worker Settings

Configuration for the async Redis queue worker.
"""

from arq.connections import RedisSettings

from config.settings import settings
from config.logging_config import get_logger

logger = get_logger("workers")


def get_redis_settings() -> RedisSettings:
    """Redis connection settings parsed from ``REDIS_URL``."""
    return RedisSettings.from_dsn(settings.redis_url)


class WorkerSettings:
    """
    ARQ Worker configuration.

    Usage:
        arq workers.settings.WorkerSettings
    """

    # Redis connection
    redis_settings = get_redis_settings()

    # Job functions to register
    functions = [
        "workers.evaluation.run_category_evaluation_job",
    ]

    # Worker behavior
    max_jobs = 5
    job_timeout = 600
    keep_result = 3600

    # Failures are recorded in the job hash, not retried
    max_tries = 1

    health_check_interval = 30

    @staticmethod
    async def on_startup(ctx):
        logger.info("ARQ Worker starting...")

    @staticmethod
    async def on_shutdown(ctx):
        from database.connection import close_db

        await close_db()
        logger.info("ARQ Worker shutting down...")
