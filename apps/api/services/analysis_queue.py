"""Analysis job queue helpers (Redis/RQ)."""

from __future__ import annotations

from typing import Optional

from redis import Redis
from rq import Queue
from rq.job import Job

from config import settings


ANALYSIS_QUEUE_NAME = "analysis_jobs"


def get_redis_connection() -> Redis:
    """Build Redis connection used by RQ."""
    return Redis.from_url(settings.REDIS_URL)


def get_analysis_queue() -> Queue:
    """Return the configured analysis queue."""
    return Queue(
        name=ANALYSIS_QUEUE_NAME,
        connection=get_redis_connection(),
        default_timeout=3600,
    )


def enqueue_backfill_job(limit: Optional[int] = None) -> Job:
    """Enqueue a backfill of published content that has no analysis yet."""
    queue = get_analysis_queue()
    return queue.enqueue(
        "services.auto_analysis.backfill_analysis_job",
        limit,
        job_timeout=3600,
        result_ttl=86400,
        failure_ttl=86400,
    )
