"""
Analytics router: per-content analysis, user interest profiles, and community trends.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.auth_scope import AuthContext, ensure_user_scope, get_auth_context, require_admin
from routers.envelope import envelope
from routers.rate_limit import rate_limit
from services.analysis_queue import enqueue_backfill_job
from services.community import generate_community_analytics, list_community_analytics
from services.content_analysis import get_content_analysis, refresh_content_analysis
from services.user_interest import get_user_interest_analysis

router = APIRouter()
logger = logging.getLogger(__name__)


class BackfillRequest(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1, le=1000)


class CommunityAnalyticsRequest(BaseModel):
    period: str = "weekly"


@router.post("/content/backfill", status_code=202)
async def backfill_content_analysis(
    request: Optional[BackfillRequest] = None,
    auth: AuthContext = Depends(require_admin),
):
    """Queue analysis of every published item that has no record yet."""
    limit = request.limit if request else None
    try:
        job = enqueue_backfill_job(limit)
    except Exception as exc:
        logger.warning("Backfill enqueue failed: %s", exc)
        raise HTTPException(
            status_code=503,
            detail="Analysis queue unavailable. Check Redis/worker availability and retry.",
        ) from exc
    logger.info("Queued analysis backfill job %s for %s", job.id, auth.user_id)
    return envelope({"job_id": job.id, "limit": limit})


@router.get("/content/{content_id}")
async def get_content_analytics(content_id: str, db: AsyncSession = Depends(get_db)):
    """Stored analysis for a blog or portfolio id/slug, created on first request."""
    return envelope(await get_content_analysis(db, content_id))


@router.post(
    "/content/{content_id}",
    dependencies=[Depends(rate_limit("analytics_content_refresh", limit=30, window_seconds=3600))],
)
async def refresh_content_analytics(
    content_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Force a fresh analysis, replacing the stored record in place."""
    return envelope(await refresh_content_analysis(db, content_id))


@router.get("/user/{user_id}")
async def get_user_analytics(
    user_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    scoped_user_id = ensure_user_scope(auth, user_id)
    return envelope(await get_user_interest_analysis(db, scoped_user_id))


@router.post("/user/{user_id}")
async def refresh_user_analytics(
    user_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    scoped_user_id = ensure_user_scope(auth, user_id)
    return envelope(await get_user_interest_analysis(db, scoped_user_id, force=True))


@router.get("/community")
async def get_community_analytics(
    period: str = "weekly",
    limit: int = Query(default=10),
    db: AsyncSession = Depends(get_db),
):
    """Most recent community snapshots for a period, newest first."""
    return envelope(await list_community_analytics(db, period, limit))


@router.post("/community")
async def create_community_analytics(
    request: CommunityAnalyticsRequest,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    logger.info("Generating %s community analytics for admin %s", request.period, auth.user_id)
    return envelope(await generate_community_analytics(db, request.period))
