"""Per-user interest profiles built from authored content and its analyses."""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from analysis.llm import LLMAnalysisClient, get_llm_analysis_client
from analysis.models import CreatedContentItem, ReadingHistoryItem, UserActivity, UserInterestResult
from config import settings
from database import as_utc, utcnow
from models.blog import Blog
from models.content_analysis import ContentAnalysis
from models.portfolio import Portfolio
from models.user import User
from models.user_interest import UserInterest
from services.accounts import require_user

logger = logging.getLogger(__name__)


def _iso(value) -> Optional[str]:
    value = as_utc(value)
    return value.isoformat() if value else None


def serialize_user_interest(record: UserInterest) -> Dict[str, Any]:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "user_name": record.user_name,
        "user_email": record.user_email,
        "interests": record.interests or [],
        "reading_behavior": record.reading_behavior or {},
        "content_preferences": record.content_preferences or {},
        "sentiment_profile": record.sentiment_profile or {},
        "recommendations": record.recommendations or {},
        "analytics": record.analytics or {},
        "ai_insights": record.ai_insights or {},
        "last_analyzed": _iso(record.last_analyzed),
        "model_version": record.model_version,
    }


def is_fresh(record: UserInterest, now: Optional[datetime] = None) -> bool:
    last_analyzed = as_utc(record.last_analyzed)
    if last_analyzed is None:
        return False
    window = timedelta(days=settings.USER_INTEREST_REFRESH_DAYS)
    return last_analyzed > (now or utcnow()) - window


async def collect_user_activity(db: AsyncSession, user: User) -> tuple[UserActivity, List[ContentAnalysis]]:
    blogs = (await db.execute(select(Blog).where(Blog.author_id == user.id))).scalars().all()
    portfolios = (await db.execute(select(Portfolio).where(Portfolio.author_id == user.id))).scalars().all()
    analyses = (
        await db.execute(select(ContentAnalysis).where(ContentAnalysis.author_id == user.id))
    ).scalars().all()

    # No reading tracking exists, so analyzed authored content stands in for history.
    history = [
        ReadingHistoryItem(
            title=analysis.title,
            content=analysis.summary or "",
            time_spent=float(analysis.reading_time_minutes or 0),
            completed=True,
            categories=list(analysis.categories or []),
            sentiment=analysis.sentiment_label or "neutral",
        )
        for analysis in analyses
    ]
    created = [
        CreatedContentItem(title=blog.title, content=blog.content, categories=list(blog.tags or []))
        for blog in blogs
    ] + [
        CreatedContentItem(
            title=portfolio.title,
            content=portfolio.content,
            categories=list(portfolio.technologies or []),
        )
        for portfolio in portfolios
    ]
    activity = UserActivity(
        user_id=user.id,
        user_name=user.name,
        user_email=user.email,
        content_history=history,
        created_content=created,
    )
    return activity, list(analyses)


def _interest_sources(topic: str, analyses: List[ContentAnalysis]) -> List[str]:
    needle = topic.strip().lower()
    sources = []
    for analysis in analyses:
        labels = {str(value).lower() for value in (analysis.key_topics or []) + (analysis.categories or [])}
        if needle in labels:
            sources.append(analysis.content_id)
    return sources


def build_profile_fields(
    activity: UserActivity,
    analyses: List[ContentAnalysis],
    result: UserInterestResult,
) -> Dict[str, Any]:
    history = activity.content_history
    total_viewed = len(history)
    total_reading_time = sum(item.time_spent for item in history)
    unique_topics = len({category for item in history for category in item.categories})

    interests = []
    for interest in result.interests:
        row = interest.model_dump()
        row["sources"] = _interest_sources(interest.topic, analyses)
        interests.append(row)

    return {
        "interests": interests,
        "reading_behavior": {
            "average_reading_time": total_reading_time / max(total_viewed, 1),
            "preferred_complexity": result.reading_behavior.preferred_complexity.value,
            "reading_frequency": total_viewed / 4,
            "completion_rate": sum(1 for item in history if item.completed) / max(total_viewed, 1),
        },
        "content_preferences": {
            "favorite_authors": list(result.recommendations.recommended_authors),
            "top_categories": [interest.category for interest in result.interests[:5]],
            "engagement_score": result.reading_behavior.engagement_score,
        },
        "sentiment_profile": result.sentiment_profile.model_dump(),
        "recommendations": result.recommendations.model_dump(),
        "analytics": {
            "total_content_viewed": total_viewed,
            "total_reading_time_minutes": total_reading_time,
            "unique_topics_explored": unique_topics,
            "knowledge_growth_score": min(unique_topics / 10, 1.0),
            "community_engagement": 0.8 if activity.created_content else 0.3,
        },
        "ai_insights": result.ai_insights.model_dump(),
    }


async def _find_user_interest(db: AsyncSession, user_id: str) -> Optional[UserInterest]:
    result = await db.execute(select(UserInterest).where(UserInterest.user_id == user_id))
    return result.scalar_one_or_none()


def _apply_profile(record: UserInterest, owner: Dict[str, str], fields: Dict[str, Any]) -> UserInterest:
    for key, value in {**owner, **fields}.items():
        setattr(record, key, value)
    record.last_analyzed = utcnow()
    record.model_version = settings.ANALYSIS_MODEL_VERSION
    return record


async def _upsert_user_interest(db: AsyncSession, owner: Dict[str, str], fields: Dict[str, Any]) -> UserInterest:
    record = await _find_user_interest(db, owner["user_id"])
    if record is None:
        record = UserInterest()
        db.add(record)
    _apply_profile(record, owner, fields)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        record = await _find_user_interest(db, owner["user_id"])
        if record is None:
            raise
        _apply_profile(record, owner, fields)
        await db.commit()
    await db.refresh(record)
    return record


async def get_user_interest_analysis(
    db: AsyncSession,
    user_id: str,
    force: bool = False,
    client: Optional[LLMAnalysisClient] = None,
) -> Dict[str, Any]:
    """Return the user's interest profile, regenerating it when stale or forced."""
    user = await require_user(db, user_id)

    if not force:
        existing = await _find_user_interest(db, user.id)
        if existing and is_fresh(existing):
            return serialize_user_interest(existing)

    activity, analyses = await collect_user_activity(db, user)
    client = client or get_llm_analysis_client()
    result = await client.analyze_user_interests(activity)
    fields = build_profile_fields(activity, analyses, result)
    owner = {"user_id": user.id, "user_name": user.name, "user_email": user.email}

    try:
        record = await _upsert_user_interest(db, owner, fields)
    except SQLAlchemyError:
        logger.exception("Failed to persist user interest profile for %s", owner["user_id"])
        await db.rollback()
        return serialize_user_interest(_apply_profile(UserInterest(), owner, fields))
    logger.info("Stored user interest profile for %s", owner["user_id"])
    return serialize_user_interest(record)
