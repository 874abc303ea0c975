"""
Community trend snapshots.

Each generation appends a CommunityAnalytics row for the requested period.
Counts and distributions are computed locally from stored content and
analyses; topic trends, insights and predictions come from the LLM.
"""

import calendar
import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from analysis.llm import LLMAnalysisClient, get_llm_analysis_client
from analysis.metrics import count_words
from analysis.models import CommunityPost, CommunitySample
from config import settings
from database import as_utc, utcnow
from models.blog import Blog
from models.community_analytics import CommunityAnalytics
from models.content_analysis import ContentAnalysis
from models.portfolio import Portfolio

logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly")
DEFAULT_PERIOD = "weekly"
MAX_LIST_LIMIT = 100


def normalize_period(period: Optional[str]) -> str:
    value = (period or DEFAULT_PERIOD).strip().lower()
    if value not in PERIODS:
        raise HTTPException(status_code=400, detail=f"period must be one of: {', '.join(PERIODS)}")
    return value


def clamp_limit(limit: Optional[int]) -> int:
    return min(max(10 if limit is None else int(limit), 1), MAX_LIST_LIMIT)


def _one_month_before(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_window(period: str, end: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    end = end or utcnow()
    if period == "daily":
        return end - timedelta(days=1), end
    if period == "weekly":
        return end - timedelta(days=7), end
    return _one_month_before(end), end


def _iso(value) -> Optional[str]:
    value = as_utc(value)
    return value.isoformat() if value else None


def serialize_community_analytics(record: CommunityAnalytics) -> Dict[str, Any]:
    return {
        "id": record.id,
        "period": record.period,
        "start_date": _iso(record.start_date),
        "end_date": _iso(record.end_date),
        "content_stats": record.content_stats or {},
        "topic_trends": record.topic_trends or [],
        "sentiment_analysis": record.sentiment_analysis or {},
        "complexity_distribution": record.complexity_distribution or {},
        "author_insights": record.author_insights or {},
        "community_engagement": record.community_engagement or {},
        "insights": record.insights or {},
        "predictions": record.predictions or {},
        "generated_at": _iso(record.generated_at),
        "model_version": record.model_version,
    }


async def list_community_analytics(db: AsyncSession, period: Optional[str], limit: Optional[int]) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(CommunityAnalytics)
        .where(CommunityAnalytics.period == normalize_period(period))
        .order_by(CommunityAnalytics.generated_at.desc())
        .limit(clamp_limit(limit))
    )
    return [serialize_community_analytics(row) for row in result.scalars().all()]


def _percent(count: int, total: int) -> int:
    return round(count / total * 100) if total else 0


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def sentiment_breakdown(analyses: List[ContentAnalysis]) -> Dict[str, Any]:
    counts = Counter(analysis.sentiment_label for analysis in analyses)
    total = len(analyses)
    overall = {
        "positive": _percent(counts["positive"], total),
        "negative": _percent(counts["negative"], total),
        "neutral": _percent(counts["neutral"], total),
        "average_score": _mean([analysis.sentiment_score or 0.0 for analysis in analyses]),
    }

    scores_by_category: Dict[str, List[float]] = defaultdict(list)
    for analysis in analyses:
        for category in analysis.categories or []:
            scores_by_category[str(category)].append(analysis.sentiment_score or 0.0)
    by_category = [
        {"category": category, "count": len(scores), "average_score": _mean(scores)}
        for category, scores in sorted(scores_by_category.items(), key=lambda row: (-len(row[1]), row[0]))
    ]
    return {"overall": overall, "by_category": by_category}


def complexity_distribution(analyses: List[ContentAnalysis]) -> Dict[str, Any]:
    counts = Counter(analysis.complexity_level for analysis in analyses)
    total = len(analyses)
    return {
        "beginner": _percent(counts["beginner"], total),
        "intermediate": _percent(counts["intermediate"], total),
        "advanced": _percent(counts["advanced"], total),
        "average_score": _mean([analysis.complexity_score or 0.0 for analysis in analyses]),
    }


def author_insights(
    blogs: List[Blog],
    portfolios: List[Portfolio],
    analyses: List[ContentAnalysis],
    prior_author_ids: set,
) -> Dict[str, Any]:
    authors: Dict[str, Dict[str, Any]] = {}
    for item, topics in [(blog, blog.tags) for blog in blogs] + [(row, row.technologies) for row in portfolios]:
        entry = authors.setdefault(item.author_id, {"name": item.author, "posts": 0, "topics": []})
        entry["posts"] += 1
        for topic in topics or []:
            if topic not in entry["topics"]:
                entry["topics"].append(topic)

    sentiment_by_author: Dict[str, List[float]] = defaultdict(list)
    for analysis in analyses:
        sentiment_by_author[analysis.author_id].append(analysis.sentiment_score or 0.0)

    ranked = [
        {
            "user_id": author_id,
            "name": entry["name"],
            "posts_count": entry["posts"],
            "average_sentiment": _mean(sentiment_by_author.get(author_id, [])),
            "top_topics": entry["topics"][:3],
        }
        for author_id, entry in authors.items()
    ]
    ranked.sort(key=lambda row: (-row["posts_count"], row["name"]))
    return {
        "most_active_authors": ranked[:5],
        "emerging_voices": [row for row in ranked if row["user_id"] not in prior_author_ids][:5],
    }


async def generate_community_analytics(
    db: AsyncSession,
    period: Optional[str],
    client: Optional[LLMAnalysisClient] = None,
    end: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build and append a new community snapshot for the period ending now."""
    period = normalize_period(period)
    start, end = period_window(period, end)

    blogs = (
        await db.execute(
            select(Blog).where(Blog.published.is_(True), Blog.created_at >= start, Blog.created_at <= end)
        )
    ).scalars().all()
    portfolios = (
        await db.execute(
            select(Portfolio).where(
                Portfolio.published.is_(True),
                Portfolio.created_at >= start,
                Portfolio.created_at <= end,
            )
        )
    ).scalars().all()
    analyses = (
        await db.execute(
            select(ContentAnalysis).where(
                ContentAnalysis.processed_at >= start,
                ContentAnalysis.processed_at <= end,
            )
        )
    ).scalars().all()

    window_author_ids = {row.author_id for row in blogs} | {row.author_id for row in portfolios}
    prior_author_ids = set()
    if window_author_ids:
        prior_blogs = await db.execute(
            select(Blog.author_id).where(Blog.author_id.in_(window_author_ids), Blog.created_at < start)
        )
        prior_portfolios = await db.execute(
            select(Portfolio.author_id).where(Portfolio.author_id.in_(window_author_ids), Portfolio.created_at < start)
        )
        prior_author_ids = set(prior_blogs.scalars().all()) | set(prior_portfolios.scalars().all())

    posts = [
        CommunityPost(
            title=blog.title,
            content=blog.content,
            author=blog.author,
            created_at=as_utc(blog.created_at),
            categories=list(blog.tags or []),
        )
        for blog in blogs
    ] + [
        CommunityPost(
            title=row.title,
            content=row.content,
            author=row.author,
            created_at=as_utc(row.created_at),
            categories=list(row.technologies or []),
        )
        for row in portfolios
    ]
    posts.sort(key=lambda post: post.created_at, reverse=True)

    total_words = sum(count_words(post.content) for post in posts)
    content_stats = {
        "total_posts": len(blogs),
        "total_portfolios": len(portfolios),
        "total_authors": len(window_author_ids),
        "average_words_per_post": total_words / max(len(posts), 1),
        "total_word_count": total_words,
    }

    client = client or get_llm_analysis_client()
    trends = await client.analyze_community_trends(CommunitySample(posts=posts, start=start, end=end))

    sentiment = sentiment_breakdown(analyses)
    sentiment["trending"] = trends.sentiment_analysis.trending.value

    record = CommunityAnalytics(
        period=period,
        start_date=start,
        end_date=end,
        content_stats=content_stats,
        topic_trends=[trend.model_dump(mode="json") for trend in trends.topic_trends],
        sentiment_analysis=sentiment,
        complexity_distribution=complexity_distribution(analyses),
        author_insights=author_insights(list(blogs), list(portfolios), list(analyses), prior_author_ids),
        community_engagement={
            "average_reading_time": _mean([float(row.reading_time_minutes or 0) for row in analyses]),
            "diversity_index": min(len(window_author_ids) / 10, 1.0),
            "knowledge_sharing_score": min(len(blogs) / 20, 1.0),
        },
        insights=trends.insights.model_dump(),
        predictions=trends.predictions.model_dump(),
        generated_at=utcnow(),
        model_version=settings.ANALYSIS_MODEL_VERSION,
    )
    db.add(record)
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to persist %s community analytics", period)
        await db.rollback()
        return serialize_community_analytics(record)
    await db.refresh(record)
    logger.info("Stored %s community analytics (%d posts)", period, len(posts))
    return serialize_community_analytics(record)
