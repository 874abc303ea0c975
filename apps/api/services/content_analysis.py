"""
On-demand content analysis for blogs and portfolios.

One ContentAnalysis row exists per (content_id, content_type). Reads reuse
it; forced refreshes overwrite its fields in place.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from analysis.llm import LLMAnalysisClient, get_llm_analysis_client
from analysis.metrics import calculate_basic_metrics
from analysis.models import BasicMetrics, ContentAnalysisResult
from config import settings
from database import as_utc, utcnow
from models.blog import Blog
from models.content_analysis import ContentAnalysis
from models.portfolio import Portfolio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisItem:
    """A blog or portfolio reduced to what the analyzer needs."""

    content_id: str
    content_type: str
    title: str
    content: str
    author: str
    author_id: str


def item_from_blog(blog: Blog) -> AnalysisItem:
    return AnalysisItem(
        content_id=blog.id,
        content_type="blog",
        title=blog.title,
        content=blog.content,
        author=blog.author,
        author_id=blog.author_id,
    )


def item_from_portfolio(portfolio: Portfolio) -> AnalysisItem:
    return AnalysisItem(
        content_id=portfolio.id,
        content_type="portfolio",
        title=portfolio.title,
        content=portfolio.content,
        author=portfolio.author,
        author_id=portfolio.author_id,
    )


async def resolve_content_item(db: AsyncSession, content_ref: str) -> Optional[AnalysisItem]:
    """Find a blog, then a portfolio, whose id or slug equals ``content_ref``."""
    blog_result = await db.execute(
        select(Blog).where(or_(Blog.id == content_ref, Blog.slug == content_ref)).limit(1)
    )
    blog = blog_result.scalar_one_or_none()
    if blog:
        return item_from_blog(blog)

    portfolio_result = await db.execute(
        select(Portfolio).where(or_(Portfolio.id == content_ref, Portfolio.slug == content_ref)).limit(1)
    )
    portfolio = portfolio_result.scalar_one_or_none()
    if portfolio:
        return item_from_portfolio(portfolio)
    return None


async def find_content_analysis(
    db: AsyncSession,
    content_id: str,
    content_type: Optional[str] = None,
) -> Optional[ContentAnalysis]:
    query = select(ContentAnalysis).where(ContentAnalysis.content_id == content_id)
    if content_type:
        query = query.where(ContentAnalysis.content_type == content_type)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


def apply_analysis(
    record: ContentAnalysis,
    item: AnalysisItem,
    result: ContentAnalysisResult,
    metrics: BasicMetrics,
) -> ContentAnalysis:
    record.content_id = item.content_id
    record.content_type = item.content_type
    record.title = item.title
    record.author = item.author
    record.author_id = item.author_id
    record.summary = result.summary
    record.key_topics = list(result.key_topics)
    record.sentiment_label = result.sentiment.label.value
    record.sentiment_score = result.sentiment.score
    record.sentiment_confidence = result.sentiment.confidence
    record.complexity_level = result.complexity.level.value
    record.complexity_score = result.complexity.score
    record.readability_score = result.complexity.readability_score
    record.categories = list(result.categories)
    record.extracted_concepts = [concept.model_dump() for concept in result.extracted_concepts]
    record.word_count = metrics.word_count
    record.sentence_count = metrics.sentence_count
    record.reading_time_minutes = metrics.reading_time_minutes
    record.language_metrics = {
        **result.language_metrics.model_dump(),
        "word_count": metrics.word_count,
        "sentence_count": metrics.sentence_count,
    }
    record.ai_insights = result.ai_insights.model_dump()
    record.processed_at = utcnow()
    record.model_version = settings.ANALYSIS_MODEL_VERSION
    return record


def _iso(value) -> Optional[str]:
    value = as_utc(value)
    return value.isoformat() if value else None


def serialize_content_analysis(record: ContentAnalysis) -> Dict[str, Any]:
    return {
        "id": record.id,
        "content_id": record.content_id,
        "content_type": record.content_type,
        "title": record.title,
        "author": record.author,
        "author_id": record.author_id,
        "summary": record.summary,
        "key_topics": record.key_topics or [],
        "sentiment": {
            "label": record.sentiment_label,
            "score": record.sentiment_score,
            "confidence": record.sentiment_confidence,
        },
        "complexity": {
            "level": record.complexity_level,
            "score": record.complexity_score,
            "readability_score": record.readability_score,
        },
        "categories": record.categories or [],
        "extracted_concepts": record.extracted_concepts or [],
        "word_count": record.word_count,
        "sentence_count": record.sentence_count,
        "reading_time_minutes": record.reading_time_minutes,
        "language_metrics": record.language_metrics or {},
        "ai_insights": record.ai_insights or {},
        "processed_at": _iso(record.processed_at),
        "model_version": record.model_version,
        "created_at": _iso(record.created_at),
        "updated_at": _iso(record.updated_at),
    }


async def run_content_analysis(
    item: AnalysisItem,
    client: Optional[LLMAnalysisClient] = None,
) -> tuple[ContentAnalysisResult, BasicMetrics]:
    client = client or get_llm_analysis_client()
    result = await client.analyze_content(
        title=item.title,
        body=item.content,
        author=item.author,
        content_type=item.content_type,
    )
    return result, calculate_basic_metrics(item.content)


async def upsert_content_analysis(
    db: AsyncSession,
    item: AnalysisItem,
    result: ContentAnalysisResult,
    metrics: BasicMetrics,
) -> ContentAnalysis:
    """Write the analysis onto the single row for this content, creating it if needed."""
    record = await find_content_analysis(db, item.content_id, item.content_type)
    if record is None:
        record = ContentAnalysis()
        db.add(record)
    apply_analysis(record, item, result, metrics)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent writer created the row first; update theirs instead.
        await db.rollback()
        record = await find_content_analysis(db, item.content_id, item.content_type)
        if record is None:
            raise
        apply_analysis(record, item, result, metrics)
        await db.commit()
    await db.refresh(record)
    return record


async def _analyze_and_store(
    db: AsyncSession,
    item: AnalysisItem,
    client: Optional[LLMAnalysisClient],
) -> Dict[str, Any]:
    result, metrics = await run_content_analysis(item, client)
    try:
        record = await upsert_content_analysis(db, item, result, metrics)
    except SQLAlchemyError:
        logger.exception("Failed to persist content analysis for %s %s", item.content_type, item.content_id)
        await db.rollback()
        return serialize_content_analysis(apply_analysis(ContentAnalysis(), item, result, metrics))
    logger.info("Stored content analysis for %s %s", item.content_type, item.content_id)
    return serialize_content_analysis(record)


async def get_content_analysis(
    db: AsyncSession,
    content_ref: str,
    client: Optional[LLMAnalysisClient] = None,
) -> Dict[str, Any]:
    """Return the stored analysis for a content id or slug, analyzing it on first request."""
    item = await resolve_content_item(db, content_ref)
    if item is None:
        raise HTTPException(status_code=404, detail="Content not found")

    existing = await find_content_analysis(db, item.content_id, item.content_type)
    if existing:
        return serialize_content_analysis(existing)

    return await _analyze_and_store(db, item, client)


async def refresh_content_analysis(
    db: AsyncSession,
    content_ref: str,
    client: Optional[LLMAnalysisClient] = None,
) -> Dict[str, Any]:
    """Re-run the analysis and overwrite the stored record in place."""
    item = await resolve_content_item(db, content_ref)
    if item is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return await _analyze_and_store(db, item, client)
