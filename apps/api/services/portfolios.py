"""Portfolio project persistence and serialization."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from database import as_utc
from models.portfolio import Portfolio
from services.slugs import unique_slug

logger = logging.getLogger(__name__)


def _clean_list(values: Optional[List[str]]) -> List[str]:
    return [value.strip() for value in values or [] if isinstance(value, str) and value.strip()]


def _optional_url(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def serialize_portfolio(portfolio: Portfolio) -> Dict[str, Any]:
    created_at = as_utc(portfolio.created_at)
    updated_at = as_utc(portfolio.updated_at)
    return {
        "id": portfolio.id,
        "slug": portfolio.slug,
        "title": portfolio.title,
        "description": portfolio.description,
        "content": portfolio.content,
        "author": portfolio.author,
        "author_id": portfolio.author_id,
        "technologies": portfolio.technologies or [],
        "project_url": portfolio.project_url,
        "github_url": portfolio.github_url,
        "image_url": portfolio.image_url,
        "featured": portfolio.featured,
        "published": portfolio.published,
        "created_at": created_at.isoformat() if created_at else None,
        "updated_at": updated_at.isoformat() if updated_at else None,
    }


def _require_fields(title: Optional[str], description: Optional[str], content: Optional[str]) -> None:
    if not (title or "").strip() or not (description or "").strip() or not (content or "").strip():
        raise HTTPException(status_code=400, detail="Title, description, and content are required")


async def list_published_portfolios(db: AsyncSession) -> List[Portfolio]:
    result = await db.execute(
        select(Portfolio)
        .where(Portfolio.published.is_(True))
        .order_by(Portfolio.featured.desc(), Portfolio.created_at.desc())
    )
    return list(result.scalars().all())


async def get_portfolio(db: AsyncSession, slug: str, published_only: bool = True) -> Portfolio:
    query = select(Portfolio).where(Portfolio.slug == slug)
    if published_only:
        query = query.where(Portfolio.published.is_(True))
    result = await db.execute(query)
    portfolio = result.scalar_one_or_none()
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return portfolio


async def create_portfolio(
    db: AsyncSession,
    *,
    author_id: str,
    author: str,
    fields: Dict[str, Any],
) -> Portfolio:
    _require_fields(fields.get("title"), fields.get("description"), fields.get("content"))
    title = fields["title"].strip()

    portfolio = Portfolio(
        id=str(uuid.uuid4()),
        slug=await unique_slug(db, Portfolio, title),
        title=title,
        description=fields["description"].strip(),
        content=fields["content"],
        author=(fields.get("author") or author or "").strip()[:100] or "Anonymous",
        author_id=author_id,
        technologies=_clean_list(fields.get("technologies")),
        project_url=_optional_url(fields.get("project_url")),
        github_url=_optional_url(fields.get("github_url")),
        image_url=_optional_url(fields.get("image_url")),
        featured=bool(fields.get("featured", False)),
        published=bool(fields.get("published", True)),
    )
    db.add(portfolio)
    await db.commit()
    await db.refresh(portfolio)
    logger.info("Created portfolio %s (%s)", portfolio.id, portfolio.slug)
    return portfolio


async def update_portfolio(db: AsyncSession, portfolio: Portfolio, fields: Dict[str, Any]) -> bool:
    """Replace the editable fields. A new title regenerates the slug. Returns True when the analyzed text changed."""
    _require_fields(fields.get("title"), fields.get("description"), fields.get("content"))
    title = fields["title"].strip()

    text_changed = title != portfolio.title or fields["content"] != portfolio.content
    if title != portfolio.title:
        portfolio.slug = await unique_slug(db, Portfolio, title, exclude_id=portfolio.id)
    portfolio.title = title
    portfolio.description = fields["description"].strip()
    portfolio.content = fields["content"]
    portfolio.technologies = _clean_list(fields.get("technologies"))
    portfolio.project_url = _optional_url(fields.get("project_url"))
    portfolio.github_url = _optional_url(fields.get("github_url"))
    portfolio.image_url = _optional_url(fields.get("image_url"))
    if fields.get("featured") is not None:
        portfolio.featured = bool(fields["featured"])
    if fields.get("published") is not None:
        portfolio.published = bool(fields["published"])

    await db.commit()
    await db.refresh(portfolio)
    return text_changed


async def delete_portfolio(db: AsyncSession, portfolio: Portfolio) -> None:
    await db.delete(portfolio)
    await db.commit()
    logger.info("Deleted portfolio %s", portfolio.id)
