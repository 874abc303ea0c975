"""Blog post persistence and serialization."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from database import as_utc
from models.blog import Blog
from services.slugs import unique_slug

logger = logging.getLogger(__name__)

LIST_LIMIT = 20


def _clean_tags(tags: Optional[List[str]]) -> List[str]:
    return [tag.strip() for tag in tags or [] if isinstance(tag, str) and tag.strip()]


def serialize_blog(blog: Blog) -> Dict[str, Any]:
    created_at = as_utc(blog.created_at)
    updated_at = as_utc(blog.updated_at)
    return {
        "id": blog.id,
        "slug": blog.slug,
        "title": blog.title,
        "content": blog.content,
        "author": blog.author,
        "author_id": blog.author_id,
        "tags": blog.tags or [],
        "published": blog.published,
        "created_at": created_at.isoformat() if created_at else None,
        "updated_at": updated_at.isoformat() if updated_at else None,
    }


async def list_published_blogs(db: AsyncSession, limit: int = LIST_LIMIT) -> List[Blog]:
    result = await db.execute(
        select(Blog)
        .where(Blog.published.is_(True))
        .order_by(Blog.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_blog(db: AsyncSession, slug: str, published_only: bool = True) -> Blog:
    query = select(Blog).where(Blog.slug == slug)
    if published_only:
        query = query.where(Blog.published.is_(True))
    result = await db.execute(query)
    blog = result.scalar_one_or_none()
    if not blog:
        raise HTTPException(status_code=404, detail="Blog not found")
    return blog


async def create_blog(
    db: AsyncSession,
    *,
    author_id: str,
    author: str,
    title: str,
    content: str,
    tags: Optional[List[str]] = None,
    published: bool = True,
) -> Blog:
    title = (title or "").strip()
    if not title or not (content or "").strip():
        raise HTTPException(status_code=400, detail="Title and content are required")

    blog = Blog(
        id=str(uuid.uuid4()),
        slug=await unique_slug(db, Blog, title),
        title=title,
        content=content,
        author=(author or "").strip()[:100] or "Anonymous",
        author_id=author_id,
        tags=_clean_tags(tags),
        published=published,
    )
    db.add(blog)
    await db.commit()
    await db.refresh(blog)
    logger.info("Created blog %s (%s)", blog.id, blog.slug)
    return blog


async def update_blog(db: AsyncSession, blog: Blog, changes: Dict[str, Any]) -> bool:
    """Apply a partial update. Returns True when the analyzed text changed."""
    text_changed = False
    for field in ("title", "content"):
        if field in changes and changes[field] is not None:
            value = changes[field].strip() if field == "title" else changes[field]
            if not value.strip():
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
            if value != getattr(blog, field):
                setattr(blog, field, value)
                text_changed = True
    if changes.get("author"):
        blog.author = changes["author"].strip()[:100]
    if changes.get("tags") is not None:
        blog.tags = _clean_tags(changes["tags"])
    if changes.get("published") is not None:
        blog.published = bool(changes["published"])

    await db.commit()
    await db.refresh(blog)
    return text_changed


async def delete_blog(db: AsyncSession, blog: Blog) -> None:
    await db.delete(blog)
    await db.commit()
    logger.info("Deleted blog %s", blog.id)
