"""URL slug generation for blogs and portfolios."""

import re
import time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    slug = _NON_SLUG_CHARS.sub("-", (title or "").lower()).strip("-")
    return slug or "untitled"


async def unique_slug(db: AsyncSession, model, title: str, exclude_id: Optional[str] = None) -> str:
    """Slug for ``title``, suffixed with a millisecond timestamp when already taken."""
    slug = slugify(title)
    query = select(model.id).where(model.slug == slug)
    if exclude_id:
        query = query.where(model.id != exclude_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is None:
        return slug
    return f"{slug}-{int(time.time() * 1000)}"
