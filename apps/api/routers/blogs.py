"""
Blog post CRUD. Writes schedule background content analysis.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.auth_scope import AuthContext, ensure_owner_or_admin, get_auth_context
from routers.envelope import envelope
from services.accounts import require_user
from services.auto_analysis import get_auto_analysis_service
from services.blogs import (
    create_blog,
    delete_blog,
    get_blog,
    list_published_blogs,
    serialize_blog,
    update_blog,
)
from services.content_analysis import item_from_blog

router = APIRouter()


class CreateBlogRequest(BaseModel):
    title: str = Field(default="", max_length=200)
    content: str = ""
    author: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    published: bool = True


class UpdateBlogRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = None
    author: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    published: Optional[bool] = None


@router.get("")
async def list_blogs(db: AsyncSession = Depends(get_db)):
    """Latest published posts, newest first."""
    blogs = await list_published_blogs(db)
    return envelope([serialize_blog(blog) for blog in blogs])


@router.post("", status_code=201)
async def create_blog_route(
    request: CreateBlogRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    user = await require_user(db, auth.user_id)
    blog = await create_blog(
        db,
        author_id=user.id,
        author=request.author or user.name,
        title=request.title,
        content=request.content,
        tags=request.tags,
        published=request.published,
    )
    get_auto_analysis_service().trigger_content_analysis(item_from_blog(blog))
    return envelope(serialize_blog(blog))


@router.get("/{slug}")
async def get_blog_route(slug: str, db: AsyncSession = Depends(get_db)):
    blog = await get_blog(db, slug)
    return envelope(serialize_blog(blog))


@router.put("/{slug}")
async def update_blog_route(
    slug: str,
    request: UpdateBlogRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; the slug is kept even when the title changes."""
    blog = await get_blog(db, slug, published_only=False)
    ensure_owner_or_admin(auth, blog.author_id)
    text_changed = await update_blog(db, blog, request.model_dump(exclude_unset=True))
    if text_changed:
        get_auto_analysis_service().trigger_content_analysis(item_from_blog(blog), force=True)
    return envelope(serialize_blog(blog))


@router.delete("/{slug}")
async def delete_blog_route(
    slug: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    blog = await get_blog(db, slug, published_only=False)
    ensure_owner_or_admin(auth, blog.author_id)
    await delete_blog(db, blog)
    return {"success": True, "message": "Blog deleted successfully"}
