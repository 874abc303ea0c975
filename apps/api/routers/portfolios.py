"""
Portfolio project CRUD. Writes schedule background content analysis.
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
from services.content_analysis import item_from_portfolio
from services.portfolios import (
    create_portfolio,
    delete_portfolio,
    get_portfolio,
    list_published_portfolios,
    serialize_portfolio,
    update_portfolio,
)

router = APIRouter()


class PortfolioRequest(BaseModel):
    title: str = Field(default="", max_length=100)
    description: str = Field(default="", max_length=500)
    content: str = ""
    author: Optional[str] = Field(default=None, max_length=100)
    technologies: List[str] = Field(default_factory=list)
    project_url: Optional[str] = None
    github_url: Optional[str] = None
    image_url: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None


@router.get("")
async def list_portfolios(db: AsyncSession = Depends(get_db)):
    """Published projects, featured first, then newest."""
    portfolios = await list_published_portfolios(db)
    return envelope([serialize_portfolio(row) for row in portfolios])


@router.post("", status_code=201)
async def create_portfolio_route(
    request: PortfolioRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    user = await require_user(db, auth.user_id)
    fields = request.model_dump(exclude_none=True)
    portfolio = await create_portfolio(db, author_id=user.id, author=user.name, fields=fields)
    get_auto_analysis_service().trigger_content_analysis(item_from_portfolio(portfolio))
    return envelope(serialize_portfolio(portfolio))


@router.get("/{slug}")
async def get_portfolio_route(slug: str, db: AsyncSession = Depends(get_db)):
    portfolio = await get_portfolio(db, slug)
    return envelope(serialize_portfolio(portfolio))


@router.put("/{slug}")
async def update_portfolio_route(
    slug: str,
    request: PortfolioRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    portfolio = await get_portfolio(db, slug, published_only=False)
    ensure_owner_or_admin(auth, portfolio.author_id)
    text_changed = await update_portfolio(db, portfolio, request.model_dump())
    if text_changed:
        get_auto_analysis_service().trigger_content_analysis(item_from_portfolio(portfolio), force=True)
    return envelope(serialize_portfolio(portfolio))


@router.delete("/{slug}")
async def delete_portfolio_route(
    slug: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    portfolio = await get_portfolio(db, slug, published_only=False)
    ensure_owner_or_admin(auth, portfolio.author_id)
    await delete_portfolio(db, portfolio)
    return {"success": True, "message": "Portfolio deleted successfully"}
