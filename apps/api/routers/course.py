"""Public course catalog endpoints."""

from typing import Optional

from fastapi import APIRouter

from routers.envelope import envelope
from services.course_catalog import get_course_overview, get_modules, get_resources, get_syllabus

router = APIRouter()


@router.get("/overview")
async def course_overview():
    """Headline stats and learning outcomes."""
    return envelope(get_course_overview())


@router.get("/syllabus")
async def course_syllabus():
    return envelope(get_syllabus())


@router.get("/modules")
async def course_modules(status: Optional[str] = None):
    return envelope(get_modules(status))


@router.get("/resources")
async def course_resources():
    return envelope(get_resources())
