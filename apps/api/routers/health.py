"""
Health check endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
import redis.asyncio as redis

from config import settings
import database
from analysis.llm import get_openai_client

router = APIRouter()


async def _database_status() -> str:
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return "up"
    except Exception as e:
        return f"down: {str(e)}"


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns overall system health status.
    """
    health_status = {
        "status": "healthy",
        "api": "up",
        "database": await _database_status(),
        "redis": "unknown",
        "openai_api_key": "configured" if get_openai_client(settings.OPENAI_API_KEY) else "missing",
    }
    if health_status["database"] != "up":
        health_status["status"] = "degraded"

    try:
        r = redis.from_url(settings.REDIS_URL)
        try:
            await r.ping()
        finally:
            await r.aclose()
        health_status["redis"] = "up"
    except Exception as e:
        health_status["redis"] = f"down: {str(e)}"
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/ready")
async def readiness_check():
    """Kubernetes-style readiness probe."""
    database_status = await _database_status()
    if database_status != "up":
        return JSONResponse(
            status_code=503,
            content={"ready": False, "database": database_status},
        )
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}
