"""
AI Education Portal - FastAPI Backend
Main application entry point with course catalog, content, and analytics routing.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings, validate_security_settings
from database import engine, Base
import models  # noqa: F401
from routers import (
    health,
    auth,
    course,
    blogs,
    portfolios,
    analytics,
)
from routers.envelope import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from services.auto_analysis import get_auto_analysis_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    print("🚀 Starting AI Education Portal API...")
    validate_security_settings()
    if settings.AUTO_CREATE_DB_SCHEMA:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            print("🗄️ Database schema verified.")
        except Exception as e:
            print(f"⚠️ Database bootstrap skipped: {e}")
    if settings.AUTO_ANALYSIS_ENABLED:
        print(f"🧠 Auto-analysis enabled (delay {settings.AUTO_ANALYSIS_DELAY_SECONDS}s).")
    yield
    # Shutdown
    service = get_auto_analysis_service()
    if service.pending_count:
        print(f"⏳ Waiting for {service.pending_count} pending content analyses...")
        await service.wait_for_pending()
    print("👋 Shutting down API...")


app = FastAPI(
    title="AI Education Portal API",
    description="Course catalog, community content, and LLM-backed learning analytics",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(course.router, prefix="/course", tags=["Course"])
app.include_router(blogs.router, prefix="/blogs", tags=["Blogs"])
app.include_router(portfolios.router, prefix="/portfolios", tags=["Portfolios"])
app.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "AI Education Portal API",
        "version": "0.1.0",
        "status": "running"
    }
