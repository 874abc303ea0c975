from typing import Any, Dict, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from unittest.mock import patch

from analysis.models import CommunityTrendResult, ContentAnalysisResult, UserInterestResult
from analysis.parsing import (
    coerce_community_analysis,
    coerce_content_analysis,
    coerce_user_interest_analysis,
)
from config import settings
from database import Base, get_db
from main import app
from routers import rate_limit


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory rate-limit state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_counters.clear()
    yield
    rate_limit._local_counters.clear()
    app.state.disable_rate_limits = previous


@pytest.fixture(autouse=True)
def disable_auto_analysis(monkeypatch):
    """Background analysis is opted into per test."""
    monkeypatch.setattr(settings, "AUTO_ANALYSIS_ENABLED", False)
    monkeypatch.setattr(settings, "ADMIN_EMAILS", [])
    monkeypatch.setattr(settings, "PASSWORD_HASH_ITERATIONS", 1000)


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "portal.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield maker
    await engine.dispose()


@pytest_asyncio.fixture
async def portal_client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with patch("services.auto_analysis.async_session_maker", session_maker):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client, session_maker

    app.dependency_overrides.pop(get_db, None)


class FakeLLMClient:
    """Stands in for LLMAnalysisClient and records every call."""

    def __init__(self):
        self.content_calls: List[Dict[str, Any]] = []
        self.user_calls: List[Any] = []
        self.community_calls: List[Any] = []

    async def analyze_content(self, *, title, body, author, content_type) -> ContentAnalysisResult:
        self.content_calls.append({"title": title, "author": author, "content_type": content_type})
        return coerce_content_analysis({
            "summary": f"Stub summary {len(self.content_calls)}",
            "key_topics": ["Machine Learning", "Education"],
            "sentiment": {"label": "positive", "score": 0.6, "confidence": 0.9},
            "complexity": {"level": "advanced", "score": 7, "readability_score": 6.5},
            "categories": ["AI", "Education"],
            "extracted_concepts": [{"concept": "Neural Networks", "relevance": 0.8, "category": "Technical"}],
        })

    async def analyze_user_interests(self, activity) -> UserInterestResult:
        self.user_calls.append(activity)
        return coerce_user_interest_analysis({
            "interests": [{"topic": "Machine Learning", "category": "Technical", "weight": 0.9, "confidence": 0.8}],
            "reading_behavior": {"preferred_complexity": "advanced", "engagement_score": 0.7},
        })

    async def analyze_community_trends(self, sample) -> CommunityTrendResult:
        self.community_calls.append(sample)
        return coerce_community_analysis({
            "topic_trends": [{"topic": "LLMs", "category": "Technical", "frequency": 3, "growth_rate": 0.4, "sentiment": "positive"}],
            "sentiment_analysis": {"trending": "improving"},
        })


@pytest.fixture
def fake_llm(monkeypatch):
    client = FakeLLMClient()
    for module in (
        "services.content_analysis",
        "services.auto_analysis",
        "services.user_interest",
        "services.community",
    ):
        monkeypatch.setattr(f"{module}.get_llm_analysis_client", lambda: client)
    return client
