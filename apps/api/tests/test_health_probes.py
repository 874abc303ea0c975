import pytest
from unittest.mock import MagicMock, patch

from config import settings


class _FakeConnection:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, statement):
        return None


@pytest.mark.asyncio
async def test_liveness_is_always_up(portal_client):
    client, _ = portal_client
    response = await client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"alive": True}


@pytest.mark.asyncio
async def test_readiness_reports_database_outage(portal_client):
    client, _ = portal_client
    engine = MagicMock()
    engine.connect.side_effect = OSError("connection refused")

    with patch("database.engine", engine):
        response = await client.get("/health/ready")

    assert response.status_code == 503
    body = response.json()
    assert body["ready"] is False
    assert body["database"].startswith("down:")


@pytest.mark.asyncio
async def test_readiness_when_database_answers(portal_client):
    client, _ = portal_client
    engine = MagicMock()
    engine.connect.return_value = _FakeConnection()

    with patch("database.engine", engine):
        response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"ready": True}


@pytest.mark.asyncio
async def test_health_marks_missing_dependencies_degraded(portal_client, monkeypatch):
    client, _ = portal_client
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")
    monkeypatch.setattr(settings, "REDIS_URL", "redis://127.0.0.1:1")
    engine = MagicMock()
    engine.connect.return_value = _FakeConnection()

    with patch("database.engine", engine):
        response = await client.get("/health")

    body = response.json()
    assert body["database"] == "up"
    assert body["openai_api_key"] == "missing"
    assert body["redis"].startswith("down:")
    assert body["status"] == "degraded"


@pytest.mark.asyncio
async def test_root_lists_service(portal_client):
    client, _ = portal_client
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "AI Education Portal API"
