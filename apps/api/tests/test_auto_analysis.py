import pytest
from contextlib import asynccontextmanager
from datetime import timedelta
from unittest.mock import AsyncMock, patch

from sqlalchemy import select

from config import settings
from database import utcnow
from models.blog import Blog
from models.content_analysis import ContentAnalysis
from models.portfolio import Portfolio
from models.user import User
from services.auto_analysis import AutoAnalysisService, backfill_analysis_job_async
from services.content_analysis import AnalysisItem


def _item(index: int, content_type: str = "blog") -> AnalysisItem:
    return AnalysisItem(
        content_id=f"{content_type}-{index}",
        content_type=content_type,
        title=f"Post {index}",
        content="Short body. Two sentences.",
        author="Lena",
        author_id="learner",
    )


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


async def _analysis_rows(session_maker):
    async with session_maker() as session:
        return (await session.execute(select(ContentAnalysis))).scalars().all()


@pytest.mark.asyncio
async def test_batch_runs_fixed_size_groups_with_pauses(session_maker, fake_llm):
    sleep = RecordingSleep()
    service = AutoAnalysisService(session_maker=session_maker, sleep=sleep)

    report = await service.batch_analyze([_item(i) for i in range(12)], batch_size=5, delay_seconds=2.0)

    assert report["total"] == 12
    assert report["batches"] == 3
    assert report["analyzed"] == 12
    assert report["failed"] == 0
    assert sleep.calls == [2.0, 2.0]
    assert len(fake_llm.content_calls) == 12
    assert len(await _analysis_rows(session_maker)) == 12


@pytest.mark.asyncio
async def test_existing_analysis_is_skipped(session_maker, fake_llm):
    service = AutoAnalysisService(session_maker=session_maker, sleep=RecordingSleep())

    assert await service.perform_analysis(_item(1)) == "analyzed"
    assert await service.perform_analysis(_item(1)) == "skipped"
    assert len(fake_llm.content_calls) == 1

    report = await service.batch_analyze([_item(1), _item(2)], batch_size=5)
    assert report["skipped"] == 1
    assert report["analyzed"] == 1


@pytest.mark.asyncio
async def test_batch_isolates_failures(session_maker, fake_llm):
    service = AutoAnalysisService(session_maker=session_maker, sleep=RecordingSleep())
    original = fake_llm.analyze_content

    async def flaky(*, title, body, author, content_type):
        if title == "Post 2":
            raise RuntimeError("upstream exploded")
        return await original(title=title, body=body, author=author, content_type=content_type)

    fake_llm.analyze_content = flaky

    report = await service.batch_analyze([_item(i) for i in range(4)], batch_size=10)
    assert report["analyzed"] == 3
    assert report["failed"] == 1
    assert report["failures"] == [
        {"content_id": "blog-2", "content_type": "blog", "error": "upstream exploded"}
    ]
    stored = {row.content_id for row in await _analysis_rows(session_maker)}
    assert stored == {"blog-0", "blog-1", "blog-3"}


@pytest.mark.asyncio
async def test_scheduled_analysis_runs_after_delay(session_maker, fake_llm):
    sleep = RecordingSleep()
    service = AutoAnalysisService(session_maker=session_maker, sleep=sleep)

    service.schedule(_item(7), delay_seconds=3)
    assert service.pending_count == 1
    await service.wait_for_pending()

    assert service.pending_count == 0
    assert sleep.calls == [3.0]
    rows = await _analysis_rows(session_maker)
    assert [row.content_id for row in rows] == ["blog-7"]
    assert rows[0].summary == "Stub summary 1"


@pytest.mark.asyncio
async def test_scheduled_failures_are_logged_not_raised(session_maker, fake_llm, caplog):
    service = AutoAnalysisService(session_maker=session_maker, sleep=RecordingSleep())

    async def broken(**kwargs):
        raise RuntimeError("boom")

    fake_llm.analyze_content = broken
    service.schedule(_item(1), delay_seconds=0)
    await service.wait_for_pending()

    assert "Auto-analysis failed for blog blog-1" in caplog.text
    assert await _analysis_rows(session_maker) == []


@pytest.mark.asyncio
async def test_trigger_respects_enabled_flag(session_maker, fake_llm, monkeypatch):
    service = AutoAnalysisService(session_maker=session_maker, sleep=RecordingSleep())

    assert service.trigger_content_analysis(_item(1)) is None
    assert service.pending_count == 0

    monkeypatch.setattr(settings, "AUTO_ANALYSIS_ENABLED", True)
    monkeypatch.setattr(settings, "AUTO_ANALYSIS_DELAY_SECONDS", 0.0)
    task = service.trigger_content_analysis(_item(1))
    assert task is not None
    await service.wait_for_pending()
    assert len(await _analysis_rows(session_maker)) == 1


@pytest.mark.asyncio
async def test_backfill_picks_published_unanalyzed_content(session_maker, fake_llm, monkeypatch):
    monkeypatch.setattr(settings, "ANALYSIS_BATCH_DELAY_SECONDS", 0.0)
    now = utcnow()
    async with session_maker() as session:
        session.add(User(id="learner", email="learner@example.com", name="Lena"))
        session.add_all(
            [
                Blog(id="b-old", slug="b-old", title="Old", content="Body.", author="Lena",
                     author_id="learner", created_at=now - timedelta(days=3)),
                Blog(id="b-new", slug="b-new", title="New", content="Body.", author="Lena",
                     author_id="learner", created_at=now),
                Blog(id="b-draft", slug="b-draft", title="Draft", content="Body.", author="Lena",
                     author_id="learner", published=False),
                Portfolio(id="p-1", slug="p-1", title="Project", description="d", content="Body.",
                          author="Lena", author_id="learner"),
            ]
        )
        await session.commit()

    service = AutoAnalysisService(session_maker=session_maker, sleep=RecordingSleep())

    pending = await service.find_unanalyzed_content(limit=2)
    assert [item.content_id for item in pending] == ["b-old", "b-new"]

    report = await service.backfill_unanalyzed_content(limit=10)
    assert report["total"] == 3
    assert report["analyzed"] == 3
    assert await service.find_unanalyzed_content(limit=10) == []


@pytest.mark.asyncio
async def test_backfill_job_disposes_engine(session_maker, fake_llm):
    service = AutoAnalysisService(session_maker=session_maker, sleep=RecordingSleep())
    with patch("services.auto_analysis.get_auto_analysis_service", return_value=service), patch(
        "services.auto_analysis.engine"
    ) as engine:
        engine.dispose = AsyncMock()
        report = await backfill_analysis_job_async(limit=5)

    assert report["total"] == 0
    engine.dispose.assert_awaited_once()


class CountingSessions:
    """Wraps a session maker and tracks how many sessions are open."""

    def __init__(self, session_maker):
        self._session_maker = session_maker
        self.open = 0

    def __call__(self):
        return self._track()

    @asynccontextmanager
    async def _track(self):
        async with self._session_maker() as session:
            self.open += 1
            try:
                yield session
            finally:
                self.open -= 1


@pytest.mark.asyncio
async def test_llm_call_runs_without_an_open_session(session_maker, fake_llm):
    sessions = CountingSessions(session_maker)
    service = AutoAnalysisService(session_maker=sessions, sleep=RecordingSleep())
    original = fake_llm.analyze_content
    open_during_call = []

    async def observed(**kwargs):
        open_during_call.append(sessions.open)
        return await original(**kwargs)

    fake_llm.analyze_content = observed

    assert await service.perform_analysis(_item(1)) == "analyzed"
    assert await service.reanalyze(_item(1)) == "analyzed"
    assert open_during_call == [0, 0]
    assert sessions.open == 0


@pytest.mark.asyncio
async def test_reanalyze_overwrites_existing_record(session_maker, fake_llm):
    service = AutoAnalysisService(session_maker=session_maker, sleep=RecordingSleep())

    assert await service.reanalyze(_item(1)) == "analyzed"
    first = await _analysis_rows(session_maker)

    service.schedule(_item(1), delay_seconds=0, force=True)
    await service.wait_for_pending()

    rows = await _analysis_rows(session_maker)
    assert len(rows) == 1
    assert rows[0].id == first[0].id
    assert rows[0].summary == "Stub summary 2"
    assert await service.perform_analysis(_item(1)) == "skipped"
    assert len(fake_llm.content_calls) == 2
