"""
Background content analysis triggered by blog and portfolio writes.

Scheduled analyses are fire-and-forget: they run on the event loop after a
short delay, skip content that already has a record, and log failures
without retrying. Batch mode analyzes fixed-size groups concurrently with a
pause between groups to stay under upstream rate limits.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set

from sqlalchemy.future import select

from analysis.llm import LLMAnalysisClient, get_llm_analysis_client
from config import settings
from database import async_session_maker, engine
from models.blog import Blog
from models.content_analysis import ContentAnalysis
from models.portfolio import Portfolio
from services.content_analysis import (
    AnalysisItem,
    apply_analysis,
    find_content_analysis,
    item_from_blog,
    item_from_portfolio,
    run_content_analysis,
    upsert_content_analysis,
)

logger = logging.getLogger(__name__)

STATUS_ANALYZED = "analyzed"
STATUS_SKIPPED = "skipped"


class AutoAnalysisService:
    def __init__(
        self,
        client: Optional[LLMAnalysisClient] = None,
        session_maker=None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._client = client
        self._session_maker = session_maker
        self._sleep = sleep
        self._pending: Set[asyncio.Task] = set()

    def _sessions(self):
        return self._session_maker or async_session_maker

    def _llm(self) -> LLMAnalysisClient:
        return self._client or get_llm_analysis_client()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def trigger_content_analysis(self, item: AnalysisItem, force: bool = False) -> Optional[asyncio.Task]:
        """Schedule analysis for freshly written content unless auto-analysis is off.

        ``force`` re-analyzes edited content and overwrites its existing record.
        """
        if not settings.AUTO_ANALYSIS_ENABLED:
            return None
        return self.schedule(item, force=force)

    def schedule(
        self,
        item: AnalysisItem,
        delay_seconds: Optional[float] = None,
        force: bool = False,
    ) -> asyncio.Task:
        delay = settings.AUTO_ANALYSIS_DELAY_SECONDS if delay_seconds is None else delay_seconds
        task = asyncio.create_task(self._run_scheduled(item, max(float(delay), 0.0), force))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run_scheduled(self, item: AnalysisItem, delay: float, force: bool = False) -> None:
        try:
            if delay:
                await self._sleep(delay)
            if force:
                status = await self.reanalyze(item)
            else:
                status = await self.perform_analysis(item)
            logger.info("Auto-analysis %s for %s %s", status, item.content_type, item.content_id)
        except Exception:
            logger.exception("Auto-analysis failed for %s %s", item.content_type, item.content_id)

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled analysis has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def perform_analysis(self, item: AnalysisItem) -> str:
        """Analyze one item and insert its record, or skip it when a record exists."""
        async with self._sessions()() as db:
            existing = await find_content_analysis(db, item.content_id, item.content_type)
        if existing:
            return STATUS_SKIPPED

        # No session is held across the LLM call; the unique constraint rejects the loser of a race.
        result, metrics = await run_content_analysis(item, self._llm())
        async with self._sessions()() as db:
            db.add(apply_analysis(ContentAnalysis(), item, result, metrics))
            await db.commit()
        return STATUS_ANALYZED

    async def reanalyze(self, item: AnalysisItem) -> str:
        """Analyze edited content and overwrite its record, creating one if missing."""
        result, metrics = await run_content_analysis(item, self._llm())
        async with self._sessions()() as db:
            await upsert_content_analysis(db, item, result, metrics)
        return STATUS_ANALYZED

    async def batch_analyze(
        self,
        items: Iterable[AnalysisItem],
        batch_size: Optional[int] = None,
        delay_seconds: Optional[float] = None,
    ) -> Dict[str, Any]:
        items = list(items)
        size = max(int(batch_size or settings.ANALYSIS_BATCH_SIZE), 1)
        delay = settings.ANALYSIS_BATCH_DELAY_SECONDS if delay_seconds is None else delay_seconds

        report: Dict[str, Any] = {
            "total": len(items),
            "batches": 0,
            "analyzed": 0,
            "skipped": 0,
            "failed": 0,
            "failures": [],
        }
        for start in range(0, len(items), size):
            if report["batches"] and delay > 0:
                await self._sleep(delay)
            group = items[start:start + size]
            report["batches"] += 1

            outcomes = await asyncio.gather(
                *(self.perform_analysis(item) for item in group),
                return_exceptions=True,
            )
            for item, outcome in zip(group, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(
                        "Batch analysis failed for %s %s: %s",
                        item.content_type,
                        item.content_id,
                        outcome,
                    )
                    report["failed"] += 1
                    report["failures"].append({
                        "content_id": item.content_id,
                        "content_type": item.content_type,
                        "error": str(outcome) or outcome.__class__.__name__,
                    })
                else:
                    report[outcome] += 1
        return report

    async def find_unanalyzed_content(self, limit: Optional[int] = None) -> List[AnalysisItem]:
        """Published blogs, then portfolios, that have no analysis record yet."""
        remaining = max(int(limit or settings.ANALYSIS_BACKFILL_LIMIT), 0)
        analyzed_ids = select(ContentAnalysis.content_id)
        items: List[AnalysisItem] = []
        async with self._sessions()() as db:
            blog_result = await db.execute(
                select(Blog)
                .where(Blog.published.is_(True), Blog.id.not_in(analyzed_ids))
                .order_by(Blog.created_at.asc())
                .limit(remaining)
            )
            items.extend(item_from_blog(blog) for blog in blog_result.scalars().all())

            remaining -= len(items)
            if remaining > 0:
                portfolio_result = await db.execute(
                    select(Portfolio)
                    .where(Portfolio.published.is_(True), Portfolio.id.not_in(analyzed_ids))
                    .order_by(Portfolio.created_at.asc())
                    .limit(remaining)
                )
                items.extend(item_from_portfolio(row) for row in portfolio_result.scalars().all())
        return items

    async def backfill_unanalyzed_content(self, limit: Optional[int] = None) -> Dict[str, Any]:
        items = await self.find_unanalyzed_content(limit)
        report = await self.batch_analyze(items)
        logger.info(
            "Backfill finished: total=%s analyzed=%s skipped=%s failed=%s",
            report["total"],
            report["analyzed"],
            report["skipped"],
            report["failed"],
        )
        return report


_shared_service: Optional[AutoAnalysisService] = None


def get_auto_analysis_service() -> AutoAnalysisService:
    global _shared_service
    if _shared_service is None:
        _shared_service = AutoAnalysisService()
    return _shared_service


async def backfill_analysis_job_async(limit: Optional[int] = None) -> Dict[str, Any]:
    try:
        return await get_auto_analysis_service().backfill_unanalyzed_content(limit)
    finally:
        # Pooled connections are bound to the loop that asyncio.run is about to close.
        await engine.dispose()


def backfill_analysis_job(limit: Optional[int] = None) -> Dict[str, Any]:
    """RQ worker entrypoint for analysis backfill jobs."""
    return asyncio.run(backfill_analysis_job_async(limit))
