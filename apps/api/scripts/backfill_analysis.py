import argparse
import asyncio
import logging
import os
import sys

# Add parent dir to path to find services
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import settings
from database import engine
from services.auto_analysis import get_auto_analysis_service


async def backfill_async(limit: int) -> int:
    print(f"🔍 Looking for up to {limit} published items without analysis...")
    try:
        report = await get_auto_analysis_service().backfill_unanalyzed_content(limit)
    finally:
        await engine.dispose()

    print(
        f"✅ Backfill done: total={report['total']} batches={report['batches']} "
        f"analyzed={report['analyzed']} skipped={report['skipped']} failed={report['failed']}"
    )
    for failure in report["failures"]:
        print(f"   ❌ {failure['content_type']} {failure['content_id']}: {failure['error']}")
    return 1 if report["failed"] else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze published content that has no analysis record.")
    parser.add_argument("--limit", type=int, default=settings.ANALYSIS_BACKFILL_LIMIT)
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    return asyncio.run(backfill_async(max(args.limit, 1)))


if __name__ == "__main__":
    sys.exit(main())
