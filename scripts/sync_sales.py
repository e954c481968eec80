"""
Run the sales sync from the command line.

Usage:
    python scripts/sync_sales.py                          # configured storage object, once
    python scripts/sync_sales.py --file data/export.xlsx  # local extract, once
    python scripts/sync_sales.py --schedule               # every SYNC_MINUTES past the hour

Re-running is always safe: rollups are replaced, not added to.
"""
import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
load_dotenv()

from hq_sales.config import settings
from hq_sales.database import SessionLocal
from hq_sales.services.refresh import RefreshScheduler
from hq_sales.services.sales_sync import run_sales_sync
from hq_sales.utils.blob_source import LocalFileSource, default_source

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger("sync_sales")


def _sync_once(source, trigger: str, notify: bool) -> bool:
    db = SessionLocal()
    try:
        result = run_sales_sync(db, source=source, trigger=trigger, notify=notify)
    finally:
        db.close()
    print(json.dumps(result.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))
    return result.ok


def main():
    parser = argparse.ArgumentParser(description="Sync daily sales rollups from the POS extract.")
    parser.add_argument("--file", help="Read the extract from a local file instead of storage")
    parser.add_argument("--schedule", action="store_true", help="Keep running at the configured sync minutes")
    parser.add_argument("--no-notify", action="store_true", help="Skip Slack notifications")
    args = parser.parse_args()

    source = LocalFileSource(args.file) if args.file else default_source()
    notify = not args.no_notify

    if not args.schedule:
        ok = _sync_once(source, "file" if args.file else "manual", notify)
        sys.exit(0 if ok else 1)

    minutes = settings.sync_offsets()
    logger.info("Scheduled sync at minutes %s (+%ss)", minutes, settings.refresh_buffer_seconds)
    scheduler = RefreshScheduler(
        lambda: _sync_once(source, "schedule", notify),
        minutes=minutes,
        buffer_seconds=settings.refresh_buffer_seconds,
        name="sales-sync",
    )
    try:
        asyncio.run(scheduler.run())
    except KeyboardInterrupt:
        logger.info("Stopped.")


if __name__ == "__main__":
    main()
