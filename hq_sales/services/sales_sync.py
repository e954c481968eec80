"""
Sales sync: extract → aggregate → upsert.

  1. fetch the POS extract bytes (hosted storage or a local file)
  2. parse it into bill lines, dropping rows with a bad date or blank store
  3. roll lines up per (date, store) and per (date, store, salesman)
  4. upsert the rollups, replacing any earlier values for the same key

Steps run strictly in order. Rollups are recomputed from source on every run,
so re-running over the same extract leaves the tables unchanged; a failed run
is retried by running it again. Writes already committed are not rolled back.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ..models.sync import SyncLog
from ..repositories.rollups import RollupRepository
from ..schemas.sync import SyncResult
from ..utils.aggregation import (
    aggregate_salesman_rollups,
    aggregate_store_rollups,
    latest_bill_times,
)
from ..utils.blob_source import default_source
from ..utils.extract_parser import parse_sales_extract
from ..utils.slack import notify_sync_complete, notify_sync_failure

logger = logging.getLogger(__name__)

# Serialises runs inside one process; separate processes remain last-writer-wins
_sync_lock = threading.Lock()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _start_log(db: Session, source_name: str, trigger: str) -> Optional[int]:
    try:
        log = SyncLog(source=source_name, trigger=trigger, status="running")
        db.add(log)
        db.commit()
        return log.id
    except Exception as exc:
        db.rollback()
        logger.warning("Could not write sync log for %s: %s", source_name, exc)
        return None


def _finish_log(db: Session, log_id: Optional[int], **fields) -> None:
    if log_id is None:
        return
    try:
        log = db.get(SyncLog, log_id)
        if log is None:
            return
        for key, value in fields.items():
            setattr(log, key, value)
        log.end_time = _utcnow()
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.warning("Could not update sync log %s: %s", log_id, exc)


def run_sales_sync(
    db: Session,
    source=None,
    trigger: str = "manual",
    notify: bool = True,
    now: Optional[datetime] = None,
) -> SyncResult:
    """
    Run one sync. Never raises: failures come back as SyncResult(ok=False).
    """
    source = source or default_source()
    with _sync_lock:
        return _run(db, source, trigger, notify, now or _utcnow())


def _run(db: Session, source, trigger: str, notify: bool, now: datetime) -> SyncResult:
    logger.info("Sales sync started (%s) from %s", trigger, source.name)
    log_id = _start_log(db, source.name, trigger)
    rows_parsed = rows_skipped = 0

    try:
        content = source.fetch()
        parsed = parse_sales_extract(content, source.name)
        rows_parsed, rows_skipped = parsed.rows_read, parsed.rows_skipped

        store_rollups = aggregate_store_rollups(parsed.lines)
        salesman_rollups = aggregate_salesman_rollups(parsed.lines) if parsed.has_salesman else []
        bill_times = latest_bill_times(parsed.lines)

        repo = RollupRepository(db)
        written = repo.upsert_store_rollups(store_rollups, updated_at=now)
        salesman_written = repo.upsert_salesman_rollups(salesman_rollups, updated_at=now)
        repo.upsert_sales_meta(bill_times, updated_at=now)
        repo.commit()
    except Exception as exc:
        db.rollback()
        error = str(exc) or exc.__class__.__name__
        logger.exception("Sales sync from %s failed", source.name)
        _finish_log(
            db, log_id,
            status="failed", rows_parsed=rows_parsed, rows_skipped=rows_skipped,
            error_message=error,
        )
        if notify:
            notify_sync_failure(source.name, error)
        return SyncResult(ok=False, error=error, rows_skipped=rows_skipped, sync_log_id=log_id)

    sale_dates = sorted({r.sale_date for r in store_rollups})
    stores = sorted({r.store_code for r in store_rollups})
    logger.info(
        "Sales sync done: %d rows parsed, %d skipped, %d store rollups, %d salesman rollups",
        rows_parsed, rows_skipped, written, salesman_written,
    )
    _finish_log(
        db, log_id,
        status="success", rows_parsed=rows_parsed, rows_skipped=rows_skipped,
        records_written=written + salesman_written,
    )
    if notify:
        notify_sync_complete(
            source.name, written, salesman_written,
            [str(d) for d in sale_dates], rows_skipped,
        )
    return SyncResult(
        ok=True,
        rows_written=written,
        salesman_rows_written=salesman_written,
        rows_skipped=rows_skipped,
        sale_dates_touched=sale_dates,
        stores_touched=stores,
        sync_log_id=log_id,
    )
