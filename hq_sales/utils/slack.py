"""
Slack notification utilities for sales sync runs.
"""
import logging
import requests

from ..config import settings

logger = logging.getLogger(__name__)


def _post(payload: dict) -> bool:
    if not settings.slack_webhook_url:
        logger.warning("SLACK_WEBHOOK_URL not configured; skipping notification")
        return False
    try:
        resp = requests.post(
            settings.slack_webhook_url,
            json=payload,
            timeout=10,
        )
        resp.raise_for_status()
        return True
    except Exception as exc:
        logger.error("Slack notification failed: %s", exc)
        return False


def notify_sync_complete(
    source: str,
    rows_written: int,
    salesman_rows_written: int,
    sale_dates: list[str],
    rows_skipped: int,
) -> bool:
    icon = "✅" if not rows_skipped else "⚠️"
    lines = [
        f"{icon} *Sales Sync Complete*",
        f"Source: {source}",
        f"Store rollups: {rows_written:,}",
        f"Salesman rollups: {salesman_rows_written:,}",
        f"Sale dates: {', '.join(sale_dates) if sale_dates else 'none'}",
    ]
    if rows_skipped:
        lines.append(f"Rows skipped (bad date / blank store): {rows_skipped:,}")
    return _post({"text": "\n".join(lines)})


def notify_sync_failure(source: str, error: str) -> bool:
    text = (
        f"🚨 *Sales Sync Failure*\n"
        f"Source: {source}\n"
        f"Error: {error}"
    )
    return _post({"text": text})
