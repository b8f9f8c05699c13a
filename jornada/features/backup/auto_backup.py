"""
Weekly auto backup.

Called on launch and on every foreground resume. The last-backup
timestamp gates writes to one per interval, so calling it often is cheap
and harmless. Failures are logged and never reach the caller.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jornada.core.clock import iso_timestamp, parse_iso_timestamp, utc_now
from jornada.core.config import settings
from jornada.core.logging import log_event
from jornada.core.storage import DurableStore
from jornada.features.streaks.service import uniq_sorted
from jornada.models.progress import AUTO_BACKUP_KEY, COMPLETED_DAYS_KEY, LAST_BACKUP_KEY, AutoBackupRecord

logger = logging.getLogger("jornada")


def get_last_backup_at(store: DurableStore) -> Optional[str]:
    return store.get(LAST_BACKUP_KEY) or None


def is_backup_due(last_backup: Optional[str], now: datetime, interval_days: int) -> bool:
    last = parse_iso_timestamp(last_backup)
    if last is None:
        return True
    return now - last >= timedelta(days=interval_days)


def run_auto_backup(store: DurableStore, *, now: Optional[datetime] = None, interval_days: Optional[int] = None) -> bool:
    """Snapshot the completed days when the last backup is old enough. Returns True when written."""
    moment = now or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    interval = interval_days if interval_days is not None else settings.AUTO_BACKUP_INTERVAL_DAYS
    try:
        if not is_backup_due(store.get(LAST_BACKUP_KEY), moment, interval):
            return False

        raw = store.get(COMPLETED_DAYS_KEY)
        stored = json.loads(raw) if raw else []
        if not isinstance(stored, list):
            raise ValueError("completed days are not a list")

        stamp = iso_timestamp(moment)
        record = AutoBackupRecord(created_at=stamp, completed_days=uniq_sorted(stored))
        store.set(AUTO_BACKUP_KEY, json.dumps(record.to_dict(), ensure_ascii=False))
        store.set(LAST_BACKUP_KEY, stamp)
    except Exception as e:
        log_event("warning", f"backup.auto.failed: {e}", event_type="backup.auto", error_code="auto_backup_failed")
        return False

    log_event(
        "info",
        "backup.auto.saved",
        event_type="backup.auto",
        extra={"count": len(record.completed_days), "created_at": stamp},
    )
    return True
