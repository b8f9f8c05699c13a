"""
Auto-backup restore.

Runs unattended at launch, so every validation failure is reported as
"nothing to restore" rather than raised. Storage errors still propagate;
the launch guard in the progress store swallows them.
"""

import json
import logging

from jornada.core.storage import DurableStore
from jornada.features.streaks.service import uniq_sorted
from jornada.models.progress import (
    AUTO_BACKUP_APP,
    AUTO_BACKUP_KEY,
    AUTO_BACKUP_TYPE,
    AUTO_RESTORE_DONE_KEY,
    AUTO_RESTORE_DONE_VALUE,
    COMPLETED_DAYS_KEY,
    RestoreResult,
)

logger = logging.getLogger("jornada")


def restore_from_auto_backup(store: DurableStore) -> RestoreResult:
    """Replace the completed days with the auto-backup snapshot, if it is valid."""
    raw = store.get(AUTO_BACKUP_KEY)
    if not raw:
        return RestoreResult(restored=False)

    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError):
        logger.warning("backup.restore.unparsable")
        return RestoreResult(restored=False)

    if not isinstance(parsed, dict):
        return RestoreResult(restored=False)

    if parsed.get("app") != AUTO_BACKUP_APP or parsed.get("type") != AUTO_BACKUP_TYPE:
        logger.warning("backup.restore.signature_mismatch")
        return RestoreResult(restored=False)

    listed = parsed.get("completedDays")
    valid_dates = uniq_sorted(listed if isinstance(listed, list) else [])
    if not valid_dates:
        return RestoreResult(restored=False)

    store.set(COMPLETED_DAYS_KEY, json.dumps(valid_dates))

    created_at = parsed.get("createdAt")
    result = RestoreResult(
        restored=True,
        count=len(valid_dates),
        created_at=created_at if isinstance(created_at, str) else None,
    )
    logger.info(f"backup.restore.applied count={result.count}")
    return result


def restore_auto_backup_now(store: DurableStore) -> RestoreResult:
    """User-triggered restore; a successful restore also closes the launch guard."""
    result = restore_from_auto_backup(store)
    if result.restored:
        store.set(AUTO_RESTORE_DONE_KEY, AUTO_RESTORE_DONE_VALUE)
    return result


def has_auto_backup(store: DurableStore) -> bool:
    return bool(store.get(AUTO_BACKUP_KEY))
