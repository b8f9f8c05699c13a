from __future__ import annotations

import json
import logging
from typing import Iterable, List

from jornada.core.errors import StorageError
from jornada.core.storage import DurableStore, store_lock
from jornada.features.backup.restore import restore_from_auto_backup
from jornada.features.streaks.service import is_valid_date_string, uniq_sorted
from jornada.models.progress import (
    AUTO_RESTORE_DONE_KEY,
    AUTO_RESTORE_DONE_VALUE,
    COMPLETED_DAYS_KEY,
    AddResult,
    RestoreResult,
)

logger = logging.getLogger("jornada")


class ProgressStore:
    """
    Owner of the completed-days set and the one-time auto-restore sentinel.

    Nothing is cached: every query re-reads the durable store, so callers
    always see the latest write. Mutations read the current state right
    before writing under the store lock, so rapid or concurrent calls
    neither duplicate nor drop days.
    """

    def __init__(self, store: DurableStore):
        self.store = store

    def get_completed_days(self) -> List[str]:
        try:
            raw = self.store.get(COMPLETED_DAYS_KEY)
            parsed = json.loads(raw) if raw else []
        except (StorageError, ValueError, RecursionError) as e:
            logger.warning(f"progress.read_failed: {e}")
            return []
        return uniq_sorted(parsed) if isinstance(parsed, list) else []

    def set_completed_days(self, days: Iterable) -> List[str]:
        sanitized = uniq_sorted(days)
        with store_lock(self.store):
            self.store.set(COMPLETED_DAYS_KEY, json.dumps(sanitized))
        return sanitized

    def add_completed_day(self, day) -> AddResult:
        if not is_valid_date_string(day):
            return AddResult(added=False, days=self.get_completed_days())

        with store_lock(self.store):
            current = self.get_completed_days()
            if day in current:
                return AddResult(added=False, days=current)
            return AddResult(added=True, days=self.set_completed_days([*current, day]))

    def reset_progress(self) -> None:
        # The auto-backup record and its timestamp are left in place.
        self.store.remove(COMPLETED_DAYS_KEY)
        self.store.remove(AUTO_RESTORE_DONE_KEY)

    def mark_auto_restore_done(self) -> None:
        self.store.set(AUTO_RESTORE_DONE_KEY, AUTO_RESTORE_DONE_VALUE)

    def is_auto_restore_done(self) -> bool:
        return self.store.get(AUTO_RESTORE_DONE_KEY) == AUTO_RESTORE_DONE_VALUE

    def ensure_auto_restore_once_if_needed(self) -> RestoreResult:
        """
        Restore from the auto backup at most once per installation.

        Existing progress is never overwritten. The sentinel is set on every
        path that gets past the first check, including failures, so a broken
        backup cannot cause a retry on every launch.
        """
        try:
            if self.is_auto_restore_done():
                return RestoreResult(restored=False)

            if self.get_completed_days():
                self.mark_auto_restore_done()
                return RestoreResult(restored=False)

            result = restore_from_auto_backup(self.store)
            self.mark_auto_restore_done()
            return result
        except Exception as e:
            logger.warning(f"progress.auto_restore_failed: {e}")
            try:
                self.mark_auto_restore_done()
            except Exception as mark_error:
                logger.warning(f"progress.auto_restore_mark_failed: {mark_error}")
            return RestoreResult(restored=False)
