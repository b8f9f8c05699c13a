"""App lifecycle hooks: what runs on launch and on foreground resume."""

import logging

from jornada.core.storage import DurableStore
from jornada.features.backup.auto_backup import run_auto_backup
from jornada.features.progress.service import ProgressStore
from jornada.models.progress import RestoreResult

logger = logging.getLogger("jornada")


def on_launch(store: DurableStore) -> RestoreResult:
    """One-time auto restore first, then the cadence-gated auto backup."""
    result = ProgressStore(store).ensure_auto_restore_once_if_needed()
    if result.restored:
        logger.info(f"lifecycle.launch.restored count={result.count}")
    run_auto_backup(store)
    return result


def on_resume(store: DurableStore) -> bool:
    return run_auto_backup(store)
