import json

import pytest

from jornada.core.errors import StorageError
from jornada.core.storage import InMemoryStore
from jornada.features.backup.restore import has_auto_backup, restore_auto_backup_now, restore_from_auto_backup
from jornada.features.progress.service import ProgressStore
from jornada.models.progress import (
    AUTO_BACKUP_KEY,
    AUTO_RESTORE_DONE_KEY,
    COMPLETED_DAYS_KEY,
)
from jornada.tests.mocks import FailingKeyStore, FailingStore

TEN_DAYS = [f"2026-01-{d:02d}" for d in (5, 6, 7, 8, 9, 10, 12, 13, 14, 15)]


def backup_record(days, app="Jornada Bíblica", kind="auto-backup", created_at="2026-01-15T12:00:00.000Z"):
    return json.dumps({"app": app, "type": kind, "createdAt": created_at, "completedDays": days})


def test_missing_backup_is_not_restored(store):
    result = restore_from_auto_backup(store)
    assert (result.restored, result.count) == (False, 0)
    assert not has_auto_backup(store)


def test_unparsable_backup_is_not_restored():
    store = InMemoryStore({AUTO_BACKUP_KEY: "{broken"})
    assert restore_from_auto_backup(store).restored is False


@pytest.mark.parametrize(
    "app,kind",
    [("Other App", "auto-backup"), ("Jornada Bíblica", "manual"), (None, None)],
)
def test_signature_mismatch_is_not_restored(app, kind):
    store = InMemoryStore({AUTO_BACKUP_KEY: backup_record(TEN_DAYS, app=app, kind=kind)})
    result = restore_from_auto_backup(store)
    assert result.restored is False
    assert store.get(COMPLETED_DAYS_KEY) is None


def test_empty_backup_is_nothing_to_restore():
    store = InMemoryStore({AUTO_BACKUP_KEY: backup_record([])})
    result = restore_from_auto_backup(store)
    assert (result.restored, result.count) == (False, 0)


def test_backup_with_only_invalid_dates_is_nothing_to_restore():
    store = InMemoryStore({AUTO_BACKUP_KEY: backup_record(["soon", 12, "2026-02-31"])})
    assert restore_from_auto_backup(store).restored is False


def test_valid_backup_replaces_current_days():
    store = InMemoryStore(
        {
            AUTO_BACKUP_KEY: backup_record(TEN_DAYS + ["junk", "2026-01-05"]),
            COMPLETED_DAYS_KEY: json.dumps(["2025-12-01"]),
        }
    )
    result = restore_from_auto_backup(store)
    assert result.restored is True
    assert result.count == 10
    assert result.created_at == "2026-01-15T12:00:00.000Z"
    assert json.loads(store.get(COMPLETED_DAYS_KEY)) == TEN_DAYS


def test_non_string_created_at_is_dropped():
    store = InMemoryStore({AUTO_BACKUP_KEY: backup_record(TEN_DAYS, created_at=1234)})
    result = restore_from_auto_backup(store)
    assert result.restored is True
    assert result.created_at is None
    assert "createdAt" not in result.to_dict()


def test_manual_restore_now_closes_launch_guard():
    store = InMemoryStore({AUTO_BACKUP_KEY: backup_record(TEN_DAYS)})
    result = restore_auto_backup_now(store)
    assert result.restored is True
    assert store.get(AUTO_RESTORE_DONE_KEY) == "1"


def test_manual_restore_now_without_backup_leaves_guard_open(store):
    assert restore_auto_backup_now(store).restored is False
    assert store.get(AUTO_RESTORE_DONE_KEY) is None


def test_fresh_install_restores_once():
    store = InMemoryStore({AUTO_BACKUP_KEY: backup_record(TEN_DAYS)})
    progress = ProgressStore(store)

    first = progress.ensure_auto_restore_once_if_needed()
    assert (first.restored, first.count) == (True, 10)
    assert store.get(AUTO_RESTORE_DONE_KEY) == "1"

    second = progress.ensure_auto_restore_once_if_needed()
    assert (second.restored, second.count) == (False, 0)


def test_existing_progress_is_never_overwritten():
    store = InMemoryStore(
        {
            AUTO_BACKUP_KEY: backup_record(TEN_DAYS),
            COMPLETED_DAYS_KEY: json.dumps(["2026-01-20"]),
        }
    )
    result = ProgressStore(store).ensure_auto_restore_once_if_needed()
    assert result.restored is False
    assert json.loads(store.get(COMPLETED_DAYS_KEY)) == ["2026-01-20"]
    assert store.get(AUTO_RESTORE_DONE_KEY) == "1"


def test_guard_is_set_even_when_nothing_to_restore(store):
    result = ProgressStore(store).ensure_auto_restore_once_if_needed()
    assert result.restored is False
    assert store.get(AUTO_RESTORE_DONE_KEY) == "1"


def test_guard_swallows_restore_failure_and_still_marks_done():
    store = FailingKeyStore(COMPLETED_DAYS_KEY, {AUTO_BACKUP_KEY: backup_record(TEN_DAYS)})
    result = ProgressStore(store).ensure_auto_restore_once_if_needed()
    assert (result.restored, result.count) == (False, 0)
    assert store.get(AUTO_RESTORE_DONE_KEY) == "1"


def test_guard_never_raises_when_store_is_down():
    result = ProgressStore(FailingStore()).ensure_auto_restore_once_if_needed()
    assert result.restored is False


def test_reset_reopens_auto_restore():
    store = InMemoryStore({AUTO_BACKUP_KEY: backup_record(TEN_DAYS)})
    progress = ProgressStore(store)
    progress.ensure_auto_restore_once_if_needed()
    progress.reset_progress()

    # The backup record survives the reset, so the next launch restores it.
    again = progress.ensure_auto_restore_once_if_needed()
    assert again.restored is True
    assert progress.get_completed_days() == TEN_DAYS


def test_restore_propagates_storage_errors():
    with pytest.raises(StorageError):
        restore_from_auto_backup(FailingStore())
