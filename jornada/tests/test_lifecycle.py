import json

from jornada.core.storage import InMemoryStore
from jornada.features.backup.auto_backup import get_last_backup_at
from jornada.features.lifecycle.service import on_launch, on_resume
from jornada.features.progress.service import ProgressStore
from jornada.models.progress import AUTO_BACKUP_KEY, AUTO_RESTORE_DONE_KEY
from jornada.tests.mocks import FailingStore

BACKUP = json.dumps(
    {
        "app": "Jornada Bíblica",
        "type": "auto-backup",
        "createdAt": "2026-01-10T12:00:00.000Z",
        "completedDays": ["2026-01-05", "2026-01-06", "2026-01-07"],
    }
)


def test_launch_restores_then_backs_up():
    store = InMemoryStore({AUTO_BACKUP_KEY: BACKUP})
    result = on_launch(store)

    assert result.to_dict() == {"restored": True, "count": 3, "createdAt": "2026-01-10T12:00:00.000Z"}
    assert ProgressStore(store).get_completed_days() == ["2026-01-05", "2026-01-06", "2026-01-07"]
    assert store.get(AUTO_RESTORE_DONE_KEY) == "1"
    assert get_last_backup_at(store) is not None
    assert json.loads(store.get(AUTO_BACKUP_KEY))["completedDays"] == ["2026-01-05", "2026-01-06", "2026-01-07"]


def test_second_launch_does_nothing_new():
    store = InMemoryStore({AUTO_BACKUP_KEY: BACKUP})
    on_launch(store)
    ProgressStore(store).set_completed_days(["2026-01-05"])

    assert on_launch(store).restored is False
    assert ProgressStore(store).get_completed_days() == ["2026-01-05"]


def test_resume_respects_backup_cadence():
    store = InMemoryStore()
    ProgressStore(store).set_completed_days(["2026-01-05"])
    assert on_resume(store) is True
    assert on_resume(store) is False


def test_launch_survives_unavailable_store():
    assert on_launch(FailingStore()).restored is False
    assert on_resume(FailingStore()) is False
