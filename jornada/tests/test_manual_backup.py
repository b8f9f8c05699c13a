import json
from datetime import datetime, timezone

import pytest

from jornada.core.errors import BackupImportError, StorageError
from jornada.core.storage import InMemoryStore
from jornada.features.backup.manual import export_backup, export_backup_text, import_backup, parse_backup_text
from jornada.features.gratitude.service import GratitudeJournal
from jornada.features.profile.service import ProfileStore
from jornada.features.progress.service import ProgressStore
from jornada.models.progress import AUTO_RESTORE_DONE_KEY, COMPLETED_DAYS_KEY, GRATITUDE_KEY, HAS_ONBOARDED_KEY
from jornada.tests.mocks import FailingKeyStore, ReadOnlyStore

NOW = datetime(2026, 1, 20, 10, 30, tzinfo=timezone.utc)


def populated_store():
    store = InMemoryStore()
    ProgressStore(store).set_completed_days(["2026-01-06", "2026-01-05"])
    GratitudeJournal(store).set_entry("2026-01-05", "Pela família")
    ProfileStore(store).set_user_name("Ana")
    ProfileStore(store).set_has_onboarded(True)
    return store


def test_export_contains_progress_notes_and_profile():
    payload = export_backup(populated_store(), now=NOW).to_export_dict()
    assert payload == {
        "app": "Jornada Bíblica",
        "version": "1.0.0",
        "exportedAt": "2026-01-20T10:30:00.000Z",
        "completedDays": ["2026-01-05", "2026-01-06"],
        "gratitudeByDate": {"2026-01-05": "Pela família"},
        "userName": "Ana",
        "hasOnboarded": True,
    }


def test_export_without_profile_omits_profile_fields():
    payload = export_backup(populated_store(), now=NOW).to_export_dict(include_profile=False)
    assert "userName" not in payload
    assert "hasOnboarded" not in payload


def test_export_text_round_trips_through_import():
    source = populated_store()
    text = export_backup_text(source, now=NOW)
    assert "Pela família" in text

    target = InMemoryStore()
    result = import_backup(target, text)
    assert result.count == 2
    assert result.gratitude_count == 1
    assert ProgressStore(target).get_completed_days() == ["2026-01-05", "2026-01-06"]
    assert ProfileStore(target).get_user_name() == "Ana"
    assert ProfileStore(target).has_onboarded() is True


def test_import_replaces_instead_of_merging():
    store = populated_store()
    import_backup(store, json.dumps({"completedDays": ["2026-02-02"]}))
    assert ProgressStore(store).get_completed_days() == ["2026-02-02"]
    assert GratitudeJournal(store).get_all() == {}


def test_import_marks_auto_restore_done(store):
    import_backup(store, json.dumps({"completedDays": ["2026-01-05"]}))
    assert store.get(AUTO_RESTORE_DONE_KEY) == "1"


def test_import_sanitizes_gratitude_entries(store):
    long_note = "a" * 250
    text = json.dumps(
        {
            "completedDays": ["2026-01-05"],
            "gratitudeByDate": {
                "2026-01-05": f"  {long_note}  ",
                "2026-01-06": "   ",
                "yesterday": "skip me",
                "2026-01-07": 42,
            },
        }
    )
    result = import_backup(store, text)
    assert result.gratitude_count == 1
    assert json.loads(store.get(GRATITUDE_KEY)) == {"2026-01-05": "a" * 200}


def test_import_ignores_blank_name_and_non_boolean_flag(store):
    result = import_backup(store, json.dumps({"completedDays": ["2026-01-05"], "userName": "   ", "hasOnboarded": "yes"}))
    assert result.user_name is None
    assert result.has_onboarded is None
    assert ProfileStore(store).get_user_name() is None


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "{not json",
        "[1, 2]",
        json.dumps({"app": "Jornada Bíblica"}),
        json.dumps({"completedDays": "2026-01-05"}),
        json.dumps({"completedDays": ["bad", 3]}),
    ],
)
def test_rejected_import_leaves_progress_untouched(text):
    store = populated_store()
    before = store.snapshot()
    with pytest.raises(BackupImportError) as exc:
        import_backup(store, text)
    assert exc.value.code == "invalid_backup"
    assert store.snapshot() == before


def test_missing_completed_days_message_is_readable():
    with pytest.raises(BackupImportError, match="completedDays"):
        parse_backup_text(json.dumps({"gratitudeByDate": {}}))


def test_import_write_failure_is_surfaced():
    store = ReadOnlyStore()
    with pytest.raises(StorageError):
        import_backup(store, json.dumps({"completedDays": ["2026-01-05"]}))
    assert store.get(COMPLETED_DAYS_KEY) is None


def test_deeply_nested_paste_is_rejected_cleanly():
    store = populated_store()
    before = store.snapshot()
    with pytest.raises(BackupImportError, match="not valid JSON"):
        import_backup(store, "[" * 100000)
    assert store.snapshot() == before


def test_failed_gratitude_write_rolls_back_completed_days():
    store = FailingKeyStore(
        GRATITUDE_KEY,
        {COMPLETED_DAYS_KEY: json.dumps(["2026-03-02"]), GRATITUDE_KEY: json.dumps({"2026-03-02": "Antes"})},
    )
    text = json.dumps({"completedDays": ["2026-01-05"], "gratitudeByDate": {"2026-01-05": "Depois"}})

    with pytest.raises(StorageError):
        import_backup(store, text)

    assert ProgressStore(store).get_completed_days() == ["2026-03-02"]
    assert GratitudeJournal(store).get_all() == {"2026-03-02": "Antes"}
    assert store.get(AUTO_RESTORE_DONE_KEY) is None


def test_export_treats_legacy_true_flag_as_onboarded(store):
    store.set(HAS_ONBOARDED_KEY, "true")
    assert export_backup(store, now=NOW).to_export_dict()["hasOnboarded"] is True
