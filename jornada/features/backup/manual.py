"""Manual backup: export progress as pasteable JSON text and import it back.

Unlike the auto backup, this path is user-driven and every rejection is
raised as BackupImportError with a readable message. Import validates the
whole payload before the first write, so a rejected paste leaves the
stored progress untouched.
"""

import json
import logging
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from jornada.core.clock import iso_timestamp
from jornada.core.config import settings
from jornada.core.errors import BackupImportError, StorageError
from jornada.core.storage import DurableStore, store_lock
from jornada.features.gratitude.service import GratitudeJournal, sanitize_gratitude_map
from jornada.features.profile.service import ProfileStore
from jornada.features.progress.service import ProgressStore
from jornada.features.streaks.service import uniq_sorted
from jornada.models.progress import (
    AUTO_RESTORE_DONE_KEY,
    COMPLETED_DAYS_KEY,
    GRATITUDE_KEY,
    HAS_ONBOARDED_KEY,
    USER_NAME_KEY,
    ImportResult,
)

logger = logging.getLogger("jornada")

PROFILE_FIELDS = {"user_name", "has_onboarded"}


class ManualBackupPayload(BaseModel):
    """User-facing export shape."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    app: str
    version: str
    exported_at: str = Field(alias="exportedAt")
    completed_days: List[str] = Field(alias="completedDays")
    gratitude_by_date: Dict[str, str] = Field(default_factory=dict, alias="gratitudeByDate")
    user_name: Optional[str] = Field(default=None, alias="userName")
    has_onboarded: Optional[bool] = Field(default=None, alias="hasOnboarded")

    def to_export_dict(self, include_profile: bool = True) -> dict:
        exclude = None if include_profile else PROFILE_FIELDS
        return self.model_dump(by_alias=True, exclude=exclude)


def export_backup(store: DurableStore, *, now: Optional[datetime] = None) -> ManualBackupPayload:
    profile = ProfileStore(store)
    return ManualBackupPayload(
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        exported_at=iso_timestamp(now),
        completed_days=ProgressStore(store).get_completed_days(),
        gratitude_by_date=GratitudeJournal(store).get_all(),
        user_name=profile.get_user_name(),
        has_onboarded=profile.has_onboarded(),
    )


def render_backup_text(payload: ManualBackupPayload, include_profile: bool = True) -> str:
    return json.dumps(payload.to_export_dict(include_profile), ensure_ascii=False, indent=2)


def export_backup_text(store: DurableStore, *, now: Optional[datetime] = None, include_profile: bool = True) -> str:
    return render_backup_text(export_backup(store, now=now), include_profile)


def parse_backup_text(text) -> dict:
    """Validate a pasted backup and return it with every field sanitized."""
    if not isinstance(text, str) or not text.strip():
        raise BackupImportError("Paste the backup JSON before importing.")

    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        raise BackupImportError("The backup is not valid JSON.")

    if not isinstance(parsed, dict):
        raise BackupImportError("The backup must be a JSON object.")

    listed = parsed.get("completedDays")
    if not isinstance(listed, list):
        raise BackupImportError("The backup has no completedDays list.")

    completed_days = uniq_sorted(listed)
    if not completed_days:
        raise BackupImportError("The backup does not contain any valid completed day.")

    user_name = parsed.get("userName")
    if isinstance(user_name, str) and user_name.strip():
        user_name = user_name.strip()
    else:
        user_name = None

    has_onboarded = parsed.get("hasOnboarded")
    if not isinstance(has_onboarded, bool):
        has_onboarded = None

    return {
        "completed_days": completed_days,
        "gratitude_by_date": sanitize_gratitude_map(parsed.get("gratitudeByDate")),
        "user_name": user_name,
        "has_onboarded": has_onboarded,
    }


def _restore_keys(store: DurableStore, previous: Dict[str, Optional[str]]) -> None:
    """Best-effort rollback of a partially applied import."""
    for key, value in previous.items():
        try:
            if value is None:
                store.remove(key)
            else:
                store.set(key, value)
        except StorageError as e:
            logger.warning(f"backup.import.rollback_failed key={key}: {e}")


def import_backup(store: DurableStore, text) -> ImportResult:
    """
    Replace local progress with a pasted manual backup.

    Completed days and gratitude notes are fully replaced, never merged.
    The auto-restore guard is closed so a later launch cannot overwrite
    the imported data with an older auto backup. When a write fails, the
    keys already written are put back to their previous values and the
    StorageError is re-raised.
    """
    data = parse_backup_text(text)

    touched = [COMPLETED_DAYS_KEY, GRATITUDE_KEY, AUTO_RESTORE_DONE_KEY]
    if data["user_name"] is not None:
        touched.append(USER_NAME_KEY)
    if data["has_onboarded"] is not None:
        touched.append(HAS_ONBOARDED_KEY)

    progress = ProgressStore(store)
    profile = ProfileStore(store)
    with store_lock(store):
        previous = {key: store.get(key) for key in touched}
        try:
            days = progress.set_completed_days(data["completed_days"])
            notes = GratitudeJournal(store).replace_all(data["gratitude_by_date"])
            if data["user_name"] is not None:
                profile.set_user_name(data["user_name"])
            if data["has_onboarded"] is not None:
                profile.set_has_onboarded(data["has_onboarded"])
            progress.mark_auto_restore_done()
        except StorageError:
            _restore_keys(store, previous)
            raise

    logger.info(f"backup.import.applied count={len(days)} gratitude={len(notes)}")
    return ImportResult(
        count=len(days),
        gratitude_count=len(notes),
        user_name=data["user_name"],
        has_onboarded=data["has_onboarded"],
    )
