from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

# Durable store keys. Values are JSON strings except where noted.
COMPLETED_DAYS_KEY = "completedDays"
AUTO_BACKUP_KEY = "autoBackupData"
LAST_BACKUP_KEY = "lastAutoBackupDate"  # ISO-8601 datetime, not JSON
AUTO_RESTORE_DONE_KEY = "autoRestoreDone"  # literal "1"
GRATITUDE_KEY = "gratitudeByDate"
USER_NAME_KEY = "userName"  # plain string
HAS_ONBOARDED_KEY = "hasOnboarded"  # "1" | "0"

AUTO_BACKUP_APP = "Jornada Bíblica"
AUTO_BACKUP_TYPE = "auto-backup"
AUTO_RESTORE_DONE_VALUE = "1"


@dataclass
class AddResult:
    """Outcome of marking a day complete."""

    added: bool
    days: List[str] = field(default_factory=list)


@dataclass
class RestoreResult:
    restored: bool
    count: int = 0
    created_at: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {"restored": self.restored, "count": self.count}
        if self.created_at is not None:
            payload["createdAt"] = self.created_at
        return payload


@dataclass
class AutoBackupRecord:
    """
    Snapshot written by the weekly auto backup.

    app/type are fixed signatures checked on restore; anything else under
    the same key is treated as foreign data.
    """

    created_at: str
    completed_days: List[str]
    app: str = AUTO_BACKUP_APP
    type: str = AUTO_BACKUP_TYPE

    def to_dict(self) -> dict:
        return {
            "app": self.app,
            "type": self.type,
            "createdAt": self.created_at,
            "completedDays": list(self.completed_days),
        }


@dataclass
class ImportResult:
    count: int
    gratitude_count: int
    user_name: Optional[str] = None
    has_onboarded: Optional[bool] = None
