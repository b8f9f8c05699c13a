from __future__ import annotations

import json
import logging
from typing import Dict, Optional

from jornada.core.errors import StorageError, ValidationError
from jornada.core.storage import DurableStore, store_lock
from jornada.features.streaks.service import is_valid_date_string
from jornada.models.progress import GRATITUDE_KEY

logger = logging.getLogger("jornada")

GRATITUDE_MAX_CHARS = 200


def sanitize_gratitude_text(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    return text[:GRATITUDE_MAX_CHARS]


def sanitize_gratitude_map(value) -> Dict[str, str]:
    """Keep ISO-date keys with non-empty string notes, each capped at 200 chars."""
    out: Dict[str, str] = {}
    if not isinstance(value, dict):
        return out
    for day, note in value.items():
        if not is_valid_date_string(day):
            continue
        text = sanitize_gratitude_text(note)
        if text is None:
            continue
        out[day] = text
    return out


class GratitudeJournal:
    """One short gratitude note per calendar day."""

    def __init__(self, store: DurableStore):
        self.store = store

    def get_all(self) -> Dict[str, str]:
        try:
            raw = self.store.get(GRATITUDE_KEY)
            parsed = json.loads(raw) if raw else {}
        except (StorageError, ValueError, RecursionError) as e:
            logger.warning(f"gratitude.read_failed: {e}")
            return {}
        return sanitize_gratitude_map(parsed)

    def get(self, day: str) -> Optional[str]:
        return self.get_all().get(day)

    def replace_all(self, entries) -> Dict[str, str]:
        sanitized = sanitize_gratitude_map(entries)
        self.store.set(GRATITUDE_KEY, json.dumps(sanitized, ensure_ascii=False))
        return sanitized

    def set_entry(self, day: str, text: str) -> str:
        if not is_valid_date_string(day):
            raise ValidationError(f"Invalid date: {day}")
        note = sanitize_gratitude_text(text)
        if note is None:
            raise ValidationError("Gratitude note must not be empty")
        with store_lock(self.store):
            entries = self.get_all()
            entries[day] = note
            self.replace_all(entries)
        return note

    def remove_entry(self, day: str) -> bool:
        with store_lock(self.store):
            entries = self.get_all()
            if day not in entries:
                return False
            del entries[day]
            self.replace_all(entries)
        return True

    def clear(self) -> None:
        self.store.remove(GRATITUDE_KEY)
