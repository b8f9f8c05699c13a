from __future__ import annotations

from typing import Optional

from jornada.core.storage import DurableStore
from jornada.models.progress import HAS_ONBOARDED_KEY, USER_NAME_KEY

# Older clients stored the flag as "true".
ONBOARDED_VALUES = ("1", "true")


class ProfileStore:
    """Onboarding profile: display name and the has-onboarded flag."""

    def __init__(self, store: DurableStore):
        self.store = store

    def get_user_name(self) -> Optional[str]:
        name = self.store.get(USER_NAME_KEY)
        return name.strip() if name and name.strip() else None

    def set_user_name(self, name: str) -> bool:
        """Store a trimmed name; blank names are ignored."""
        if not isinstance(name, str) or not name.strip():
            return False
        self.store.set(USER_NAME_KEY, name.strip())
        return True

    def has_onboarded(self) -> bool:
        return self.store.get(HAS_ONBOARDED_KEY) in ONBOARDED_VALUES

    def set_has_onboarded(self, value: bool) -> None:
        self.store.set(HAS_ONBOARDED_KEY, "1" if value else "0")

    def reset_onboarding(self) -> None:
        self.store.remove(USER_NAME_KEY)
        self.store.remove(HAS_ONBOARDED_KEY)
