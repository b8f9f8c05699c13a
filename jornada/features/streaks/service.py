from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from jornada.core.clock import to_local_day

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Sunday never breaks a streak and never counts towards it.
FREE_WEEKDAY = calendar.SUNDAY


def is_valid_date_string(value) -> bool:
    """True for a YYYY-MM-DD string naming a real calendar day."""
    if not isinstance(value, str) or not ISO_DATE_RE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def uniq_sorted(values: Iterable) -> List[str]:
    """Valid ISO dates only, deduplicated, ascending."""
    return sorted({v for v in values if is_valid_date_string(v)})


def is_free_day(day: date) -> bool:
    return day.weekday() == FREE_WEEKDAY


def calculate_streak(completed_days: Iterable[str], as_of: Union[date, datetime]) -> int:
    """
    Count consecutive completed non-free days walking backward from ``as_of``.

    Free days are stepped over without being required or counted, including
    ``as_of`` itself. Datetimes are pinned to local noon before the calendar
    day is taken.
    """
    days = set(completed_days)
    if not days:
        return 0

    current = to_local_day(as_of)
    count = 0
    while True:
        if not is_free_day(current):
            if current.isoformat() not in days:
                break
            count += 1
        current -= timedelta(days=1)
    return count


def get_last_read(completed_days: Iterable[str]) -> Optional[str]:
    days = list(completed_days or [])
    if not days:
        return None
    return max(days)
