from datetime import date
from typing import Optional

from fastapi import Query

from jornada.core.clock import today_local
from jornada.core.errors import ValidationError
from jornada.features.streaks.service import is_valid_date_string


def resolve_today(today: Optional[str] = Query(None, description="Override for the current day (YYYY-MM-DD)")) -> date:
    """The client's calendar day; defaults to today in LOCAL_TIMEZONE."""
    if today is None:
        return today_local()
    if not is_valid_date_string(today):
        raise ValidationError(f"Invalid date: {today}")
    return date.fromisoformat(today)
