"""Time helpers shared by the streak engine and the backup writer."""

from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional, Union

from jornada.core.config import local_tz

LOCAL_NOON = time(12, 0)


def utc_now() -> datetime:
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix, e.g. 2026-01-08T15:00:00.000Z."""
    moment = moment or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_iso_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 datetime; naive values are taken as UTC. None when unparsable."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_noon(moment: Union[date, datetime], tz: Optional[tzinfo] = None) -> datetime:
    """
    Pin a moment to noon of its local calendar day.

    Aware datetimes are converted to the local zone first; naive ones are
    read as local wall time. Extracting the date from the result is immune
    to UTC-boundary drift.
    """
    zone = tz or local_tz()
    if isinstance(moment, datetime):
        local = moment.astimezone(zone) if moment.tzinfo else moment.replace(tzinfo=zone)
        return local.replace(hour=12, minute=0, second=0, microsecond=0)
    return datetime.combine(moment, LOCAL_NOON, tzinfo=zone)


def to_local_day(moment: Union[date, datetime], tz: Optional[tzinfo] = None) -> date:
    if isinstance(moment, datetime):
        return local_noon(moment, tz).date()
    return moment


def today_local(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> date:
    """The current calendar day in the configured timezone."""
    return local_noon(now or utc_now(), tz).date()
