# jornada/conftest.py
from datetime import date, timedelta

import pytest

from jornada.core.storage import InMemoryStore, set_store
from jornada.features.plan.service import ReadingPlan, set_reading_plan
from jornada.models.plan import ReadingDay


def build_plan(start: str, end: str) -> ReadingPlan:
    """A reading plan with one entry per calendar day between start and end."""
    first, last = date.fromisoformat(start), date.fromisoformat(end)
    days = []
    current, n = first, 1
    while current <= last:
        days.append(
            ReadingDay(
                date=current.isoformat(),
                reference=f"Gênesis {n}",
                is_sunday=current.weekday() == 6,
            )
        )
        current += timedelta(days=1)
        n += 1
    return ReadingPlan(days)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def january_plan():
    """Plan covering 2026-01-05 (Monday) to 2026-01-31 (Saturday)."""
    return build_plan("2026-01-05", "2026-01-31")


@pytest.fixture(autouse=True)
def app_store():
    """
    Give every test a fresh process-wide store and an empty reading plan.

    Keeps API tests off the file store configured by default.
    """
    fresh = InMemoryStore()
    set_store(fresh)
    set_reading_plan(ReadingPlan())
    yield fresh
    set_store(None)
    set_reading_plan(None)
