from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from jornada.api.deps import resolve_today
from jornada.core.errors import ValidationError
from jornada.core.storage import DurableStore, get_store
from jornada.features.gratitude.service import GratitudeJournal
from jornada.features.journey.service import JourneyService
from jornada.features.plan.service import ReadingPlan, get_reading_plan
from jornada.features.progress.service import ProgressStore
from jornada.features.streaks.service import calculate_streak, get_last_read, is_valid_date_string

router = APIRouter()


class CompletedDaysBody(BaseModel):
    completed_days: List[str] = Field(default_factory=list)


class AddDayBody(BaseModel):
    date: str = Field(..., min_length=1)


def _progress_state(days: List[str], today: date) -> dict:
    return {
        "completed_days": days,
        "count": len(days),
        "last_read": get_last_read(days),
        "streak": calculate_streak(days, today),
    }


@router.get("/v1/progress")
def get_progress(today: date = Depends(resolve_today), store: DurableStore = Depends(get_store)):
    """Completed days with the streak as of ``today``."""
    return _progress_state(ProgressStore(store).get_completed_days(), today)


@router.put("/v1/progress/days")
def replace_completed_days(
    body: CompletedDaysBody,
    today: date = Depends(resolve_today),
    store: DurableStore = Depends(get_store),
):
    days = ProgressStore(store).set_completed_days(body.completed_days)
    return _progress_state(days, today)


@router.post("/v1/progress/days")
def add_completed_day(
    body: AddDayBody,
    today: date = Depends(resolve_today),
    store: DurableStore = Depends(get_store),
):
    if not is_valid_date_string(body.date):
        raise ValidationError(f"Invalid date: {body.date}")
    result = ProgressStore(store).add_completed_day(body.date)
    return {"added": result.added, **_progress_state(result.days, today)}


@router.delete("/v1/progress")
def reset_progress(
    include_gratitude: bool = Query(False),
    store: DurableStore = Depends(get_store),
):
    ProgressStore(store).reset_progress()
    if include_gratitude:
        GratitudeJournal(store).clear()
    return {"reset": True, "gratitude_cleared": include_gratitude}


@router.get("/v1/progress/summary")
def get_progress_summary(
    today: date = Depends(resolve_today),
    store: DurableStore = Depends(get_store),
    plan: ReadingPlan = Depends(get_reading_plan),
):
    return asdict(JourneyService(store, plan).summary(today))


@router.get("/v1/progress/history")
def get_progress_history(
    store: DurableStore = Depends(get_store),
    plan: ReadingPlan = Depends(get_reading_plan),
):
    """Completed plan readings grouped by month, newest first."""
    months = JourneyService(store, plan).history()
    return {"months": [asdict(m) for m in months], "total": sum(len(m.readings) for m in months)}
