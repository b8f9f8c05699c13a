from __future__ import annotations

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends

from jornada.api.deps import resolve_today
from jornada.core.storage import DurableStore, get_store
from jornada.features.journey.service import JourneyService
from jornada.features.plan.service import ReadingPlan, get_reading_plan

router = APIRouter()


@router.get("/v1/today")
def get_today(
    today: date = Depends(resolve_today),
    store: DurableStore = Depends(get_store),
    plan: ReadingPlan = Depends(get_reading_plan),
):
    """Home screen state: reading, phase, streak, level and daily message."""
    return asdict(JourneyService(store, plan).build_today(today))


@router.post("/v1/today/complete")
def complete_today(
    today: date = Depends(resolve_today),
    store: DurableStore = Depends(get_store),
    plan: ReadingPlan = Depends(get_reading_plan),
):
    outcome = JourneyService(store, plan).complete_today(today)
    return asdict(outcome)
