from dataclasses import asdict

from fastapi import APIRouter, Query

from jornada.features.gamification.service import (
    get_daily_message,
    get_level_for_streak,
    get_next_milestone,
    is_milestone,
)

router = APIRouter()


@router.get("/v1/gamification")
def get_gamification(
    streak: float = Query(0),
    is_before_plan: bool = Query(False),
    is_after_plan: bool = Query(False),
):
    return {
        "level": asdict(get_level_for_streak(streak)),
        "next_milestone": asdict(get_next_milestone(streak)),
        "is_milestone": is_milestone(streak),
        "daily_message": get_daily_message(streak, is_before_plan=is_before_plan, is_after_plan=is_after_plan),
    }
