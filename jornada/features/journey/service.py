"""
Journey service

Composes the progress store, streak engine, plan calendar and
gamification into the views the client shows on its home and progress
screens. Nothing here is persisted: every call derives from the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from jornada.core.storage import DurableStore
from jornada.features.gamification.service import (
    WEEKLY_GOAL,
    get_daily_message,
    get_level_for_streak,
    get_milestone_message,
    get_motivation_message,
    get_next_milestone,
    is_milestone,
)
from jornada.features.gratitude.service import GratitudeJournal
from jornada.features.plan.service import ReadingPlan
from jornada.features.progress.service import ProgressStore
from jornada.features.streaks.service import calculate_streak, get_last_read, is_free_day, is_valid_date_string
from jornada.models.gamification import Level, MilestoneProgress
from jornada.models.plan import HistoryEntry, HistoryMonth, Phase, ProgressSummary, ReadingDay, WeeklyProgress


@dataclass
class TodayView:
    today: str
    is_before_plan: bool
    is_after_plan: bool
    reading: Optional[ReadingDay]
    phase: Optional[Phase]
    completed_today: bool
    streak: int
    last_read: Optional[str]
    level: Level
    next_milestone: MilestoneProgress
    daily_message: str
    gratitude: Optional[str]
    can_complete: bool


@dataclass
class CompletionOutcome:
    completed: bool
    reason: Optional[str]
    streak: int
    days: List[str]
    milestone_message: Optional[str] = None


def clamp_percent(value: float) -> int:
    return max(0, min(100, round(value)))


def weekly_progress(completed_days: Iterable[str], today: date, goal: int = WEEKLY_GOAL) -> WeeklyProgress:
    """Completed non-Sunday days in the Sunday-to-Saturday week holding ``today``."""
    week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    week_end = week_start + timedelta(days=6)
    start_iso, end_iso = week_start.isoformat(), week_end.isoformat()

    count = 0
    for day in set(completed_days):
        if not is_valid_date_string(day) or not start_iso <= day <= end_iso:
            continue
        if is_free_day(date.fromisoformat(day)):
            continue
        count += 1

    return WeeklyProgress(
        week_start=start_iso,
        week_end=end_iso,
        count=count,
        goal=goal,
        percent=clamp_percent(count / goal * 100) if goal else 0,
    )


def progress_summary(
    completed_days: List[str],
    plan: ReadingPlan,
    today: date,
    gratitude_by_date: Optional[Dict[str, str]] = None,
) -> ProgressSummary:
    month_prefix = today.isoformat()[:7]
    monthly_completed = len([d for d in completed_days if d.startswith(month_prefix)])
    monthly_plan_days = plan.non_free_day_count(year=today.year, month=today.month)
    total_plan_days = plan.non_free_day_count()
    total_completed = len(completed_days)
    annual_percent = clamp_percent(total_completed / total_plan_days * 100) if total_plan_days else 0

    notes = gratitude_by_date or {}
    with_gratitude = len([d for d in completed_days if notes.get(d, "").strip()])

    return ProgressSummary(
        weekly=weekly_progress(completed_days, today),
        monthly_completed=monthly_completed,
        monthly_plan_days=monthly_plan_days,
        monthly_percent=clamp_percent(monthly_completed / monthly_plan_days * 100) if monthly_plan_days else 0,
        total_completed=total_completed,
        total_plan_days=total_plan_days,
        annual_percent=annual_percent,
        remaining_days=max(0, total_plan_days - total_completed),
        motivation_message=get_motivation_message(annual_percent),
        gratitude_count=len(notes),
        completed_with_gratitude_count=with_gratitude,
        gratitude_coverage_percent=clamp_percent(with_gratitude / total_completed * 100) if total_completed else 0,
    )


def build_history(completed_days: Iterable[str], plan: ReadingPlan) -> List[HistoryMonth]:
    """Completed plan readings grouped by YYYY-MM; months and readings newest first."""
    completed = set(completed_days)
    months: Dict[str, HistoryMonth] = {}
    for item in sorted(plan.days, key=lambda d: d.date, reverse=True):
        if item.date not in completed:
            continue
        month = item.date[:7]
        if month not in months:
            months[month] = HistoryMonth(month=month)
        months[month].readings.append(HistoryEntry(date=item.date, reference=item.reference))
    return list(months.values())


class JourneyService:
    """Home-screen state and the "mark today as read" action."""

    def __init__(self, store: DurableStore, plan: ReadingPlan):
        self.progress = ProgressStore(store)
        self.gratitude = GratitudeJournal(store)
        self.plan = plan

    def build_today(self, today: date) -> TodayView:
        day = today.isoformat()
        days = self.progress.get_completed_days()
        streak = calculate_streak(days, today)
        is_before = self.plan.is_before(day)
        is_after = self.plan.is_after(day)
        reading = self.plan.reading_for(day)
        completed_today = day in days

        return TodayView(
            today=day,
            is_before_plan=is_before,
            is_after_plan=is_after,
            reading=reading,
            phase=self.plan.current_phase(day),
            completed_today=completed_today,
            streak=streak,
            last_read=get_last_read(days),
            level=get_level_for_streak(streak),
            next_milestone=get_next_milestone(streak),
            daily_message=get_daily_message(streak, is_before_plan=is_before, is_after_plan=is_after),
            gratitude=self.gratitude.get(day),
            can_complete=self._refusal(today, reading, completed_today) is None,
        )

    def complete_today(self, today: date) -> CompletionOutcome:
        day = today.isoformat()
        days = self.progress.get_completed_days()
        reason = self._refusal(today, self.plan.reading_for(day), day in days)
        if reason is not None:
            return CompletionOutcome(completed=False, reason=reason, streak=calculate_streak(days, today), days=days)

        result = self.progress.add_completed_day(day)
        streak = calculate_streak(result.days, today)
        if not result.added:
            return CompletionOutcome(completed=False, reason="already_completed", streak=streak, days=result.days)

        return CompletionOutcome(
            completed=True,
            reason=None,
            streak=streak,
            days=result.days,
            milestone_message=get_milestone_message(streak) if is_milestone(streak) else None,
        )

    def summary(self, today: date) -> ProgressSummary:
        return progress_summary(self.progress.get_completed_days(), self.plan, today, self.gratitude.get_all())

    def history(self) -> List[HistoryMonth]:
        return build_history(self.progress.get_completed_days(), self.plan)

    def _refusal(self, today: date, reading: Optional[ReadingDay], completed_today: bool) -> Optional[str]:
        day = today.isoformat()
        if self.plan.is_before(day):
            return "before_plan"
        if self.plan.is_after(day):
            return "after_plan"
        if reading is None:
            return "no_reading"
        if reading.is_sunday or is_free_day(today):
            return "free_day"
        if completed_today:
            return "already_completed"
        return None
