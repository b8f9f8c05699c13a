from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ReadingDay:
    """One entry of the annual reading plan. Read-only reference data."""

    date: str  # YYYY-MM-DD
    reference: str
    is_sunday: bool = False


@dataclass(frozen=True)
class Phase:
    id: int
    title: str
    description: str
    start_date: str  # YYYY-MM-DD, inclusive
    end_date: str  # YYYY-MM-DD, inclusive


@dataclass
class WeeklyProgress:
    week_start: str
    week_end: str
    count: int
    goal: int
    percent: int


@dataclass
class ProgressSummary:
    weekly: WeeklyProgress
    monthly_completed: int
    monthly_plan_days: int
    monthly_percent: int
    total_completed: int
    total_plan_days: int
    annual_percent: int
    remaining_days: int
    motivation_message: str
    gratitude_count: int
    completed_with_gratitude_count: int
    gratitude_coverage_percent: int


@dataclass
class HistoryEntry:
    date: str
    reference: str


@dataclass
class HistoryMonth:
    """Completed readings of one month, newest first."""

    month: str  # YYYY-MM
    readings: List[HistoryEntry] = field(default_factory=list)
