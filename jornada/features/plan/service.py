"""
Reading plan and phase calendar.

Both are read-only reference data. The phase calendar ships with the
package; the day-by-day reading plan is loaded from READING_PLAN_PATH
(a JSON list of {date, reference, isSunday}) when configured.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from jornada.core.config import settings
from jornada.features.streaks.service import is_valid_date_string
from jornada.models.plan import Phase, ReadingDay

logger = logging.getLogger("jornada")

PHASES: Sequence[Phase] = (
    Phase(1, "Fundamentos", "Criação, queda e os primeiros passos do plano redentor de Deus.", "2026-01-05", "2026-02-15"),
    Phase(2, "Preparação", "Deus forma um povo e estabelece alianças que apontam para a redenção.", "2026-02-16", "2026-03-29"),
    Phase(3, "Profecia", "Chamado ao arrependimento e esperança messiânica anunciada pelos profetas.", "2026-03-30", "2026-05-10"),
    Phase(4, "Silêncio e Espera", "O período intertestamentário e a expectativa pelo Messias prometido.", "2026-05-11", "2026-05-31"),
    Phase(5, "Evangelhos", "A vida, os ensinos, a morte e a ressurreição de Jesus Cristo.", "2026-06-01", "2026-07-19"),
    Phase(6, "Igreja Primitiva", "O nascimento da Igreja e a expansão do Evangelho pelo mundo.", "2026-07-20", "2026-08-30"),
    Phase(7, "Cartas Apostólicas", "Instruções práticas e teológicas para a vida cristã.", "2026-08-31", "2026-10-11"),
    Phase(8, "Perseverança", "Chamado à fidelidade, maturidade espiritual e firmeza na fé.", "2026-10-12", "2026-11-08"),
    Phase(9, "Consumação", "A vitória final de Cristo e a esperança eterna do povo de Deus.", "2026-11-09", "2026-11-29"),
    Phase(10, "Esperança Eterna", "Reflexão final sobre redenção, eternidade e vida com Deus.", "2026-11-30", "2026-12-31"),
)


class ReadingPlan:
    """Ordered reading days plus the phase calendar they belong to."""

    def __init__(self, days: Iterable[ReadingDay] = (), phases: Sequence[Phase] = PHASES):
        self.days: List[ReadingDay] = sorted(days, key=lambda d: d.date)
        self.phases = tuple(phases)
        self._by_date: Dict[str, ReadingDay] = {d.date: d for d in self.days}

    @property
    def start(self) -> Optional[str]:
        return self.days[0].date if self.days else None

    @property
    def end(self) -> Optional[str]:
        return self.days[-1].date if self.days else None

    def is_before(self, day: str) -> bool:
        return self.start is not None and day < self.start

    def is_after(self, day: str) -> bool:
        return self.end is not None and day > self.end

    def reading_for(self, day: str) -> Optional[ReadingDay]:
        return self._by_date.get(day)

    def current_phase(self, day: str) -> Optional[Phase]:
        return next((p for p in self.phases if p.start_date <= day <= p.end_date), None)

    def non_free_day_count(self, year: Optional[int] = None, month: Optional[int] = None) -> int:
        count = 0
        for item in self.days:
            if item.is_sunday:
                continue
            parsed = date.fromisoformat(item.date)
            if year is not None and parsed.year != year:
                continue
            if month is not None and parsed.month != month:
                continue
            count += 1
        return count


def parse_reading_days(records) -> List[ReadingDay]:
    """Build reading days from raw records, skipping anything malformed."""
    days: List[ReadingDay] = []
    if not isinstance(records, list):
        return days
    for record in records:
        if not isinstance(record, dict):
            continue
        day = record.get("date")
        reference = record.get("reference")
        if not is_valid_date_string(day) or not isinstance(reference, str):
            continue
        is_sunday = record.get("isSunday")
        if not isinstance(is_sunday, bool):
            is_sunday = date.fromisoformat(day).weekday() == 6
        days.append(ReadingDay(date=day, reference=reference, is_sunday=is_sunday))
    return days


def load_reading_plan(path: Optional[str] = None) -> ReadingPlan:
    """Load the plan from a JSON file; a missing or broken file gives an empty plan."""
    target = path or settings.READING_PLAN_PATH
    if not target:
        return ReadingPlan()
    try:
        with open(Path(target), "r", encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, ValueError, RecursionError) as e:
        logger.warning(f"plan.load_failed path={target}: {e}")
        return ReadingPlan()
    days = parse_reading_days(records)
    logger.info(f"plan.loaded days={len(days)}")
    return ReadingPlan(days)


_plan: Optional[ReadingPlan] = None


def get_reading_plan() -> ReadingPlan:
    global _plan
    if _plan is None:
        _plan = load_reading_plan()
    return _plan


def set_reading_plan(plan: Optional[ReadingPlan]) -> None:
    global _plan
    _plan = plan
