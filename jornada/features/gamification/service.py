"""
Streak gamification: level ladder, milestones and the short daily message.

All functions are pure and total. Streak inputs are floored and clamped
at zero; anything that is not a finite number counts as zero.
"""

from __future__ import annotations

import math
from typing import Tuple

from jornada.models.gamification import Level, LevelRung, MilestoneProgress

# Six reading days a week; Sunday is free and does not count.
WEEKLY_GOAL = 6

MILESTONES: Tuple[int, ...] = (3, 7, 14, 21, 30, 45, 60, 90, 120, 180, 365)

LEVELS: Tuple[LevelRung, ...] = (
    LevelRung(0, "Recomeço", "Um dia de cada vez.", "🌱"),
    LevelRung(3, "Constante", "A disciplina está nascendo.", "🔥"),
    LevelRung(7, "Disciplinado", "Uma semana firme.", "🚀"),
    LevelRung(14, "Perseverante", "Você está criando raiz.", "⚔️"),
    LevelRung(30, "Semeador", "Constância madura.", "🌿"),
    LevelRung(60, "Firme na Palavra", "Você não depende de ânimo.", "🌳"),
    LevelRung(90, "Inabalável", "Hábito consolidado.", "🏔️"),
    LevelRung(180, "Testemunho", "Sua vida já reflete disciplina.", "👑"),
    LevelRung(365, "Jornada Completa", "Um ano de fidelidade.", "🏆"),
)

MILESTONE_MESSAGES = {
    3: "3 dias: você saiu da inércia.",
    7: "7 dias: uma semana firme.",
    14: "14 dias: hábito em formação.",
    21: "21 dias: consistência visível.",
    30: "30 dias: disciplina consolidando.",
    60: "60 dias: firmeza rara. Continue.",
    90: "90 dias: hábito estabelecido.",
    180: "180 dias: você está diferente.",
    365: "365 dias: jornada completa.",
}


def normalize_streak(value) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, math.floor(number))


def get_level_for_streak(streak) -> Level:
    s = normalize_streak(streak)
    rung = next((level for level in reversed(LEVELS) if s >= level.min_streak), LEVELS[0])
    return Level(
        streak=s,
        title=rung.title,
        subtitle=rung.subtitle,
        icon=rung.icon,
        min_streak=rung.min_streak,
    )


def get_next_milestone(streak) -> MilestoneProgress:
    s = normalize_streak(streak)
    upcoming = next((m for m in MILESTONES if m > s), None)
    return MilestoneProgress(next=upcoming, remaining=upcoming - s if upcoming is not None else 0)


def is_milestone(streak) -> bool:
    return normalize_streak(streak) in MILESTONES


def get_daily_message(streak, is_before_plan: bool = False, is_after_plan: bool = False) -> str:
    if is_before_plan:
        return "Plano ainda não começou. Prepare o coração e a rotina."
    if is_after_plan:
        return "Plano finalizado. Releia, consolide e mantenha o hábito."

    s = normalize_streak(streak)
    if s == 0:
        return "Recomece hoje. Simples e direto."
    if s < 3:
        return "Constância > intensidade. Faça o básico bem feito."
    if s < 7:
        return "Você está formando hábito. Proteja seu horário."
    if s < 14:
        return "Uma semana sólida. Agora é manter sem negociar."
    if s < 30:
        return "Perseverança real: continuar mesmo sem vontade."
    return "Disciplina madura. Continue, sem ansiedade."


def get_milestone_message(milestone) -> str:
    m = normalize_streak(milestone)
    return MILESTONE_MESSAGES.get(m, f"{m} dias: marco atingido.")


def get_motivation_message(percent) -> str:
    """Encouragement for the annual plan completion percentage (0..100)."""
    p = normalize_streak(percent)
    if p == 0:
        return "Toda grande jornada começa com um passo."
    if p < 25:
        return "Continue firme! Deus honra a constância."
    if p < 50:
        return "Você já avançou bastante. Persevere!"
    if p < 75:
        return "A jornada está florescendo. Não desista!"
    if p < 100:
        return "Você está muito perto da conclusão!"
    return "Parabéns! Você completou a Jornada Bíblica 🎉"
