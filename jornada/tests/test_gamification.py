import pytest

from jornada.features.gamification.service import (
    LEVELS,
    MILESTONES,
    get_daily_message,
    get_level_for_streak,
    get_milestone_message,
    get_motivation_message,
    get_next_milestone,
    is_milestone,
    normalize_streak,
)


def test_ladder_starts_at_zero_and_ascends():
    thresholds = [rung.min_streak for rung in LEVELS]
    assert thresholds[0] == 0
    assert thresholds == sorted(thresholds)


@pytest.mark.parametrize(
    "streak,title",
    [(0, "Recomeço"), (2, "Recomeço"), (3, "Constante"), (13, "Disciplinado"), (30, "Semeador"), (400, "Jornada Completa")],
)
def test_level_is_highest_reached_rung(streak, title):
    level = get_level_for_streak(streak)
    assert level.title == title
    assert level.min_streak <= level.streak


@pytest.mark.parametrize("value", [-5, None, "abc", float("nan"), float("inf"), 10 ** 400])
def test_level_tolerates_garbage(value):
    assert get_level_for_streak(value).title == "Recomeço"


def test_normalize_floors_and_clamps():
    assert normalize_streak(6.9) == 6
    assert normalize_streak(-0.5) == 0
    assert normalize_streak("7") == 7
    assert normalize_streak(True) == 0


def test_next_milestone_is_strictly_greater():
    for s in range(0, 400):
        progress = get_next_milestone(s)
        if progress.next is None:
            assert s >= MILESTONES[-1]
            assert progress.remaining == 0
        else:
            assert progress.next > s
            assert progress.remaining == progress.next - s


def test_next_milestone_examples():
    assert get_next_milestone(0).next == 3
    assert get_next_milestone(7).next == 14
    assert get_next_milestone(365).next is None


def test_is_milestone_membership():
    assert is_milestone(21)
    assert is_milestone(21.4)
    assert not is_milestone(22)
    assert not is_milestone(-3)


def test_daily_message_priorities():
    assert get_daily_message(50, is_before_plan=True).startswith("Plano ainda não começou")
    assert get_daily_message(50, is_after_plan=True).startswith("Plano finalizado")
    assert get_daily_message(0) == "Recomece hoje. Simples e direto."
    assert get_daily_message(2).startswith("Constância")
    assert get_daily_message(6).startswith("Você está formando hábito")
    assert get_daily_message(13).startswith("Uma semana sólida")
    assert get_daily_message(29).startswith("Perseverança real")
    assert get_daily_message(30).startswith("Disciplina madura")


def test_milestone_messages():
    assert get_milestone_message(7) == "7 dias: uma semana firme."
    assert get_milestone_message(45) == "45 dias: marco atingido."


@pytest.mark.parametrize(
    "percent,prefix",
    [(0, "Toda grande jornada"), (24, "Continue firme"), (25, "Você já avançou"), (74, "A jornada está"), (99, "Você está muito perto"), (100, "Parabéns")],
)
def test_motivation_message_bands(percent, prefix):
    assert get_motivation_message(percent).startswith(prefix)
