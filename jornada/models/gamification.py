from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LevelRung:
    min_streak: int
    title: str
    subtitle: str
    icon: str


@dataclass(frozen=True)
class Level:
    """A ladder rung resolved for a concrete streak."""

    streak: int
    title: str
    subtitle: str
    icon: str
    min_streak: int


@dataclass(frozen=True)
class MilestoneProgress:
    next: Optional[int]
    remaining: int
