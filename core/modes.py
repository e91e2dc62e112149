"""
core.modes
Difficulty specifications (stat / gold multipliers).

Kept in core so balancing lives in one place, but UI can still display labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Difficulty(str, Enum):
    EASY = "EASY"
    NORMAL = "NORMAL"
    HARD = "HARD"


@dataclass(frozen=True)
class DifficultySpec:
    key: Difficulty
    label: str
    desc: str
    stat_mult: float
    gold_mult: float


DIFFICULTIES: Dict[Difficulty, DifficultySpec] = {
    Difficulty.EASY: DifficultySpec(
        key=Difficulty.EASY,
        label="Easy",
        desc="Weaker monsters, smaller rewards.",
        stat_mult=0.8,
        gold_mult=0.8,
    ),
    Difficulty.NORMAL: DifficultySpec(
        key=Difficulty.NORMAL,
        label="Normal",
        desc="The intended balance.",
        stat_mult=1.0,
        gold_mult=1.0,
    ),
    Difficulty.HARD: DifficultySpec(
        key=Difficulty.HARD,
        label="Hard",
        desc="Monsters hit much harder but pay out more gold.",
        stat_mult=1.5,
        gold_mult=1.5,
    ),
}


def parse_difficulty(value: object) -> Difficulty:
    """Raises ValueError on unknown keys."""
    if isinstance(value, Difficulty):
        return value
    return Difficulty(str(value or "").strip().upper())


def get_difficulty_spec(difficulty: Difficulty) -> DifficultySpec:
    return DIFFICULTIES[parse_difficulty(difficulty)]


def is_boss_floor(floor: int) -> bool:
    return int(floor) % 5 == 0


def difficulty_rating(floor: int) -> int:
    """Rating fed to the monster generator."""
    return 10 + int(floor) * 5
