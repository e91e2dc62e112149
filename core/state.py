"""
core.state
Core domain data models (UI/LLM independent).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

from .catalog import JOBS, ULTIMATES, WEAPONS, get_job, get_weapon

ULT_MAX = 100


def clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


@dataclass(frozen=True)
class Hero:
    """The player character.

    `max_hp` / `max_mp` are base values before the job bonus. Effective stats
    are derived by the helpers below and never stored.
    """

    hp: int
    max_hp: int
    mp: int
    max_mp: int
    base_atk: int
    level: int
    ult_charge: int          # 0..100
    gold: int
    jellies: int
    elixirs: int
    equipped_ultimate_id: str
    weapon_id: str
    job_id: str
    name: str = "Hero"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "hp": int(self.hp),
            "max_hp": int(self.max_hp),
            "mp": int(self.mp),
            "max_mp": int(self.max_mp),
            "base_atk": int(self.base_atk),
            "level": int(self.level),
            "ult_charge": int(self.ult_charge),
            "gold": int(self.gold),
            "jellies": int(self.jellies),
            "elixirs": int(self.elixirs),
            "equipped_ultimate_id": self.equipped_ultimate_id,
            "weapon_id": self.weapon_id,
            "job_id": self.job_id,
            "effective_atk": effective_atk(self),
            "effective_max_hp": effective_max_hp(self),
            "effective_max_mp": effective_max_mp(self),
        }


@dataclass(frozen=True)
class Monster:
    name: str
    hp: int
    max_hp: int
    atk: int
    is_boss: bool
    reward_gold: int
    flavor_text: str
    emoji: str = "👾"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "hp": int(self.hp),
            "max_hp": int(self.max_hp),
            "atk": int(self.atk),
            "is_boss": bool(self.is_boss),
            "reward_gold": int(self.reward_gold),
            "flavor_text": self.flavor_text,
            "emoji": self.emoji,
        }


def effective_atk(hero: Hero) -> int:
    return int(hero.base_atk + get_weapon(hero.weapon_id).atk_bonus + get_job(hero.job_id).atk_bonus)


def effective_max_hp(hero: Hero) -> int:
    return int(hero.max_hp + get_job(hero.job_id).hp_bonus)


def effective_max_mp(hero: Hero) -> int:
    return int(hero.max_mp + get_job(hero.job_id).mp_bonus)


def add_ult_charge(hero: Hero, amount: int) -> Hero:
    return replace(hero, ult_charge=clamp(hero.ult_charge + int(amount), 0, ULT_MAX))


def heal_hp(hero: Hero, amount: int) -> Hero:
    return replace(hero, hp=clamp(hero.hp + int(amount), 0, effective_max_hp(hero)))


def restore_mp(hero: Hero, amount: int) -> Hero:
    return replace(hero, mp=clamp(hero.mp + int(amount), 0, effective_max_mp(hero)))


def default_hero() -> Hero:
    """Baseline hero for a fresh run.

    Keep it in core so headless tests and UI share the same baseline.
    """
    return Hero(
        hp=120,
        max_hp=120,
        mp=60,
        max_mp=60,
        base_atk=15,
        level=1,
        ult_charge=0,
        gold=0,
        jellies=3,
        elixirs=1,
        equipped_ultimate_id=ULTIMATES[0].id,
        weapon_id=WEAPONS[0].id,
        job_id=JOBS[0].id,
    )


def hero_invariants_hold(hero: Hero) -> bool:
    return (
        0 <= hero.hp <= effective_max_hp(hero)
        and 0 <= hero.mp <= effective_max_mp(hero)
        and 0 <= hero.ult_charge <= ULT_MAX
        and hero.gold >= 0
        and hero.jellies >= 0
        and hero.elixirs >= 0
    )
