"""
core.loot
Gacha: one paid draw, one weighted reward.

Tiers are evaluated in a fixed order against a single uniform roll:
  r < 0.40 jelly | r < 0.70 gold refund | r < 0.95 small stat | else jackpot
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .catalog import GACHA_PRICE
from .rng import RandomSource
from .state import Hero, clamp, effective_max_hp, effective_max_mp


class GachaTier(str, Enum):
    JELLY = "JELLY"
    GOLD = "GOLD"
    ATK_UP = "ATK_UP"
    HP_UP = "HP_UP"
    JACKPOT = "JACKPOT"


JELLY_THRESHOLD = 0.40
GOLD_THRESHOLD = 0.70
STAT_THRESHOLD = 0.95

COLOR_JELLY = "#00ff00"
COLOR_GOLD = "#ffd700"
COLOR_HP = "#ff4d4d"
COLOR_ATK = "#00e5ff"
COLOR_JACKPOT = "#ff00ff"


@dataclass(frozen=True)
class GachaOutcome:
    tier: GachaTier
    magnitude: int
    text: str
    color: str

    def to_dict(self) -> dict:
        return {"tier": self.tier.value, "magnitude": int(self.magnitude), "text": self.text, "color": self.color}


def can_afford_gacha(hero: Hero) -> bool:
    return hero.gold >= GACHA_PRICE


def pay_for_gacha(hero: Hero) -> Hero:
    if not can_afford_gacha(hero):
        raise ValueError("not enough gold for a gacha pull")
    return replace(hero, gold=hero.gold - GACHA_PRICE)


def draw_reward(hero: Hero, rng: RandomSource) -> Tuple[Hero, GachaOutcome]:
    """Resolve an already-paid draw."""
    r = rng.random()

    if r < JELLY_THRESHOLD:
        hero = replace(hero, jellies=hero.jellies + 1)
        return hero, GachaOutcome(GachaTier.JELLY, 1, "🍬 Got 1 jelly!", COLOR_JELLY)

    if r < GOLD_THRESHOLD:
        refund = rng.randint(50, 349)
        hero = replace(hero, gold=hero.gold + refund)
        return hero, GachaOutcome(GachaTier.GOLD, refund, f"💰 Payback! Got {refund}G!", COLOR_GOLD)

    if r < STAT_THRESHOLD:
        if rng.random() < 0.5:
            hero = replace(hero, max_hp=hero.max_hp + 10)
            hero = replace(hero, hp=clamp(hero.hp + 10, 0, effective_max_hp(hero)))
            return hero, GachaOutcome(GachaTier.HP_UP, 10, "❤ Max HP +10!", COLOR_HP)
        hero = replace(hero, base_atk=hero.base_atk + 1)
        return hero, GachaOutcome(GachaTier.ATK_UP, 1, "⚔ ATK +1!", COLOR_ATK)

    # mp is raised max_mp + 20, clamped to the effective cap. With a positive job
    # mp bonus this lands above the raised base max_mp.
    new_max_mp = hero.max_mp + 20
    hero = replace(
        hero,
        base_atk=hero.base_atk + 5,
        max_hp=hero.max_hp + 50,
        max_mp=new_max_mp,
        gold=hero.gold + 1000,
    )
    hero = replace(
        hero,
        hp=clamp(hero.hp + 50, 0, effective_max_hp(hero)),
        mp=clamp(new_max_mp + 20, 0, effective_max_mp(hero)),
    )
    return hero, GachaOutcome(GachaTier.JACKPOT, 1000, "✨ JACKPOT!! All stats up & 1000G!!", COLOR_JACKPOT)
