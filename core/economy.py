"""
core.economy
Shop / progression rules:
- weapon purchase, job change, ultimate switch
- consumable purchases (jelly, elixir)
- per-interlude stat allocation

Every rule returns (hero, LedgerResult). A rejected result carries the
unchanged hero.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from .catalog import ELIXIR_PRICE, JELLY_PRICE, find_job, find_ultimate, find_weapon
from .state import Hero, effective_max_hp, effective_max_mp, heal_hp, restore_mp


class StatKind(str, Enum):
    STR = "STR"
    VIT = "VIT"
    INT = "INT"


STR_ATK = 4
VIT_HP = 30
INT_MP = 20


@dataclass(frozen=True)
class LedgerResult:
    accepted: bool
    message: str
    gold_spent: int = 0


def _no_gold(price: int) -> LedgerResult:
    return LedgerResult(False, f"Not enough gold! ({price}G needed)")


def buy_weapon(hero: Hero, weapon_id: str) -> Tuple[Hero, LedgerResult]:
    weapon = find_weapon(weapon_id)
    if weapon is None:
        return hero, LedgerResult(False, f"Unknown weapon: {weapon_id}")
    if hero.weapon_id == weapon.id:
        return hero, LedgerResult(False, f"[{weapon.name}] is already equipped.")
    if hero.gold < weapon.price:
        return hero, _no_gold(weapon.price)
    hero = replace(hero, gold=hero.gold - weapon.price, weapon_id=weapon.id)
    return hero, LedgerResult(True, f"⚔️ Bought [{weapon.name}]!", gold_spent=weapon.price)


def change_job(hero: Hero, job_id: str) -> Tuple[Hero, LedgerResult]:
    """Switch job; current HP/MP are only clamped down, never refilled."""
    job = find_job(job_id)
    if job is None:
        return hero, LedgerResult(False, f"Unknown job: {job_id}")
    if hero.job_id == job.id:
        return hero, LedgerResult(False, f"Already a [{job.name}].")
    if hero.gold < job.price:
        return hero, _no_gold(job.price)
    hero = replace(hero, gold=hero.gold - job.price, job_id=job.id)
    hero = replace(
        hero,
        hp=max(0, min(hero.hp, effective_max_hp(hero))),
        mp=max(0, min(hero.mp, effective_max_mp(hero))),
    )
    return hero, LedgerResult(True, f"🏅 Became a [{job.name}]!", gold_spent=job.price)


def switch_ultimate(hero: Hero, ult_id: str) -> Tuple[Hero, LedgerResult]:
    ult = find_ultimate(ult_id)
    if ult is None:
        return hero, LedgerResult(False, f"Unknown ultimate: {ult_id}")
    if hero.level < ult.unlock_level:
        return hero, LedgerResult(False, f"[{ult.name}] unlocks at level {ult.unlock_level}.")
    if hero.equipped_ultimate_id == ult.id:
        return hero, LedgerResult(True, f"[{ult.name}] is already equipped.")
    hero = replace(hero, equipped_ultimate_id=ult.id)
    return hero, LedgerResult(True, f"{ult.emoji} Equipped [{ult.name}].")


def buy_jelly(hero: Hero) -> Tuple[Hero, LedgerResult]:
    if hero.gold < JELLY_PRICE:
        return hero, _no_gold(JELLY_PRICE)
    hero = replace(hero, gold=hero.gold - JELLY_PRICE, jellies=hero.jellies + 1)
    return hero, LedgerResult(True, "🍬 Bought a jelly!", gold_spent=JELLY_PRICE)


def buy_elixir(hero: Hero) -> Tuple[Hero, LedgerResult]:
    if hero.gold < ELIXIR_PRICE:
        return hero, _no_gold(ELIXIR_PRICE)
    hero = replace(hero, gold=hero.gold - ELIXIR_PRICE, elixirs=hero.elixirs + 1)
    return hero, LedgerResult(True, "🧪 Bought an elixir!", gold_spent=ELIXIR_PRICE)


def allocate_stat(hero: Hero, kind: StatKind, already_allocated: bool) -> Tuple[Hero, LedgerResult]:
    """One level-up per shop interlude. The caller owns the gate flag."""
    if already_allocated:
        return hero, LedgerResult(False, "You already trained this floor.")
    kind = StatKind(kind)
    if kind == StatKind.STR:
        hero = replace(hero, base_atk=hero.base_atk + STR_ATK, level=hero.level + 1)
        return hero, LedgerResult(True, f"Strength trained! (ATK +{STR_ATK})")
    if kind == StatKind.VIT:
        hero = heal_hp(replace(hero, max_hp=hero.max_hp + VIT_HP, level=hero.level + 1), VIT_HP)
        return hero, LedgerResult(True, f"Vitality trained! (Max HP +{VIT_HP} & heal)")
    hero = restore_mp(replace(hero, max_mp=hero.max_mp + INT_MP, level=hero.level + 1), INT_MP)
    return hero, LedgerResult(True, f"Intellect trained! (Max MP +{INT_MP} & restore)")
