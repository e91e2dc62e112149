"""
core.combat
Turn rules:
- hero action effects (damage / heal / mp / ultimate charge)
- victory reward
- enemy counter-turn (dodge, defend halving)

All functions are pure: they take Hero/Monster and return new instances plus an
outcome record. Sequencing (when the counter-turn fires) is the engine's job.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from .catalog import get_ultimate
from .rng import RandomSource, roll_variance
from .state import (
    ULT_MAX,
    Hero,
    Monster,
    add_ult_charge,
    clamp,
    effective_atk,
    effective_max_hp,
    heal_hp,
    restore_mp,
)


class HeroAction(str, Enum):
    ATTACK = "ATTACK"
    FIREBALL = "FIREBALL"
    ITEM = "ITEM"
    ELIXIR = "ELIXIR"
    DEFEND = "DEFEND"
    ULTIMATE = "ULTIMATE"


CRIT_CHANCE = 0.2
CRIT_MULT = 1.5
FIREBALL_MP_COST = 15
FIREBALL_MULT = 2.5
JELLY_HEAL_RATIO = 0.5
ELIXIR_MP = 50
DEFEND_MP = 15
METEOR_MULT = 6
HOLY_LIGHT_HEAL_RATIO = 0.8
HOLY_LIGHT_MP = 50
VAMPIRE_MULT = 4
VAMPIRE_DRAIN_RATIO = 0.5
HIT_ULT_GAIN = 10
VICTORY_BONUS_MAX = 19  # randint(0, 19), same as floor(random * 20)

ULT_GAIN = {
    HeroAction.ATTACK: 10,
    HeroAction.FIREBALL: 15,
    HeroAction.ITEM: 5,
    HeroAction.ELIXIR: 5,
    HeroAction.DEFEND: 5,
    HeroAction.ULTIMATE: 0,
}


@dataclass(frozen=True)
class HeroActionOutcome:
    action: HeroAction
    accepted: bool
    message: str
    damage: int = 0
    heal: int = 0
    mp_restored: int = 0
    is_crit: bool = False
    ult_gain: int = 0
    ultimate_id: Optional[str] = None
    monster_defeated: bool = False


@dataclass(frozen=True)
class VictoryOutcome:
    gold_earned: int
    boss_bonus: bool
    message: str


@dataclass(frozen=True)
class EnemyTurnOutcome:
    dodged: bool
    damage: int
    defended: bool
    hero_defeated: bool
    message: str


def _reject(action: HeroAction, message: str) -> HeroActionOutcome:
    return HeroActionOutcome(action=action, accepted=False, message=message)


def resolve_hero_action(
    hero: Hero,
    monster: Monster,
    action: HeroAction,
    rng: RandomSource,
) -> Tuple[Hero, Monster, HeroActionOutcome]:
    """Apply the hero's half of a turn.

    Steps: effect -> monster damage -> ultimate charge -> defeat check.
    A failed precondition returns the inputs unchanged with accepted=False.
    """
    action = HeroAction(action)
    total_atk = effective_atk(hero)
    dmg = 0
    heal = 0
    mp_rec = 0
    is_crit = False
    ult_id: Optional[str] = None
    msg = ""

    if action == HeroAction.ATTACK:
        is_crit = rng.random() < CRIT_CHANCE
        dmg = math.floor(total_atk * roll_variance(rng) * (CRIT_MULT if is_crit else 1))
        prefix = "💥 Critical! " if is_crit else "🗡️ "
        msg = f"{prefix}[{monster.name}] takes {dmg} physical damage!"

    elif action == HeroAction.FIREBALL:
        if hero.mp < FIREBALL_MP_COST:
            return hero, monster, _reject(action, "Not enough MP!")
        hero = replace(hero, mp=hero.mp - FIREBALL_MP_COST)
        dmg = math.floor(total_atk * FIREBALL_MULT)
        msg = f"🔥 Fireball! {dmg} fire damage!"

    elif action == HeroAction.ITEM:
        if hero.jellies <= 0:
            return hero, monster, _reject(action, "No jellies left! Buy some in the shop.")
        heal = math.floor(effective_max_hp(hero) * JELLY_HEAL_RATIO)
        hero = heal_hp(replace(hero, jellies=hero.jellies - 1), heal)
        msg = f"🍬 Ate a jelly! Restored {heal} HP. ({hero.jellies} left)"

    elif action == HeroAction.ELIXIR:
        if hero.elixirs <= 0:
            return hero, monster, _reject(action, "No elixirs left! Buy some in the shop.")
        mp_rec = ELIXIR_MP
        hero = restore_mp(replace(hero, elixirs=hero.elixirs - 1), mp_rec)
        msg = f"🧪 Drank an elixir! Restored {mp_rec} MP. ({hero.elixirs} left)"

    elif action == HeroAction.DEFEND:
        mp_rec = DEFEND_MP
        hero = restore_mp(hero, mp_rec)
        msg = "🛡️ Defensive stance! Recovering MP."

    elif action == HeroAction.ULTIMATE:
        if hero.ult_charge < ULT_MAX:
            return hero, monster, _reject(action, "The ultimate is not charged yet!")
        ult = get_ultimate(hero.equipped_ultimate_id)
        ult_id = ult.id
        if ult.effect_kind == "METEOR":
            dmg = math.floor(total_atk * METEOR_MULT)
            msg = f"☄️ [Ultimate] Meteor Strike! {dmg} damage!"
        elif ult.effect_kind == "HOLY_LIGHT":
            heal = math.floor(effective_max_hp(hero) * HOLY_LIGHT_HEAL_RATIO)
            mp_rec = HOLY_LIGHT_MP
            hero = restore_mp(heal_hp(hero, heal), mp_rec)
            msg = "✨ [Ultimate] Holy Light! HP and MP greatly restored!"
        elif ult.effect_kind == "VAMPIRE":
            dmg = math.floor(total_atk * VAMPIRE_MULT)
            heal = math.floor(dmg * VAMPIRE_DRAIN_RATIO)
            hero = heal_hp(hero, heal)
            msg = f"🩸 [Ultimate] Blood Slash! {dmg} damage, {heal} HP drained!"
        hero = replace(hero, ult_charge=0)

    if dmg > 0:
        monster = replace(monster, hp=clamp(monster.hp - dmg, 0, monster.max_hp))

    gain = ULT_GAIN[action]
    if gain > 0:
        hero = add_ult_charge(hero, gain)

    outcome = HeroActionOutcome(
        action=action,
        accepted=True,
        message=msg,
        damage=dmg,
        heal=heal,
        mp_restored=mp_rec,
        is_crit=is_crit,
        ult_gain=gain,
        ultimate_id=ult_id,
        monster_defeated=monster.hp <= 0,
    )
    return hero, monster, outcome


def resolve_victory(hero: Hero, monster: Monster, rng: RandomSource) -> Tuple[Hero, VictoryOutcome]:
    gold = int(monster.reward_gold) + rng.randint(0, VICTORY_BONUS_MAX)
    hero = replace(hero, gold=hero.gold + gold)
    if monster.is_boss:
        hero = replace(hero, ult_charge=ULT_MAX)
    return hero, VictoryOutcome(
        gold_earned=gold,
        boss_bonus=bool(monster.is_boss),
        message=f"🏆 Victory! Earned {gold}G!",
    )


def dodge_chance(hero: Hero) -> float:
    return 0.05 + hero.level * 0.005


def resolve_enemy_turn(
    hero: Hero,
    monster: Monster,
    defending: bool,
    rng: RandomSource,
) -> Tuple[Hero, EnemyTurnOutcome]:
    """Monster counter-attack after an accepted, non-lethal hero action."""
    if rng.random() < dodge_chance(hero):
        return hero, EnemyTurnOutcome(
            dodged=True,
            damage=0,
            defended=bool(defending),
            hero_defeated=False,
            message=f"💨 Dodged [{monster.name}]'s attack!",
        )

    raw = math.floor(monster.atk * roll_variance(rng))
    dmg = raw // 2 if defending else raw
    new_hp = clamp(hero.hp - dmg, 0, effective_max_hp(hero))
    hero = replace(hero, hp=new_hp)
    if dmg > 0:
        hero = add_ult_charge(hero, HIT_ULT_GAIN)
        msg = f"💥 [{monster.name}] attacks! {dmg} damage."
    else:
        msg = f"[{monster.name}]'s attack missed!"

    return hero, EnemyTurnOutcome(
        dodged=False,
        damage=dmg,
        defended=bool(defending),
        hero_defeated=new_hp <= 0,
        message=msg,
    )
