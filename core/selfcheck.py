"""
core.selfcheck
Minimal "it runs" proof for the combat rules.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import replace

from .combat import HeroAction, resolve_enemy_turn, resolve_hero_action, resolve_victory
from .economy import StatKind, allocate_stat
from .loot import can_afford_gacha, draw_reward, pay_for_gacha
from .rng import rng_from
from .state import Monster, default_hero, hero_invariants_hold

ACTION_CYCLE = [
    HeroAction.ATTACK,
    HeroAction.FIREBALL,
    HeroAction.DEFEND,
    HeroAction.ITEM,
    HeroAction.ULTIMATE,
    HeroAction.ELIXIR,
]


def run_battles_smoke(battles: int = 20, base_seed: int = 42) -> dict:
    rng = rng_from("selfcheck", battles, base_seed=base_seed)
    hero = default_hero()
    wins = 0
    turns = 0

    for n in range(1, battles + 1):
        monster = Monster(
            name=f"Training Dummy {n}",
            hp=50 * n,
            max_hp=50 * n,
            atk=4 + n,
            is_boss=n % 5 == 0,
            reward_gold=40 * n,
            flavor_text="It wobbles.",
        )
        for i in range(200):
            turns += 1
            action = ACTION_CYCLE[i % len(ACTION_CYCLE)]
            hero, monster, out = resolve_hero_action(hero, monster, action, rng)
            assert hero_invariants_hold(hero), hero
            if not out.accepted:
                continue
            if out.monster_defeated:
                hero, _ = resolve_victory(hero, monster, rng)
                wins += 1
                break
            hero, enemy = resolve_enemy_turn(hero, monster, action == HeroAction.DEFEND, rng)
            assert hero_invariants_hold(hero), hero
            if enemy.hero_defeated:
                # revive for the next dummy; this is a rules smoke, not a run
                hero = replace(hero, hp=1)
                break

        hero, _ = allocate_stat(hero, StatKind.VIT if n % 2 else StatKind.STR, already_allocated=False)
        if can_afford_gacha(hero):
            hero, _ = draw_reward(pay_for_gacha(hero), rng)
        assert hero_invariants_hold(hero), hero

    return {"wins": wins, "turns": turns, "hero": hero.to_dict()}


if __name__ == "__main__":
    out = run_battles_smoke()
    print("OK: combat smoke passed.")
    print(f"Wins: {out['wins']} in {out['turns']} turns")
    print("Final hero:", out["hero"])
