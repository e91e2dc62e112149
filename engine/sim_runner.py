"""engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic and CI-friendly by avoiding network calls.
It uses a tiny built-in fake monster provider and a greedy hero policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from content.providers.base import ProviderStatus
from content.schemas import MonsterDraft
from core.combat import FIREBALL_MP_COST, HeroAction
from core.economy import StatKind
from core.state import ULT_MAX, effective_max_hp, hero_invariants_hold

from .config import EngineConfig
from .run import RunEngine, RunState


@dataclass
class FakeMonsterProvider:
    """Deterministic provider for tests (no LLM)."""

    calls: int = 0

    def status(self) -> ProviderStatus:
        return ProviderStatus(True, "fake", "fake-monster-1")

    def generate_monster_draft(
        self,
        *,
        prompt: str,
        temperature: float = 0.9,
        max_output_tokens: int = 400,
    ) -> Tuple[MonsterDraft, str]:
        self.calls += 1
        boss = "Is Boss: true" in prompt
        draft = MonsterDraft(
            name="Cinder Wraith" if boss else "Ember Imp",
            hp=180.0 * (2 if boss else 1),
            atk=12.0 if boss else 8.0,
            emoji="🔥",
            description="It hisses and crackles in the dark.",
            reward_gold=120.0,
        )
        return draft, str(draft.to_dict())


def pick_action(engine: RunEngine) -> HeroAction:
    hero = engine.hero
    if hero.hp < effective_max_hp(hero) * 0.4 and hero.jellies > 0:
        return HeroAction.ITEM
    if hero.ult_charge >= ULT_MAX:
        return HeroAction.ULTIMATE
    if hero.mp >= FIREBALL_MP_COST:
        return HeroAction.FIREBALL
    return HeroAction.ATTACK


def run_headless_sim(floors: int = 6, seed: int = 123, max_steps: int = 2000) -> Dict[str, Any]:
    """Run a deterministic simulation and return summary."""
    cfg = EngineConfig(base_seed=int(seed))
    engine = RunEngine(cfg, provider=FakeMonsterProvider())

    engine.select_adventure()
    engine.choose_theme("FIRE")
    engine.choose_difficulty("NORMAL")

    steps = 0
    stats_cycle = [StatKind.STR, StatKind.VIT, StatKind.INT]
    violations: List[int] = []

    while steps < max_steps:
        steps += 1
        engine.drain()
        if not hero_invariants_hold(engine.hero):
            violations.append(steps)

        if engine.state == RunState.GAMEOVER:
            break
        if engine.state == RunState.BATTLE:
            engine.hero_action(pick_action(engine))
            continue
        if engine.state == RunState.SHOP:
            if engine.floor >= floors:
                break
            if engine.hero.gold >= 100 and engine.hero.jellies < 2:
                engine.buy_jelly()
            engine.allocate_stat(stats_cycle[engine.floor % len(stats_cycle)])
            engine.advance_floor()
            continue
        break

    return {
        "steps": steps,
        "final_state": engine.state,
        "floor": engine.floor,
        "hero": engine.hero,
        "violations": violations,
        "log": engine.log.to_list(),
    }


if __name__ == "__main__":
    out = run_headless_sim()
    print(f"{out['final_state'].value} on floor {out['floor']} after {out['steps']} steps")
    print("Hero:", out["hero"].to_dict())
