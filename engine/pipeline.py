"""engine.pipeline

Monster flow (headless).

Responsibilities:
- Build the generator prompt for (floor, theme, difficulty)
- Convert MonsterDraft (flavor + suggested numbers) -> Monster with local
  difficulty multipliers
- Convert any generator failure into the deterministic fallback monster

This layer is UI-agnostic. RunEngine only ever sees a Monster.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from content.prompts import build_monster_prompt
from content.providers.base import MonsterProvider
from content.schemas import MonsterDraft
from core.catalog import DungeonTheme
from core.modes import Difficulty, difficulty_rating, get_difficulty_spec, is_boss_floor
from core.state import Monster

from .config import EngineConfig

log = logging.getLogger(__name__)

FALLBACK_BOSS_NAME = "Lord of the Abyss"
FALLBACK_NAME = "Dungeon Slime"
FALLBACK_BOSS_EMOJI = "👹"
FALLBACK_EMOJI = "🦠"
FALLBACK_DESCRIPTION = "An unknown enemy."


@dataclass(frozen=True)
class GenerationResult:
    monster: Optional[Monster]
    raw: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.monster is not None


def draft_to_monster(draft: MonsterDraft, *, floor: int, difficulty: Difficulty) -> Monster:
    """Deterministically rescale a generator draft.

    Only name/description/emoji are taken as-is; the numbers always pass through
    the difficulty multipliers.
    """
    spec = get_difficulty_spec(difficulty)
    hp = math.floor(draft.hp * spec.stat_mult)
    if hp < 1:
        raise ValueError("monster.hp rescales below 1")
    atk = math.floor(draft.atk * spec.stat_mult)
    gold = math.floor(draft.reward_gold * spec.gold_mult)
    return Monster(
        name=draft.name,
        hp=hp,
        max_hp=hp,
        atk=atk,
        is_boss=is_boss_floor(floor),
        reward_gold=gold,
        flavor_text=draft.description,
        emoji=draft.emoji,
    )


def fallback_monster(*, floor: int, difficulty: Difficulty) -> Monster:
    """Offline monster. No randomness: same inputs, same monster."""
    spec = get_difficulty_spec(difficulty)
    boss = is_boss_floor(floor)
    hp = math.floor(60 * floor * (2 if boss else 1) * spec.stat_mult)
    atk = math.floor(10 * floor * (1.2 if boss else 1) * spec.stat_mult)
    gold = math.floor(50 * floor * spec.gold_mult)
    return Monster(
        name=FALLBACK_BOSS_NAME if boss else FALLBACK_NAME,
        hp=hp,
        max_hp=hp,
        atk=atk,
        is_boss=boss,
        reward_gold=gold,
        flavor_text=FALLBACK_DESCRIPTION,
        emoji=FALLBACK_BOSS_EMOJI if boss else FALLBACK_EMOJI,
    )


def try_generate_monster(
    provider: Optional[MonsterProvider],
    *,
    floor: int,
    theme: DungeonTheme,
    difficulty: Difficulty,
    config: EngineConfig,
) -> GenerationResult:
    """Single attempt against the provider. Never raises."""
    if provider is None:
        return GenerationResult(monster=None, error="no provider")

    prompt = build_monster_prompt(
        theme=theme,
        floor=int(floor),
        is_boss=is_boss_floor(floor),
        difficulty_rating=difficulty_rating(floor),
        language=config.language,
    )
    raw = ""
    try:
        draft, raw = provider.generate_monster_draft(
            prompt=prompt,
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
        )
        monster = draft_to_monster(draft, floor=int(floor), difficulty=difficulty)
    except Exception as e:
        return GenerationResult(monster=None, raw=raw, error=f"{type(e).__name__}: {e}")
    return GenerationResult(monster=monster, raw=raw)


@dataclass
class MonsterFactory:
    provider: Optional[MonsterProvider]
    config: EngineConfig

    last_result: Optional[GenerationResult] = None

    def generate(self, floor: int, theme: DungeonTheme, difficulty: Difficulty) -> Monster:
        res = try_generate_monster(
            self.provider,
            floor=floor,
            theme=theme,
            difficulty=difficulty,
            config=self.config,
        )
        self.last_result = res
        if res.monster is not None:
            return res.monster
        log.warning("monster generation failed on floor %s, using fallback: %s", floor, res.error)
        return fallback_monster(floor=int(floor), difficulty=difficulty)

    @property
    def used_fallback(self) -> bool:
        return self.last_result is not None and not self.last_result.ok
