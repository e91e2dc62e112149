from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from content.providers.base import ProviderStatus
from content.schemas import MonsterDraft
from core.catalog import find_theme
from core.modes import Difficulty
from engine.config import EngineConfig
from engine.pipeline import MonsterFactory, draft_to_monster, fallback_monster, try_generate_monster


@dataclass
class StubProvider:
    draft: MonsterDraft
    prompts: List[str] = field(default_factory=list)

    def status(self) -> ProviderStatus:
        return ProviderStatus(True, "stub", "stub")

    def generate_monster_draft(self, *, prompt: str, temperature: float = 0.9, max_output_tokens: int = 400) -> Tuple[MonsterDraft, str]:
        self.prompts.append(prompt)
        return self.draft, "{}"


@dataclass
class FailingProvider:
    error: Exception
    calls: int = 0

    def status(self) -> ProviderStatus:
        return ProviderStatus(False, "stub", "stub", error=str(self.error))

    def generate_monster_draft(self, *, prompt: str, temperature: float = 0.9, max_output_tokens: int = 400) -> Tuple[MonsterDraft, str]:
        self.calls += 1
        raise self.error


def _draft(hp: float = 100, atk: float = 20, gold: float = 50) -> MonsterDraft:
    return MonsterDraft(name="Magma Hound", hp=hp, atk=atk, emoji="🐕", description="Snarls.", reward_gold=gold)


def test_failed_generation_on_boss_floor_hard_uses_fallback_numbers() -> None:
    provider = FailingProvider(TimeoutError("deadline exceeded"))
    factory = MonsterFactory(provider=provider, config=EngineConfig())

    monster = factory.generate(5, find_theme("FIRE"), Difficulty.HARD)

    assert (monster.hp, monster.max_hp, monster.atk, monster.reward_gold) == (900, 900, 90, 375)
    assert monster.is_boss
    assert factory.used_fallback
    assert provider.calls == 1


def test_fallback_is_deterministic() -> None:
    first = fallback_monster(floor=7, difficulty=Difficulty.EASY)
    for _ in range(5):
        assert fallback_monster(floor=7, difficulty=Difficulty.EASY) == first
    assert (first.hp, first.atk, first.reward_gold) == (336, 56, 280)
    assert not first.is_boss


def test_successful_generation_is_rescaled_locally() -> None:
    provider = StubProvider(_draft(hp=100, atk=20, gold=50))
    factory = MonsterFactory(provider=provider, config=EngineConfig())

    monster = factory.generate(3, find_theme("FOREST"), Difficulty.HARD)

    assert (monster.hp, monster.atk, monster.reward_gold) == (150, 30, 75)
    assert monster.name == "Magma Hound"
    assert monster.flavor_text == "Snarls."
    assert not monster.is_boss
    assert not factory.used_fallback
    assert "Undead, Ghost, Poison" in provider.prompts[0]
    assert "Difficulty level: 25." in provider.prompts[0]


def test_boss_flag_comes_from_floor_not_generator() -> None:
    monster = draft_to_monster(_draft(), floor=10, difficulty=Difficulty.NORMAL)

    assert monster.is_boss


def test_any_exception_type_falls_back() -> None:
    for err in (RuntimeError("503"), ValueError("bad json"), KeyError("name"), ConnectionError("down")):
        factory = MonsterFactory(provider=FailingProvider(err), config=EngineConfig())
        monster = factory.generate(2, find_theme("ICE"), Difficulty.NORMAL)
        assert monster == fallback_monster(floor=2, difficulty=Difficulty.NORMAL)


def test_draft_that_rescales_below_one_hp_is_treated_as_malformed() -> None:
    res = try_generate_monster(
        StubProvider(_draft(hp=1)),
        floor=1,
        theme=find_theme("FIRE"),
        difficulty=Difficulty.EASY,
        config=EngineConfig(),
    )

    assert not res.ok
    assert "hp" in res.error


def test_missing_provider_falls_back() -> None:
    factory = MonsterFactory(provider=None, config=EngineConfig())

    monster = factory.generate(1, find_theme("FIRE"), Difficulty.NORMAL)

    assert monster.name == "Dungeon Slime"
    assert (monster.hp, monster.atk, monster.reward_gold) == (60, 10, 50)
