"""content.schemas

Contract for the generator's monster output.

Design choice:
We keep balance OUT of the LLM. The generator suggests numbers and writes the
flavor; engine.pipeline rescales hp/atk/rewardGold with local difficulty
multipliers before anything reaches the run.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping

MAX_NAME_LEN = 40
MAX_DESCRIPTION_LEN = 240


def _as_number(x: Any, field_name: str) -> float:
    if isinstance(x, bool):
        raise ValueError(f"monster.{field_name} must be a number")
    try:
        v = float(x)
    except (TypeError, ValueError):
        raise ValueError(f"monster.{field_name} must be a number") from None
    if math.isnan(v) or math.isinf(v):
        raise ValueError(f"monster.{field_name} must be finite")
    return v


@dataclass(frozen=True)
class MonsterDraft:
    """Raw generator suggestion (numbers untrusted)."""

    name: str
    hp: float
    atk: float
    emoji: str
    description: str
    reward_gold: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "hp": self.hp,
            "atk": self.atk,
            "emoji": self.emoji,
            "description": self.description,
            "rewardGold": self.reward_gold,
        }


def validate_monster_draft(d: MonsterDraft) -> None:
    if not (d.name or "").strip():
        raise ValueError("monster.name is empty")
    if d.hp <= 0:
        raise ValueError("monster.hp must be > 0")
    if d.atk < 0:
        raise ValueError("monster.atk must be >= 0")
    if d.reward_gold < 0:
        raise ValueError("monster.rewardGold must be >= 0")


def draft_from_llm(data: Mapping[str, Any]) -> MonsterDraft:
    """Parse and validate a generator JSON object.

    Accepts `flavorIcon` as an alias of `emoji` and `reward_gold` of `rewardGold`.
    """
    if not isinstance(data, Mapping):
        raise ValueError("monster payload must be an object")

    gold_raw = data.get("rewardGold", data.get("reward_gold"))
    if gold_raw is None:
        raise ValueError("monster.rewardGold missing")

    d = MonsterDraft(
        name=str(data.get("name") or "").strip()[:MAX_NAME_LEN],
        hp=_as_number(data.get("hp"), "hp"),
        atk=_as_number(data.get("atk"), "atk"),
        emoji=str(data.get("emoji") or data.get("flavorIcon") or "👾").strip(),
        description=str(data.get("description") or "").strip()[:MAX_DESCRIPTION_LEN],
        reward_gold=_as_number(gold_raw, "rewardGold"),
    )
    validate_monster_draft(d)
    return d
