"""
core.rng
Deterministic RNG helpers that do NOT rely on Python's built-in hash().

Goal:
- Same (base_seed + inputs) => same Random stream across platforms & runs.
- Combat/loot code only depends on the tiny RandomSource protocol, so tests can
  script exact rolls.
"""

from __future__ import annotations

import hashlib
import json
import random
from typing import Any, Protocol


class RandomSource(Protocol):
    def random(self) -> float:
        """Next uniform float in [0.0, 1.0)."""
        ...

    def randint(self, a: int, b: int) -> int:
        """Next integer N with a <= N <= b."""
        ...


def stable_int_seed(*parts: Any, salt: str = "abyss-crawler") -> int:
    """Return a stable 32-bit integer seed derived from arbitrary inputs.

    Uses SHA-256 over a canonical JSON representation of `parts`.
    This avoids Python's randomized hash() and is stable across processes/platforms.
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def rng_from(*parts: Any, base_seed: int) -> random.Random:
    """Create a Random instance from (base_seed + parts)."""
    seed = stable_int_seed(base_seed, *parts)
    return random.Random(seed)


def roll_variance(rng: RandomSource) -> float:
    """Uniform multiplier in [0.8, 1.2) drawn from a single random() call.

    A roll of 0.5 gives exactly 1.0.
    """
    return rng.random() * 0.4 + 0.8
