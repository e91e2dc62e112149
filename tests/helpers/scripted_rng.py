"""Scripted random source for exact-roll tests."""
from __future__ import annotations

from collections import deque
from typing import Iterable


class ScriptedRng:
    """Returns queued values in order; raises when the script runs dry."""

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = ()) -> None:
        self._floats = deque(floats)
        self._ints = deque(ints)

    def random(self) -> float:
        if not self._floats:
            raise AssertionError("ScriptedRng ran out of floats")
        return self._floats.popleft()

    def randint(self, a: int, b: int) -> int:
        if not self._ints:
            raise AssertionError("ScriptedRng ran out of ints")
        value = self._ints.popleft()
        assert a <= value <= b, (a, value, b)
        return value

    @property
    def exhausted(self) -> bool:
        return not self._floats and not self._ints
