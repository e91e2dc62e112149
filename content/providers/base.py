"""content.providers.base

Provider interfaces.

A provider's job is to produce a MonsterDraft (flavor + suggested numbers).
The engine rescales it deterministically, or falls back when it raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Tuple

from ..schemas import MonsterDraft


@dataclass(frozen=True)
class ProviderStatus:
    ok: bool
    backend: str
    model: str
    note: str = ""
    error: str = ""


class MonsterProvider(Protocol):
    def status(self) -> ProviderStatus: ...

    def generate_monster_draft(
        self,
        *,
        prompt: str,
        temperature: float = 0.9,
        max_output_tokens: int = 400,
    ) -> Tuple[MonsterDraft, str]:
        """Return (draft, raw_text_used). Raises on any failure."""
        ...
