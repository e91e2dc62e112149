"""engine.config

Engine configuration passed from UI.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    base_seed: int = 42
    model: str = "gemini-2.5-flash"
    temperature: float = 0.9
    max_output_tokens: int = 400
    request_timeout_s: float = 15.0
    language: str = "Korean"

    # continuation delays (seconds); the driver sleeps, the engine does not
    enemy_turn_delay_s: float = 1.0
    defeat_delay_s: float = 0.5
    gacha_delay_s: float = 1.5
    generation_delay_s: float = 0.0
