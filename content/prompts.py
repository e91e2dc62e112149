"""content.prompts

Prompt builder for the monster generator.

The model writes flavor and suggests numbers; the engine rescales the numbers
with local difficulty multipliers, so the prompt only needs a rating hint.
"""

from __future__ import annotations

from core.catalog import DungeonTheme


def build_monster_prompt(
    *,
    theme: DungeonTheme,
    floor: int,
    is_boss: bool,
    difficulty_rating: int,
    language: str = "Korean",
) -> str:
    boss_line = "true (make it a fearsome floor boss)" if is_boss else "false"
    return f"""
Create a fantasy RPG monster for Dungeon Theme: "{theme.name}" ({theme.monster_descriptor}).
Floor: {int(floor)}.
Is Boss: {boss_line}.
Difficulty level: {int(difficulty_rating)}.

Rules:
- "name" and "description" are written in {language}.
- "description" is one short menacing intro line.
- "hp", "atk", "rewardGold" are plain integers scaled to the difficulty level.
- "emoji" is a single emoji.

Return ONLY JSON:
{{
  "name": "string",
  "hp": 0,
  "atk": 0,
  "emoji": "string",
  "description": "string",
  "rewardGold": 0
}}
""".strip()
