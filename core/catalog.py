"""
core.catalog
Static reference data: dungeon themes, weapons, jobs, ultimates.

Read-only. Hero refers to weapons/jobs/ultimates by id and looks them up here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class DungeonTheme:
    id: str
    name: str
    description: str
    emoji: str
    color: str
    monster_descriptor: str  # fed to the generator prompt


@dataclass(frozen=True)
class Weapon:
    id: str
    name: str
    atk_bonus: int
    price: int
    emoji: str
    description: str


@dataclass(frozen=True)
class Job:
    id: str
    name: str
    hp_bonus: int
    mp_bonus: int
    atk_bonus: int
    price: int
    emoji: str
    description: str


@dataclass(frozen=True)
class Ultimate:
    id: str
    name: str
    effect_kind: str  # METEOR | HOLY_LIGHT | VAMPIRE
    unlock_level: int
    emoji: str
    description: str
    color: str


DUNGEONS: Tuple[DungeonTheme, ...] = (
    DungeonTheme(
        id="FIRE",
        name="Canyon of Flames",
        description="Lava flows and fire creatures roam here.",
        emoji="🌋",
        color="#ff4400",
        monster_descriptor="Fire, Lava, Demon",
    ),
    DungeonTheme(
        id="ICE",
        name="Frozen Cavern",
        description="A cold labyrinth where everything is frozen solid.",
        emoji="❄️",
        color="#00ccff",
        monster_descriptor="Ice, Yeti, Spirit",
    ),
    DungeonTheme(
        id="FOREST",
        name="Haunted Forest",
        description="The undead hide in the gloomy mist.",
        emoji="🌲",
        color="#aa00ff",
        monster_descriptor="Undead, Ghost, Poison",
    ),
)

# The first entry is the default for unknown/unequipped ids.
ULTIMATES: Tuple[Ultimate, ...] = (
    Ultimate("METEOR", "Meteor", "METEOR", 1, "☄️", "Deals 600% of attack to the enemy", "#ff2222"),
    Ultimate("HOLY_LIGHT", "Holy Light", "HOLY_LIGHT", 3, "✨", "Restores 80% HP and 50 MP", "#ffffaa"),
    Ultimate("VAMPIRE", "Blood Slash", "VAMPIRE", 5, "🩸", "Deals 400% of attack, drains 50% of it", "#ff00aa"),
)

WEAPONS: Tuple[Weapon, ...] = (
    Weapon("WOOD_SWORD", "Wooden Sword", 0, 0, "🪵", "A practice sword."),
    Weapon("RUSTY_DAGGER", "Rusty Dagger", 5, 100, "🔪", "Rusty, but it still cuts."),
    Weapon("IRON_SWORD", "Iron Sword", 10, 500, "🗡️", "A basic iron blade."),
    Weapon("IRON_MACE", "Iron Mace", 18, 1000, "🔨", "Good against armored monsters."),
    Weapon("SILVER_LANCE", "Silver Lance", 25, 2000, "🔱", "Long and sharp."),
    Weapon("STEEL_CLAYMORE", "Steel Claymore", 35, 3500, "⚔️", "Heavy but powerful swings."),
    Weapon("GOLD_AXE", "Golden Axe", 50, 6000, "🪓", "Flashy and destructive."),
    Weapon("KATANA", "Master Katana", 70, 9000, "🎌", "Forged with a smith's soul."),
    Weapon("DRAGON_SLAYER", "Dragon Slayer", 120, 15000, "🐉", "The sword of legend."),
    Weapon("DEMON_BLADE", "Demon Blade", 180, 30000, "👿", "Cursed power dwells within."),
    Weapon("LIGHT_SABER", "Light Saber", 300, 80000, "🔦", "Built with future technology."),
    Weapon("INFINITY_BLADE", "Infinity Blade", 999, 999999, "♾️", "It could cut a god."),
)

JOBS: Tuple[Job, ...] = (
    Job("NOVICE", "Novice", 0, 0, 0, 0, "👶", "A beginner starting the adventure."),
    Job("KNIGHT", "Knight", 100, 0, 5, 1000, "🛡️", "High HP, very sturdy."),
    Job("MAGE", "Mage", -20, 100, 10, 1000, "🧙", "High MP and aggressive."),
    Job("ASSASSIN", "Assassin", 20, 20, 20, 2500, "🥷", "High attack power."),
    Job("BERSERKER", "Berserker", 200, -30, 30, 5000, "👹", "Overwhelming physique."),
)

JELLY_PRICE = 100
ELIXIR_PRICE = 150
GACHA_PRICE = 300


def _index(items) -> Dict[str, object]:
    return {x.id: x for x in items}


_DUNGEONS_BY_ID = _index(DUNGEONS)
_WEAPONS_BY_ID = _index(WEAPONS)
_JOBS_BY_ID = _index(JOBS)
_ULTIMATES_BY_ID = _index(ULTIMATES)


def find_theme(theme_id: str) -> Optional[DungeonTheme]:
    return _DUNGEONS_BY_ID.get(str(theme_id))  # type: ignore[return-value]


def find_weapon(weapon_id: str) -> Optional[Weapon]:
    return _WEAPONS_BY_ID.get(str(weapon_id))  # type: ignore[return-value]


def find_job(job_id: str) -> Optional[Job]:
    return _JOBS_BY_ID.get(str(job_id))  # type: ignore[return-value]


def find_ultimate(ult_id: str) -> Optional[Ultimate]:
    return _ULTIMATES_BY_ID.get(str(ult_id))  # type: ignore[return-value]


def get_weapon(weapon_id: str) -> Weapon:
    return find_weapon(weapon_id) or WEAPONS[0]


def get_job(job_id: str) -> Job:
    return find_job(job_id) or JOBS[0]


def get_ultimate(ult_id: str) -> Ultimate:
    """Unknown or unequipped ids resolve to the first ultimate."""
    return find_ultimate(ult_id) or ULTIMATES[0]
