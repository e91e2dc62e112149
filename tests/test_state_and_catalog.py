from __future__ import annotations

from dataclasses import replace

from core.catalog import DUNGEONS, JOBS, ULTIMATES, WEAPONS, find_job, get_ultimate
from core.modes import Difficulty, difficulty_rating, get_difficulty_spec, is_boss_floor, parse_difficulty
from core.state import default_hero, effective_atk, effective_max_hp, effective_max_mp, hero_invariants_hold


def test_default_hero_matches_run_start_values() -> None:
    hero = default_hero()

    assert (hero.hp, hero.max_hp, hero.mp, hero.max_mp) == (120, 120, 60, 60)
    assert hero.base_atk == 15
    assert hero.level == 1
    assert hero.ult_charge == 0
    assert hero.gold == 0
    assert (hero.jellies, hero.elixirs) == (3, 1)
    assert hero.weapon_id == "WOOD_SWORD"
    assert hero.job_id == "NOVICE"
    assert hero.equipped_ultimate_id == "METEOR"
    assert hero_invariants_hold(hero)


def test_effective_stats_add_weapon_and_job_bonuses() -> None:
    hero = replace(default_hero(), weapon_id="IRON_SWORD", job_id="KNIGHT")

    assert effective_atk(hero) == 15 + 10 + 5
    assert effective_max_hp(hero) == 120 + 100
    assert effective_max_mp(hero) == 60


def test_negative_job_bonus_lowers_effective_caps() -> None:
    hero = replace(default_hero(), job_id="BERSERKER")

    assert effective_max_hp(hero) == 320
    assert effective_max_mp(hero) == 30


def test_unknown_ultimate_defaults_to_first_entry() -> None:
    assert get_ultimate("NOPE") is ULTIMATES[0]
    assert get_ultimate("").id == "METEOR"


def test_catalog_tables_have_unique_ids() -> None:
    for table in (DUNGEONS, WEAPONS, JOBS, ULTIMATES):
        ids = [x.id for x in table]
        assert len(ids) == len(set(ids))
    assert WEAPONS[0].price == 0 and WEAPONS[0].atk_bonus == 0
    assert find_job("MAGE").hp_bonus == -20


def test_boss_floor_every_fifth_floor() -> None:
    for floor in range(1, 41):
        assert is_boss_floor(floor) == (floor % 5 == 0)


def test_difficulty_table_and_rating() -> None:
    assert get_difficulty_spec(Difficulty.EASY).stat_mult == 0.8
    assert get_difficulty_spec(Difficulty.NORMAL).gold_mult == 1.0
    assert get_difficulty_spec(Difficulty.HARD).stat_mult == 1.5
    assert parse_difficulty("hard") is Difficulty.HARD
    assert difficulty_rating(1) == 15
    assert difficulty_rating(5) == 35
