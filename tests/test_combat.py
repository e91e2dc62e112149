from __future__ import annotations

from dataclasses import replace

import pytest

from core.combat import HeroAction, dodge_chance, resolve_enemy_turn, resolve_hero_action, resolve_victory
from core.state import Monster, default_hero
from tests.helpers.scripted_rng import ScriptedRng

NO_CRIT = 0.9
MID_ROLL = 0.5  # variance multiplier of exactly 1.0
NO_DODGE = 0.99


def _make_monster(hp: int = 500, atk: int = 20, boss: bool = False, gold: int = 100) -> Monster:
    return Monster(
        name="Frost Yeti",
        hp=hp,
        max_hp=hp,
        atk=atk,
        is_boss=boss,
        reward_gold=gold,
        flavor_text="Brr.",
    )


def test_attack_without_crit_uses_effective_attack() -> None:
    hero = default_hero()
    rng = ScriptedRng(floats=[NO_CRIT, MID_ROLL])

    hero2, monster, out = resolve_hero_action(hero, _make_monster(), HeroAction.ATTACK, rng)

    assert out.accepted
    assert out.damage == 15
    assert not out.is_crit
    assert monster.hp == 485
    assert hero2.ult_charge == 10
    assert rng.exhausted


def test_attack_crit_multiplies_by_one_and_a_half() -> None:
    rng = ScriptedRng(floats=[0.1, MID_ROLL])

    _, monster, out = resolve_hero_action(default_hero(), _make_monster(), HeroAction.ATTACK, rng)

    assert out.is_crit
    assert out.damage == 22
    assert monster.hp == 478


def test_fireball_spends_mp_and_charges_fifteen() -> None:
    hero, monster, out = resolve_hero_action(default_hero(), _make_monster(), HeroAction.FIREBALL, ScriptedRng())

    assert out.damage == 37
    assert hero.mp == 45
    assert hero.ult_charge == 15
    assert monster.hp == 463


def test_fireball_without_mp_is_rejected_without_side_effects() -> None:
    hero = replace(default_hero(), mp=14)
    monster = _make_monster()

    hero2, monster2, out = resolve_hero_action(hero, monster, HeroAction.FIREBALL, ScriptedRng())

    assert not out.accepted
    assert out.message
    assert hero2 == hero
    assert monster2 == monster


def test_jelly_heals_half_of_effective_max_and_clamps() -> None:
    hero = replace(default_hero(), hp=100)

    hero2, _, out = resolve_hero_action(hero, _make_monster(), HeroAction.ITEM, ScriptedRng())

    assert out.heal == 60
    assert hero2.hp == 120
    assert hero2.jellies == 2
    assert hero2.ult_charge == 5


def test_items_rejected_when_out_of_stock() -> None:
    hero = replace(default_hero(), jellies=0, elixirs=0)

    for action in (HeroAction.ITEM, HeroAction.ELIXIR):
        hero2, _, out = resolve_hero_action(hero, _make_monster(), action, ScriptedRng())
        assert not out.accepted
        assert hero2 == hero


def test_elixir_restores_mp_up_to_cap() -> None:
    hero = replace(default_hero(), mp=20)

    hero2, _, out = resolve_hero_action(hero, _make_monster(), HeroAction.ELIXIR, ScriptedRng())

    assert out.accepted
    assert hero2.mp == 60
    assert hero2.elixirs == 0


def test_defend_restores_mp_and_deals_nothing() -> None:
    hero = replace(default_hero(), mp=10)

    hero2, monster, out = resolve_hero_action(hero, _make_monster(), HeroAction.DEFEND, ScriptedRng())

    assert hero2.mp == 25
    assert out.damage == 0
    assert monster.hp == 500
    assert hero2.ult_charge == 5


def test_ultimate_requires_full_charge() -> None:
    hero = replace(default_hero(), ult_charge=99)

    hero2, _, out = resolve_hero_action(hero, _make_monster(), HeroAction.ULTIMATE, ScriptedRng())

    assert not out.accepted
    assert hero2.ult_charge == 99


def test_meteor_deals_six_times_attack() -> None:
    hero = replace(default_hero(), ult_charge=100)

    hero2, monster, out = resolve_hero_action(hero, _make_monster(), HeroAction.ULTIMATE, ScriptedRng())

    assert out.damage == 90
    assert monster.hp == 410
    assert hero2.ult_charge == 0


def test_holy_light_heals_and_restores_mp() -> None:
    hero = replace(
        default_hero(),
        hp=50,
        max_hp=200,
        mp=10,
        max_mp=100,
        level=3,
        ult_charge=100,
        equipped_ultimate_id="HOLY_LIGHT",
    )

    hero2, monster, out = resolve_hero_action(hero, _make_monster(), HeroAction.ULTIMATE, ScriptedRng())

    assert hero2.hp == 200
    assert hero2.mp == 60
    assert hero2.ult_charge == 0
    assert out.damage == 0
    assert monster.hp == 500


def test_vampire_drains_half_of_damage() -> None:
    hero = replace(default_hero(), hp=40, ult_charge=100, equipped_ultimate_id="VAMPIRE", level=5)

    hero2, monster, out = resolve_hero_action(hero, _make_monster(), HeroAction.ULTIMATE, ScriptedRng())

    assert out.damage == 60
    assert out.heal == 30
    assert hero2.hp == 70
    assert monster.hp == 440


def test_unknown_equipped_ultimate_falls_back_to_meteor() -> None:
    hero = replace(default_hero(), ult_charge=100, equipped_ultimate_id="???")

    _, _, out = resolve_hero_action(hero, _make_monster(), HeroAction.ULTIMATE, ScriptedRng())

    assert out.ultimate_id == "METEOR"
    assert out.damage == 90


def test_ult_charge_is_capped_at_one_hundred() -> None:
    hero = replace(default_hero(), ult_charge=95)

    hero2, _, _ = resolve_hero_action(hero, _make_monster(), HeroAction.ATTACK, ScriptedRng(floats=[NO_CRIT, MID_ROLL]))

    assert hero2.ult_charge == 100


def test_lethal_hit_clamps_monster_hp_and_flags_defeat() -> None:
    _, monster, out = resolve_hero_action(
        default_hero(), _make_monster(hp=10), HeroAction.ATTACK, ScriptedRng(floats=[NO_CRIT, MID_ROLL])
    )

    assert monster.hp == 0
    assert out.monster_defeated


def test_victory_grants_reward_plus_bonus() -> None:
    hero, out = resolve_victory(default_hero(), _make_monster(gold=100), ScriptedRng(ints=[7]))

    assert out.gold_earned == 107
    assert hero.gold == 107
    assert hero.ult_charge == 0
    assert not out.boss_bonus


def test_boss_victory_fills_ultimate() -> None:
    hero, out = resolve_victory(default_hero(), _make_monster(boss=True), ScriptedRng(ints=[0]))

    assert out.boss_bonus
    assert hero.ult_charge == 100


def test_dodge_chance_grows_with_level() -> None:
    assert dodge_chance(default_hero()) == pytest.approx(0.055)
    assert dodge_chance(replace(default_hero(), level=11)) == pytest.approx(0.105)


def test_enemy_turn_dodge_deals_nothing() -> None:
    hero = default_hero()

    hero2, out = resolve_enemy_turn(hero, _make_monster(), defending=False, rng=ScriptedRng(floats=[0.05]))

    assert out.dodged
    assert hero2 == hero


def test_enemy_turn_hits_and_charges_ultimate() -> None:
    hero2, out = resolve_enemy_turn(default_hero(), _make_monster(atk=20), False, ScriptedRng(floats=[NO_DODGE, MID_ROLL]))

    assert out.damage == 20
    assert hero2.hp == 100
    assert hero2.ult_charge == 10


def test_defending_halves_damage() -> None:
    hero2, out = resolve_enemy_turn(default_hero(), _make_monster(atk=21), True, ScriptedRng(floats=[NO_DODGE, MID_ROLL]))

    assert out.damage == 10
    assert hero2.hp == 110


def test_zero_damage_does_not_charge_ultimate() -> None:
    hero2, out = resolve_enemy_turn(default_hero(), _make_monster(atk=0), False, ScriptedRng(floats=[NO_DODGE, MID_ROLL]))

    assert out.damage == 0
    assert hero2.ult_charge == 0


def test_lethal_enemy_hit_clamps_hero_hp_at_zero() -> None:
    hero = replace(default_hero(), hp=5)

    hero2, out = resolve_enemy_turn(hero, _make_monster(atk=50), False, ScriptedRng(floats=[NO_DODGE, MID_ROLL]))

    assert hero2.hp == 0
    assert out.hero_defeated
