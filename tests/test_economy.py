from __future__ import annotations

from dataclasses import replace

from core.economy import StatKind, allocate_stat, buy_elixir, buy_jelly, buy_weapon, change_job, switch_ultimate
from core.state import default_hero, effective_max_hp


def test_buying_equipped_weapon_never_changes_gold() -> None:
    hero = replace(default_hero(), gold=500)

    hero2, res = buy_weapon(hero, "WOOD_SWORD")

    assert not res.accepted
    assert hero2.gold == 500


def test_buy_weapon_requires_gold() -> None:
    hero = replace(default_hero(), gold=99)

    hero2, res = buy_weapon(hero, "RUSTY_DAGGER")

    assert not res.accepted
    assert hero2 == hero


def test_buy_weapon_replaces_without_refund() -> None:
    hero = replace(default_hero(), gold=650, weapon_id="RUSTY_DAGGER")

    hero2, res = buy_weapon(hero, "IRON_SWORD")

    assert res.accepted
    assert res.gold_spent == 500
    assert hero2.gold == 150
    assert hero2.weapon_id == "IRON_SWORD"


def test_unknown_catalog_ids_are_rejected() -> None:
    hero = replace(default_hero(), gold=10_000)

    assert not buy_weapon(hero, "BANANA")[1].accepted
    assert not change_job(hero, "BARD")[1].accepted
    assert not switch_ultimate(hero, "NUKE")[1].accepted


def test_change_job_keeps_hp_when_under_new_cap() -> None:
    hero = replace(default_hero(), gold=1000, hp=90)

    hero2, res = change_job(hero, "MAGE")

    assert res.accepted
    assert effective_max_hp(hero2) == 100
    assert hero2.hp == 90
    assert hero2.gold == 0


def test_change_job_clamps_hp_down_to_new_cap() -> None:
    hero = replace(default_hero(), gold=1000, max_hp=110, hp=95)

    hero2, _ = change_job(hero, "MAGE")

    assert effective_max_hp(hero2) == 90
    assert hero2.hp == 90


def test_change_job_clamps_mp_and_never_refills() -> None:
    hero = replace(default_hero(), gold=5000, hp=50)

    hero2, _ = change_job(hero, "BERSERKER")

    assert hero2.mp == 30
    assert hero2.hp == 50


def test_change_to_current_job_is_a_noop() -> None:
    hero = replace(default_hero(), gold=1000)

    hero2, res = change_job(hero, "NOVICE")

    assert not res.accepted
    assert hero2 == hero


def test_switch_ultimate_respects_unlock_level() -> None:
    hero = default_hero()

    hero2, res = switch_ultimate(hero, "HOLY_LIGHT")
    assert not res.accepted
    assert hero2.equipped_ultimate_id == "METEOR"

    hero3, res3 = switch_ultimate(replace(hero, level=3), "HOLY_LIGHT")
    assert res3.accepted
    assert hero3.equipped_ultimate_id == "HOLY_LIGHT"

    hero4, res4 = switch_ultimate(replace(hero, level=4), "VAMPIRE")
    assert not res4.accepted
    assert hero4.equipped_ultimate_id == "METEOR"


def test_consumable_purchases() -> None:
    hero = replace(default_hero(), gold=260)

    hero, res = buy_jelly(hero)
    assert res.accepted and hero.jellies == 4 and hero.gold == 160

    hero, res = buy_elixir(hero)
    assert res.accepted and hero.elixirs == 2 and hero.gold == 10

    hero2, res = buy_jelly(hero)
    assert not res.accepted and hero2 == hero


def test_allocate_strength() -> None:
    hero, res = allocate_stat(default_hero(), StatKind.STR, already_allocated=False)

    assert res.accepted
    assert hero.base_atk == 19
    assert hero.level == 2


def test_allocate_vitality_heals_within_new_cap() -> None:
    hero = replace(default_hero(), hp=110)

    hero2, _ = allocate_stat(hero, StatKind.VIT, already_allocated=False)

    assert hero2.max_hp == 150
    assert hero2.hp == 140
    assert hero2.level == 2


def test_allocate_intellect_under_negative_job_bonus() -> None:
    hero = replace(default_hero(), job_id="BERSERKER", mp=30)

    hero2, _ = allocate_stat(hero, StatKind.INT, already_allocated=False)

    assert hero2.max_mp == 80
    assert hero2.mp == 50


def test_allocation_is_blocked_once_used() -> None:
    hero = default_hero()

    hero2, res = allocate_stat(hero, StatKind.STR, already_allocated=True)

    assert not res.accepted
    assert hero2 == hero
