from __future__ import annotations

import random

import pytest

from core.catalog import DUNGEONS, JOBS, ULTIMATES, WEAPONS
from core.combat import HeroAction
from core.economy import StatKind
from core.modes import Difficulty, is_boss_floor
from core.state import hero_invariants_hold
from engine.config import EngineConfig
from engine.run import Command, RunEngine, RunState

ARGS = {
    Command.CHOOSE_THEME: [t.id for t in DUNGEONS] + ["NOWHERE"],
    Command.CHOOSE_DIFFICULTY: [d.value for d in Difficulty] + ["insane"],
    Command.HERO_ACTION: [a.value for a in HeroAction],
    Command.BUY_WEAPON: [w.id for w in WEAPONS],
    Command.CHANGE_JOB: [j.id for j in JOBS],
    Command.SWITCH_ULTIMATE: [u.id for u in ULTIMATES],
    Command.ALLOCATE_STAT: [s.value for s in StatKind],
}

# weighted toward progress so runs get past the first few floors
WEIGHTED = (
    [Command.HERO_ACTION] * 12
    + [Command.ADVANCE_FLOOR, Command.ALLOCATE_STAT] * 3
    + [Command.SELECT_ADVENTURE, Command.CHOOSE_THEME, Command.CHOOSE_DIFFICULTY] * 2
    + list(Command)
)


@pytest.mark.parametrize("seed", [1, 7, 99, 2024])
def test_random_command_streams_keep_run_consistent(seed: int) -> None:
    picker = random.Random(seed)
    engine = RunEngine(EngineConfig(base_seed=seed))

    for _ in range(1500):
        cmd = picker.choice(WEIGHTED)
        arg = picker.choice(ARGS[cmd]) if cmd in ARGS else None
        engine.dispatch(cmd, arg)
        if engine.processing and picker.random() < 0.7:
            engine.resolve_continuation()

        assert hero_invariants_hold(engine.hero), engine.hero
        assert isinstance(engine.state, RunState)
        if engine.monster is not None:
            assert engine.monster.is_boss == is_boss_floor(engine.floor)
            assert 0 <= engine.monster.hp <= engine.monster.max_hp
        if engine.state != RunState.BATTLE:
            assert engine.monster is None


def test_processing_lock_rejects_every_battle_and_shop_command() -> None:
    engine = RunEngine(EngineConfig(base_seed=5))
    engine.select_adventure()
    engine.choose_theme("FIRE")
    engine.choose_difficulty("EASY")
    assert engine.processing

    before = engine.snapshot()
    for action in HeroAction:
        assert not engine.hero_action(action).accepted
    assert not engine.advance_floor().accepted
    after = engine.snapshot()

    assert before.hero == after.hero
    assert before.floor == after.floor
    assert before.pending == after.pending
