"""engine.run

Run state machine + command surface (headless).

Responsibilities:
- Gate every command on the current RunState and the processing lock
- Route accepted commands to core.combat / core.economy / core.loot
- Model delayed steps (monster generation, enemy counter-turn, defeat,
  gacha reveal) as one pending continuation fired by resolve_continuation()

Rejected commands are no-ops that return CommandResult(accepted=False) and add a
log line. Nothing here raises to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from content.providers.base import MonsterProvider
from core.catalog import DUNGEONS, DungeonTheme, GACHA_PRICE, find_theme
from core.combat import HeroAction, resolve_enemy_turn, resolve_hero_action, resolve_victory
from core.economy import (
    LedgerResult,
    StatKind,
    allocate_stat,
    buy_elixir,
    buy_jelly,
    buy_weapon,
    change_job,
    switch_ultimate,
)
from core.loot import GachaOutcome, can_afford_gacha, draw_reward, pay_for_gacha
from core.modes import Difficulty, get_difficulty_spec, is_boss_floor, parse_difficulty
from core.rng import RandomSource, rng_from
from core.state import Hero, Monster, default_hero

from .config import EngineConfig
from .logging import LogSource, RunLog
from .pipeline import MonsterFactory


class RunState(str, Enum):
    START = "START"
    SELECT_THEME = "SELECT_THEME"
    SELECT_DIFFICULTY = "SELECT_DIFFICULTY"
    BATTLE = "BATTLE"
    SHOP = "SHOP"
    GAMEOVER = "GAMEOVER"


class ContinuationKind(str, Enum):
    GENERATE_MONSTER = "GENERATE_MONSTER"
    ENEMY_TURN = "ENEMY_TURN"
    DEFEAT = "DEFEAT"
    GACHA_REVEAL = "GACHA_REVEAL"


class Command(str, Enum):
    SELECT_ADVENTURE = "selectAdventure"
    BROWSE_SHOP = "browseShop"
    CHOOSE_THEME = "chooseTheme"
    CHOOSE_DIFFICULTY = "chooseDifficulty"
    BACK_TO_THEMES = "backToThemes"
    HERO_ACTION = "heroAction"
    BUY_WEAPON = "buyWeapon"
    CHANGE_JOB = "changeJob"
    SWITCH_ULTIMATE = "switchUltimate"
    BUY_JELLY = "buyJelly"
    BUY_ELIXIR = "buyElixir"
    PULL_GACHA = "pullGacha"
    ALLOCATE_STAT = "allocateStat"
    ADVANCE_FLOOR = "advanceFloor"
    REQUEST_EXIT = "requestExit"
    CONFIRM_EXIT = "confirmExit"
    CANCEL_EXIT = "cancelExit"
    RETURN_TO_TITLE = "returnToTitle"


@dataclass(frozen=True)
class CommandResult:
    accepted: bool
    message: str = ""


@dataclass(frozen=True)
class RunSnapshot:
    """Everything a renderer needs, as plain data."""

    state: RunState
    hero: Dict[str, Any]
    monster: Optional[Dict[str, Any]]
    floor: int
    difficulty: Difficulty
    theme_id: str
    processing: bool
    pending: Optional[ContinuationKind]
    browsing: bool
    has_allocated_stat: bool
    exit_confirm_open: bool
    gacha_rolling: bool
    gacha: Optional[Dict[str, Any]]
    log: List[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "hero": dict(self.hero),
            "monster": None if self.monster is None else dict(self.monster),
            "floor": int(self.floor),
            "difficulty": self.difficulty.value,
            "theme_id": self.theme_id,
            "processing": bool(self.processing),
            "pending": None if self.pending is None else self.pending.value,
            "browsing": bool(self.browsing),
            "has_allocated_stat": bool(self.has_allocated_stat),
            "exit_confirm_open": bool(self.exit_confirm_open),
            "gacha_rolling": bool(self.gacha_rolling),
            "gacha": None if self.gacha is None else dict(self.gacha),
            "log": list(self.log),
        }


class RunEngine:
    """Single owner of the run. One mutator, at most one pending continuation."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        provider: Optional[MonsterProvider] = None,
        rng: Optional[RandomSource] = None,
        factory: Optional[MonsterFactory] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.rng: RandomSource = rng if rng is not None else rng_from("run", base_seed=int(self.config.base_seed))
        self.factory = factory or MonsterFactory(provider=provider, config=self.config)
        self.log = RunLog()

        self.state = RunState.START
        self.hero: Hero = default_hero()
        self.monster: Optional[Monster] = None
        self.floor = 1
        self.difficulty = Difficulty.NORMAL
        self.theme: DungeonTheme = DUNGEONS[0]
        self.has_allocated_stat = False
        self.browsing = False
        self.exit_confirm_open = False
        self.gacha_outcome: Optional[GachaOutcome] = None

        self._pending: Optional[ContinuationKind] = None
        self._defending = False

    # -------------------------
    # Observation
    # -------------------------

    @property
    def pending(self) -> Optional[ContinuationKind]:
        return self._pending

    @property
    def processing(self) -> bool:
        return self._pending is not None

    @property
    def pending_delay_s(self) -> float:
        delays = {
            ContinuationKind.GENERATE_MONSTER: self.config.generation_delay_s,
            ContinuationKind.ENEMY_TURN: self.config.enemy_turn_delay_s,
            ContinuationKind.DEFEAT: self.config.defeat_delay_s,
            ContinuationKind.GACHA_REVEAL: self.config.gacha_delay_s,
        }
        return float(delays.get(self._pending, 0.0)) if self._pending else 0.0

    def snapshot(self) -> RunSnapshot:
        return RunSnapshot(
            state=self.state,
            hero=self.hero.to_dict(),
            monster=None if self.monster is None else self.monster.to_dict(),
            floor=int(self.floor),
            difficulty=self.difficulty,
            theme_id=self.theme.id,
            processing=self.processing,
            pending=self._pending,
            browsing=self.browsing,
            has_allocated_stat=self.has_allocated_stat,
            exit_confirm_open=self.exit_confirm_open,
            gacha_rolling=self._pending == ContinuationKind.GACHA_REVEAL,
            gacha=None if self.gacha_outcome is None else self.gacha_outcome.to_dict(),
            log=self.log.to_list(),
        )

    # -------------------------
    # Helpers
    # -------------------------

    def _reject(self, message: str) -> CommandResult:
        self.log.add(message, LogSource.SYSTEM)
        return CommandResult(False, message)

    def _accept(self, message: str = "", source: LogSource = LogSource.SYSTEM) -> CommandResult:
        if message:
            self.log.add(message, source)
        return CommandResult(True, message)

    def _from_ledger(self, hero: Hero, res: LedgerResult) -> CommandResult:
        if not res.accepted:
            return self._reject(res.message)
        self.hero = hero
        return self._accept(res.message)

    def _shop_gate(self) -> Optional[CommandResult]:
        if self.state != RunState.SHOP:
            return self._reject("The shop is closed.")
        if self.exit_confirm_open:
            return self._reject("Answer the exit prompt first.")
        if self.processing:
            return self._reject("Please wait...")
        return None

    def _begin_generation(self) -> None:
        spec = get_difficulty_spec(self.difficulty)
        if is_boss_floor(self.floor):
            self.log.add(f"⚠️ Floor {self.floor}: a powerful presence stirs! ({spec.label})", LogSource.SYSTEM)
        else:
            self.log.add(f"Floor {self.floor} [{self.theme.name}] exploring... ({spec.label})", LogSource.SYSTEM)
        self.monster = None
        self._pending = ContinuationKind.GENERATE_MONSTER

    # -------------------------
    # Navigation
    # -------------------------

    def select_adventure(self) -> CommandResult:
        if self.state != RunState.START:
            return self._reject("Cannot start an adventure now.")
        self.state = RunState.SELECT_THEME
        return self._accept()

    def browse_shop(self) -> CommandResult:
        if self.state != RunState.START:
            return self._reject("Cannot browse the shop now.")
        self.browsing = True
        self.gacha_outcome = None
        self.state = RunState.SHOP
        return self._accept()

    def choose_theme(self, theme_id: str) -> CommandResult:
        if self.state != RunState.SELECT_THEME:
            return self._reject("Cannot choose a dungeon now.")
        theme = find_theme(theme_id)
        if theme is None:
            return self._reject(f"Unknown dungeon: {theme_id}")
        self.theme = theme
        self.state = RunState.SELECT_DIFFICULTY
        return self._accept()

    def choose_difficulty(self, level: Any) -> CommandResult:
        if self.state != RunState.SELECT_DIFFICULTY:
            return self._reject("Cannot choose a difficulty now.")
        try:
            difficulty = parse_difficulty(level)
        except ValueError:
            return self._reject(f"Unknown difficulty: {level}")

        self.difficulty = difficulty
        self.browsing = False
        self.hero = default_hero()
        self.floor = 1
        self.has_allocated_stat = False
        self.gacha_outcome = None
        self._defending = False
        self.log.clear()
        self.state = RunState.BATTLE
        self._begin_generation()
        return CommandResult(True)

    def back_to_themes(self) -> CommandResult:
        if self.state != RunState.SELECT_DIFFICULTY:
            return self._reject("Nothing to go back to.")
        self.state = RunState.SELECT_THEME
        return self._accept()

    def request_exit(self) -> CommandResult:
        if self.state in (RunState.START, RunState.GAMEOVER):
            return self._reject("Nothing to leave.")
        self.exit_confirm_open = True
        return self._accept()

    def confirm_exit(self) -> CommandResult:
        if not self.exit_confirm_open:
            return self._reject("No exit to confirm.")
        self.exit_confirm_open = False
        # a paid gacha pull is always revealed; other pending steps are dropped
        if self._pending == ContinuationKind.GACHA_REVEAL:
            self._resolve_gacha()
        self._pending = None
        self.monster = None
        self.browsing = False
        self.state = RunState.START
        return self._accept()

    def cancel_exit(self) -> CommandResult:
        if not self.exit_confirm_open:
            return self._reject("No exit to cancel.")
        self.exit_confirm_open = False
        return self._accept()

    def return_to_title(self) -> CommandResult:
        if self.state == RunState.GAMEOVER or (self.state == RunState.SHOP and self.browsing):
            if self.processing:
                return self._reject("Please wait...")
            self.browsing = False
            self.exit_confirm_open = False
            self.state = RunState.START
            return self._accept()
        return self._reject("Cannot return to the title now.")

    # -------------------------
    # Battle
    # -------------------------

    def hero_action(self, kind: Any) -> CommandResult:
        if self.state != RunState.BATTLE:
            return self._reject("Not in battle.")
        if self.exit_confirm_open:
            return self._reject("Answer the exit prompt first.")
        if self.processing or self.monster is None:
            return self._reject("Please wait...")
        try:
            action = HeroAction(kind)
        except ValueError:
            return self._reject(f"Unknown action: {kind}")

        hero, monster, out = resolve_hero_action(self.hero, self.monster, action, self.rng)
        if not out.accepted:
            return self._reject(out.message)

        self.hero, self.monster = hero, monster
        self.log.add(out.message, LogSource.HERO)

        if out.monster_defeated:
            self._win()
            return CommandResult(True, out.message)

        self._defending = action == HeroAction.DEFEND
        self._pending = ContinuationKind.ENEMY_TURN
        return CommandResult(True, out.message)

    def _win(self) -> None:
        if self.monster is None:
            return
        self.hero, victory = resolve_victory(self.hero, self.monster, self.rng)
        self.log.add(victory.message, LogSource.SYSTEM)
        if victory.boss_bonus:
            self.log.add("🎉 Boss bonus! Ultimate gauge MAX!", LogSource.SYSTEM)
        self.monster = None
        self.browsing = False
        self.has_allocated_stat = False
        self.gacha_outcome = None
        self.state = RunState.SHOP

    # -------------------------
    # Shop
    # -------------------------

    def buy_weapon(self, weapon_id: str) -> CommandResult:
        return self._shop_gate() or self._from_ledger(*buy_weapon(self.hero, weapon_id))

    def change_job(self, job_id: str) -> CommandResult:
        return self._shop_gate() or self._from_ledger(*change_job(self.hero, job_id))

    def switch_ultimate(self, ult_id: str) -> CommandResult:
        return self._shop_gate() or self._from_ledger(*switch_ultimate(self.hero, ult_id))

    def buy_jelly(self) -> CommandResult:
        return self._shop_gate() or self._from_ledger(*buy_jelly(self.hero))

    def buy_elixir(self) -> CommandResult:
        return self._shop_gate() or self._from_ledger(*buy_elixir(self.hero))

    def pull_gacha(self) -> CommandResult:
        gate = self._shop_gate()
        if gate is not None:
            return gate
        if not can_afford_gacha(self.hero):
            return self._reject(f"Not enough gold! ({GACHA_PRICE}G needed)")
        self.hero = pay_for_gacha(self.hero)
        self.gacha_outcome = None
        self._pending = ContinuationKind.GACHA_REVEAL
        return CommandResult(True)

    def allocate_stat(self, kind: Any) -> CommandResult:
        gate = self._shop_gate()
        if gate is not None:
            return gate
        if self.browsing:
            return self._reject("Training is only available between floors.")
        try:
            stat = StatKind(kind)
        except ValueError:
            return self._reject(f"Unknown stat: {kind}")
        hero, res = allocate_stat(self.hero, stat, self.has_allocated_stat)
        if res.accepted:
            self.has_allocated_stat = True
        return self._from_ledger(hero, res)

    def advance_floor(self) -> CommandResult:
        gate = self._shop_gate()
        if gate is not None:
            return gate
        if self.browsing:
            return self._reject("No floor to advance to while browsing.")
        if not self.has_allocated_stat:
            return self._reject("Train a stat before heading down!")
        self.floor += 1
        self.gacha_outcome = None
        self._defending = False
        self.state = RunState.BATTLE
        self._begin_generation()
        return CommandResult(True)

    # -------------------------
    # Continuations
    # -------------------------

    def resolve_continuation(self) -> CommandResult:
        kind = self._pending
        if kind is None:
            return CommandResult(False, "Nothing pending.")
        if kind == ContinuationKind.GENERATE_MONSTER:
            return self._resolve_generation()
        if kind == ContinuationKind.ENEMY_TURN:
            return self._resolve_enemy_turn()
        if kind == ContinuationKind.DEFEAT:
            return self._resolve_defeat()
        return self._resolve_gacha()

    def _resolve_generation(self) -> CommandResult:
        monster = self.factory.generate(self.floor, self.theme, self.difficulty)
        self.monster = monster
        self._pending = None
        if monster.is_boss:
            msg = f"☠️ Boss [{monster.name}] appears!"
        else:
            msg = f"A wild [{monster.name}] appears!"
        self.log.add(msg, LogSource.SYSTEM)
        # generated flavor is tagged AI; offline monsters speak as MONSTER
        source = LogSource.MONSTER if self.factory.used_fallback else LogSource.AI
        self.log.add(f'"{monster.flavor_text}"', source)
        return CommandResult(True, msg)

    def _resolve_enemy_turn(self) -> CommandResult:
        if self.monster is None:
            self._pending = None
            return CommandResult(False, "No monster.")
        self.hero, out = resolve_enemy_turn(self.hero, self.monster, self._defending, self.rng)
        self._defending = False
        self.log.add(out.message, LogSource.HERO if out.dodged else LogSource.MONSTER)
        if out.hero_defeated:
            self.log.add("💀 You have fallen...", LogSource.SYSTEM)
            self._pending = ContinuationKind.DEFEAT
        else:
            self._pending = None
        return CommandResult(True, out.message)

    def _resolve_defeat(self) -> CommandResult:
        self._pending = None
        self.monster = None
        self.exit_confirm_open = False
        self.state = RunState.GAMEOVER
        return CommandResult(True, "GAME OVER")

    def _resolve_gacha(self) -> CommandResult:
        self.hero, out = draw_reward(self.hero, self.rng)
        self.gacha_outcome = out
        self._pending = None
        self.log.add(f"[Gacha] {out.text}", LogSource.SYSTEM)
        return CommandResult(True, out.text)

    def drain(self, limit: int = 8) -> List[CommandResult]:
        """Fire pending continuations back to back (headless drivers, tests)."""
        results: List[CommandResult] = []
        while self._pending is not None and len(results) < limit:
            results.append(self.resolve_continuation())
        return results

    # -------------------------
    # Tagged dispatch
    # -------------------------

    def dispatch(self, command: Any, arg: Any = None) -> CommandResult:
        try:
            cmd = Command(command)
        except ValueError:
            return self._reject(f"Unknown command: {command}")

        no_arg: Dict[Command, Callable[[], CommandResult]] = {
            Command.SELECT_ADVENTURE: self.select_adventure,
            Command.BROWSE_SHOP: self.browse_shop,
            Command.BACK_TO_THEMES: self.back_to_themes,
            Command.BUY_JELLY: self.buy_jelly,
            Command.BUY_ELIXIR: self.buy_elixir,
            Command.PULL_GACHA: self.pull_gacha,
            Command.ADVANCE_FLOOR: self.advance_floor,
            Command.REQUEST_EXIT: self.request_exit,
            Command.CONFIRM_EXIT: self.confirm_exit,
            Command.CANCEL_EXIT: self.cancel_exit,
            Command.RETURN_TO_TITLE: self.return_to_title,
        }
        with_arg: Dict[Command, Callable[[Any], CommandResult]] = {
            Command.CHOOSE_THEME: self.choose_theme,
            Command.CHOOSE_DIFFICULTY: self.choose_difficulty,
            Command.HERO_ACTION: self.hero_action,
            Command.BUY_WEAPON: self.buy_weapon,
            Command.CHANGE_JOB: self.change_job,
            Command.SWITCH_ULTIMATE: self.switch_ultimate,
            Command.ALLOCATE_STAT: self.allocate_stat,
        }
        if cmd in no_arg:
            return no_arg[cmd]()
        return with_arg[cmd](arg)
