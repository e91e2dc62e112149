"""Abyss Crawler (Streamlit)

UI/Experience

Principles:
- UI only renders + triggers.
- Rules live in core/ and engine/; this file renders RunEngine.snapshot() and
  forwards button clicks as commands.
- Monster flavor comes from Gemini. If it fails the engine silently uses an
  offline monster; the player only notices a plainer name.

Entry point for Streamlit Cloud: app.py
"""

from __future__ import annotations

import os
import time
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict

import streamlit as st

from content.providers.base import ProviderStatus
from content.providers.gemini import GeminiProvider
from core.catalog import DUNGEONS, ELIXIR_PRICE, GACHA_PRICE, JELLY_PRICE, JOBS, ULTIMATES, WEAPONS, get_job, get_ultimate, get_weapon
from core.combat import HeroAction
from core.economy import StatKind
from core.modes import DIFFICULTIES
from engine.config import EngineConfig
from engine.logging import dumps_run_export, make_run_export
from engine.run import RunEngine, RunState

APP_TITLE = "Abyss Crawler"
APP_SUBTITLE = "Pick a dungeon, fight floor by floor, spend your gold between fights."
APP_VERSION = "1.0.0"

st.set_page_config(page_title=APP_TITLE, page_icon="🗡️", layout="wide", initial_sidebar_state="expanded")

CSS = """
<style>
.block-container {padding-top: 3.2rem; padding-bottom: 2rem;}
.card {
  border: 1px solid rgba(255,255,255,0.08);
  border-radius: 16px;
  padding: 14px 16px;
  background: rgba(255,255,255,0.03);
}
.log-line {font-size: 14px; margin: 2px 0;}
.log-SYSTEM {opacity: .8;}
.log-HERO {color: #8fd3ff;}
.log-MONSTER {color: #ff9a9a;}
.log-AI {color: #d8b4fe;}
.muted {opacity:.75;}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)


# =========================
# Helpers
# =========================


def _now_id() -> str:
    return datetime.utcnow().strftime("%Y%m%d%H%M%S%f")


def _get_api_key() -> str:
    # Streamlit Cloud: st.secrets
    try:
        if "GEMINI_API_KEY" in st.secrets:
            return str(st.secrets["GEMINI_API_KEY"])  # type: ignore
    except FileNotFoundError:
        pass
    # Local
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""


def _provider(cfg: EngineConfig) -> GeminiProvider:
    return GeminiProvider.from_api_key_string(_get_api_key(), model=cfg.model, timeout_s=cfg.request_timeout_s)


def _provider_status(engine: RunEngine) -> ProviderStatus:
    provider = engine.factory.provider
    if provider is None:
        return ProviderStatus(False, "none", "", error="no provider")
    return provider.status()


def _bar(label: str, value: int, maximum: int) -> None:
    pct = 0.0 if maximum <= 0 else max(0.0, min(1.0, value / maximum))
    st.progress(pct, text=f"{label} {value}/{maximum}")


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "run_id" not in ss:
        ss.run_id = _now_id()
    if "base_seed" not in ss:
        ss.base_seed = 42
    if "engine" not in ss:
        cfg = EngineConfig(base_seed=int(ss.base_seed))
        ss.engine = RunEngine(cfg, provider=_provider(cfg))


def _reset_engine() -> None:
    ss = st.session_state
    ss.run_id = _now_id()
    cfg = EngineConfig(base_seed=int(ss.base_seed))
    ss.engine = RunEngine(cfg, provider=_provider(cfg))


def _send(method: str, *args: Any) -> None:
    engine: RunEngine = st.session_state.engine
    getattr(engine, method)(*args)
    st.rerun()


def _drive_continuation() -> None:
    """Wait the configured delay, fire the pending step, repaint."""
    engine: RunEngine = st.session_state.engine
    if not engine.processing:
        return
    with st.spinner("..."):
        time.sleep(engine.pending_delay_s)
        engine.resolve_continuation()
    st.rerun()


# =========================
# Pages
# =========================


def page_start(engine: RunEngine) -> None:
    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)
    c1, c2 = st.columns(2)
    with c1:
        if st.button("⚔️ Adventure", use_container_width=True):
            _send("select_adventure")
    with c2:
        if st.button("🛒 Shop", use_container_width=True):
            _send("browse_shop")


def page_select_theme(engine: RunEngine) -> None:
    st.subheader("Choose a dungeon")
    cols = st.columns(len(DUNGEONS))
    for col, theme in zip(cols, DUNGEONS):
        with col:
            st.markdown(f"<div class='card'><h3>{theme.emoji} {theme.name}</h3><p class='muted'>{theme.description}</p></div>", unsafe_allow_html=True)
            if st.button("Enter", key=f"theme_{theme.id}", use_container_width=True):
                _send("choose_theme", theme.id)


def page_select_difficulty(engine: RunEngine) -> None:
    st.subheader(f"{engine.theme.emoji} {engine.theme.name}: choose a difficulty")
    cols = st.columns(len(DIFFICULTIES))
    for col, spec in zip(cols, DIFFICULTIES.values()):
        with col:
            st.markdown(f"<div class='card'><h3>{spec.label}</h3><p class='muted'>{spec.desc}</p></div>", unsafe_allow_html=True)
            if st.button(spec.label, key=f"diff_{spec.key.value}", use_container_width=True):
                _send("choose_difficulty", spec.key)
    if st.button("⬅️ Back"):
        _send("back_to_themes")


def _hero_panel(snap: Dict[str, Any]) -> None:
    h = snap["hero"]
    job = get_job(h["job_id"])
    weapon = get_weapon(h["weapon_id"])
    ult = get_ultimate(h["equipped_ultimate_id"])
    st.markdown(f"**{h['name']}** · Lv.{h['level']} · {job.emoji} {job.name} · {weapon.emoji} {weapon.name}")
    _bar("HP", h["hp"], h["effective_max_hp"])
    _bar("MP", h["mp"], h["effective_max_mp"])
    _bar(f"{ult.emoji} {ult.name}", h["ult_charge"], 100)
    st.caption(f"ATK {h['effective_atk']} · 💰 {h['gold']}G · 🍬 {h['jellies']} · 🧪 {h['elixirs']}")


def page_battle(engine: RunEngine) -> None:
    snap = engine.snapshot().to_dict()
    st.subheader(f"{engine.theme.emoji} Floor {snap['floor']} · {snap['difficulty']}")

    left, right = st.columns(2)
    with left:
        _hero_panel(snap)
    with right:
        m = snap["monster"]
        if m is None:
            st.info("Something approaches...")
        else:
            tag = "☠️ BOSS " if m["is_boss"] else ""
            st.markdown(f"### {m['emoji']} {tag}{m['name']}")
            _bar("HP", m["hp"], m["max_hp"])
            st.caption(f"ATK {m['atk']} · reward {m['reward_gold']}G")

    labels = {
        HeroAction.ATTACK: "🗡️ Attack",
        HeroAction.FIREBALL: "🔥 Fireball (15 MP)",
        HeroAction.ITEM: "🍬 Jelly",
        HeroAction.ELIXIR: "🧪 Elixir",
        HeroAction.DEFEND: "🛡️ Defend",
        HeroAction.ULTIMATE: "🌟 Ultimate",
    }
    cols = st.columns(len(labels))
    for col, (action, label) in zip(cols, labels.items()):
        with col:
            if st.button(label, key=f"act_{action.value}", disabled=snap["processing"], use_container_width=True):
                _send("hero_action", action)


def page_shop(engine: RunEngine) -> None:
    snap = engine.snapshot().to_dict()
    title = "🛒 Shop" if snap["browsing"] else f"🛒 Rest stop after floor {snap['floor']}"
    st.subheader(title)
    _hero_panel(snap)
    busy = snap["processing"]

    tab_items, tab_weapons, tab_jobs, tab_skills = st.tabs(["Items", "Weapons", "Jobs", "Skills"])

    with tab_items:
        c1, c2, c3 = st.columns(3)
        with c1:
            if st.button(f"🍬 Jelly ({JELLY_PRICE}G)", disabled=busy, use_container_width=True):
                _send("buy_jelly")
        with c2:
            if st.button(f"🧪 Elixir ({ELIXIR_PRICE}G)", disabled=busy, use_container_width=True):
                _send("buy_elixir")
        with c3:
            if st.button(f"🎰 Gacha ({GACHA_PRICE}G)", disabled=busy, use_container_width=True):
                _send("pull_gacha")
        if snap["gacha_rolling"]:
            st.markdown("**Rolling...**")
        elif snap["gacha"]:
            g = snap["gacha"]
            st.markdown(f"<span style='color:{g['color']}'><b>{g['text']}</b></span>", unsafe_allow_html=True)

    with tab_weapons:
        for w in WEAPONS:
            owned = w.id == snap["hero"]["weapon_id"]
            label = f"{w.emoji} {w.name} (+{w.atk_bonus} ATK) · {w.price}G" + (" ✔" if owned else "")
            if st.button(label, key=f"w_{w.id}", disabled=busy or owned, use_container_width=True):
                _send("buy_weapon", w.id)

    with tab_jobs:
        for j in JOBS:
            current = j.id == snap["hero"]["job_id"]
            label = f"{j.emoji} {j.name} (HP {j.hp_bonus:+}, MP {j.mp_bonus:+}, ATK {j.atk_bonus:+}) · {j.price}G" + (" ✔" if current else "")
            if st.button(label, key=f"j_{j.id}", disabled=busy or current, use_container_width=True):
                _send("change_job", j.id)

    with tab_skills:
        for u in ULTIMATES:
            locked = snap["hero"]["level"] < u.unlock_level
            label = f"{u.emoji} {u.name} · {u.description}" + (f" (Lv.{u.unlock_level})" if locked else "")
            if st.button(label, key=f"u_{u.id}", disabled=busy or locked, use_container_width=True):
                _send("switch_ultimate", u.id)

    st.markdown("---")
    if snap["browsing"]:
        if st.button("🏠 Back to title", disabled=busy):
            _send("return_to_title")
        return

    st.markdown("**Level up** (once per floor)")
    c1, c2, c3 = st.columns(3)
    done = snap["has_allocated_stat"]
    for col, kind, label in ((c1, StatKind.STR, "💪 STR +4 ATK"), (c2, StatKind.VIT, "❤️ VIT +30 HP"), (c3, StatKind.INT, "🔮 INT +20 MP")):
        with col:
            if st.button(label, key=f"stat_{kind.value}", disabled=busy or done, use_container_width=True):
                _send("allocate_stat", kind)
    if st.button("⬇️ Next floor", disabled=busy or not done, type="primary"):
        _send("advance_floor")


def page_gameover(engine: RunEngine) -> None:
    st.title("💀 GAME OVER")
    st.markdown(f"Reached floor **{engine.floor}** at level **{engine.hero.level}**.")
    if st.button("🏠 Back to title"):
        _send("return_to_title")


def log_panel(engine: RunEngine) -> None:
    st.markdown("#### Log")
    for e in engine.log.tail(14):
        st.markdown(f"<div class='log-line log-{e.source.value}'>{e.text}</div>", unsafe_allow_html=True)


# =========================
# Sidebar
# =========================


def export_controls(engine: RunEngine) -> None:
    ss = st.session_state
    payload = make_run_export(
        seed=int(engine.config.base_seed),
        config=asdict(engine.config),
        snapshot=engine.snapshot().to_dict(),
        log=engine.log.to_list(),
    )
    st.sidebar.download_button(
        "Download run log",
        data=dumps_run_export(payload).encode("utf-8"),
        file_name=f"abyss_run_{ss.get('run_id', 'run')}.json",
        mime="application/json",
    )


def sidebar(engine: RunEngine) -> None:
    ss = st.session_state
    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")
    st.sidebar.markdown("---")

    ss.base_seed = st.sidebar.number_input("Seed", value=int(ss.base_seed), step=1)

    ps = _provider_status(engine)
    if ps.ok:
        st.sidebar.success(f"Gemini ready ({ps.backend} / {ps.model})")
    else:
        st.sidebar.warning("Gemini offline: using offline monsters")
        st.sidebar.caption(ps.error or "API key missing")

    cols = st.sidebar.columns(2)
    with cols[0]:
        if engine.state not in (RunState.START, RunState.GAMEOVER) and st.button("🏠 Home", use_container_width=True):
            _send("request_exit")
    with cols[1]:
        if st.button("Reset", use_container_width=True):
            _reset_engine()
            st.rerun()

    if engine.exit_confirm_open:
        st.sidebar.warning("Return to the title screen? Progress is lost.")
        c1, c2 = st.sidebar.columns(2)
        with c1:
            if st.button("Yes", use_container_width=True):
                _send("confirm_exit")
        with c2:
            if st.button("No", use_container_width=True):
                _send("cancel_exit")

    st.sidebar.markdown("---")
    export_controls(engine)


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    engine: RunEngine = st.session_state.engine
    sidebar(engine)

    pages = {
        RunState.START: page_start,
        RunState.SELECT_THEME: page_select_theme,
        RunState.SELECT_DIFFICULTY: page_select_difficulty,
        RunState.BATTLE: page_battle,
        RunState.SHOP: page_shop,
        RunState.GAMEOVER: page_gameover,
    }
    pages[engine.state](engine)

    if engine.state in (RunState.BATTLE, RunState.SHOP, RunState.GAMEOVER):
        log_panel(engine)

    _drive_continuation()


if __name__ == "__main__":
    main()
