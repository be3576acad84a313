"""Scaling Meter (Streamlit)

UI/Experience

Principles:
- UI only renders + triggers.
- Core domain and engine are pure Python modules.
- Every run is reproducible from its seed; exports resume bit-for-bit.

Entry point: streamlit run app.py
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import streamlit as st

from content.default_pack import get_default_pack
from content.narration import commentary_for_tier, describe_delta, ending_for_tier, unluck_message_for
from content.schemas import ContentPack
from core.config import DEFAULT_CONFIG, MeterConfig, config_from_mapping
from core.insights import get_insights, get_meter_tier
from core.rng import generate_seed, rng_from
from core.state import DIMENSION_LABELS, Delta, MeterResult, RunState, state_to_dict
from engine.config import EngineConfig
from engine.pipeline import initialize_run_state, step_update
from engine.run_log import dumps_run_export, loads_run_export, make_run_export

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s")
logger = logging.getLogger("scaling_meter.app")

APP_TITLE = "Scaling Meter"
APP_SUBTITLE = "Five steps, two choices each. Grow the startup; the meter decides your ending."
APP_VERSION = "1.0.0"

st.set_page_config(page_title=APP_TITLE, page_icon="🚀", layout="wide", initial_sidebar_state="expanded")


# =========================
# Helpers
# =========================


def _meter_config() -> MeterConfig:
    """Optional tuning from st.secrets['meter']; defaults otherwise."""
    try:
        raw = st.secrets.get("meter")
    except FileNotFoundError:
        raw = None
    if not raw:
        return DEFAULT_CONFIG
    try:
        return config_from_mapping(raw)
    except ValueError as e:
        logger.warning("ignoring invalid meter config in secrets: %s", e)
        return DEFAULT_CONFIG


def _pack() -> ContentPack:
    return get_default_pack()


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "started" not in ss:
        ss.started = False
    if "seed_text" not in ss:
        ss.seed_text = ""
    if "engine_config" not in ss:
        ss.engine_config = None
    if "run_state" not in ss:
        ss.run_state = None
    if "choices" not in ss:
        ss.choices = []
    if "show_feedback" not in ss:
        ss.show_feedback = False


def _reset_run() -> None:
    ss = st.session_state
    keep = {"last_import": ss.get("last_import", "")}
    for k in list(ss.keys()):
        del ss[k]
    for k, v in keep.items():
        ss[k] = v
    _ensure_state()


def _start_run(seed: Optional[int] = None) -> None:
    ss = st.session_state
    seed = generate_seed() if seed is None else int(seed)
    ss.engine_config = EngineConfig(seed=seed, meter=_meter_config())
    ss.run_state = initialize_run_state(seed)
    ss.choices = []
    ss.show_feedback = False
    ss.started = True
    logger.info("run started seed=%s", seed)


def _resume(payload: Mapping[str, Any]) -> None:
    ss = st.session_state
    rs: RunState = payload["run_state"]
    ss.engine_config = EngineConfig(seed=rs.seed, meter=payload["config"])
    ss.run_state = rs
    ss.choices = [r.option for r in rs.history]
    ss.show_feedback = False
    ss.started = True


# =========================
# UI Pages
# =========================


def page_setup() -> None:
    ss = st.session_state
    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)
    st.markdown("""
    ### How to play
    - Each step shows a situation and two options (A/B).
    - Every option moves five hidden dimensions: Revenue, Users, Reliability, Customer Love, Investors.
    - Sometimes luck turns against you. Strong play still wins out.
    """)
    ss.seed_text = st.text_input("Seed (optional, for a reproducible run)", value=str(ss.get("seed_text", "")))
    if st.button("Start", type="primary"):
        txt = str(ss.seed_text or "").strip()
        if txt and not txt.isdigit():
            st.error("Seed must be a non-negative integer.")
            return
        _start_run(int(txt) if txt else None)
        st.rerun()


def _meter_header(rs: RunState) -> None:
    tier = get_meter_tier(rs.last_meter)
    a, b, c = st.columns([1.0, 1.0, 2.0])
    a.metric("Step", f"{min(rs.step_count + 1, 5)}/5")
    prev = rs.history[-2].meter if len(rs.history) >= 2 else None
    b.metric("Meter", f"{rs.last_meter}", delta=None if prev is None else rs.last_meter - prev)
    c.progress(rs.last_meter / 100.0, text=f"{tier.emoji} {tier.tier} ({tier.range})")


def page_step() -> None:
    ss = st.session_state
    cfg: EngineConfig = ss.engine_config
    rs: RunState = ss.run_state
    pack = _pack()
    step = pack.step(rs.step_count + 1)

    st.title(APP_TITLE)
    _meter_header(rs)
    st.markdown(f"## Step {step.id}: {step.title}")
    if step.subtitle:
        st.caption(step.subtitle)
    st.markdown(step.scenario)

    def _on_choose(option: str) -> None:
        ss = st.session_state
        delta = step.choice(option).delta
        ss.run_state, _ = step_update(ss.run_state, delta, option, cfg.meter)
        ss.choices = [*ss.choices, option]
        ss.show_feedback = True

    cols = st.columns(2)
    for col, option in zip(cols, ("A", "B")):
        choice = step.choice(option)
        with col:
            st.markdown(f"#### {option}. {choice.label}")
            st.caption(describe_delta(choice.delta))
            st.markdown(choice.body)
            if st.button(f"Choose {option}", key=f"choose_{step.id}_{option}", use_container_width=True):
                _on_choose(option)
                st.rerun()


def page_feedback() -> None:
    ss = st.session_state
    cfg: EngineConfig = ss.engine_config
    rs: RunState = ss.run_state
    pack = _pack()
    result: MeterResult = rs.history[-1]
    tier = get_meter_tier(result.meter)

    st.title(APP_TITLE)
    _meter_header(rs)

    if result.unluck_applied:
        msg = unluck_message_for(pack, result, cfg.seed)
        pct = round(float(result.luck_factor or 0.0) * 100)
        st.warning(f"**Unluck event: gains reduced.** {msg} (cut to {pct}% this step)")
        if result.special_unluck_applied:
            st.error("**Perfect storm.** The setback hit your users, customers and investors too.")

    commentary_rng = rng_from("commentary", result.step, base_seed=cfg.seed)
    st.markdown(f"> {commentary_for_tier(tier.tier, commentary_rng.random)}")

    step = pack.step(result.step)
    insights = get_insights(result.effective, step.choice(result.option).delta, cfg.meter)
    st.markdown(f"**Top drivers:** {', '.join(insights.top_drivers)}")
    if insights.bottleneck:
        st.markdown(f"**Bottleneck:** {insights.bottleneck}")

    label = "See your ending" if rs.step_count >= cfg.season_length else "Next step"
    if st.button(label, type="primary"):
        ss.show_feedback = False
        st.rerun()


def page_finale() -> None:
    ss = st.session_state
    cfg: EngineConfig = ss.engine_config
    rs: RunState = ss.run_state
    pack = _pack()
    tier = get_meter_tier(rs.last_meter)
    ending = ending_for_tier(tier.tier)

    st.title(f"{tier.emoji} {ending.title}")
    st.markdown(ending.message)
    st.metric("Final meter", rs.last_meter)
    st.line_chart({"meter": [r.meter for r in rs.history]})

    st.markdown("### Your journey")
    for r, option in zip(rs.history, ss.choices):
        step = pack.step(r.step)
        line = f"**Step {r.step}, {option}:** {step.choice(option).label} → {r.meter}"
        if r.unluck_applied:
            line += f"  \n_Unluck: {unluck_message_for(pack, r, cfg.seed)}_"
        st.markdown(line)

    final = get_insights(rs.history[-1].effective, Delta(), cfg.meter)
    st.markdown(f"**What carried you:** {', '.join(final.top_drivers)}")
    with st.expander("Final dimensions"):
        st.json({DIMENSION_LABELS[k]: v for k, v in state_to_dict(rs.state).items()})

    if st.button("Start over", type="primary"):
        _reset_run()
        st.rerun()


def export_import_controls() -> None:
    ss = st.session_state
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Run Export / Import")
    if ss.get("started") and ss.get("run_state") is not None:
        payload: Dict[str, Any] = make_run_export(
            run_state=ss.run_state, config=ss.engine_config.meter, choices=list(ss.choices)
        )
        st.sidebar.download_button(
            "Download run",
            data=dumps_run_export(payload).encode("utf-8"),
            file_name=f"scaling_meter_run_{ss.run_state.seed}.json",
            mime="application/json",
        )

    up = st.sidebar.file_uploader("Resume a run", type=["json"], accept_multiple_files=False)
    token = f"{up.name}:{up.size}" if up is not None else ""
    if up is not None and token != ss.get("last_import"):
        ss.last_import = token
        try:
            _resume(loads_run_export(up.read().decode("utf-8")))
        except (ValueError, UnicodeDecodeError) as e:
            # corrupted export -> fresh run
            logger.warning("run import failed: %s", e)
            st.sidebar.error(f"Import failed, starting fresh: {e}")
            _reset_run()
        else:
            st.sidebar.success("Run resumed.")
        st.rerun()


def sidebar() -> None:
    ss = st.session_state
    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")
    if ss.get("started") and ss.get("engine_config") is not None:
        st.sidebar.caption(f"Seed: {ss.engine_config.seed}")
        if st.sidebar.button("Reset run"):
            _reset_run()
            st.rerun()
    export_import_controls()


def main() -> None:
    _ensure_state()
    sidebar()
    ss = st.session_state
    if not ss.started:
        page_setup()
        return
    rs: RunState = ss.run_state
    if ss.show_feedback:
        page_feedback()
    elif rs.step_count >= ss.engine_config.season_length:
        page_finale()
    else:
        page_step()


main()
