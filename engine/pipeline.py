"""engine.pipeline

Core step flow (headless).

Responsibilities:
- Derive the step's RNG from (seed, step_count)
- Apply pending rubber-band nudge, roll Unluck / Special Unluck, apply the delta
- Score the new state and append to history

This layer is UI-agnostic. The per-step RNG never leaves step_update(),
so callers cannot interleave draws out of order.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from core.config import DEFAULT_CONFIG, MeterConfig
from core.effects import (
    apply_delta,
    apply_perfect_storm,
    apply_rubber_band,
    compute_effective,
    roll_special_unluck,
    roll_unluck,
    special_unluck_eligible,
)
from core.meter import compute_meter
from core.rng import generate_seed, step_rng
from core.state import Delta, MeterResult, Option, RunState, zero_state

logger = logging.getLogger(__name__)


def initialize_run_state(seed: Optional[int] = None) -> RunState:
    return RunState(
        state=zero_state(),
        seed=int(generate_seed() if seed is None else seed),
        last_meter=0,
        step_count=0,
        history=(),
    )


def step_update(
    run_state: RunState,
    delta: Delta,
    option: Option | str,
    config: MeterConfig = DEFAULT_CONFIG,
) -> Tuple[RunState, MeterResult]:
    """Apply one player choice and advance the run.

    Returns (new_run_state, result). The input run_state is left untouched.
    """
    option = Option.parse(option)
    step = int(run_state.step_count) + 1
    rng = step_rng(run_state.seed, run_state.step_count)

    # 1) silent catch-up from the previous low step
    s = run_state.state
    if run_state.history and run_state.history[-1].rubber_band:
        s = apply_rubber_band(s, config)

    # 2) Unluck: trigger draw, then factor draw iff fired
    roll = roll_unluck(delta, rng, config)
    applied = roll.delta

    # 3) Special Unluck only stacks on a regular Unluck at the target step/option
    special = False
    if roll.applied and special_unluck_eligible(step, option, config):
        special, applied = roll_special_unluck(applied, rng, config)

    # 4) delta, then perfect-storm haircuts on the post-delta totals
    s = apply_delta(s, applied)
    if special:
        s = apply_perfect_storm(s, config)

    # 5) score; the randomness draw comes last
    effective = compute_effective(s, config)
    result = compute_meter(effective, run_state.last_meter, rng, config)
    result = replace(
        result,
        unluck_applied=roll.applied,
        luck_factor=roll.factor,
        special_unluck_applied=special,
        step=step,
        option=option.value,
    )

    if roll.applied:
        logger.info("unluck fired seed=%s step=%s factor=%.3f special=%s", run_state.seed, step, roll.factor, special)
    logger.debug(
        "step seed=%s step=%s option=%s meter=%s raw=%.3f momentum=%s randomness=%s rubber_band=%s",
        run_state.seed, step, option.value, result.meter, result.raw,
        result.momentum, result.randomness, result.rubber_band,
    )

    new_run_state = RunState(
        state=s,
        seed=run_state.seed,
        last_meter=result.meter,
        step_count=step,
        history=(*run_state.history, result),
    )
    return new_run_state, result


def play_choices(
    run_state: RunState,
    choices: Iterable[Tuple[Delta, Option | str]],
    config: MeterConfig = DEFAULT_CONFIG,
) -> List[RunState]:
    """Fold a sequence of (delta, option) through step_update.

    Returns every snapshot including the starting one, so index i is the
    state after i steps (handy for undo / replay).
    """
    snapshots = [run_state]
    for delta, option in choices:
        run_state, _ = step_update(run_state, delta, option, config)
        snapshots.append(run_state)
    return snapshots
