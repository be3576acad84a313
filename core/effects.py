"""
core.effects
State physics rules:
- delta application (elementwise, no clamping)
- diminishing returns
- Unluck / Special Unluck gain reduction
- rubber-band catch-up

Everything here is pure. Functions that roll dice take the step's rng
callable explicitly and document how many draws they consume.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import DEFAULT_CONFIG, MeterConfig
from .rng import Rng
from .state import DIMENSIONS, Delta, EffectiveState, Option, State, round_half_up


def apply_delta(state: State, delta: Delta) -> State:
    """Apply delta (pure function). No clamps: dimensions are unbounded."""
    return State(
        R=state.R + delta.R,
        U=state.U + delta.U,
        S=state.S + delta.S,
        C=state.C + delta.C,
        I=state.I + delta.I,
    )


def compute_effective(state: State, config: MeterConfig = DEFAULT_CONFIG) -> EffectiveState:
    """max(0, x) ** p per dimension. Negative totals contribute nothing."""
    p = float(config.diminishing_returns)
    return EffectiveState(**{k: _damp(getattr(state, k), p) for k in DIMENSIONS})


def _damp(x: float, p: float) -> float:
    if x <= 0:
        return 0.0
    return float(x) ** p


def apply_rubber_band(state: State, config: MeterConfig = DEFAULT_CONFIG) -> State:
    """Nudge the weaker of S/C after a low-meter step (S wins ties). Draws nothing."""
    bonus = int(config.rubber_band.bonus)
    if state.S <= state.C:
        return replace(state, S=state.S + bonus)
    return replace(state, C=state.C + bonus)


def scale_gains(delta: Delta, factor: float) -> Delta:
    """Scale strictly-positive fields; zero and negative fields are trade-offs and stay as authored."""
    return Delta(**{
        k: (round_half_up(v * factor) if v > 0 else v)
        for k, v in ((k, getattr(delta, k)) for k in DIMENSIONS)
    })


@dataclass(frozen=True)
class UnluckRoll:
    applied: bool
    factor: Optional[float]
    delta: Delta


def roll_unluck(delta: Delta, rng: Rng, config: MeterConfig = DEFAULT_CONFIG) -> UnluckRoll:
    """Consumes 1 draw, or 2 when Unluck fires (trigger, then factor)."""
    spec = config.unluck
    if rng() >= float(spec.probability):
        return UnluckRoll(applied=False, factor=None, delta=delta)
    lo, hi = spec.factor_range
    factor = float(lo) + rng() * (float(hi) - float(lo))
    return UnluckRoll(applied=True, factor=factor, delta=scale_gains(delta, factor))


def special_unluck_eligible(step: int, option: Option, config: MeterConfig = DEFAULT_CONFIG) -> bool:
    """Step (1-indexed) and option gate. Regular Unluck must also have fired; the caller checks that."""
    spec = config.special_unluck
    return bool(spec.enabled) and int(step) == int(spec.step) and Option.parse(option) == Option.parse(spec.option)


def roll_special_unluck(delta: Delta, rng: Rng, config: MeterConfig = DEFAULT_CONFIG) -> Tuple[bool, Delta]:
    """Consumes 1 draw. On hit, the already-scaled delta is scaled again by gains_factor."""
    spec = config.special_unluck
    if rng() >= float(spec.probability):
        return False, delta
    return True, scale_gains(delta, float(spec.gains_factor))


def apply_perfect_storm(state: State, config: MeterConfig = DEFAULT_CONFIG) -> State:
    """Haircut accumulated U/C/I totals after the delta lands. R and S are untouched."""
    spec = config.special_unluck
    return replace(
        state,
        U=round_half_up(state.U * (1.0 - float(spec.users_reduction))),
        C=round_half_up(state.C * (1.0 - float(spec.customers_reduction))),
        I=round_half_up(state.I * (1.0 - float(spec.investors_reduction))),
    )
