"""
core.selfcheck
Minimal "it runs" proof for the meter core.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import asdict

from .config import DEFAULT_CONFIG
from .effects import (
    apply_delta,
    apply_perfect_storm,
    apply_rubber_band,
    compute_effective,
    roll_special_unluck,
    roll_unluck,
    special_unluck_eligible,
)
from .insights import get_insights, get_meter_tier
from .meter import compute_meter
from .rng import step_rng
from .state import Delta, Option, State

# A/B deltas per step, alternating choice
SMOKE_PATH = (
    (Delta(R=10, U=4, I=-2), Option.A),
    (Delta(C=8, U=-2), Option.B),
    (Delta(U=6, R=5, S=-3), Option.A),
    (Delta(C=7, I=4, S=-5), Option.B),
    (Delta(U=6, C=5), Option.A),
)


def run_five_step_smoke(seed: int = 42) -> State:
    config = DEFAULT_CONFIG
    state = State()
    last_meter = 0
    rubber_band = False

    for i, (delta, option) in enumerate(SMOKE_PATH):
        rng = step_rng(seed, i)
        if rubber_band:
            state = apply_rubber_band(state, config)

        roll = roll_unluck(delta, rng, config)
        d = roll.delta
        special = False
        if roll.applied and special_unluck_eligible(i + 1, option, config):
            special, d = roll_special_unluck(d, rng, config)
        state = apply_delta(state, d)
        if special:
            state = apply_perfect_storm(state, config)

        eff = compute_effective(state, config)
        result = compute_meter(eff, last_meter, rng, config)
        last_meter, rubber_band = result.meter, result.rubber_band

        # invariants
        assert 0 <= result.meter <= 100
        assert all(v >= 0.0 for v in asdict(eff).values())
        assert result.momentum in (0, config.momentum_bonus)
        lo, hi = config.randomness_range
        assert lo <= result.randomness <= hi
        for k in ("R", "U", "S", "C", "I"):
            if getattr(delta, k) <= 0 and not special:
                assert getattr(d, k) == getattr(delta, k)

    tier = get_meter_tier(last_meter)
    print("OK: 5-step core smoke test passed.")
    print("Final state:", asdict(state))
    print("Final meter:", last_meter, f"({tier.tier})")
    print("Insights:", get_insights(compute_effective(state, config), SMOKE_PATH[-1][0], config))
    return state


if __name__ == "__main__":
    run_five_step_smoke()
