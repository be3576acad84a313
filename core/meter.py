"""
core.meter
Effective state -> 0..100 meter.

Order is fixed: raw -> sigmoid -> momentum -> randomness -> clamp -> rubber-band flag.
Exactly one rng draw per call (the randomness step).
"""

from __future__ import annotations

import math

from .config import DEFAULT_CONFIG, MeterConfig
from .rng import Rng
from .state import DIMENSIONS, EffectiveState, MeterResult, clamp, round_half_up


def sigmoid(x: float) -> float:
    return 1.0 / (1.0 + math.exp(-x))


def raw_score(effective: EffectiveState, config: MeterConfig = DEFAULT_CONFIG) -> float:
    w = config.weights
    return sum(float(getattr(w, k)) * float(getattr(effective, k)) for k in DIMENSIONS)


def normalize(raw: float, config: MeterConfig = DEFAULT_CONFIG) -> int:
    sg = config.sigmoid
    return round_half_up(100.0 * sigmoid((raw - float(sg.mu)) / float(sg.sigma)))


def compute_meter(
    effective: EffectiveState,
    last_meter: int,
    rng: Rng,
    config: MeterConfig = DEFAULT_CONFIG,
) -> MeterResult:
    raw = raw_score(effective, config)
    meter = normalize(raw, config)

    # momentum rewards an upward trend only; equal or lower gets nothing
    momentum = 0
    if meter > int(last_meter):
        momentum = int(config.momentum_bonus)
        meter += momentum

    lo, hi = config.randomness_range
    randomness = round_half_up(rng() * (float(hi) - float(lo)) + float(lo))
    meter += randomness

    meter = int(clamp(meter, 0, 100))

    return MeterResult(
        meter=meter,
        raw=float(raw),
        effective=effective,
        momentum=momentum,
        randomness=randomness,
        rubber_band=meter < int(config.rubber_band.threshold),
    )
