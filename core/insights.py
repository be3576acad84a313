"""
core.insights
Read-only helpers: meter -> tier band, effective state -> drivers / bottleneck.

The tier table is public contract: UI and tests depend on the exact boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import DEFAULT_CONFIG, MeterConfig
from .state import DIMENSION_LABELS, DIMENSIONS, Delta, EffectiveState


@dataclass(frozen=True)
class MeterTier:
    tier: str
    emoji: str
    low: int
    high: int

    @property
    def range(self) -> str:
        return f"{self.low}-{self.high}"


# Inclusive on both ends; together they partition 0..100.
TIERS: Tuple[MeterTier, ...] = (
    MeterTier("Scrappy Mode", "🚧", 0, 29),
    MeterTier("Finding Fit", "🌱", 30, 49),
    MeterTier("Gaining Steam", "⚡", 50, 69),
    MeterTier("Scaling Up", "🚀", 70, 84),
    MeterTier("Breakout Trajectory", "🦄", 85, 100),
)


def get_meter_tier(meter: int) -> MeterTier:
    m = int(meter)
    for t in TIERS:
        if t.low <= m <= t.high:
            return t
    # out-of-range input: pin to the nearest band
    return TIERS[0] if m < TIERS[0].low else TIERS[-1]


@dataclass(frozen=True)
class Insights:
    top_drivers: List[str]
    bottleneck: Optional[str] = None


def get_insights(effective: EffectiveState, last_delta: Delta, config: MeterConfig = DEFAULT_CONFIG) -> Insights:
    """Top two dimensions are drivers.

    The weakest dimension is a bottleneck only if it is below config.bottleneck_threshold and
    was not just improved (its last delta component <= 0).
    """
    ranked = sorted(DIMENSIONS, key=lambda k: float(getattr(effective, k)), reverse=True)
    drivers = [DIMENSION_LABELS[k] for k in ranked[:2]]

    lowest = ranked[-1]
    bottleneck: Optional[str] = None
    if float(getattr(effective, lowest)) < float(config.bottleneck_threshold) and int(getattr(last_delta, lowest)) <= 0:
        bottleneck = DIMENSION_LABELS[lowest]
    return Insights(top_drivers=drivers, bottleneck=bottleneck)
