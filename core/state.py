"""
core.state
Core domain data models (UI/content independent).

Five dimensions drive everything:
- R: Revenue Momentum
- U: User Growth / Activation
- S: System Reliability / Scalability
- C: Customer Love (NPS / retention)
- I: Investor Confidence / Story
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


DIMENSIONS: Tuple[str, ...] = ("R", "U", "S", "C", "I")

DIMENSION_LABELS: Dict[str, str] = {
    "R": "Revenue",
    "U": "User Growth",
    "S": "System Reliability",
    "C": "Customer Love",
    "I": "Investor Confidence",
}


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def round_half_up(x: float) -> int:
    """floor(x + 0.5), halves toward +inf (2.5 -> 3, -2.5 -> -2), same as JS Math.round.

    Every rounding in the engine goes through here; builtin round() is banker's rounding.
    Decimal keeps the +0.5 exact for any float input.
    """
    return int((Decimal(x) + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


class Option(str, Enum):
    """The two choices offered at every step."""

    A = "A"
    B = "B"

    @classmethod
    def parse(cls, value: Any) -> "Option":
        if isinstance(value, Option):
            return value
        key = str(value or "").strip().upper()
        if key not in ("A", "B"):
            raise ValueError(f"option must be 'A' or 'B', got {value!r}")
        return cls(key)


@dataclass(frozen=True)
class State:
    """Running totals per dimension. Unbounded integers; may go negative."""

    R: int = 0
    U: int = 0
    S: int = 0
    C: int = 0
    I: int = 0  # noqa: E741


@dataclass(frozen=True)
class Delta:
    """Sparse additive adjustment authored per option (missing fields are 0)."""

    R: int = 0
    U: int = 0
    S: int = 0
    C: int = 0
    I: int = 0  # noqa: E741


@dataclass(frozen=True)
class EffectiveState:
    """State after diminishing returns. Used for scoring only, never persisted as state of record."""

    R: float = 0.0
    U: float = 0.0
    S: float = 0.0
    C: float = 0.0
    I: float = 0.0  # noqa: E741


@dataclass(frozen=True)
class MeterResult:
    """One step's outcome. Appended to RunState.history and never edited."""

    meter: int
    raw: float
    effective: EffectiveState
    momentum: int
    randomness: int
    rubber_band: bool        # meter fell below threshold; consumed by the next step
    unluck_applied: bool = False
    luck_factor: Optional[float] = None
    special_unluck_applied: bool = False
    step: int = 0            # 1-indexed step that produced this result
    option: str = ""


@dataclass(frozen=True)
class RunState:
    """Everything needed to resume a run bit-for-bit.

    Every transition returns a new RunState; old snapshots stay valid for replay/undo.
    """

    state: State
    seed: int
    last_meter: int = 0
    step_count: int = 0
    history: Tuple[MeterResult, ...] = ()


def zero_state() -> State:
    return State()


def state_to_dict(s: Any) -> Dict[str, Any]:
    """Works for State, Delta and EffectiveState alike."""
    return {k: getattr(s, k) for k in DIMENSIONS}


def state_from_mapping(d: Mapping[str, Any]) -> State:
    return State(**{k: int(d.get(k, 0) or 0) for k in DIMENSIONS})


def delta_from_mapping(d: Mapping[str, Any]) -> Delta:
    """Bridge helper for dict-shaped deltas ({'R': 10, 'I': -2})."""
    unknown = set(d) - set(DIMENSIONS)
    if unknown:
        raise ValueError(f"unknown delta fields: {sorted(unknown)}")
    return Delta(**{k: int(d.get(k, 0) or 0) for k in DIMENSIONS})


def effective_from_mapping(d: Mapping[str, Any]) -> EffectiveState:
    return EffectiveState(**{k: float(d.get(k, 0.0) or 0.0) for k in DIMENSIONS})
