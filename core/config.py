"""
core.config
Meter tuning (weights / normalization / momentum / luck / catch-up).

Kept in core so balancing lives in one place. Every engine entry point takes
a MeterConfig; nothing below core reaches for a hardcoded constant.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Tuple

from .state import Option


@dataclass(frozen=True)
class Weights:
    R: float = 0.30
    U: float = 0.25
    S: float = 0.20
    C: float = 0.15
    I: float = 0.10  # noqa: E741


@dataclass(frozen=True)
class SigmoidSpec:
    # Tuned via seeded simulations: ~60-75 median final meter, 85+ reachable.
    mu: float = -4.0
    sigma: float = 11.0


@dataclass(frozen=True)
class RubberBandSpec:
    threshold: int = 30
    bonus: int = 2


@dataclass(frozen=True)
class UnluckSpec:
    probability: float = 0.10
    factor_range: Tuple[float, float] = (0.4, 0.7)


@dataclass(frozen=True)
class SpecialUnluckSpec:
    """'Perfect storm': only rolls on top of a regular Unluck at a given step/option."""

    enabled: bool = True
    step: int = 4            # 1-indexed
    option: str = "B"
    probability: float = 0.5
    gains_factor: float = 0.5
    users_reduction: float = 0.5
    customers_reduction: float = 0.7
    investors_reduction: float = 0.4


@dataclass(frozen=True)
class MeterConfig:
    weights: Weights = field(default_factory=Weights)
    sigmoid: SigmoidSpec = field(default_factory=SigmoidSpec)
    diminishing_returns: float = 0.9
    momentum_bonus: int = 3
    randomness_range: Tuple[int, int] = (-5, 5)
    rubber_band: RubberBandSpec = field(default_factory=RubberBandSpec)
    unluck: UnluckSpec = field(default_factory=UnluckSpec)
    special_unluck: SpecialUnluckSpec = field(default_factory=SpecialUnluckSpec)
    bottleneck_threshold: float = 10.0  # insights only; never feeds the meter


DEFAULT_CONFIG = MeterConfig()


_NESTED = {
    "weights": Weights,
    "sigmoid": SigmoidSpec,
    "rubber_band": RubberBandSpec,
    "unluck": UnluckSpec,
    "special_unluck": SpecialUnluckSpec,
}

_PAIRS = {"randomness_range", "factor_range"}
_INTS = {"momentum_bonus", "threshold", "bonus", "step"}
_UNIT = {"probability", "gains_factor", "users_reduction", "customers_reduction", "investors_reduction"}
_POSITIVE = {"sigma", "diminishing_returns"}


def with_overrides(config: MeterConfig = DEFAULT_CONFIG, **changes: Any) -> MeterConfig:
    """Shallow override helper for tuning and tests.

    Nested sections can be passed as dicts: with_overrides(unluck={"probability": 1.0}).
    Every leaf is type/range checked; anything malformed raises ValueError.
    """
    known = {f.name for f in fields(MeterConfig)}
    unknown = set(changes) - known
    if unknown:
        raise ValueError(f"MeterConfig: unknown keys {sorted(unknown)}")
    out: Dict[str, Any] = {}
    for k, v in changes.items():
        if k in _NESTED:
            cls = _NESTED[k]
            if isinstance(v, cls):
                v = asdict(v)
            if not isinstance(v, Mapping):
                raise ValueError(f"MeterConfig.{k} must be a mapping")
            out[k] = _build(cls, v, base=getattr(config, k))
        else:
            out[k] = _leaf("MeterConfig", k, v)
    return replace(config, **out)


def _is_number(v: Any) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return isinstance(v, int) or math.isfinite(v)


def _pair(where: str, v: Any) -> Tuple[Any, Any]:
    try:
        lo, hi = v
    except (TypeError, ValueError) as e:
        raise ValueError(f"{where} must be a [low, high] pair") from e
    if not (_is_number(lo) and _is_number(hi)):
        raise ValueError(f"{where} bounds must be numbers")
    if lo > hi:
        raise ValueError(f"{where}: lower bound {lo} exceeds upper bound {hi}")
    return (lo, hi)


def _leaf(owner: str, name: str, v: Any) -> Any:
    where = f"{owner}.{name}"
    if name in _PAIRS:
        return _pair(where, v)
    if name == "enabled":
        if not isinstance(v, bool):
            raise ValueError(f"{where} must be true/false")
        return v
    if name == "option":
        return Option.parse(v).value
    if name in _INTS:
        if not isinstance(v, int) or isinstance(v, bool):
            raise ValueError(f"{where} must be an int")
        return v
    if not _is_number(v):
        raise ValueError(f"{where} must be a number")
    if name in _UNIT and not 0.0 <= v <= 1.0:
        raise ValueError(f"{where} must be within [0, 1]")
    if name in _POSITIVE and v <= 0:
        raise ValueError(f"{where} must be > 0")
    return v


def _build(cls: Any, data: Mapping[str, Any], *, base: Any) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"{cls.__name__}: unknown keys {sorted(map(str, unknown))}")
    kw = {k: _leaf(cls.__name__, k, v) for k, v in data.items()}
    return replace(base, **kw)


def config_from_mapping(data: Mapping[str, Any], base: MeterConfig = DEFAULT_CONFIG) -> MeterConfig:
    """Build a MeterConfig from a nested dict (JSON / st.secrets), starting from `base`."""
    if not isinstance(data, Mapping):
        raise ValueError("meter config must be a mapping")
    unknown = set(data) - {f.name for f in fields(MeterConfig)}
    if unknown:
        raise ValueError(f"MeterConfig: unknown keys {sorted(map(str, unknown))}")
    return with_overrides(base, **dict(data))


def config_to_dict(config: MeterConfig) -> Dict[str, Any]:
    d = asdict(config)
    d["randomness_range"] = list(config.randomness_range)
    d["unluck"]["factor_range"] = list(config.unluck.factor_range)
    return d
