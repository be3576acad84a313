"""engine.run_log

Helpers for storing run logs.

A run export is JSON-serializable so it can be exported/imported later.
RunState round-trips exactly: same seed + step_count => same future draws,
so a resumed run continues as if never interrupted.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from core.config import MeterConfig, config_from_mapping, config_to_dict
from core.state import (
    MeterResult,
    RunState,
    effective_from_mapping,
    state_from_mapping,
    state_to_dict,
)

EXPORT_VERSION = 1


def meter_result_to_dict(r: MeterResult) -> Dict[str, Any]:
    return {
        "meter": int(r.meter),
        "raw": float(r.raw),
        "effective": state_to_dict(r.effective),
        "momentum": int(r.momentum),
        "randomness": int(r.randomness),
        "rubber_band": bool(r.rubber_band),
        "unluck_applied": bool(r.unluck_applied),
        "luck_factor": None if r.luck_factor is None else float(r.luck_factor),
        "special_unluck_applied": bool(r.special_unluck_applied),
        "step": int(r.step),
        "option": str(r.option),
    }


def meter_result_from_dict(d: Mapping[str, Any]) -> MeterResult:
    try:
        lf = d.get("luck_factor")
        r = MeterResult(
            meter=int(d["meter"]),
            raw=float(d.get("raw", 0.0)),
            effective=effective_from_mapping(d.get("effective") or {}),
            momentum=int(d.get("momentum", 0)),
            randomness=int(d.get("randomness", 0)),
            rubber_band=bool(d.get("rubber_band", False)),
            unluck_applied=bool(d.get("unluck_applied", False)),
            luck_factor=None if lf is None else float(lf),
            special_unluck_applied=bool(d.get("special_unluck_applied", False)),
            step=int(d.get("step", 0)),
            option=str(d.get("option", "")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"malformed history entry: {e}") from e
    if not 0 <= r.meter <= 100:
        raise ValueError(f"history meter {r.meter} outside 0..100")
    if r.option not in ("A", "B"):
        raise ValueError(f"history option must be 'A' or 'B', got {r.option!r}")
    return r


def run_state_to_dict(rs: RunState) -> Dict[str, Any]:
    return {
        "state": state_to_dict(rs.state),
        "seed": int(rs.seed),
        "last_meter": int(rs.last_meter),
        "step_count": int(rs.step_count),
        "history": [meter_result_to_dict(r) for r in rs.history],
    }


def run_state_from_dict(d: Mapping[str, Any]) -> RunState:
    """Inverse of run_state_to_dict. Raises ValueError on anything malformed."""
    if not isinstance(d, Mapping):
        raise ValueError("run state must be a mapping")
    try:
        history = tuple(meter_result_from_dict(x) for x in list(d.get("history") or []))
        rs = RunState(
            state=state_from_mapping(d["state"]),
            seed=int(d["seed"]),
            last_meter=int(d.get("last_meter", 0)),
            step_count=int(d.get("step_count", 0)),
            history=history,
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"malformed run state: {e}") from e
    if rs.step_count < 0 or rs.step_count != len(rs.history):
        raise ValueError("run state step_count does not match history length")
    if rs.history and rs.history[-1].meter != rs.last_meter:
        raise ValueError("run state last_meter does not match history")
    if [r.step for r in rs.history] != list(range(1, len(rs.history) + 1)):
        raise ValueError("run state history steps must be 1..n in order")
    return rs


def make_run_export(*, run_state: RunState, config: MeterConfig, choices: List[str]) -> Dict[str, Any]:
    return {
        "version": EXPORT_VERSION,
        "config": config_to_dict(config),
        "run_state": run_state_to_dict(run_state),
        "choices": [str(c) for c in choices],
    }


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)


def loads_run_export(text: str) -> Dict[str, Any]:
    """Parse an export back into {'config', 'run_state', 'choices'} with engine types."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"run export is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("run export must be a JSON object")
    version = data.get("version")
    if isinstance(version, bool) or not isinstance(version, int) or version != EXPORT_VERSION:
        raise ValueError(f"unsupported run export version: {version!r}")
    choices = data.get("choices") or []
    if not isinstance(choices, list) or any(str(c) not in ("A", "B") for c in choices):
        raise ValueError("run export choices must be a list of 'A'/'B'")
    return {
        "config": config_from_mapping(data.get("config") or {}),
        "run_state": run_state_from_dict(data.get("run_state") or {}),
        "choices": [str(c) for c in choices],
    }
