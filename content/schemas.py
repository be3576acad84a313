"""content.schemas

Contracts for content packs:
- ChoiceSpec: one option (label/body + authored delta + unluck narration).
- StepSpec: one of the five steps (scenario + option A/B).
- ContentPack: id/version/title + exactly five steps.

Design choice:
Packs are authored data; the engine trusts deltas validated here
(each field an int in [-10, +15]) and never re-checks them.
A malformed pack never reaches the engine: callers fall back to the default pack.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from core.state import DIMENSIONS, Delta, Option, delta_from_mapping, state_to_dict

logger = logging.getLogger(__name__)

DELTA_MIN = -10
DELTA_MAX = 15
STEP_COUNT = 5

_SEMVER = re.compile(r"^\d+\.\d+\.\d+$")


@dataclass(frozen=True)
class ChoiceSpec:
    label: str
    body: str
    delta: Delta
    unluck_messages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "body": self.body,
            "delta": state_to_dict(self.delta),
            "unluck_messages": list(self.unluck_messages),
        }


@dataclass(frozen=True)
class StepSpec:
    id: int  # 1..5
    title: str
    scenario: str
    option_a: ChoiceSpec
    option_b: ChoiceSpec
    subtitle: str = ""

    def choice(self, option: Option | str) -> ChoiceSpec:
        return self.option_a if Option.parse(option) == Option.A else self.option_b

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": int(self.id),
            "title": self.title,
            "subtitle": self.subtitle,
            "scenario": self.scenario,
            "option_a": self.option_a.to_dict(),
            "option_b": self.option_b.to_dict(),
        }


@dataclass(frozen=True)
class ContentPack:
    id: str
    version: str
    title: str
    steps: List[StepSpec]
    description: str = ""
    author: str = ""
    tags: List[str] = field(default_factory=list)

    def step(self, step_id: int) -> StepSpec:
        for s in self.steps:
            if int(s.id) == int(step_id):
                return s
        raise KeyError(f"no step {step_id} in pack {self.id}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "version": self.version,
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "tags": list(self.tags),
            "steps": [s.to_dict() for s in self.steps],
        }


def _check_text(value: str, where: str, lo: int, hi: int) -> None:
    n = len((value or "").strip())
    if n < lo or len(value or "") > hi:
        raise ValueError(f"{where} must be {lo}-{hi} chars")


def validate_delta(d: Delta, where: str) -> None:
    for k in DIMENSIONS:
        v = getattr(d, k)
        if not isinstance(v, int) or isinstance(v, bool):
            raise ValueError(f"{where}.{k} must be an int")
        if v < DELTA_MIN or v > DELTA_MAX:
            raise ValueError(f"{where}.{k}={v} outside [{DELTA_MIN}, {DELTA_MAX}]")


def validate_choice(c: ChoiceSpec, where: str) -> None:
    _check_text(c.label, f"{where}.label", 1, 200)
    _check_text(c.body, f"{where}.body", 1, 1000)
    validate_delta(c.delta, f"{where}.delta")
    if any(not isinstance(m, str) or not m.strip() for m in c.unluck_messages):
        raise ValueError(f"{where}.unluck_messages must be non-empty strings")


def validate_content_pack(p: ContentPack) -> None:
    _check_text(p.id, "pack.id", 1, 50)
    if not _SEMVER.match(p.version or ""):
        raise ValueError("pack.version must look like 1.2.3")
    _check_text(p.title, "pack.title", 1, 100)
    if len(p.description or "") > 500:
        raise ValueError("pack.description must be <= 500 chars")
    if not isinstance(p.steps, list) or len(p.steps) != STEP_COUNT:
        raise ValueError(f"pack.steps must contain exactly {STEP_COUNT} steps")
    ids = [int(s.id) for s in p.steps]
    if ids != list(range(1, STEP_COUNT + 1)):
        raise ValueError("pack.steps ids must be 1..5 in order")
    for s in p.steps:
        where = f"steps[{s.id}]"
        _check_text(s.title, f"{where}.title", 1, 100)
        if len(s.subtitle or "") > 200:
            raise ValueError(f"{where}.subtitle must be <= 200 chars")
        _check_text(s.scenario, f"{where}.scenario", 1, 2000)
        validate_choice(s.option_a, f"{where}.option_a")
        validate_choice(s.option_b, f"{where}.option_b")


def _parse_delta(obj: Mapping[str, Any], where: str) -> Delta:
    raw = dict(obj or {})
    for k, v in raw.items():
        if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
            raise ValueError(f"{where}.{k} must be an int")
    return delta_from_mapping(raw)


def _parse_choice(obj: Mapping[str, Any], where: str) -> ChoiceSpec:
    return ChoiceSpec(
        label=str(obj.get("label") or "").strip(),
        body=str(obj.get("body") or "").strip(),
        delta=_parse_delta(obj.get("delta") or {}, f"{where}.delta"),
        unluck_messages=[str(m) for m in list(obj.get("unluck_messages") or obj.get("unluckMessages") or [])],
    )


def pack_from_mapping(data: Mapping[str, Any]) -> ContentPack:
    """Parse + validate a dict-shaped pack (camelCase optionA/optionB accepted)."""
    steps: List[StepSpec] = []
    for i, obj in enumerate(list(data.get("steps") or [])):
        where = f"steps[{i + 1}]"
        steps.append(
            StepSpec(
                id=int(obj.get("id", i + 1)),
                title=str(obj.get("title") or "").strip(),
                subtitle=str(obj.get("subtitle") or "").strip(),
                scenario=str(obj.get("scenario") or "").strip(),
                option_a=_parse_choice(obj.get("option_a") or obj.get("optionA") or {}, f"{where}.option_a"),
                option_b=_parse_choice(obj.get("option_b") or obj.get("optionB") or {}, f"{where}.option_b"),
            )
        )
    meta = dict(data.get("metadata") or {})
    pack = ContentPack(
        id=str(data.get("id") or "").strip(),
        version=str(data.get("version") or "").strip(),
        title=str(data.get("title") or "").strip(),
        steps=steps,
        description=str(data.get("description") or "").strip(),
        author=str(data.get("author") or "").strip(),
        tags=[str(t) for t in list(data.get("tags") or meta.get("tags") or [])],
    )
    validate_content_pack(pack)
    return pack


def load_pack_or_default(data: Optional[Mapping[str, Any]]) -> ContentPack:
    """Parse a pack; on any validation problem log it and return the default pack."""
    from .default_pack import get_default_pack

    if data is None:
        return get_default_pack()
    try:
        return pack_from_mapping(data)
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("content pack rejected, using default pack: %s", e)
        return get_default_pack()
