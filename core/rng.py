"""
core.rng
Deterministic RNG helpers that do NOT rely on Python's built-in hash().

Goal:
- Same seed => same float stream across platforms, runs and languages.
- Each step owns its own generator, derived from (seed, step_count).
"""

from __future__ import annotations

import hashlib
import json
import random
import secrets
from typing import Any, Callable

MASK32 = 0xFFFFFFFF

Rng = Callable[[], float]


def _imul(a: int, b: int) -> int:
    """32-bit wrap-around multiply (unsigned result)."""
    return (a * b) & MASK32


def mulberry32(seed: int) -> Rng:
    """Mulberry32 generator: returns a no-arg callable yielding floats in [0, 1).

    Matches the 32-bit reference algorithm bit-for-bit, so a seed
    reproduces the same sequence as any other conforming implementation.
    """
    state = int(seed) & MASK32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & MASK32
        t = _imul(state ^ (state >> 15), state | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK32
        return ((t ^ (t >> 14)) & MASK32) / 4294967296

    return next_float


def step_rng(seed: int, step_count: int) -> Rng:
    """Per-step generator. Distinct per step, replayable in isolation."""
    return mulberry32((int(seed) + int(step_count)) & MASK32)


def generate_seed() -> int:
    """Fresh, non-reproducible seed for a new run."""
    return secrets.randbelow(2147483647)


def stable_int_seed(*parts: Any, salt: str = "scaling-meter") -> int:
    """Return a stable 32-bit integer seed derived from arbitrary inputs.

    Uses SHA-256 over a canonical JSON representation of `parts`.
    This avoids Python's randomized hash() and is stable across processes/platforms.
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def rng_from(*parts: Any, base_seed: int) -> random.Random:
    """Create a Random instance from (base_seed + parts).

    Used for things outside the scoring stream (simulated players, commentary picks).
    """
    seed = stable_int_seed(base_seed, *parts)
    return random.Random(seed)
