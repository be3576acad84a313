"""engine.config

Engine configuration passed from UI / headless runner.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.config import DEFAULT_CONFIG, MeterConfig


@dataclass(frozen=True)
class EngineConfig:
    seed: int
    meter: MeterConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    season_length: int = 5
