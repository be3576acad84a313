"""engine.sim_runner

Headless runner for balance checks.

This keeps tests deterministic and CI-friendly: whole runs are played
against a content pack with scripted, greedy or seeded-random players.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from content.default_pack import get_default_pack
from content.schemas import ContentPack
from core.config import DEFAULT_CONFIG, MeterConfig
from core.effects import apply_delta, compute_effective
from core.meter import raw_score
from core.rng import rng_from
from core.state import Option, RunState, State

from .config import EngineConfig
from .pipeline import initialize_run_state, step_update


def simulate_run(
    seed: int,
    choices: Sequence[Option | str],
    pack: Optional[ContentPack] = None,
    config: MeterConfig = DEFAULT_CONFIG,
) -> RunState:
    """Play a fixed choice path through the pack."""
    pack = pack or get_default_pack()
    rs = initialize_run_state(seed)
    for step, option in zip(pack.steps, choices):
        rs, _ = step_update(rs, step.choice(option).delta, option, config)
    return rs


def enumerate_paths(steps: int = 5) -> List[Tuple[Option, ...]]:
    """Every A/B path, in binary order (AAAAA, AAAAB, ...)."""
    return list(itertools.product((Option.A, Option.B), repeat=steps))


def random_path(seed: int, steps: int = 5) -> List[Option]:
    """50/50 player, seeded independently of the scoring stream."""
    rng = rng_from("random-player", steps, base_seed=seed)
    return [Option.B if rng.random() < 0.5 else Option.A for _ in range(steps)]


def greedy_choice(state: State, step_index: int, pack: ContentPack, config: MeterConfig = DEFAULT_CONFIG) -> Option:
    """Pick whichever option projects the higher raw score (A on ties)."""
    step = pack.steps[step_index]
    proj_a = raw_score(compute_effective(apply_delta(state, step.option_a.delta), config), config)
    proj_b = raw_score(compute_effective(apply_delta(state, step.option_b.delta), config), config)
    return Option.B if proj_b > proj_a else Option.A


@dataclass(frozen=True)
class BalanceReport:
    runs: int
    median: int
    p25: int
    p75: int
    low: int
    high: int

    def to_dict(self) -> Dict[str, int]:
        return {"runs": self.runs, "median": self.median, "p25": self.p25, "p75": self.p75, "low": self.low, "high": self.high}


def balance_report(finals: Iterable[int]) -> BalanceReport:
    xs = sorted(int(x) for x in finals)
    if not xs:
        raise ValueError("balance_report needs at least one run")
    n = len(xs)
    return BalanceReport(runs=n, median=xs[n // 2], p25=xs[n // 4], p75=xs[(3 * n) // 4], low=xs[0], high=xs[-1])


def exhaustive_balance(
    seeds: Iterable[int],
    pack: Optional[ContentPack] = None,
    config: MeterConfig = DEFAULT_CONFIG,
) -> BalanceReport:
    """Final meters over every A/B path x every seed (uniform random play, without sampling noise)."""
    pack = pack or get_default_pack()
    paths = enumerate_paths(len(pack.steps))
    seeds = list(seeds)
    finals = [simulate_run(seed, path, pack, config).last_meter for path in paths for seed in seeds]
    return balance_report(finals)


def run_headless_sim(config: EngineConfig, pack: Optional[ContentPack] = None, policy: str = "greedy") -> Dict[str, Any]:
    """Run one deterministic simulation and return summary."""
    pack = pack or get_default_pack()
    rs = initialize_run_state(config.seed)
    path = random_path(config.seed, config.season_length) if policy == "random" else []
    choices: List[str] = []

    for i in range(min(config.season_length, len(pack.steps))):
        option = path[i] if path else greedy_choice(rs.state, i, pack, config.meter)
        rs, _ = step_update(rs, pack.steps[i].choice(option).delta, option, config.meter)
        choices.append(option.value)

    return {
        "steps": rs.step_count,
        "final": rs,
        "choices": choices,
        "meters": [r.meter for r in rs.history],
    }
