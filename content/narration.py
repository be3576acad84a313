"""content.narration

Human-facing text around engine results: unluck lines, per-tier endings and
commentary, delta summaries. Picks are driven by an rng callable so the
same run always narrates the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from core.rng import Rng, step_rng
from core.state import DIMENSION_LABELS, DIMENSIONS, Delta, MeterResult, Option

from .schemas import ContentPack, StepSpec

FALLBACK_UNLUCK = "Something outside your control reduced your gains this step."


@dataclass(frozen=True)
class Ending:
    title: str
    message: str


ENDINGS: Dict[str, Ending] = {
    "Scrappy Mode": Ending(
        "The Scrappy Founder",
        "You've built something from nothing. You're still early, but the foundation is there "
        "and the determination is clear. Every great company started exactly where you are now.",
    ),
    "Finding Fit": Ending(
        "The Product-Market Fit Hunter",
        "You're in the sweet spot of discovery. You've found some traction and are learning what works. "
        "This is where many startups find their breakthrough moment.",
    ),
    "Gaining Steam": Ending(
        "The Momentum Builder",
        "You've hit your stride. Real momentum, and the pieces are coming together.",
    ),
    "Scaling Up": Ending(
        "The Scale Master",
        "You've cracked the code. The startup is scaling efficiently and making waves in the market.",
    ),
    "Breakout Trajectory": Ending(
        "The Unicorn Founder",
        "Legendary. Your startup is on a breakout trajectory few ever reach.",
    ),
}

COMMENTARIES: Dict[str, List[str]] = {
    "Scrappy Mode": [
        "Rough step. Every founder has one. Regroup and pick the next fight carefully.",
        "Not our finest hour, but we're still standing. Scrappy counts.",
        "The numbers dipped. Time to focus on what actually moves the needle.",
    ],
    "Finding Fit": [
        "Interesting choice! We're finding our groove.",
        "Smart move. We're getting closer to product-market fit.",
        "Good thinking. We're in the sweet spot of discovery.",
    ],
    "Gaining Steam": [
        "Excellent choice! The engines are warming up.",
        "Great decision. We're hitting our stride.",
        "Perfect timing. I can see the growth trajectory.",
    ],
    "Scaling Up": [
        "Outstanding choice! Full scaling mode.",
        "Brilliant move. The market is taking notice.",
        "Fantastic decision. We're in the big leagues now.",
    ],
    "Breakout Trajectory": [
        "LEGENDARY choice! IPO, here we come.",
        "INCREDIBLE move. History in the making.",
        "PHENOMENAL decision. We're not just scaling, we're transcending.",
    ],
}


def pick_unluck_message(step: StepSpec, option: Option | str, rng: Rng) -> Optional[str]:
    messages = list(step.choice(option).unluck_messages)
    if not messages:
        return None
    return messages[int(rng() * len(messages)) % len(messages)]


def unluck_message_for(pack: ContentPack, result: MeterResult, seed: int) -> Optional[str]:
    """Narration for a stored result; re-derives that step's rng so it never changes on reload."""
    if not result.unluck_applied or not result.option:
        return None
    step = pack.step(result.step)
    return pick_unluck_message(step, result.option, step_rng(seed, result.step - 1)) or FALLBACK_UNLUCK


def ending_for_tier(tier: str) -> Ending:
    return ENDINGS.get(tier, ENDINGS["Scrappy Mode"])


def commentary_for_tier(tier: str, rng: Rng) -> str:
    lines = COMMENTARIES.get(tier, COMMENTARIES["Scrappy Mode"])
    return lines[int(rng() * len(lines)) % len(lines)]


def describe_delta(delta: Delta) -> str:
    """Human summary, no numbers."""
    parts: List[str] = []
    for k in DIMENSIONS:
        v = int(getattr(delta, k))
        if v == 0:
            continue
        parts.append(f"{DIMENSION_LABELS[k]} {'↑' if v > 0 else '↓'}")
    return " · ".join(parts) if parts else "Balanced"
