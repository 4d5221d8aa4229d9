"""
Bot Personalities - Behavior profiles and difficulty tiers.

A behavior profile sets what the bot values:
- How much it likes attacking, and how much rank advantage matters
- How much it likes moving forward
- How much it cares whether the destination is safe

A difficulty tier sets how precisely it plays:
- easy: halved scores with large noise
- medium: small noise
- hard: no noise, one-ply exposure lookahead and a centre penalty
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class Behavior(str, Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    PASSIVE = "passive"
    BALANCED = "balanced"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights for scoring one candidate move.

    Higher values = more attractive.
    """
    attack: float = 8.0  # any challenge
    advantage: float = 1.0  # per ordinal of (own rank - target rank)
    spy_strike: float = 7.0  # Spy attacking anything but a Private or Spy
    private_vs_spy: float = 5.0  # Private attacking a Spy
    forward: float = 1.0  # multiplies +2 forward / -1 backward
    safe: float = 3.0
    unsafe: float = -4.0
    exposed_officer: float = 0.0  # extra, rank >= Captain into an unsafe square
    flag_capture: float = 1000.0


@dataclass(frozen=True)
class Personality:
    """A named behavior profile."""
    name: str
    description: str = ""
    weights: ScoringWeights = field(default_factory=ScoringWeights)


# ============================================================================
# Predefined Personalities
# ============================================================================

AGGRESSIVE = Personality(
    name="aggressive",
    description="Attacks and advances, barely minds exposure",
    weights=ScoringWeights(
        attack=10.0,
        advantage=2.0,
        spy_strike=8.0,
        private_vs_spy=6.0,
        forward=1.0,
        safe=1.0,
        unsafe=-1.0,
    ),
)


DEFENSIVE = Personality(
    name="defensive",
    description="Values safe squares and keeps high officers out of reach",
    weights=ScoringWeights(
        attack=6.0,
        advantage=1.0,
        spy_strike=6.0,
        private_vs_spy=5.0,
        forward=0.0,
        safe=6.0,
        unsafe=-8.0,
        exposed_officer=-4.0,
    ),
)


PASSIVE = Personality(
    name="passive",
    description="Avoids challenges, creeps forward along safe squares",
    weights=ScoringWeights(
        attack=-5.0,
        advantage=0.0,
        spy_strike=0.0,
        private_vs_spy=0.0,
        forward=1.0,
        safe=6.0,
        unsafe=-8.0,
    ),
)


BALANCED = Personality(
    name="balanced",
    description="Moderate mix of attack, advance and safety",
    weights=ScoringWeights(),
)


PERSONALITIES: dict[str, Personality] = {
    Behavior.AGGRESSIVE.value: AGGRESSIVE,
    Behavior.DEFENSIVE.value: DEFENSIVE,
    Behavior.PASSIVE.value: PASSIVE,
    Behavior.BALANCED.value: BALANCED,
}


# ============================================================================
# Difficulty Tiers
# ============================================================================

@dataclass(frozen=True)
class DifficultyTier:
    name: str
    score_scale: float = 1.0
    noise: float = 0.0  # uniform noise in [-noise, noise]
    lookahead: bool = False  # subtract exposure to adjacent enemies
    exposure_base: float = 8.0
    centre_weight: float = 0.0


DIFFICULTIES: dict[str, DifficultyTier] = {
    Difficulty.EASY.value: DifficultyTier(name="easy", score_scale=0.5, noise=5.0),
    Difficulty.MEDIUM.value: DifficultyTier(name="medium", noise=2.0),
    Difficulty.HARD.value: DifficultyTier(name="hard", lookahead=True, centre_weight=0.5),
}


def get_personality(name: str) -> Personality:
    """Look up a behavior profile by name."""
    try:
        return PERSONALITIES[Behavior(name).value]
    except ValueError:
        raise ValueError(
            f"Unknown behavior '{name}'. Choose from: {', '.join(PERSONALITIES)}"
        ) from None


def get_difficulty(name: str) -> DifficultyTier:
    """Look up a difficulty tier by name."""
    try:
        return DIFFICULTIES[Difficulty(name).value]
    except ValueError:
        raise ValueError(
            f"Unknown difficulty '{name}'. Choose from: {', '.join(DIFFICULTIES)}"
        ) from None
