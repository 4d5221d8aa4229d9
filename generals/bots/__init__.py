"""
Bots module - Computer opponent implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy: Uniform baseline for simulations
- MoveEvaluator: Scores candidate moves
- GeneralsBot: Heuristic computer opponent
- Personality: Behavior profiles and difficulty tiers
"""

from .policy import BotPolicy, BotDecision, RandomPolicy
from .evaluator import CandidateMove, MoveEvaluator, describe
from .personality import (
    DIFFICULTIES,
    PERSONALITIES,
    Behavior,
    Difficulty,
    DifficultyTier,
    Personality,
    ScoringWeights,
)
from .generals_bot import GeneralsBot

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "CandidateMove",
    "MoveEvaluator",
    "describe",
    "Behavior",
    "Difficulty",
    "DifficultyTier",
    "Personality",
    "ScoringWeights",
    "PERSONALITIES",
    "DIFFICULTIES",
    "GeneralsBot",
]
