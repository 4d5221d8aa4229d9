"""
Generals Bot - Computer opponent for the Game of the Generals.

The bot:
- Scores every legal move once (one-ply, no search)
- Weighs moves by a behavior profile and a difficulty tier
- Picks a running best, flipping a coin on exact ties

The bot does NOT:
- Remember anything between moves
- Read hidden information differently from the board it is given

The coin flip means a later candidate that ties the current best replaces
it half of the time, so with k tied candidates the last one is the most
likely pick. This order dependence is kept on purpose; candidates come in
the board's row-major order with directions up, down, left, right.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass

from ..engine_core.board import Board
from ..engine_core.errors import NoLegalMove
from ..engine_core.move import Move
from ..engine_core.pieces import Side
from .evaluator import MoveEvaluator, describe
from .personality import (
    BALANCED,
    DIFFICULTIES,
    DifficultyTier,
    Personality,
    get_difficulty,
    get_personality,
)
from .policy import BotDecision, BotPolicy

logger = logging.getLogger(__name__)


@dataclass
class GeneralsBot(BotPolicy):
    """
    Heuristic computer opponent.

    Usage:
        bot = GeneralsBot.for_profile(Side.SIDE2, "aggressive", "hard", rng=random.Random(7))
        decision = bot.select_move(board, Side.SIDE2, legal_moves(board, Side.SIDE2))
    """
    side: Side
    personality: Personality = None  # type: ignore
    difficulty: DifficultyTier = None  # type: ignore
    evaluator: MoveEvaluator = None  # type: ignore
    rng: random.Random = None  # type: ignore

    def __post_init__(self):
        if self.personality is None:
            self.personality = BALANCED
        if self.difficulty is None:
            self.difficulty = DIFFICULTIES["medium"]
        if self.evaluator is None:
            self.evaluator = MoveEvaluator(self.personality, self.difficulty)
        if self.rng is None:
            self.rng = random.Random()

    @classmethod
    def for_profile(
        cls,
        side: Side,
        behavior: str = "balanced",
        difficulty: str = "medium",
        rng: random.Random | None = None,
    ) -> GeneralsBot:
        """Build a bot from behavior and difficulty names."""
        return cls(
            side=side,
            personality=get_personality(behavior),
            difficulty=get_difficulty(difficulty),
            rng=rng,
        )

    def select_move(
        self,
        board: Board,
        side: Side,
        legal_moves: list[Move],
    ) -> BotDecision:
        """
        Select the best-scoring move.

        Process:
        1. Describe each legal move (attack, advantage, forward, safety)
        2. Score it with personality weights and difficulty
        3. Keep a running best; replace on a higher score, or on an
           exact tie with probability 1/2
        """
        if not legal_moves:
            raise NoLegalMove(f"{side.value} has no legal moves")

        best: Move | None = None
        best_score = float("-inf")
        for move in legal_moves:
            candidate = describe(board, side, move)
            s = self.evaluator.score(board, side, candidate, self.rng)
            if s > best_score or (s == best_score and self.rng.random() < 0.5):
                best, best_score = move, s

        logger.debug(
            "%s picked %s (score %.2f of %d candidates)",
            self.get_name(), best, best_score, len(legal_moves),
        )
        return BotDecision(
            move=best,
            explanation=self._generate_explanation(board, best, best_score),
            confidence=self._calculate_confidence(best_score, len(legal_moves)),
            evaluated_moves=len(legal_moves),
            best_score=best_score,
            evaluation_details={
                "behavior": self.personality.name,
                "difficulty": self.difficulty.name,
            },
        )

    def _generate_explanation(self, board: Board, move: Move, score: float) -> str:
        piece = board.get(move.from_pos).rank
        target = board.get(move.to_pos)
        verb = "challenges" if target is not None else "moves"
        return (
            f"{piece.label} {verb} {move.from_pos} -> {move.to_pos} "
            f"(score: {score:.1f}, behavior: {self.personality.name})"
        )

    def _calculate_confidence(self, score: float, num_evaluated: int) -> float:
        if num_evaluated <= 1:
            return 1.0
        base_confidence = min(1.0, num_evaluated / 10)
        score_boost = min(0.3, score / 100) if score > 0 else 0
        return min(1.0, base_confidence + score_boost)

    def get_name(self) -> str:
        return f"GeneralsBot({self.side.value}, {self.personality.name}, {self.difficulty.name})"
