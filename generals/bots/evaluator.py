"""
Move Evaluator - Scores candidate moves for bot decision-making.

The evaluator assigns a numeric score to each candidate based on:
- Challenge features (is it an attack, rank advantage, spy tricks)
- Progress (forward / backward row delta from the mover's point of view)
- Exposure (could an adjacent enemy beat the mover on its new square)

Weights come from a Personality; the DifficultyTier perturbs the result.
"""

from __future__ import annotations
import random
from dataclasses import dataclass

from ..engine_core.board import Board, Position
from ..engine_core.combat import can_defeat
from ..engine_core.move import Move
from ..engine_core.pieces import Rank, Side
from .personality import BALANCED, DIFFICULTIES, DifficultyTier, Personality


@dataclass(frozen=True)
class CandidateMove:
    """A legal move with the features the scorer looks at."""
    move: Move
    piece: Rank
    target: Rank | None = None
    forward_delta: int = 0  # +1 toward the enemy, -1 toward home, 0 sideways
    is_safe: bool = True

    @property
    def is_attack(self) -> bool:
        return self.target is not None

    @property
    def advantage(self) -> int:
        """Ordinal difference own - target; 0 for a plain move."""
        if self.target is None:
            return 0
        return int(self.piece) - int(self.target)

    @property
    def captures_flag(self) -> bool:
        return self.target is Rank.FLAG


def _threats(board: Board, square: Position, piece: Rank, side: Side) -> list[Rank]:
    """Ranks of enemy pieces next to square that would beat piece there."""
    threats = []
    for pos in square.neighbors():
        cell = board.get(pos)
        if cell is None or cell.side is side:
            continue
        # A Flag may only ever challenge a Flag
        if cell.rank is Rank.FLAG and piece is not Rank.FLAG:
            continue
        if can_defeat(cell.rank, piece):
            threats.append(cell.rank)
    return threats


def describe(board: Board, side: Side, move: Move) -> CandidateMove:
    """Build the scoring features of a legal move."""
    piece = board.get(move.from_pos).rank
    target_cell = board.get(move.to_pos)
    row_delta = move.to_pos.row - move.from_pos.row
    return CandidateMove(
        move=move,
        piece=piece,
        target=target_cell.rank if target_cell is not None else None,
        forward_delta=row_delta * side.forward,
        is_safe=not _threats(board, move.to_pos, piece, side),
    )


class MoveEvaluator:
    """
    Scores candidate moves using weighted features.

    Used by bots for one-ply selection:
    1. Describe each legal move as a CandidateMove
    2. Score it with the personality weights
    3. Apply the difficulty tier (noise or exposure lookahead)
    """

    def __init__(
        self,
        personality: Personality | None = None,
        difficulty: DifficultyTier | None = None,
    ):
        self.personality = personality or BALANCED
        self.difficulty = difficulty or DIFFICULTIES["medium"]

    @property
    def weights(self):
        return self.personality.weights

    def base_score(self, candidate: CandidateMove) -> float:
        """Personality score before the difficulty tier is applied."""
        w = self.weights
        score = 0.0

        if candidate.is_attack:
            score += w.attack + candidate.advantage * w.advantage
            if candidate.captures_flag:
                score += w.flag_capture
            if candidate.piece is Rank.SPY and candidate.target not in (Rank.PRIVATE, Rank.SPY):
                score += w.spy_strike
            if candidate.piece is Rank.PRIVATE and candidate.target is Rank.SPY:
                score += w.private_vs_spy

        if candidate.forward_delta > 0:
            score += 2 * w.forward
        elif candidate.forward_delta < 0:
            score -= w.forward

        if candidate.is_safe:
            score += w.safe
        else:
            score += w.unsafe
            if candidate.piece >= Rank.CAPTAIN:
                score += w.exposed_officer

        return score

    def score(
        self,
        board: Board,
        side: Side,
        candidate: CandidateMove,
        rng: random.Random,
    ) -> float:
        """Full score, including the difficulty tier."""
        tier = self.difficulty
        score = self.base_score(candidate) * tier.score_scale

        if tier.noise:
            score += rng.uniform(-tier.noise, tier.noise)

        if tier.lookahead and not candidate.is_safe:
            for enemy in _threats(board, candidate.move.to_pos, candidate.piece, side):
                score -= tier.exposure_base + max(0, int(enemy) - int(candidate.piece))

        if tier.centre_weight:
            col = candidate.move.to_pos.col
            score -= tier.centre_weight * (4 - abs(col - 4))

        return score
