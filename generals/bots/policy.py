"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a board, the side to play and its legal moves, and
returns a decision. Decisions include:
- Which move to make
- An explanation (for logs and UI)
- Evaluation details (for debugging)
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..engine_core.errors import NoLegalMove

if TYPE_CHECKING:
    from ..engine_core.board import Board
    from ..engine_core.move import Move
    from ..engine_core.pieces import Side


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to make
    - Explanation (for UI/debugging)
    - Confidence in the decision
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_moves: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects moves. Policies never touch the
    session; the caller commits the chosen move like any other.
    """

    @abstractmethod
    def select_move(
        self,
        board: Board,
        side: Side,
        legal_moves: list[Move],
    ) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            board: Current board (full information)
            side: Side the bot plays
            legal_moves: Moves to choose from

        Returns:
            BotDecision with the selected move

        Raises:
            NoLegalMove: if legal_moves is empty
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects moves uniformly at random.

    The `simulate` baseline (`--side1 random`).
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(
        self,
        board: Board,
        side: Side,
        legal_moves: list[Move],
    ) -> BotDecision:
        if not legal_moves:
            raise NoLegalMove(f"{side.value} has no legal moves")

        move = self.rng.choice(legal_moves)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_moves),
            evaluated_moves=len(legal_moves),
        )
