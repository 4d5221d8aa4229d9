"""
Move System - Moves, execution results and history records.

Moves represent:
1. A player's proposed single-step move
2. A bot's chosen candidate
3. A committed entry in the session history
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .board import Board, Position
from .combat import CombatResult
from .pieces import Rank, Side

if TYPE_CHECKING:
    from .win_evaluator import TerminationReason


class MoveKind(str, Enum):
    MOVE = "move"
    CHALLENGE = "challenge"


@dataclass(frozen=True)
class Move:
    """A single orthogonal step from one square to another."""
    from_pos: Position
    to_pos: Position

    @classmethod
    def of(cls, from_row: int, from_col: int, to_row: int, to_col: int) -> Move:
        """Factory from raw coordinates."""
        return cls(Position(from_row, from_col), Position(to_row, to_col))

    def __str__(self) -> str:
        return f"{self.from_pos}->{self.to_pos}"


@dataclass(frozen=True)
class ExecutionResult:
    """Output of the executor: the new board and any challenge that happened."""
    board: Board
    combat: CombatResult | None = None


@dataclass
class MoveRecord:
    """
    A committed move, kept for replay and statistics.

    Passes are recorded too (piece is None, kind is None) so the history
    shows every turn change.
    """
    move_number: int
    side: Side
    from_pos: Position | None
    to_pos: Position | None
    piece: Rank | None
    kind: MoveKind | None
    combat: CombatResult | None = None
    timestamp: float | None = None

    @property
    def is_pass(self) -> bool:
        return self.piece is None


@dataclass
class MoveOutcome:
    """
    Result of committing a move to a session.

    Contains:
    - The challenge result (if the move was an attack)
    - Winner and reason (if the move ended the game)
    - Human-readable changes for logs and UI
    """
    move: Move | None
    side: Side
    combat: CombatResult | None = None
    winner: Side | None = None
    reason: TerminationReason | None = None
    finished: bool = False
    changes: list[str] = field(default_factory=list)
