"""
Game Session State - The authoritative aggregate for one game.

Design principles:
- One document: board, turn, counters, result and history travel together
- Transitions never mutate a session in place; reducer functions return
  an updated copy that the session layer writes back atomically
- Versioned: every committed transition bumps `version` (compare-and-swap)
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum

from .board import Board, Position
from .move import MoveRecord
from .pieces import Side
from .win_evaluator import PendingBaseReach, TerminationReason


class SessionStatus(str, Enum):
    """Linear lifecycle: setup -> playing -> finished."""
    SETUP = "setup"
    PLAYING = "playing"
    FINISHED = "finished"


# side1 always opens
STARTING_SIDE = Side.SIDE1


@dataclass
class GameSession:
    """
    Complete session state at a point in time.

    `last_move_from`/`last_move_to` are for UI and audit only; no rule
    reads them.
    """
    session_id: str
    board: Board = field(default_factory=Board.empty)
    status: SessionStatus = SessionStatus.SETUP
    current_turn: Side = STARTING_SIDE
    move_count: int = 0

    # Result
    winner: Side | None = None
    termination_reason: TerminationReason | None = None

    # Setup tracking
    setup_committed: set[Side] = field(default_factory=set)
    initial_board: Board | None = None

    # Deferred flag-at-base state between two evaluations
    pending_base_reach: PendingBaseReach | None = None

    # Last move endpoints
    last_move_from: Position | None = None
    last_move_to: Position | None = None

    # Computer opponent (None for a two-player session)
    computer_side: Side | None = None
    ai_behavior: str = "balanced"
    ai_difficulty: str = "medium"

    # History (for replay and statistics)
    history: list[MoveRecord] = field(default_factory=list)

    # Timestamps from the injected clock
    created_at: float | None = None
    started_at: float | None = None
    finished_at: float | None = None
    last_move_at: float | None = None

    # Bumped on every committed write
    version: int = 0

    @property
    def is_playing(self) -> bool:
        return self.status is SessionStatus.PLAYING

    @property
    def is_finished(self) -> bool:
        return self.status is SessionStatus.FINISHED

    @property
    def is_computer_turn(self) -> bool:
        return self.is_playing and self.current_turn is self.computer_side

    def has_committed(self, side: Side) -> bool:
        return side in self.setup_committed

    def clone(self) -> GameSession:
        """Deep copy the session."""
        return deepcopy(self)
