"""
Game Loop - Turn driver for games against the computer.

The loop:
1. The human proposes a move
2. The engine validates, executes and evaluates it
3. If the game goes on and the computer is to move, the AI move is
   computed and committed the same way (or the computer passes when it
   has no legal move)
4. The caller shows both outcomes and waits for the next human move

The loop never writes to the session directly; every commit goes through
the SessionManager.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from ..engine_core.move import Move, MoveOutcome
from ..engine_core.pieces import Side
from ..engine_core.state import GameSession
from .manager import SessionManager


class LoopState(Enum):
    """State of the game loop after a call."""
    WAITING_HUMAN_MOVE = "waiting_human_move"
    WAITING_SETUP = "waiting_setup"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a turn.

    Contains the human move outcome and, when the computer answered, its
    move and outcome.
    """
    loop_state: LoopState
    human_outcome: MoveOutcome | None = None

    # Computer reply
    ai_move: Move | None = None
    ai_outcome: MoveOutcome | None = None
    ai_passed: bool = False

    # Game over info
    winner: Side | None = None
    reason: str | None = None

    @property
    def changes(self) -> list[str]:
        out: list[str] = []
        for outcome in (self.human_outcome, self.ai_outcome):
            if outcome is not None:
                out.extend(outcome.changes)
        return out


@dataclass
class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(manager, session_id)
        result = loop.play_human_move(Side.SIDE1, Move.of(5, 4, 4, 4))
        for line in result.changes:
            print(line)
    """
    manager: SessionManager
    session_id: str
    move_limit: int = 1000
    history: list[TurnResult] = field(default_factory=list)

    @property
    def session(self) -> GameSession:
        return self.manager.get_session(self.session_id)

    def play_human_move(self, side: Side, move: Move) -> TurnResult:
        """
        Commit a human move, then the computer's reply if it is its turn.

        Engine rejections of the human move propagate unchanged.
        """
        human_outcome = self.manager.propose_move(self.session_id, side, move)
        result = TurnResult(
            loop_state=LoopState.WAITING_HUMAN_MOVE,
            human_outcome=human_outcome,
        )
        session = self.session
        if session.is_computer_turn:
            self._play_ai_turn(session.computer_side, result)
        self._finish_result(result)
        self.history.append(result)
        return result

    def play_ai_turn(self, side: Side | None = None) -> TurnResult:
        """Commit one AI move (or pass) for side, default the side to move."""
        result = TurnResult(loop_state=LoopState.WAITING_HUMAN_MOVE)
        self._play_ai_turn(side or self.session.current_turn, result)
        self._finish_result(result)
        self.history.append(result)
        return result

    def run_to_completion(self) -> GameSession:
        """
        Let the AI play both sides until the game ends or move_limit turns are played.

        Used by simulations; a game still running at the limit is left as is.
        """
        session = self.session
        turns = 0
        while session.is_playing and turns < self.move_limit:
            self.play_ai_turn(session.current_turn)
            session = self.session
            turns += 1
        return session

    def _play_ai_turn(self, side: Side, result: TurnResult) -> None:
        move = self.manager.request_ai_move(self.session_id, side)
        if move is None:
            result.ai_outcome = self.manager.pass_turn(self.session_id, side)
            result.ai_passed = True
        else:
            result.ai_move = move
            result.ai_outcome = self.manager.propose_move(self.session_id, side, move)

    def _finish_result(self, result: TurnResult) -> None:
        session = self.session
        if session.is_finished:
            result.loop_state = LoopState.GAME_OVER
            result.winner = session.winner
            result.reason = session.termination_reason.value
        elif not session.is_playing:
            result.loop_state = LoopState.WAITING_SETUP
