"""
Reducer - Session state machine transitions.

The reducer is the single point of session change. Every transition:
- Validates first, raising an EngineError before anything is touched
- Works on a clone and returns it, never mutating its input
- Bumps nothing itself; the session layer versions committed writes

Lifecycle: setup -> playing -> finished. No transition leaves `finished`.
"""

from __future__ import annotations
import random
from typing import Sequence

from .errors import (
    GameAlreadyFinished,
    InvalidSetup,
    NotYourTurn,
    PassNotAllowed,
    SessionNotPlaying,
)
from .executor import execute
from .move import Move, MoveKind, MoveOutcome, MoveRecord
from .move_generator import has_legal_move
from .pieces import Side
from .setup import Placement, place_on_board, random_setup, validate_placements
from .state import STARTING_SIDE, GameSession, SessionStatus
from .validator import validate_move
from .win_evaluator import TerminationReason, WinEvaluation, evaluate


def create_session(
    session_id: str,
    now: float | None = None,
    computer_side: Side | None = Side.SIDE2,
    side1_setup: Sequence[Placement] | None = None,
    rng: random.Random | None = None,
    ai_behavior: str = "balanced",
    ai_difficulty: str = "medium",
) -> GameSession:
    """
    Create a session in `setup`.

    The computer side (if any) is placed randomly and committed at once.
    If side1's placement is supplied it is committed too, which may start
    the game immediately.
    """
    session = GameSession(
        session_id=session_id,
        created_at=now,
        computer_side=computer_side,
        ai_behavior=ai_behavior,
        ai_difficulty=ai_difficulty,
    )
    if computer_side is not None:
        session = commit_setup(session, computer_side, random_setup(computer_side, rng), now)
    if side1_setup is not None:
        session = commit_setup(session, Side.SIDE1, side1_setup, now)
    return session


def commit_setup(
    session: GameSession,
    side: Side,
    placements: Sequence[Placement],
    now: float | None = None,
) -> GameSession:
    """Commit one side's initial placement; start the game once both are in."""
    if session.is_finished:
        raise GameAlreadyFinished("Game is already finished")
    if session.status is not SessionStatus.SETUP:
        raise InvalidSetup("Game is not in setup phase")
    if session.has_committed(side):
        raise InvalidSetup(f"{side.value} has already committed a setup")

    validate_placements(side, placements)

    new_session = session.clone()
    new_session.board = place_on_board(session.board, side, placements)
    new_session.setup_committed.add(side)

    if new_session.setup_committed == {Side.SIDE1, Side.SIDE2}:
        new_session.status = SessionStatus.PLAYING
        new_session.current_turn = STARTING_SIDE
        new_session.started_at = now
        new_session.initial_board = new_session.board.with_all_hidden()

    return new_session


def apply_move(
    session: GameSession,
    side: Side,
    move: Move,
    now: float | None = None,
) -> tuple[GameSession, MoveOutcome]:
    """Validate, execute and evaluate one move as a single step."""
    _ensure_playing(session)
    board = session.board
    validate_move(board, move.from_pos, move.to_pos, side, session.current_turn)

    piece = board.get(move.from_pos)
    result = execute(board, move.from_pos, move.to_pos)
    evaluation = evaluate(
        result.board,
        mover=side,
        combat=result.combat,
        moved_to=move.to_pos,
        pending=session.pending_base_reach,
    )

    new_session = session.clone()
    new_session.board = result.board
    new_session.move_count += 1
    new_session.current_turn = side.opponent
    new_session.last_move_from = move.from_pos
    new_session.last_move_to = move.to_pos
    new_session.last_move_at = now
    new_session.pending_base_reach = evaluation.pending
    new_session.history.append(MoveRecord(
        move_number=new_session.move_count,
        side=side,
        from_pos=move.from_pos,
        to_pos=move.to_pos,
        piece=piece.rank,
        kind=MoveKind.CHALLENGE if result.combat else MoveKind.MOVE,
        combat=result.combat,
        timestamp=now,
    ))

    # Ranks stay out of plain moves; only a challenge reveals them
    changes = [f"{side.value} moved {move.from_pos} -> {move.to_pos}"]
    if result.combat:
        c = result.combat
        changes.append(f"{c.attacker.label} vs {c.defender.label}: {c.outcome.value}")
    if evaluation.pending and evaluation.pending != session.pending_base_reach:
        changes.append(f"{side.value} flag reached the enemy home row")

    _apply_evaluation(new_session, evaluation, now)
    return new_session, _outcome(new_session, side, move, result.combat, evaluation, changes)


def pass_turn(
    session: GameSession,
    side: Side,
    now: float | None = None,
) -> tuple[GameSession, MoveOutcome]:
    """
    Hand the turn over when side has no legal move.

    A pass is not a move: move_count is unchanged. The win evaluator still
    runs, so a pending base reach resolves on the pass.
    """
    _ensure_playing(session)
    if side is not session.current_turn:
        raise NotYourTurn(f"It is {session.current_turn.value}'s turn, not {side.value}'s")
    if has_legal_move(session.board, side):
        raise PassNotAllowed(f"{side.value} still has legal moves")

    evaluation = evaluate(session.board, mover=side, pending=session.pending_base_reach)

    new_session = session.clone()
    new_session.current_turn = side.opponent
    new_session.last_move_at = now
    new_session.pending_base_reach = evaluation.pending
    new_session.history.append(MoveRecord(
        move_number=new_session.move_count,
        side=side,
        from_pos=None,
        to_pos=None,
        piece=None,
        kind=None,
        timestamp=now,
    ))

    _apply_evaluation(new_session, evaluation, now)
    return new_session, _outcome(
        new_session, side, None, None, evaluation, [f"{side.value} has no legal move and passes"]
    )


def surrender(session: GameSession, side: Side, now: float | None = None) -> GameSession:
    """End the game in the opponent's favour, whatever the board says."""
    if session.is_finished:
        raise GameAlreadyFinished("Game is already finished")
    new_session = session.clone()
    _finish(new_session, side.opponent, TerminationReason.SURRENDER, now)
    return new_session


def timeout(session: GameSession, side: Side, now: float | None = None) -> GameSession:
    """The side to move ran out of time; the opponent wins."""
    _ensure_playing(session)
    if side is not session.current_turn:
        raise NotYourTurn("Only the side to move can time out")
    new_session = session.clone()
    _finish(new_session, side.opponent, TerminationReason.TIMEOUT, now)
    return new_session


def _ensure_playing(session: GameSession) -> None:
    if session.is_finished:
        raise GameAlreadyFinished("Game is already finished")
    if not session.is_playing:
        raise SessionNotPlaying(f"Game is not active (status: {session.status.value})")


def _apply_evaluation(session: GameSession, evaluation: WinEvaluation, now: float | None) -> None:
    if evaluation.finished:
        _finish(session, evaluation.winner, evaluation.reason, now)


def _finish(
    session: GameSession,
    winner: Side,
    reason: TerminationReason,
    now: float | None,
) -> None:
    session.status = SessionStatus.FINISHED
    session.winner = winner
    session.termination_reason = reason
    session.finished_at = now
    session.pending_base_reach = None


def _outcome(
    session: GameSession,
    side: Side,
    move: Move | None,
    combat,
    evaluation: WinEvaluation,
    changes: list[str],
) -> MoveOutcome:
    return MoveOutcome(
        move=move,
        side=side,
        combat=combat,
        winner=session.winner if evaluation.finished else None,
        reason=session.termination_reason if evaluation.finished else None,
        finished=evaluation.finished,
        changes=changes,
    )

