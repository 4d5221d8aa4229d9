"""
Session Manager - Creates and drives game sessions.

LIFECYCLE:
1. create_session: the computer side (if any) is placed at random; side1
   may commit its placement in the same call
2. commit_setup: once both sides are committed the game is `playing`
3. propose_move / pass_turn: one transition per call, side1 moves first
4. surrender / timeout / a winning move: the game is `finished`, for good
5. end_session removes it from the store

WRITE DISCIPLINE:
- One writer per session at a time (a lock per session id)
- Every write is read -> transition -> compare-and-swap against the version
  that was read; a rejected transition writes nothing
- The AI never writes: request_ai_move only returns a Move, which the
  caller commits through propose_move like any other
"""

from __future__ import annotations
import logging
import random
import threading
import time
import uuid
from typing import Callable, Sequence

from ..bots.generals_bot import GeneralsBot
from ..bots.personality import get_difficulty, get_personality
from ..engine_core import reducer
from ..engine_core.errors import (
    ConcurrentModification,
    EngineError,
    NoLegalMove,
    NotYourTurn,
    SessionNotPlaying,
)
from ..engine_core.move import Move, MoveOutcome
from ..engine_core.move_generator import legal_moves
from ..engine_core.pieces import Side
from ..engine_core.setup import Placement
from ..engine_core.state import GameSession
from .store import InMemorySessionStore, SessionStore

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions and commit setups
    - Serialize every write to a session
    - Compute (but never commit) computer moves
    - Clean up finished or abandoned sessions
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
        default_behavior: str = "balanced",
        default_difficulty: str = "medium",
    ):
        self.store = store or InMemorySessionStore()
        self.clock = clock
        self.rng = rng or random.Random()
        self.default_behavior = default_behavior
        self.default_difficulty = default_difficulty
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # =========================================================================
    # Write path
    # =========================================================================

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
            return lock

    def _commit(self, session_id: str, transition, action: str):
        """
        Run one transition under the session's lock and write it back.

        transition(session) returns either a new session or a
        (new session, extra) pair; the extra value is passed through.
        """
        with self._lock_for(session_id):
            session = self.store.load(session_id)
            try:
                result = transition(session)
            except EngineError as e:
                logger.debug("Rejected %s on %s: %s (%s)", action, session_id, e.message, e.code.value)
                raise

            new_session, extra = result if isinstance(result, tuple) else (result, None)
            try:
                saved = self.store.save(new_session, expected_version=session.version)
            except ConcurrentModification:
                logger.warning("Lost write race on %s during %s", session_id, action)
                raise

        if session.status is not saved.status:
            self._log_status_change(saved)
        return saved, extra

    def _log_status_change(self, session: GameSession) -> None:
        if session.is_playing:
            logger.info("Session %s started", session.session_id)
        elif session.is_finished:
            logger.info(
                "Session %s finished: %s wins by %s after %d moves",
                session.session_id,
                session.winner.value,
                session.termination_reason.value,
                session.move_count,
            )

    # =========================================================================
    # Operations
    # =========================================================================

    def create_session(
        self,
        side1_setup: Sequence[Placement] | None = None,
        computer_side: Side | None = Side.SIDE2,
        behavior: str | None = None,
        difficulty: str | None = None,
        session_id: str | None = None,
    ) -> GameSession:
        """
        Create a new session.

        Args:
            side1_setup: Optional placement for side1, committed at once
            computer_side: Side played by the computer (None for two humans)
            behavior: AI behavior profile (defaults to the manager's)
            difficulty: AI difficulty tier (defaults to the manager's)
            session_id: Explicit id; a uuid4 otherwise

        Raises:
            ValueError: unknown behavior or difficulty
            InvalidSetup: side1_setup is not a legal placement
        """
        behavior = get_personality(behavior or self.default_behavior).name
        difficulty = get_difficulty(difficulty or self.default_difficulty).name

        session = reducer.create_session(
            session_id or str(uuid.uuid4()),
            now=self.clock(),
            computer_side=computer_side,
            side1_setup=side1_setup,
            rng=self.rng,
            ai_behavior=behavior,
            ai_difficulty=difficulty,
        )
        stored = self.store.insert(session)
        logger.info(
            "Created session %s (computer: %s, %s/%s)",
            stored.session_id,
            computer_side.value if computer_side else "none",
            behavior,
            difficulty,
        )
        if stored.is_playing:
            self._log_status_change(stored)
        return stored

    def commit_setup(
        self,
        session_id: str,
        side: Side,
        placements: Sequence[Placement],
    ) -> GameSession:
        """Commit one side's placement."""
        saved, _ = self._commit(
            session_id,
            lambda s: reducer.commit_setup(s, side, placements, self.clock()),
            "setup",
        )
        return saved

    def propose_move(self, session_id: str, side: Side, move: Move) -> MoveOutcome:
        """Validate, execute and evaluate one move, atomically."""
        _, outcome = self._commit(
            session_id,
            lambda s: reducer.apply_move(s, side, move, self.clock()),
            "move",
        )
        return outcome

    def pass_turn(self, session_id: str, side: Side) -> MoveOutcome:
        """Hand the turn over when side has no legal move."""
        _, outcome = self._commit(
            session_id,
            lambda s: reducer.pass_turn(s, side, self.clock()),
            "pass",
        )
        return outcome

    def surrender(self, session_id: str, side: Side) -> GameSession:
        saved, _ = self._commit(
            session_id,
            lambda s: reducer.surrender(s, side, self.clock()),
            "surrender",
        )
        return saved

    def timeout(self, session_id: str, side: Side) -> GameSession:
        saved, _ = self._commit(
            session_id,
            lambda s: reducer.timeout(s, side, self.clock()),
            "timeout",
        )
        return saved

    def request_ai_move(self, session_id: str, side: Side | None = None) -> Move | None:
        """
        Compute the computer's move without committing it.

        Args:
            session_id: Session to play in
            side: Side to compute for (defaults to the session's computer side,
                or the side to move in a two-player session)

        Returns:
            The chosen Move, or None when the side has no legal move

        Raises:
            SessionNotPlaying: the game is not in progress
            NotYourTurn: side is not the side to move
        """
        session = self.store.load(session_id)
        if not session.is_playing:
            raise SessionNotPlaying(f"Game is not active (status: {session.status.value})")
        side = side or session.computer_side or session.current_turn
        if side is not session.current_turn:
            raise NotYourTurn(f"It is {session.current_turn.value}'s turn, not {side.value}'s")

        bot = GeneralsBot.for_profile(
            side, session.ai_behavior, session.ai_difficulty, rng=self.rng
        )
        try:
            decision = bot.select_move(session.board, side, legal_moves(session.board, side))
        except NoLegalMove:
            logger.info("Session %s: %s has no legal move", session_id, side.value)
            return None
        return decision.move

    # =========================================================================
    # Housekeeping
    # =========================================================================

    def get_session(self, session_id: str) -> GameSession:
        """Return a copy of the session; raises SessionNotFound."""
        return self.store.load(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """Remove a session from the store."""
        with self._lock_for(session_id):
            removed = self.store.delete(session_id)
        with self._locks_guard:
            self._locks.pop(session_id, None)
        if removed:
            logger.info("Ended session %s (%s)", session_id, reason)
        return removed

    def list_active_sessions(self) -> list[str]:
        """IDs of sessions that are not finished."""
        active = []
        for session_id in self.store.list_ids():
            try:
                session = self.store.load(session_id)
            except EngineError:
                continue  # removed meanwhile
            if not session.is_finished:
                active.append(session_id)
        return active

    def cleanup_stale_sessions(self, max_age_seconds: float = 3600) -> int:
        """
        Remove sessions with no activity for more than max_age_seconds.

        Activity is the last move, or creation for a session with no moves.
        Returns the number of sessions removed.
        """
        now = self.clock()
        removed = 0
        for session_id in self.store.list_ids():
            try:
                session = self.store.load(session_id)
            except EngineError:
                continue
            stamps = [t for t in (session.created_at, session.last_move_at, session.finished_at) if t is not None]
            last_activity = max(stamps, default=now)
            if now - last_activity > max_age_seconds:
                if self.end_session(session_id, reason="stale"):
                    removed += 1
        return removed
