"""
Tests for session storage, the session manager and the game loop.

Tests:
- Versioned store (compare-and-swap)
- Session lifecycle through the manager
- One writer per session under concurrent proposals
- AI move computation and stale-session cleanup
- Game loop turn handling
"""

import random
import threading

import pytest

from ..engine_core.errors import (
    ConcurrentModification,
    GameAlreadyFinished,
    InvalidSetup,
    NotYourTurn,
    SessionNotFound,
    SessionNotPlaying,
)
from ..engine_core.move import Move
from ..engine_core.move_generator import legal_moves
from ..engine_core.pieces import Rank, Side
from ..engine_core.presets import preset_placements
from ..engine_core.state import GameSession, SessionStatus
from ..engine_core.win_evaluator import TerminationReason
from ..session import GameLoop, InMemorySessionStore, LoopState, SessionManager
from .conftest import make_board, playing_session


A, B = Side.SIDE1, Side.SIDE2
OPENING = Move.of(5, 4, 4, 4)  # Major steps into the neutral rows


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def playing(manager, side1_placements) -> GameSession:
    return manager.create_session(side1_setup=side1_placements, session_id="live")


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore."""

    def test_insert_starts_at_version_zero(self, store):
        stored = store.insert(GameSession(session_id="s1", version=5))
        assert stored.version == 0
        assert store.load("s1").version == 0

    def test_save_bumps_version(self, store):
        store.insert(GameSession(session_id="s1"))
        session = store.load("s1")
        session.move_count = 3
        saved = store.save(session, expected_version=0)
        assert saved.version == 1
        assert store.load("s1").move_count == 3

    def test_stale_write_rejected(self, store):
        store.insert(GameSession(session_id="s1"))
        first = store.load("s1")
        second = store.load("s1")
        store.save(first, expected_version=first.version)
        second.move_count = 99
        with pytest.raises(ConcurrentModification):
            store.save(second, expected_version=second.version)
        assert store.load("s1").move_count == 0

    def test_duplicate_insert(self, store):
        store.insert(GameSession(session_id="s1"))
        with pytest.raises(ConcurrentModification):
            store.insert(GameSession(session_id="s1"))

    def test_load_missing(self, store):
        with pytest.raises(SessionNotFound):
            store.load("nope")

    def test_load_returns_copy(self, store):
        store.insert(GameSession(session_id="s1"))
        session = store.load("s1")
        session.status = SessionStatus.FINISHED
        assert store.load("s1").status is SessionStatus.SETUP

    def test_delete(self, store):
        store.insert(GameSession(session_id="s1"))
        assert store.delete("s1")
        assert not store.delete("s1")
        assert store.list_ids() == []


class TestSessionManagerLifecycle:
    """Tests for session creation and setup."""

    def test_create_with_setup_starts_game(self, playing):
        assert playing.status is SessionStatus.PLAYING
        assert playing.current_turn is A
        assert playing.computer_side is B
        assert playing.board.count(A) == 21
        assert playing.board.count(B) == 21
        assert playing.version == 0
        assert playing.started_at == 1000.0

    def test_create_then_commit(self, manager, side1_placements):
        session = manager.create_session()
        assert session.status is SessionStatus.SETUP
        assert session.setup_committed == {B}

        session = manager.commit_setup(session.session_id, A, side1_placements)
        assert session.status is SessionStatus.PLAYING
        assert session.version == 1

    def test_two_player_setup(self, manager):
        session = manager.create_session(computer_side=None)
        assert session.setup_committed == set()

        session = manager.commit_setup(
            session.session_id, A, preset_placements("Spy Gambit", A)
        )
        assert session.status is SessionStatus.SETUP
        session = manager.commit_setup(
            session.session_id, B, preset_placements("Fortress Defense", B)
        )
        assert session.status is SessionStatus.PLAYING

    def test_rejected_setup_writes_nothing(self, manager, side1_placements):
        session = manager.create_session()
        with pytest.raises(InvalidSetup):
            manager.commit_setup(session.session_id, A, side1_placements[:20])
        assert manager.get_session(session.session_id).version == 0

    def test_unknown_profile(self, manager):
        with pytest.raises(ValueError):
            manager.create_session(behavior="reckless")
        with pytest.raises(ValueError):
            manager.create_session(difficulty="nightmare")

    def test_profile_defaults(self, clock):
        manager = SessionManager(clock=clock, default_behavior="defensive", default_difficulty="hard")
        session = manager.create_session()
        assert session.ai_behavior == "defensive"
        assert session.ai_difficulty == "hard"

    def test_generated_ids_are_unique(self, manager):
        ids = {manager.create_session().session_id for _ in range(5)}
        assert len(ids) == 5


class TestSessionManagerMoves:
    """Tests for moves committed through the manager."""

    def test_propose_move(self, manager, playing, clock):
        clock.advance(5)
        outcome = manager.propose_move("live", A, OPENING)

        assert not outcome.finished
        assert outcome.changes[0] == "side1 moved (5,4) -> (4,4)"
        session = manager.get_session("live")
        assert session.move_count == 1
        assert session.current_turn is B
        assert session.version == 1
        assert session.last_move_at == 1005.0
        assert session.board.get(OPENING.to_pos).rank is Rank.MAJOR

    def test_wrong_turn_writes_nothing(self, manager, playing):
        with pytest.raises(NotYourTurn):
            manager.propose_move("live", B, Move.of(2, 4, 3, 4))
        assert manager.get_session("live").version == 0

    def test_missing_session(self, manager):
        with pytest.raises(SessionNotFound):
            manager.propose_move("nope", A, OPENING)

    def test_concurrent_proposals(self, manager, playing):
        """Of several identical proposals racing, exactly one is applied."""
        workers = 8
        barrier = threading.Barrier(workers)
        results = []
        results_lock = threading.Lock()

        def propose():
            barrier.wait()
            try:
                manager.propose_move("live", A, OPENING)
                result = "ok"
            except NotYourTurn:
                result = "rejected"
            with results_lock:
                results.append(result)

        threads = [threading.Thread(target=propose) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("rejected") == workers - 1
        session = manager.get_session("live")
        assert session.move_count == 1
        assert session.version == 1

    def test_surrender_then_move(self, manager, playing):
        session = manager.surrender("live", A)
        assert session.winner is B
        assert session.termination_reason is TerminationReason.SURRENDER
        with pytest.raises(GameAlreadyFinished):
            manager.propose_move("live", A, OPENING)

    def test_timeout(self, manager, playing):
        session = manager.timeout("live", A)
        assert session.winner is B
        assert session.termination_reason is TerminationReason.TIMEOUT


class TestRequestAIMove:
    """Tests for computer move computation."""

    def test_not_committed(self, manager, playing):
        manager.propose_move("live", A, OPENING)
        before = manager.get_session("live")

        move = manager.request_ai_move("live")

        assert move in legal_moves(before.board, B)
        after = manager.get_session("live")
        assert after.version == before.version
        assert after.current_turn is B

    def test_not_computers_turn(self, manager, playing):
        with pytest.raises(NotYourTurn):
            manager.request_ai_move("live")

    def test_explicit_side(self, manager, playing):
        move = manager.request_ai_move("live", A)
        assert move in legal_moves(playing.board, A)

    def test_during_setup(self, manager):
        session = manager.create_session()
        with pytest.raises(SessionNotPlaying):
            manager.request_ai_move(session.session_id)

    def test_no_legal_move(self, manager):
        """A boxed-in side gets None and must pass."""
        board = make_board(
            (A, Rank.FLAG, 7, 8),
            (A, Rank.SERGEANT, 0, 1),
            (A, Rank.CAPTAIN, 1, 0),
            (B, Rank.FLAG, 0, 0),
        )
        manager.store.insert(playing_session(board, turn=B, computer_side=B, session_id="boxed"))

        assert manager.request_ai_move("boxed") is None

        outcome = manager.pass_turn("boxed", B)
        assert outcome.finished
        assert outcome.winner is A
        assert outcome.reason is TerminationReason.ELIMINATION


class TestHousekeeping:
    """Tests for listing, ending and cleaning up sessions."""

    def test_end_session(self, manager, playing):
        assert manager.end_session("live")
        assert not manager.end_session("live")
        with pytest.raises(SessionNotFound):
            manager.get_session("live")

    def test_list_active_sessions(self, manager, playing):
        other = manager.create_session()
        done = manager.create_session()
        manager.surrender(done.session_id, A)

        active = manager.list_active_sessions()
        assert sorted(active) == sorted(["live", other.session_id])

    def test_cleanup_stale_sessions(self, manager, playing, clock):
        idle = manager.create_session()
        clock.advance(1800)
        manager.propose_move("live", A, OPENING)
        clock.advance(2000)

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == 1
        assert manager.store.list_ids() == ["live"]
        with pytest.raises(SessionNotFound):
            manager.get_session(idle.session_id)

    def test_cleanup_keeps_fresh_sessions(self, manager, playing, clock):
        clock.advance(60)
        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 0
        assert manager.store.list_ids() == ["live"]


class TestGameLoop:
    """Tests for the game loop driver."""

    def test_human_move_gets_reply(self, manager, playing):
        loop = GameLoop(manager, "live")

        result = loop.play_human_move(A, OPENING)

        assert result.loop_state is LoopState.WAITING_HUMAN_MOVE
        assert result.human_outcome.side is A
        assert result.ai_move is not None
        assert result.ai_outcome.side is B
        assert not result.ai_passed
        assert len(result.changes) >= 2
        session = loop.session
        assert session.move_count == 2
        assert session.current_turn is A
        assert loop.history == [result]

    def test_rejected_human_move(self, manager, playing):
        loop = GameLoop(manager, "live")
        with pytest.raises(NotYourTurn):
            loop.play_human_move(B, Move.of(2, 4, 3, 4))
        assert loop.history == []

    def test_human_surrender_leaves_loop_over(self, manager, playing):
        loop = GameLoop(manager, "live")
        loop.play_human_move(A, OPENING)
        manager.surrender("live", A)
        with pytest.raises(GameAlreadyFinished):
            loop.play_human_move(A, Move.of(4, 4, 3, 4))

    def test_ai_pass_ends_game(self, manager):
        board = make_board(
            (A, Rank.FLAG, 7, 8),
            (A, Rank.SERGEANT, 0, 1),
            (A, Rank.CAPTAIN, 1, 0),
            (B, Rank.FLAG, 0, 0),
        )
        manager.store.insert(playing_session(board, turn=B, computer_side=B, session_id="boxed"))

        result = GameLoop(manager, "boxed").play_ai_turn()

        assert result.ai_passed
        assert result.loop_state is LoopState.GAME_OVER
        assert result.winner is A
        assert result.reason == "elimination"

    def test_run_to_completion(self, clock):
        manager = SessionManager(clock=clock, rng=random.Random(3), default_difficulty="hard")
        manager.create_session(computer_side=None, session_id="sim")
        manager.commit_setup("sim", A, preset_placements("Aggressive Front", A))
        manager.commit_setup("sim", B, preset_placements("Balanced Formation", B))

        loop = GameLoop(manager, "sim", move_limit=300)
        session = loop.run_to_completion()

        assert len(loop.history) <= 300
        if session.is_finished:
            assert session.winner in (A, B)
            assert loop.history[-1].loop_state is LoopState.GAME_OVER
        else:
            assert len(loop.history) == 300
        assert session.move_count <= len(loop.history)
