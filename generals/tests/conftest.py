"""
Pytest fixtures for Generals tests.
"""

import random

import pytest

from ..engine_core.board import Board, Cell, Position
from ..engine_core.pieces import Rank, Side
from ..engine_core.presets import preset_placements
from ..engine_core.reducer import create_session
from ..engine_core.state import GameSession, SessionStatus
from ..session import SessionManager


def make_board(*pieces) -> Board:
    """Board from (side, rank, row, col) tuples."""
    return Board.from_pieces({
        Position(row, col): Cell(rank=rank, side=side)
        for side, rank, row, col in pieces
    })


def playing_session(board: Board, turn: Side = Side.SIDE1, **kwargs) -> GameSession:
    """A session already in play on a hand-built board."""
    return GameSession(
        session_id=kwargs.pop("session_id", "test_session"),
        board=board,
        status=SessionStatus.PLAYING,
        current_turn=turn,
        setup_committed={Side.SIDE1, Side.SIDE2},
        **kwargs,
    )


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def side1_placements():
    return preset_placements("Balanced Formation", Side.SIDE1)


@pytest.fixture
def started_session(side1_placements, rng) -> GameSession:
    """A vs-computer session with both setups committed."""
    return create_session(
        "started",
        now=1000.0,
        side1_setup=side1_placements,
        rng=rng,
    )


@pytest.fixture
def manager(clock) -> SessionManager:
    return SessionManager(clock=clock, rng=random.Random(7))


@pytest.fixture
def duel_board() -> Board:
    """Small mid-game board: side1 Private at (4,4), side2 Sergeant at (3,4)."""
    return make_board(
        (Side.SIDE1, Rank.FLAG, 7, 0),
        (Side.SIDE1, Rank.PRIVATE, 4, 4),
        (Side.SIDE1, Rank.MAJOR, 6, 6),
        (Side.SIDE2, Rank.FLAG, 0, 8),
        (Side.SIDE2, Rank.SERGEANT, 3, 4),
        (Side.SIDE2, Rank.CAPTAIN, 1, 1),
    )
