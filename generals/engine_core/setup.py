"""
Setup - Initial piece placement.

This module handles:
- Validating a side's committed placement
- Random placement with a seeded generator (computer side, CLI)
- Writing a placement onto the board

A placement is valid iff it uses exactly the canonical 21-piece roster
(one Flag) and every piece sits on a distinct square of the side's three
reserved rows.
"""

from __future__ import annotations
import random
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from .board import Board, Cell, Position
from .errors import InvalidSetup
from .pieces import BOARD_COLS, INITIAL_PIECES, PIECES_PER_SIDE, Rank, Side, roster_counts


@dataclass(frozen=True)
class Placement:
    """One piece placed on one square."""
    rank: Rank
    position: Position

    @classmethod
    def of(cls, rank: Rank | str, row: int, col: int) -> Placement:
        if isinstance(rank, str):
            rank = Rank.from_label(rank)
        return cls(rank=rank, position=Position(row, col))


def setup_zone(side: Side) -> list[Position]:
    """All squares a side may use during setup."""
    return [Position(row, col) for row in side.setup_rows for col in range(BOARD_COLS)]


def validate_placements(side: Side, placements: Sequence[Placement]) -> None:
    """Raise InvalidSetup unless placements form a legal initial setup for side."""
    if len(placements) != PIECES_PER_SIDE:
        raise InvalidSetup(
            f"Invalid number of pieces: expected {PIECES_PER_SIDE}, got {len(placements)}"
        )

    counts = Counter(p.rank for p in placements)
    expected = roster_counts()
    if counts != expected:
        missing = expected - counts
        extra = counts - expected
        details = []
        if missing:
            details.append("missing " + ", ".join(f"{n}x {r.label}" for r, n in missing.items()))
        if extra:
            details.append("extra " + ", ".join(f"{n}x {r.label}" for r, n in extra.items()))
        raise InvalidSetup("Piece set does not match the standard roster: " + "; ".join(details))

    seen: set[Position] = set()
    for placement in placements:
        pos = placement.position
        if pos.row not in side.setup_rows or not pos.in_bounds:
            raise InvalidSetup(f"Pieces must be placed in your area; {pos} is outside it")
        if pos in seen:
            raise InvalidSetup(f"Two pieces placed on {pos}")
        seen.add(pos)


def place_on_board(board: Board, side: Side, placements: Iterable[Placement]) -> Board:
    """Write a (validated) placement onto the board, pieces hidden."""
    return board.with_changes({
        p.position: Cell(rank=p.rank, side=side, revealed=False)
        for p in placements
    })


def random_setup(side: Side, rng: random.Random | None = None) -> list[Placement]:
    """
    Random legal placement.

    The roster is shuffled into 21 of the side's 27 squares.
    """
    rng = rng or random.Random()
    pieces = list(INITIAL_PIECES)
    rng.shuffle(pieces)
    squares = rng.sample(setup_zone(side), len(pieces))
    return [Placement(rank=rank, position=pos) for rank, pos in zip(pieces, squares)]
