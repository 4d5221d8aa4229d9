"""
Move Generator - Enumerates all legal moves for one side.

The generator is used by:
1. Bots to enumerate candidate moves
2. The session to detect a boxed-in side (stall)
3. UI to highlight available moves

Order is deterministic: pieces row-major, then up, down, left, right.
Bots depend on that order for their tie-breaking.
"""

from __future__ import annotations
from typing import Iterator

from .board import DIRECTIONS, Board
from .move import Move
from .pieces import Rank, Side


def iter_legal_moves(board: Board, side: Side) -> Iterator[Move]:
    """Yield every legal single-step move for side."""
    for pos, cell in board.pieces_of(side):
        for d_row, d_col in DIRECTIONS:
            dest = pos.offset(d_row, d_col)
            if not dest.in_bounds:
                continue
            target = board.get(dest)
            if target is not None and target.side is side:
                continue
            if cell.rank is Rank.FLAG and target is not None and target.rank is not Rank.FLAG:
                continue
            yield Move(pos, dest)


def legal_moves(board: Board, side: Side) -> list[Move]:
    """Convenience list form of iter_legal_moves()."""
    return list(iter_legal_moves(board, side))


def has_legal_move(board: Board, side: Side) -> bool:
    return next(iter_legal_moves(board, side), None) is not None
