"""
Move Validator - Checks a proposed move against the rules.

Checks run in a fixed order and the first failure is raised, so callers
always see the specific rule that was broken:
1. mover == turn                         (NotYourTurn)
2. from holds a piece owned by mover     (InvalidPieceSelection)
3. to is on the board                    (OutOfBounds)
4. exactly one orthogonal step           (IllegalDistance)
5. to is not the mover's own piece       (SelfCapture)
6. a Flag may only enter empty squares or attack a Flag (IllegalFlagAttack)
"""

from __future__ import annotations

from .board import Board, Position
from .errors import (
    IllegalDistance,
    IllegalFlagAttack,
    IllegalMove,
    InvalidPieceSelection,
    NotYourTurn,
    OutOfBounds,
    SelfCapture,
)
from .pieces import Rank, Side


def validate_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    mover: Side,
    turn: Side,
) -> None:
    """Raise the matching IllegalMove subclass if the move is not legal."""
    if mover is not turn:
        raise NotYourTurn(f"It is {turn.value}'s turn, not {mover.value}'s")

    piece = board.get(from_pos)
    if piece is None or piece.side is not mover:
        raise InvalidPieceSelection(f"No {mover.value} piece at {from_pos}")

    if not to_pos.in_bounds:
        raise OutOfBounds(f"Destination {to_pos} is off the board")

    if from_pos.distance(to_pos) != 1:
        raise IllegalDistance(
            f"Pieces move one square orthogonally; {from_pos} to {to_pos} is not adjacent"
        )

    target = board.get(to_pos)
    if target is not None and target.side is mover:
        raise SelfCapture(f"Cannot attack your own piece at {to_pos}")

    if piece.rank is Rank.FLAG and target is not None and target.rank is not Rank.FLAG:
        raise IllegalFlagAttack("A Flag can only challenge the opposing Flag")


def is_legal_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    mover: Side,
    turn: Side,
) -> bool:
    """Boolean form of validate_move()."""
    try:
        validate_move(board, from_pos, to_pos, mover, turn)
    except IllegalMove:
        return False
    return True
