"""
Win Evaluator - Decides whether a post-move board ends the game.

Checks run after every executed move (and every pass), in this order:
1. Elimination: a side reduced to its lone Flag loses. The mover's
   opponent is checked first, so a mutual wipe-out goes to the mover.
2. Flag capture: the move just made took the enemy Flag.
3. Deferred base reach: a flag that arrived on the enemy home row on an
   earlier turn wins once the opponent has had exactly one reply, provided
   it is still standing on that square.

Arriving on the enemy home row never ends the game by itself. It arms a
PendingBaseReach that the *next* evaluation consumes. This gives the
defender one move to capture the flag and keeps both sides on equal moves.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .board import Board, Position
from .combat import CombatResult
from .pieces import Rank, Side


class TerminationReason(str, Enum):
    FLAG_CAPTURED = "flag_captured"
    FLAG_REACHED_BASE = "flag_reached_base"
    ELIMINATION = "elimination"
    SURRENDER = "surrender"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class PendingBaseReach:
    """A flag standing on the enemy home row, waiting out the grace move."""
    side: Side
    position: Position


@dataclass(frozen=True)
class WinEvaluation:
    """Evaluation result. `pending` is carried to the next evaluation."""
    winner: Side | None = None
    reason: TerminationReason | None = None
    pending: PendingBaseReach | None = None

    @property
    def finished(self) -> bool:
        return self.winner is not None


def is_eliminated(board: Board, side: Side) -> bool:
    """True when every non-Flag piece of side is gone and the Flag remains."""
    return board.ranks_of(side) == [Rank.FLAG]


def evaluate(
    board: Board,
    mover: Side,
    combat: CombatResult | None = None,
    moved_to: Position | None = None,
    pending: PendingBaseReach | None = None,
) -> WinEvaluation:
    """
    Evaluate the board after mover's turn.

    Args:
        board: Board after the move was executed
        mover: Side that just acted (moved or passed)
        combat: Challenge result of that move, if any
        moved_to: Destination of that move (None for a pass)
        pending: PendingBaseReach carried over from the previous evaluation
    """
    for loser in (mover.opponent, mover):
        if is_eliminated(board, loser):
            return WinEvaluation(winner=loser.opponent, reason=TerminationReason.ELIMINATION)

    if combat is not None and combat.captured_flag:
        return WinEvaluation(winner=combat.attacker_side, reason=TerminationReason.FLAG_CAPTURED)

    carried: PendingBaseReach | None = None
    if pending is not None:
        if pending.side is mover:
            # Not yet answered by the opponent
            carried = pending
        else:
            cell = board.get(pending.position)
            if cell is not None and cell.side is pending.side and cell.rank is Rank.FLAG:
                return WinEvaluation(
                    winner=pending.side,
                    reason=TerminationReason.FLAG_REACHED_BASE,
                )

    if moved_to is not None and moved_to.row == mover.opponent.home_row:
        cell = board.get(moved_to)
        if cell is not None and cell.side is mover and cell.rank is Rank.FLAG:
            carried = PendingBaseReach(side=mover, position=moved_to)

    return WinEvaluation(pending=carried)
