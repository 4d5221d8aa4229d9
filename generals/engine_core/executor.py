"""
Move Executor - Applies a validated move to a board.

Pure: returns a new Board and never touches the input. Callers compose it
with the win evaluator before committing anything.
"""

from __future__ import annotations
from dataclasses import replace

from .board import Board, Position
from .combat import CombatOutcome, CombatResult, resolve
from .move import ExecutionResult


def execute(board: Board, from_pos: Position, to_pos: Position) -> ExecutionResult:
    """
    Apply a move that already passed validate_move().

    - Empty destination: the piece relocates.
    - Enemy destination: the challenge is resolved and
      attacker_wins -> attacker takes the square, hidden again;
      defender_wins -> attacker is removed, defender untouched;
      tie -> both squares are emptied.
    """
    attacker = board.get(from_pos)
    if attacker is None:
        raise ValueError(f"No piece at {from_pos}")

    defender = board.get(to_pos)
    if defender is None:
        return ExecutionResult(
            board=board.with_changes({from_pos: None, to_pos: attacker}),
        )

    outcome = resolve(attacker.rank, defender.rank)
    combat = CombatResult(
        attacker=attacker.rank,
        defender=defender.rank,
        outcome=outcome,
        attacker_side=attacker.side,
    )

    if outcome is CombatOutcome.ATTACKER_WINS:
        changes = {from_pos: None, to_pos: replace(attacker, revealed=False)}
    elif outcome is CombatOutcome.DEFENDER_WINS:
        changes = {from_pos: None}
    else:
        changes = {from_pos: None, to_pos: None}

    return ExecutionResult(board=board.with_changes(changes), combat=combat)
