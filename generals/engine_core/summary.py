"""
Match Summary - End-of-game statistics derived from the history.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .combat import CombatOutcome
from .pieces import Rank, Side
from .state import GameSession
from .win_evaluator import TerminationReason


@dataclass
class SideStats:
    """Per-side tallies."""
    moves: int = 0
    challenges: int = 0
    pieces_eliminated: int = 0  # enemy pieces this side removed
    pieces_lost: int = 0
    spies_revealed: int = 0  # own spies exposed by losing or tying a challenge


@dataclass
class MatchSummary:
    session_id: str
    status: str
    winner: Side | None
    reason: TerminationReason | None
    move_count: int
    duration: float | None
    flag_captured: bool
    stats: dict[Side, SideStats] = field(default_factory=dict)


def summarize_match(session: GameSession) -> MatchSummary:
    """Walk the history and tally the match."""
    stats = {Side.SIDE1: SideStats(), Side.SIDE2: SideStats()}

    for record in session.history:
        if record.is_pass:
            continue
        mover = stats[record.side]
        other = stats[record.side.opponent]
        mover.moves += 1
        combat = record.combat
        if combat is None:
            continue

        mover.challenges += 1
        if combat.outcome in (CombatOutcome.ATTACKER_WINS, CombatOutcome.TIE):
            mover.pieces_eliminated += 1
            other.pieces_lost += 1
            if combat.defender is Rank.SPY:
                other.spies_revealed += 1
        if combat.outcome in (CombatOutcome.DEFENDER_WINS, CombatOutcome.TIE):
            other.pieces_eliminated += 1
            mover.pieces_lost += 1
            if combat.attacker is Rank.SPY:
                mover.spies_revealed += 1

    duration = None
    if session.started_at is not None and session.finished_at is not None:
        duration = session.finished_at - session.started_at

    return MatchSummary(
        session_id=session.session_id,
        status=session.status.value,
        winner=session.winner,
        reason=session.termination_reason,
        move_count=session.move_count,
        duration=duration,
        flag_captured=session.termination_reason is TerminationReason.FLAG_CAPTURED,
        stats=stats,
    )
