"""
Combat Resolver - Piece-vs-piece challenge outcomes.

resolve() is pure, total and deterministic. Precedence:
1. Flag involved: Flag-vs-Flag and any piece attacking a Flag are won by
   the attacker. A Flag attacking anything else loses (the validator never
   lets that happen).
2. Spy attacking: beats Flag and officers (Sergeant..5 Star General),
   loses to Private, ties with Spy.
3. Spy defending: loses to Private, beats attacking officers.
4. Private attacking: ties with Private, loses to every officer.
5. Private defending: loses to every officer.
6. Otherwise the higher ordinal wins; equal ordinals tie.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .pieces import Rank, Side


class CombatOutcome(str, Enum):
    ATTACKER_WINS = "attacker_wins"
    DEFENDER_WINS = "defender_wins"
    TIE = "tie"

    @property
    def reversed(self) -> CombatOutcome:
        """Same fight seen with the roles swapped."""
        if self is CombatOutcome.ATTACKER_WINS:
            return CombatOutcome.DEFENDER_WINS
        if self is CombatOutcome.DEFENDER_WINS:
            return CombatOutcome.ATTACKER_WINS
        return CombatOutcome.TIE


@dataclass(frozen=True)
class CombatResult:
    """A resolved challenge, as reported to collaborators and history."""
    attacker: Rank
    defender: Rank
    outcome: CombatOutcome
    attacker_side: Side

    @property
    def captured_flag(self) -> bool:
        return self.defender is Rank.FLAG and self.outcome is CombatOutcome.ATTACKER_WINS

    @property
    def winner_side(self) -> Side | None:
        """Side whose piece survived, None on a tie."""
        if self.outcome is CombatOutcome.ATTACKER_WINS:
            return self.attacker_side
        if self.outcome is CombatOutcome.DEFENDER_WINS:
            return self.attacker_side.opponent
        return None


def resolve(attacker: Rank, defender: Rank) -> CombatOutcome:
    """Resolve a challenge between two piece identities."""
    if attacker is Rank.FLAG or defender is Rank.FLAG:
        if attacker is Rank.FLAG and defender is not Rank.FLAG:
            return CombatOutcome.DEFENDER_WINS
        return CombatOutcome.ATTACKER_WINS

    if attacker is Rank.SPY:
        if defender.is_officer:
            return CombatOutcome.ATTACKER_WINS
        if defender is Rank.PRIVATE:
            return CombatOutcome.DEFENDER_WINS
        return CombatOutcome.TIE

    if defender is Rank.SPY:
        if attacker is Rank.PRIVATE:
            return CombatOutcome.ATTACKER_WINS
        if attacker.is_officer:
            return CombatOutcome.DEFENDER_WINS
        return CombatOutcome.TIE

    if attacker is Rank.PRIVATE:
        if defender is Rank.PRIVATE:
            return CombatOutcome.TIE
        return CombatOutcome.DEFENDER_WINS

    if defender is Rank.PRIVATE:
        return CombatOutcome.ATTACKER_WINS

    if attacker > defender:
        return CombatOutcome.ATTACKER_WINS
    if attacker < defender:
        return CombatOutcome.DEFENDER_WINS
    return CombatOutcome.TIE


def can_defeat(attacker: Rank, defender: Rank) -> bool:
    """True if attacker would eliminate defender in a challenge."""
    return resolve(attacker, defender) is CombatOutcome.ATTACKER_WINS
