"""
Piece Catalog - Ranks, sides and the canonical roster.

Ranks form a total order by ordinal. Flag, Spy and Private carry special
combat rules layered on top of that order (see combat.py).
"""

from __future__ import annotations
from collections import Counter
from enum import Enum, IntEnum


BOARD_ROWS = 8
BOARD_COLS = 9


class Rank(IntEnum):
    """Piece identity. The value is the rank ordinal."""
    FLAG = 0
    PRIVATE = 1
    SERGEANT = 2
    SECOND_LIEUTENANT = 3
    FIRST_LIEUTENANT = 4
    CAPTAIN = 5
    MAJOR = 6
    LIEUTENANT_COLONEL = 7
    COLONEL = 8
    ONE_STAR_GENERAL = 9
    TWO_STAR_GENERAL = 10
    THREE_STAR_GENERAL = 11
    FOUR_STAR_GENERAL = 12
    FIVE_STAR_GENERAL = 13
    SPY = 14

    @property
    def label(self) -> str:
        return RANK_LABELS[self]

    @property
    def is_officer(self) -> bool:
        """Sergeant through 5 Star General - the ranks a Spy eliminates."""
        return Rank.SERGEANT <= self <= Rank.FIVE_STAR_GENERAL

    @classmethod
    def from_label(cls, label: str) -> Rank:
        """Look up a rank by display label or enum name."""
        for rank, rank_label in RANK_LABELS.items():
            if label == rank_label or label.upper() == rank.name:
                return rank
        raise ValueError(f"Unknown piece: {label}")


RANK_LABELS: dict[Rank, str] = {
    Rank.FLAG: "Flag",
    Rank.PRIVATE: "Private",
    Rank.SERGEANT: "Sergeant",
    Rank.SECOND_LIEUTENANT: "2nd Lieutenant",
    Rank.FIRST_LIEUTENANT: "1st Lieutenant",
    Rank.CAPTAIN: "Captain",
    Rank.MAJOR: "Major",
    Rank.LIEUTENANT_COLONEL: "Lieutenant Colonel",
    Rank.COLONEL: "Colonel",
    Rank.ONE_STAR_GENERAL: "1 Star General",
    Rank.TWO_STAR_GENERAL: "2 Star General",
    Rank.THREE_STAR_GENERAL: "3 Star General",
    Rank.FOUR_STAR_GENERAL: "4 Star General",
    Rank.FIVE_STAR_GENERAL: "5 Star General",
    Rank.SPY: "Spy",
}


class Side(str, Enum):
    """The two players. side1 sets up at the bottom and moves first."""
    SIDE1 = "side1"
    SIDE2 = "side2"

    @property
    def opponent(self) -> Side:
        return Side.SIDE2 if self is Side.SIDE1 else Side.SIDE1

    @property
    def setup_rows(self) -> tuple[int, ...]:
        """Rows this side may place pieces in during setup."""
        return (5, 6, 7) if self is Side.SIDE1 else (0, 1, 2)

    @property
    def home_row(self) -> int:
        """Back row. The opponent's flag wins by reaching it."""
        return BOARD_ROWS - 1 if self is Side.SIDE1 else 0

    @property
    def forward(self) -> int:
        """Row delta of a forward step."""
        return -1 if self is Side.SIDE1 else 1


# 21 pieces per side
INITIAL_PIECES: tuple[Rank, ...] = (
    Rank.FLAG,
    Rank.SPY, Rank.SPY,
    Rank.PRIVATE, Rank.PRIVATE, Rank.PRIVATE,
    Rank.PRIVATE, Rank.PRIVATE, Rank.PRIVATE,
    Rank.SERGEANT,
    Rank.SECOND_LIEUTENANT,
    Rank.FIRST_LIEUTENANT,
    Rank.CAPTAIN,
    Rank.MAJOR,
    Rank.LIEUTENANT_COLONEL,
    Rank.COLONEL,
    Rank.ONE_STAR_GENERAL,
    Rank.TWO_STAR_GENERAL,
    Rank.THREE_STAR_GENERAL,
    Rank.FOUR_STAR_GENERAL,
    Rank.FIVE_STAR_GENERAL,
)

PIECES_PER_SIDE = len(INITIAL_PIECES)


def roster_counts() -> Counter[Rank]:
    """Canonical rank multiset for one side."""
    return Counter(INITIAL_PIECES)
