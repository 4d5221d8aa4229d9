"""
Setup Presets - Built-in starting formations.

Formations are authored from side1's point of view (rows 5-7, flag at the
back). side2 gets the same formation rotated 180 degrees.
"""

from __future__ import annotations
from dataclasses import dataclass

from .pieces import BOARD_COLS, BOARD_ROWS, Rank, Side
from .setup import Placement


@dataclass(frozen=True)
class SetupPreset:
    name: str
    description: str
    pieces: tuple[tuple[Rank, int, int], ...]  # (rank, row, col) for side1

    def placements_for(self, side: Side) -> list[Placement]:
        """Placements for side, rotated for side2."""
        if side is Side.SIDE1:
            return [Placement.of(rank, row, col) for rank, row, col in self.pieces]
        return [
            Placement.of(rank, BOARD_ROWS - 1 - row, BOARD_COLS - 1 - col)
            for rank, row, col in self.pieces
        ]


R = Rank

AGGRESSIVE_FRONT = SetupPreset(
    name="Aggressive Front",
    description="Strong offensive formation with flag protected by spies",
    pieces=(
        # front line
        (R.FIVE_STAR_GENERAL, 5, 4), (R.FOUR_STAR_GENERAL, 5, 3),
        (R.THREE_STAR_GENERAL, 5, 5), (R.TWO_STAR_GENERAL, 5, 2),
        (R.ONE_STAR_GENERAL, 5, 6), (R.COLONEL, 5, 1),
        (R.LIEUTENANT_COLONEL, 5, 7), (R.MAJOR, 5, 0), (R.CAPTAIN, 5, 8),
        # middle line
        (R.SPY, 6, 3), (R.SPY, 6, 5), (R.FIRST_LIEUTENANT, 6, 4),
        (R.SECOND_LIEUTENANT, 6, 2), (R.SERGEANT, 6, 6),
        (R.PRIVATE, 6, 1), (R.PRIVATE, 6, 7), (R.PRIVATE, 6, 0), (R.PRIVATE, 6, 8),
        # back line
        (R.FLAG, 7, 4), (R.PRIVATE, 7, 3), (R.PRIVATE, 7, 5),
    ),
)

FORTRESS_DEFENSE = SetupPreset(
    name="Fortress Defense",
    description="Defensive formation with flag heavily protected in the back",
    pieces=(
        (R.PRIVATE, 5, 0), (R.PRIVATE, 5, 1),
        (R.SERGEANT, 5, 3), (R.SECOND_LIEUTENANT, 5, 4), (R.FIRST_LIEUTENANT, 5, 5),
        (R.CAPTAIN, 5, 6), (R.PRIVATE, 5, 7), (R.PRIVATE, 5, 8),
        (R.MAJOR, 6, 1), (R.LIEUTENANT_COLONEL, 6, 2), (R.COLONEL, 6, 3),
        (R.ONE_STAR_GENERAL, 6, 4), (R.TWO_STAR_GENERAL, 6, 5),
        (R.THREE_STAR_GENERAL, 6, 6), (R.FOUR_STAR_GENERAL, 6, 7),
        (R.PRIVATE, 6, 0), (R.PRIVATE, 6, 8),
        (R.SPY, 7, 3), (R.FLAG, 7, 4), (R.SPY, 7, 5), (R.FIVE_STAR_GENERAL, 7, 2),
    ),
)

BALANCED_FORMATION = SetupPreset(
    name="Balanced Formation",
    description="Well-rounded setup with good offense and defense",
    pieces=(
        (R.PRIVATE, 5, 0), (R.SERGEANT, 5, 1), (R.SECOND_LIEUTENANT, 5, 2),
        (R.CAPTAIN, 5, 3), (R.MAJOR, 5, 4), (R.LIEUTENANT_COLONEL, 5, 5),
        (R.COLONEL, 5, 6), (R.ONE_STAR_GENERAL, 5, 7), (R.PRIVATE, 5, 8),
        (R.PRIVATE, 6, 0), (R.FIRST_LIEUTENANT, 6, 1), (R.TWO_STAR_GENERAL, 6, 2),
        (R.THREE_STAR_GENERAL, 6, 3), (R.FOUR_STAR_GENERAL, 6, 4),
        (R.FIVE_STAR_GENERAL, 6, 5), (R.SPY, 6, 6), (R.PRIVATE, 6, 7), (R.PRIVATE, 6, 8),
        (R.SPY, 7, 3), (R.FLAG, 7, 4), (R.PRIVATE, 7, 5),
    ),
)

SPY_GAMBIT = SetupPreset(
    name="Spy Gambit",
    description="Aggressive formation focusing on spy tactics",
    pieces=(
        (R.PRIVATE, 5, 0), (R.PRIVATE, 5, 1), (R.SPY, 5, 2),
        (R.SERGEANT, 5, 3), (R.SECOND_LIEUTENANT, 5, 4), (R.FIRST_LIEUTENANT, 5, 5),
        (R.SPY, 5, 6), (R.PRIVATE, 5, 7), (R.PRIVATE, 5, 8),
        (R.CAPTAIN, 6, 0), (R.MAJOR, 6, 1), (R.LIEUTENANT_COLONEL, 6, 2),
        (R.COLONEL, 6, 3), (R.ONE_STAR_GENERAL, 6, 4), (R.TWO_STAR_GENERAL, 6, 5),
        (R.THREE_STAR_GENERAL, 6, 6), (R.FOUR_STAR_GENERAL, 6, 7), (R.FIVE_STAR_GENERAL, 6, 8),
        (R.PRIVATE, 7, 3), (R.FLAG, 7, 4), (R.PRIVATE, 7, 5),
    ),
)


PRESETS: dict[str, SetupPreset] = {
    preset.name: preset
    for preset in (AGGRESSIVE_FRONT, FORTRESS_DEFENSE, BALANCED_FORMATION, SPY_GAMBIT)
}


def list_presets() -> list[SetupPreset]:
    return list(PRESETS.values())


def preset_placements(name: str, side: Side) -> list[Placement]:
    """Placements of a named preset for side."""
    preset = PRESETS.get(name)
    if preset is None:
        raise KeyError(f"Unknown preset: {name}")
    return preset.placements_for(side)
