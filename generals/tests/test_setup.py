"""
Tests for initial placement.

Tests:
- Placement validation
- Random setup
- Built-in presets
"""

import random

import pytest

from ..engine_core.board import Board, Position
from ..engine_core.errors import ErrorCode, InvalidSetup
from ..engine_core.pieces import Rank, Side, roster_counts
from ..engine_core.presets import PRESETS, list_presets, preset_placements
from ..engine_core.setup import (
    Placement,
    place_on_board,
    random_setup,
    setup_zone,
    validate_placements,
)


A, B = Side.SIDE1, Side.SIDE2


class TestValidatePlacements:
    """Tests for validate_placements()."""

    def test_valid(self, side1_placements):
        validate_placements(A, side1_placements)

    def test_too_few(self, side1_placements):
        with pytest.raises(InvalidSetup) as exc:
            validate_placements(A, side1_placements[:-1])
        assert exc.value.code is ErrorCode.INVALID_SETUP
        assert "number of pieces" in exc.value.message

    def test_wrong_roster(self, side1_placements):
        """Swapping a Private for a second Spy keeps the count but breaks the roster."""
        placements = list(side1_placements)
        index = next(i for i, p in enumerate(placements) if p.rank is Rank.PRIVATE)
        placements[index] = Placement(Rank.SPY, placements[index].position)
        with pytest.raises(InvalidSetup) as exc:
            validate_placements(A, placements)
        assert "missing 1x Private" in exc.value.message
        assert "extra 1x Spy" in exc.value.message

    def test_outside_zone(self, side1_placements):
        placements = list(side1_placements)
        placements[0] = Placement(placements[0].rank, Position(4, 0))
        with pytest.raises(InvalidSetup):
            validate_placements(A, placements)

    def test_other_sides_zone(self, side1_placements):
        with pytest.raises(InvalidSetup):
            validate_placements(B, side1_placements)

    def test_duplicate_square(self, side1_placements):
        placements = list(side1_placements)
        placements[1] = Placement(placements[1].rank, placements[0].position)
        with pytest.raises(InvalidSetup):
            validate_placements(A, placements)

    def test_place_on_board(self, side1_placements):
        board = place_on_board(Board.empty(), A, side1_placements)
        assert board.count(A) == 21
        assert all(not cell.revealed for _, cell in board.pieces_of(A))

    def test_placement_from_label(self):
        assert Placement.of("1 Star General", 5, 0).rank is Rank.ONE_STAR_GENERAL
        assert Placement.of("flag", 7, 4).position == Position(7, 4)


class TestRandomSetup:
    """Tests for random_setup()."""

    @pytest.mark.parametrize("side", [A, B])
    def test_valid_for_both_sides(self, side):
        placements = random_setup(side, random.Random(3))
        validate_placements(side, placements)

    def test_seeded_is_reproducible(self):
        first = random_setup(A, random.Random(11))
        second = random_setup(A, random.Random(11))
        assert first == second

    def test_uses_zone(self):
        placements = random_setup(B, random.Random(5))
        zone = set(setup_zone(B))
        assert {p.position for p in placements} <= zone
        assert len(zone) == 27


class TestPresets:
    """Tests for the built-in formations."""

    def test_four_presets(self):
        assert set(PRESETS) == {
            "Aggressive Front",
            "Fortress Defense",
            "Balanced Formation",
            "Spy Gambit",
        }
        assert len(list_presets()) == 4

    @pytest.mark.parametrize("name", sorted(PRESETS))
    @pytest.mark.parametrize("side", [A, B])
    def test_every_preset_is_legal(self, name, side):
        validate_placements(side, preset_placements(name, side))

    def test_side2_is_rotated(self):
        """side1's back-row Flag at (7,4) lands on (0,4) for side2."""
        side1 = {p.position: p.rank for p in preset_placements("Aggressive Front", A)}
        side2 = {p.position: p.rank for p in preset_placements("Aggressive Front", B)}
        assert side1[Position(7, 4)] is Rank.FLAG
        assert side2[Position(0, 4)] is Rank.FLAG
        assert side1[Position(5, 0)] is side2[Position(2, 8)]

    def test_roster_matches(self):
        for preset in list_presets():
            ranks = [p.rank for p in preset.placements_for(A)]
            assert sorted(ranks) == sorted(roster_counts().elements())

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            preset_placements("Turtle", A)
