"""
Tests for the command-line interface.
"""

import random

import pytest

from ..bots import GeneralsBot, RandomPolicy
from ..cli import _parse_move, _simulation_bot, main
from ..engine_core.pieces import Side


class TestCLI:
    """Tests for the CLI commands."""

    def test_presets(self, capsys):
        main(["presets"])
        out = capsys.readouterr().out
        assert "Balanced Formation:" in out
        assert "Spy Gambit:" in out
        assert "Flag@4" in out

    def test_simulate(self, capsys):
        main(["simulate", "--seed", "4", "--max-turns", "60", "--difficulty", "medium"])
        out = capsys.readouterr().out
        assert "side1: aggressive, side2: defensive, difficulty: medium" in out
        assert "side1:" in out and "challenges" in out

    def test_simulate_against_random_baseline(self, capsys):
        main(["simulate", "--side2", "random", "--seed", "8", "--max-turns", "40"])
        out = capsys.readouterr().out
        assert "side1: aggressive, side2: random, difficulty: hard" in out

    def test_simulation_bot(self):
        rng = random.Random(1)
        assert isinstance(_simulation_bot(Side.SIDE2, "random", "hard", rng), RandomPolicy)
        bot = _simulation_bot(Side.SIDE1, "passive", "easy", rng)
        assert isinstance(bot, GeneralsBot)
        assert bot.personality.name == "passive"

    def test_simulate_unknown_behavior(self, capsys):
        with pytest.raises(SystemExit):
            main(["simulate", "--side1", "reckless"])
        assert "Unknown behavior" in capsys.readouterr().out

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])

    def test_parse_move(self):
        assert _parse_move("5 4 4 4") == (5, 4, 4, 4)
        assert _parse_move("5,4 4,4") == (5, 4, 4, 4)
        with pytest.raises(ValueError):
            _parse_move("5 4")
