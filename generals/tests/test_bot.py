"""
Tests for bot move selection.

Tests:
- Bots only select legal moves
- Flag captures win over everything else
- Personality weights and difficulty tiers change the score
- Seeded bots are reproducible
"""

import random

import pytest

from ..bots import GeneralsBot, RandomPolicy
from ..bots.evaluator import CandidateMove, MoveEvaluator, describe
from ..bots.personality import (
    BALANCED,
    DEFENSIVE,
    DIFFICULTIES,
    PERSONALITIES,
    get_difficulty,
    get_personality,
)
from ..engine_core.board import Board
from ..engine_core.errors import NoLegalMove
from ..engine_core.move import Move
from ..engine_core.move_generator import legal_moves
from ..engine_core.pieces import Rank, Side
from .conftest import make_board


A, B = Side.SIDE1, Side.SIDE2


@pytest.fixture
def flag_in_reach() -> Board:
    """side1 Private at (4,4) can take the side2 Flag at (3,4)."""
    return make_board(
        (A, Rank.FLAG, 7, 0),
        (A, Rank.PRIVATE, 4, 4),
        (A, Rank.MAJOR, 6, 6),
        (B, Rank.FLAG, 3, 4),
        (B, Rank.SERGEANT, 0, 0),
    )


@pytest.fixture
def exposed_board() -> Board:
    """A side2 Sergeant at (3,5) threatens (3,4) and (4,5)."""
    return make_board(
        (A, Rank.FLAG, 7, 0),
        (A, Rank.PRIVATE, 4, 4),
        (B, Rank.FLAG, 0, 8),
        (B, Rank.SERGEANT, 3, 5),
    )


class TestBotMoveLegality:
    """Tests that bots only select legal moves."""

    def test_bot_selects_legal_move(self, started_session):
        """Bot always selects from the legal moves it was given."""
        board = started_session.board
        bot = GeneralsBot(side=A, rng=random.Random(1))
        legal = legal_moves(board, A)

        decision = bot.select_move(board, A, legal)

        assert decision.move in legal
        assert decision.evaluated_moves == len(legal)
        assert decision.explanation

    def test_random_policy_selects_legal(self, started_session):
        board = started_session.board
        bot = RandomPolicy(seed=42)
        legal = legal_moves(board, A)

        for _ in range(10):
            assert bot.select_move(board, A, legal).move in legal

    @pytest.mark.parametrize("policy", [
        GeneralsBot(side=A, rng=random.Random(0)),
        RandomPolicy(seed=0),
    ])
    def test_no_legal_moves(self, policy, duel_board):
        with pytest.raises(NoLegalMove):
            policy.select_move(duel_board, A, [])

    def test_single_candidate(self, duel_board):
        move = Move.of(4, 4, 3, 4)
        decision = GeneralsBot(side=A, rng=random.Random(0)).select_move(duel_board, A, [move])
        assert decision.move == move
        assert decision.confidence == 1.0


class TestFlagCapture:
    """An available flag capture is always taken."""

    @pytest.mark.parametrize("behavior", sorted(PERSONALITIES))
    @pytest.mark.parametrize("difficulty", sorted(DIFFICULTIES))
    def test_flag_capture_chosen(self, flag_in_reach, behavior, difficulty):
        bot = GeneralsBot.for_profile(A, behavior, difficulty, rng=random.Random(5))
        decision = bot.select_move(flag_in_reach, A, legal_moves(flag_in_reach, A))
        assert decision.move == Move.of(4, 4, 3, 4)
        assert decision.evaluation_details == {"behavior": behavior, "difficulty": difficulty}


class TestDescribe:
    """Tests for the candidate features."""

    def test_attack_features(self, duel_board):
        candidate = describe(duel_board, A, Move.of(4, 4, 3, 4))
        assert candidate.piece is Rank.PRIVATE
        assert candidate.target is Rank.SERGEANT
        assert candidate.is_attack
        assert candidate.advantage == -1
        assert candidate.forward_delta == 1

    def test_forward_is_per_side(self, duel_board):
        """side2 moving down the board is moving forward."""
        assert describe(duel_board, B, Move.of(3, 4, 2, 4)).forward_delta == -1
        assert describe(duel_board, B, Move.of(1, 1, 2, 1)).forward_delta == 1
        assert describe(duel_board, A, Move.of(6, 6, 6, 7)).forward_delta == 0

    def test_unsafe_next_to_stronger_enemy(self, exposed_board):
        assert not describe(exposed_board, A, Move.of(4, 4, 4, 5)).is_safe
        assert not describe(exposed_board, A, Move.of(4, 4, 3, 4)).is_safe
        assert describe(exposed_board, A, Move.of(4, 4, 5, 4)).is_safe

    def test_enemy_flag_is_no_threat(self):
        board = make_board(
            (A, Rank.FLAG, 7, 0),
            (A, Rank.PRIVATE, 4, 4),
            (B, Rank.FLAG, 3, 5),
            (B, Rank.SERGEANT, 0, 0),
        )
        assert describe(board, A, Move.of(4, 4, 4, 5)).is_safe


class TestScoring:
    """Tests for MoveEvaluator weights and tiers."""

    def candidate(self, piece, target=None, forward=0, safe=True, col=0):
        return CandidateMove(
            move=Move.of(4, col, 4, col),
            piece=piece,
            target=target,
            forward_delta=forward,
            is_safe=safe,
        )

    def test_balanced_attack(self):
        evaluator = MoveEvaluator(BALANCED)
        score = evaluator.base_score(self.candidate(Rank.PRIVATE, Rank.SERGEANT, forward=1))
        # attack 8, advantage -1, forward +2, safe 3
        assert score == 12

    def test_spy_strike_bonus(self):
        evaluator = MoveEvaluator(BALANCED)
        assert evaluator.base_score(self.candidate(Rank.SPY, Rank.MAJOR)) == 26

    def test_private_against_spy_bonus(self):
        evaluator = MoveEvaluator(BALANCED)
        assert evaluator.base_score(self.candidate(Rank.PRIVATE, Rank.SPY)) == 3

    def test_backward_costs_one_forward(self):
        evaluator = MoveEvaluator(BALANCED)
        assert evaluator.base_score(self.candidate(Rank.MAJOR, forward=-1)) == 2

    def test_defensive_exposed_officer(self):
        evaluator = MoveEvaluator(DEFENSIVE)
        assert evaluator.base_score(self.candidate(Rank.COLONEL, safe=False)) == -12
        assert evaluator.base_score(self.candidate(Rank.PRIVATE, safe=False)) == -8

    def test_flag_capture_bonus(self):
        evaluator = MoveEvaluator(BALANCED)
        assert evaluator.base_score(self.candidate(Rank.PRIVATE, Rank.FLAG)) == 1000 + 8 + 1 + 3

    def test_medium_noise_is_bounded(self):
        evaluator = MoveEvaluator(BALANCED, get_difficulty("medium"))
        rng = random.Random(9)
        candidate = self.candidate(Rank.MAJOR)
        for _ in range(50):
            assert 1 <= evaluator.score(Board.empty(), A, candidate, rng) <= 5

    def test_easy_halves_score(self):
        easy = get_difficulty("easy")
        evaluator = MoveEvaluator(BALANCED, easy)
        score = evaluator.score(Board.empty(), A, self.candidate(Rank.SPY, Rank.MAJOR), random.Random(3))
        assert 13 - easy.noise <= score <= 13 + easy.noise

    def test_hard_centre_penalty(self):
        evaluator = MoveEvaluator(BALANCED, get_difficulty("hard"))
        rng = random.Random(0)
        edge = evaluator.score(Board.empty(), A, self.candidate(Rank.MAJOR, col=0), rng)
        centre = evaluator.score(Board.empty(), A, self.candidate(Rank.MAJOR, col=4), rng)
        assert edge == 3
        assert centre == 1

    def test_hard_exposure_lookahead(self, exposed_board):
        evaluator = MoveEvaluator(BALANCED, get_difficulty("hard"))
        candidate = describe(exposed_board, A, Move.of(4, 4, 4, 5))
        score = evaluator.score(exposed_board, A, candidate, random.Random(0))
        # unsafe -4, Sergeant threat 8 + 1, centre 0.5 * 3
        assert score == pytest.approx(-14.5)


class TestProfiles:
    """Tests for profile lookup and reproducibility."""

    def test_unknown_behavior(self):
        with pytest.raises(ValueError):
            get_personality("reckless")
        with pytest.raises(ValueError):
            GeneralsBot.for_profile(A, "balanced", "impossible")

    def test_seeded_bots_agree(self, started_session):
        board = started_session.board
        legal = legal_moves(board, A)
        for difficulty in DIFFICULTIES:
            first = GeneralsBot.for_profile(A, "aggressive", difficulty, rng=random.Random(21))
            second = GeneralsBot.for_profile(A, "aggressive", difficulty, rng=random.Random(21))
            assert first.select_move(board, A, legal).move == second.select_move(board, A, legal).move

    def test_default_bot_is_balanced_medium(self):
        bot = GeneralsBot(side=B)
        assert bot.personality is BALANCED
        assert bot.difficulty.name == "medium"
        assert "balanced" in bot.get_name()
