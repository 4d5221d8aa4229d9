"""
Engine Core - Deterministic rules for the Game of the Generals.

The engine is the runtime that:
1. Defines the piece catalog and the 8x9 board
2. Resolves challenges between two ranks
3. Validates and executes single-step moves
4. Decides wins, including the deferred flag-at-base rule
5. Drives a session through setup -> playing -> finished
"""

from .pieces import BOARD_COLS, BOARD_ROWS, INITIAL_PIECES, PIECES_PER_SIDE, Rank, Side
from .board import Board, Cell, HiddenCell, Position
from .combat import CombatOutcome, CombatResult, can_defeat, resolve
from .errors import EngineError, ErrorCode, IllegalMove
from .move import Move, MoveKind, MoveOutcome, MoveRecord
from .validator import is_legal_move, validate_move
from .executor import execute
from .move_generator import has_legal_move, legal_moves
from .win_evaluator import PendingBaseReach, TerminationReason, WinEvaluation, evaluate
from .state import GameSession, SessionStatus
from .setup import Placement, random_setup, validate_placements
from .presets import PRESETS, SetupPreset, preset_placements
from .summary import MatchSummary, summarize_match

__all__ = [
    "BOARD_ROWS",
    "BOARD_COLS",
    "INITIAL_PIECES",
    "PIECES_PER_SIDE",
    "Rank",
    "Side",
    "Board",
    "Cell",
    "HiddenCell",
    "Position",
    "CombatOutcome",
    "CombatResult",
    "resolve",
    "can_defeat",
    "EngineError",
    "ErrorCode",
    "IllegalMove",
    "Move",
    "MoveKind",
    "MoveOutcome",
    "MoveRecord",
    "validate_move",
    "is_legal_move",
    "execute",
    "legal_moves",
    "has_legal_move",
    "PendingBaseReach",
    "TerminationReason",
    "WinEvaluation",
    "evaluate",
    "GameSession",
    "SessionStatus",
    "Placement",
    "random_setup",
    "validate_placements",
    "PRESETS",
    "SetupPreset",
    "preset_placements",
    "MatchSummary",
    "summarize_match",
]
