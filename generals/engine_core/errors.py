"""
Engine Errors - Structured rule violations.

Every rejection carries a stable ErrorCode so API and UI layers can
report the exact rule that was broken. All of these are recoverable:
they are raised before any state is changed.
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_SETUP = "INVALID_SETUP"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    ILLEGAL_DISTANCE = "ILLEGAL_DISTANCE"
    SELF_CAPTURE = "SELF_CAPTURE"
    ILLEGAL_FLAG_ATTACK = "ILLEGAL_FLAG_ATTACK"
    INVALID_PIECE_SELECTION = "INVALID_PIECE_SELECTION"
    SESSION_NOT_PLAYING = "SESSION_NOT_PLAYING"
    GAME_ALREADY_FINISHED = "GAME_ALREADY_FINISHED"
    NO_LEGAL_MOVE = "NO_LEGAL_MOVE"
    PASS_NOT_ALLOWED = "PASS_NOT_ALLOWED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class EngineError(Exception):
    """Base class for all engine rejections."""
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidSetup(EngineError):
    code = ErrorCode.INVALID_SETUP


class IllegalMove(EngineError):
    """A proposed move failed validation."""


class NotYourTurn(IllegalMove):
    code = ErrorCode.NOT_YOUR_TURN


class OutOfBounds(IllegalMove):
    code = ErrorCode.OUT_OF_BOUNDS


class IllegalDistance(IllegalMove):
    code = ErrorCode.ILLEGAL_DISTANCE


class SelfCapture(IllegalMove):
    code = ErrorCode.SELF_CAPTURE


class IllegalFlagAttack(IllegalMove):
    code = ErrorCode.ILLEGAL_FLAG_ATTACK


class InvalidPieceSelection(IllegalMove):
    code = ErrorCode.INVALID_PIECE_SELECTION


class SessionNotPlaying(EngineError):
    code = ErrorCode.SESSION_NOT_PLAYING


class GameAlreadyFinished(SessionNotPlaying):
    code = ErrorCode.GAME_ALREADY_FINISHED


class NoLegalMove(EngineError):
    """The side to move has no candidate moves."""
    code = ErrorCode.NO_LEGAL_MOVE


class PassNotAllowed(EngineError):
    code = ErrorCode.PASS_NOT_ALLOWED


class SessionNotFound(EngineError):
    code = ErrorCode.SESSION_NOT_FOUND


class ConcurrentModification(EngineError):
    """A write lost a compare-and-swap race against another writer."""
    code = ErrorCode.CONCURRENT_MODIFICATION


class InvalidRequest(EngineError):
    """A request named an unknown side, piece, preset or AI profile."""
    code = ErrorCode.INVALID_REQUEST
