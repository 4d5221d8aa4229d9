"""
Session Module - Manages game sessions.

A session represents one game:
- Created with the computer side already placed
- Starts once both sides have committed a setup
- Accepts one write at a time (compare-and-swap on a version counter)
- Ends when a win condition, surrender or timeout finishes it

Sessions live in memory only.
"""

from .store import SessionStore, InMemorySessionStore
from .manager import SessionManager
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "SessionManager",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
