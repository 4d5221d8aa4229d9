"""
Generals - Game of the Generals Rules Engine

A deterministic rules engine for the Game of the Generals with a
heuristic computer opponent. The engine provides:
- Piece catalog and combat resolution
- Move validation and execution on an immutable board
- Win evaluation, including the deferred flag-at-base rule
- Session state machine (setup -> playing -> finished)
- Bot policies with configurable behavior and difficulty
"""

__version__ = "0.1.0"
