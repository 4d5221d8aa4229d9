"""
API Module - HTTP interface to the engine.

Clients:
1. Create a session (the computer side is placed automatically)
2. Commit side1's setup
3. Make moves, with or without the computer's reply
4. Read history and the end-of-game summary

All state lives in the in-memory session store.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    SetupRequest,
    MoveRequest,
    SideRequest,
    # Responses
    SessionResponse,
    MoveResponse,
    HistoryResponse,
    SummaryResponse,
    PresetListResponse,
    ErrorResponse,
    # Shared
    CellInfo,
    CombatInfo,
    PlacementInfo,
    PositionInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "SetupRequest",
    "MoveRequest",
    "SideRequest",
    # Responses
    "SessionResponse",
    "MoveResponse",
    "HistoryResponse",
    "SummaryResponse",
    "PresetListResponse",
    "ErrorResponse",
    # Shared
    "CellInfo",
    "CombatInfo",
    "PlacementInfo",
    "PositionInfo",
    # Service
    "APIService",
    "create_app",
]
