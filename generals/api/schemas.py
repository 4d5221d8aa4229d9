"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error codes are the engine's ErrorCode values (NOT_YOUR_TURN,
SELF_CAPTURE, SESSION_NOT_FOUND, ...), plus INVALID_REQUEST for unknown
names in a request (behavior, difficulty, preset, piece).
"""

from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.errors import ErrorCode


# =============================================================================
# Shared Models
# =============================================================================

class PositionInfo(BaseModel):
    """A board square."""
    row: int
    col: int

    model_config = {"from_attributes": True}


class PlacementInfo(BaseModel):
    """One piece placed during setup."""
    rank: str = Field(..., description="Piece label ('Spy', '2nd Lieutenant') or name ('SPY')")
    row: int
    col: int


class CellInfo(BaseModel):
    """An occupied square as seen by the requesting side."""
    side: str
    rank: Optional[str] = Field(None, description="Null when the piece is hidden")
    rank_value: Optional[int] = None
    revealed: bool = False


class CombatInfo(BaseModel):
    """Result of a challenge."""
    attacker: str
    defender: str
    outcome: str = Field(description="attacker_wins, defender_wins or tie")


class MoveInfo(BaseModel):
    from_pos: PositionInfo
    to_pos: PositionInfo


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    vs_computer: bool = Field(True, description="side2 is played by the computer")
    behavior: Optional[str] = Field(
        None, description="AI behavior: aggressive, defensive, passive, balanced"
    )
    difficulty: Optional[str] = Field(None, description="AI difficulty: easy, medium, hard")
    side1_setup: Optional[list[PlacementInfo]] = Field(
        None, description="Commit side1's placement at once"
    )
    side1_preset: Optional[str] = Field(None, description="Commit a named preset for side1")


class SetupRequest(BaseModel):
    """Request to commit one side's initial placement."""
    side: str = Field(..., description="side1 or side2")
    placements: Optional[list[PlacementInfo]] = None
    preset: Optional[str] = Field(None, description="Use a named preset instead")
    random: bool = Field(False, description="Use a random placement instead")


class MoveRequest(BaseModel):
    """Request to make one move."""
    side: str
    from_row: int
    from_col: int
    to_row: int
    to_col: int
    auto_reply: bool = Field(
        False, description="In a game against the computer, commit its reply too"
    )


class SideRequest(BaseModel):
    """Request naming the acting side (surrender, timeout)."""
    side: str


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Session state as seen by one side."""
    session_id: str
    status: str
    current_turn: str
    move_count: int = 0
    winner: Optional[str] = None
    termination_reason: Optional[str] = None
    computer_side: Optional[str] = None
    ai_behavior: str
    ai_difficulty: str
    setup_committed: list[str] = Field(default_factory=list)
    viewer: Optional[str] = Field(None, description="Side the board is masked for")
    board: list[list[Optional[CellInfo]]] = Field(default_factory=list)
    last_move_from: Optional[PositionInfo] = None
    last_move_to: Optional[PositionInfo] = None
    created_at: Optional[float] = None
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    version: int = 0
    api_version: str = "v1"


class MoveResponse(BaseModel):
    """Outcome of a committed move, plus the computer's reply if requested."""
    ok: bool = True
    session_id: str
    move: Optional[MoveInfo] = None
    combat: Optional[CombatInfo] = None
    winner: Optional[str] = None
    reason: Optional[str] = None
    finished: bool = False
    changes: list[str] = Field(default_factory=list)

    ai_move: Optional[MoveInfo] = None
    ai_combat: Optional[CombatInfo] = None
    ai_passed: bool = False

    session: SessionResponse
    api_version: str = "v1"


class MoveRecordInfo(BaseModel):
    move_number: int
    side: str
    piece: Optional[str] = None
    from_pos: Optional[PositionInfo] = None
    to_pos: Optional[PositionInfo] = None
    kind: Optional[str] = Field(None, description="move, challenge, or null for a pass")
    combat: Optional[CombatInfo] = None
    timestamp: Optional[float] = None


class HistoryResponse(BaseModel):
    """Move history for replay. Boards are unmasked only once finished."""
    session_id: str
    status: str
    initial_board: Optional[list[list[Optional[CellInfo]]]] = None
    moves: list[MoveRecordInfo] = Field(default_factory=list)
    api_version: str = "v1"


class SideStatsInfo(BaseModel):
    moves: int = 0
    challenges: int = 0
    pieces_eliminated: int = 0
    pieces_lost: int = 0
    spies_revealed: int = 0

    model_config = {"from_attributes": True}


class SummaryResponse(BaseModel):
    """End-of-game statistics."""
    session_id: str
    status: str
    winner: Optional[str] = None
    reason: Optional[str] = None
    move_count: int = 0
    duration: Optional[float] = None
    flag_captured: bool = False
    stats: dict[str, SideStatsInfo] = Field(default_factory=dict)
    api_version: str = "v1"


class PresetInfo(BaseModel):
    name: str
    description: str
    placements: list[PlacementInfo] = Field(
        default_factory=list, description="Placements for side1"
    )


class PresetListResponse(BaseModel):
    presets: list[PresetInfo]
    count: int


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str = "development"
