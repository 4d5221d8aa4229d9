"""
FastAPI Application - REST API for the Generals engine.

Endpoints:
    POST   /api/v1/sessions                  Create game session
    GET    /api/v1/sessions                  List active sessions
    GET    /api/v1/sessions/{id}?side=       Get session (board masked for side)
    DELETE /api/v1/sessions/{id}             End session
    POST   /api/v1/sessions/{id}/setup       Commit one side's placement
    POST   /api/v1/sessions/{id}/moves       Make a move (optionally with AI reply)
    POST   /api/v1/sessions/{id}/ai-move     Compute and commit a computer move
    POST   /api/v1/sessions/{id}/surrender   Surrender
    POST   /api/v1/sessions/{id}/timeout     Report that the side to move ran out of time
    GET    /api/v1/sessions/{id}/history     Move history
    GET    /api/v1/sessions/{id}/summary     Match statistics
    GET    /api/v1/presets                   Built-in setup formations
    GET    /api/v1/health                    Health check

All responses are JSON with explicit Pydantic schemas. Rejected calls
return an ErrorResponse and leave the session unchanged.
"""

from typing import Annotated, Optional, Union
import os

# Environment configuration
GENERALS_ENV = os.getenv("GENERALS_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
SESSION_TTL = int(os.getenv("GENERALS_SESSION_TTL", "3600"))
DEFAULT_BEHAVIOR = os.getenv("GENERALS_DEFAULT_BEHAVIOR", "balanced")
DEFAULT_DIFFICULTY = os.getenv("GENERALS_DEFAULT_DIFFICULTY", "medium")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from ..engine_core.errors import EngineError
    from ..session import SessionManager
    from .service import APIService, error_status, to_error_response
    from .schemas import (
        # Request models
        CreateSessionRequest,
        SetupRequest,
        MoveRequest,
        SideRequest,
        # Response models
        SessionResponse,
        MoveResponse,
        HistoryResponse,
        SummaryResponse,
        PresetListResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
    )

    app = FastAPI(
        title="Generals Engine API",
        description="""
Game of the Generals rules engine with a computer opponent.

## Flow

1. `POST /sessions` creates a game; the computer side is placed at random
2. `POST /setup` commits side1's 21 pieces (or pass `side1_preset` at creation)
3. `POST /moves` for each move; set `auto_reply=true` to get the computer's answer in the same call

## Error Codes

| Code | HTTP | Description |
|------|------|-------------|
| `INVALID_SETUP` | 400 | Wrong piece count, roster or zone |
| `NOT_YOUR_TURN` | 400 | Mover is not the side to move |
| `OUT_OF_BOUNDS` | 400 | Destination outside the 8x9 board |
| `ILLEGAL_DISTANCE` | 400 | Not a single orthogonal step |
| `SELF_CAPTURE` | 400 | Destination holds the mover's own piece |
| `ILLEGAL_FLAG_ATTACK` | 400 | A Flag may only challenge a Flag |
| `SESSION_NOT_PLAYING` | 409 | Game is in setup |
| `GAME_ALREADY_FINISHED` | 409 | Game is over |
| `CONCURRENT_MODIFICATION` | 409 | Another write landed first; retry |
| `SESSION_NOT_FOUND` | 404 | Session does not exist |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(
            default_behavior=DEFAULT_BEHAVIOR,
            default_difficulty=DEFAULT_DIFFICULTY,
        ),
        session_ttl=SESSION_TTL,
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: EngineError) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=error_status(error.code),
            content=to_error_response(error).model_dump(mode="json"),
        )

    error_responses = {
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        request: CreateSessionRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        The computer side (side2 by default) is placed at random. Supply
        `side1_setup` or `side1_preset` to start playing immediately.
        """
        try:
            return api_service.create_session(request)
        except EngineError as e:
            return make_error_response(e)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List the IDs of sessions that are not finished."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Get session state",
    )
    async def get_session(
        session_id: str,
        side: Annotated[Optional[str], Query(description="Mask the board for this side")] = None,
    ) -> Union[SessionResponse, JSONResponse]:
        """Get the session; without `side`, every piece is shown hidden until the game ends."""
        try:
            return api_service.get_session(session_id, side)
        except EngineError as e:
            return make_error_response(e)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/setup",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Commit a side's initial placement",
    )
    async def commit_setup(
        session_id: str,
        request: SetupRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        try:
            return api_service.commit_setup(session_id, request)
        except EngineError as e:
            return make_error_response(e)

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=MoveResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Make a move",
    )
    async def make_move(
        session_id: str,
        request: MoveRequest,
    ) -> Union[MoveResponse, JSONResponse]:
        """
        Validate, execute and evaluate one move.

        With `auto_reply=true` in a game against the computer, the
        computer's reply is committed before the response is returned.
        """
        try:
            return api_service.make_move(session_id, request)
        except EngineError as e:
            return make_error_response(e)

    @app.post(
        "/api/v1/sessions/{session_id}/ai-move",
        response_model=MoveResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Compute and commit a computer move",
    )
    async def ai_move(
        session_id: str,
        side: Annotated[Optional[str], Query(description="Side to play (default: side to move)")] = None,
    ) -> Union[MoveResponse, JSONResponse]:
        try:
            return api_service.ai_move(session_id, side)
        except EngineError as e:
            return make_error_response(e)

    @app.post(
        "/api/v1/sessions/{session_id}/surrender",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Surrender",
    )
    async def surrender(
        session_id: str,
        request: SideRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        try:
            return api_service.surrender(session_id, request.side)
        except EngineError as e:
            return make_error_response(e)

    @app.post(
        "/api/v1/sessions/{session_id}/timeout",
        response_model=SessionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Report a timeout for the side to move",
    )
    async def timeout(
        session_id: str,
        request: SideRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        try:
            return api_service.timeout(session_id, request.side)
        except EngineError as e:
            return make_error_response(e)

    @app.get(
        "/api/v1/sessions/{session_id}/history",
        response_model=HistoryResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Move history",
    )
    async def get_history(
        session_id: str,
        side: Annotated[Optional[str], Query(description="Show this side's pieces")] = None,
    ) -> Union[HistoryResponse, JSONResponse]:
        try:
            return api_service.get_history(session_id, side)
        except EngineError as e:
            return make_error_response(e)

    @app.get(
        "/api/v1/sessions/{session_id}/summary",
        response_model=SummaryResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Match statistics",
    )
    async def get_summary(session_id: str) -> Union[SummaryResponse, JSONResponse]:
        try:
            return api_service.get_summary(session_id)
        except EngineError as e:
            return make_error_response(e)

    @app.get(
        "/api/v1/presets",
        response_model=PresetListResponse,
        tags=["Setup"],
        summary="Built-in setup formations",
    )
    async def presets() -> PresetListResponse:
        return api_service.list_presets()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="generals-engine",
            version=__version__,
            environment=GENERALS_ENV,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Generals Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn generals.api.app:app
app = create_app()
