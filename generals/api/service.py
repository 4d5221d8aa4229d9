"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Drives sessions through the SessionManager
3. Formats engine objects as response models
4. Maps engine errors to HTTP status codes and ErrorResponses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.board import Board, HiddenCell, Position
from ..engine_core.combat import CombatResult
from ..engine_core.errors import EngineError, ErrorCode, InvalidRequest
from ..engine_core.move import Move, MoveOutcome, MoveRecord
from ..engine_core.pieces import Side
from ..engine_core.presets import list_presets, preset_placements
from ..engine_core.setup import Placement, random_setup
from ..engine_core.state import GameSession
from ..engine_core.summary import summarize_match
from ..session import GameLoop, SessionManager
from .schemas import (
    CellInfo,
    CombatInfo,
    CreateSessionRequest,
    ErrorResponse,
    HistoryResponse,
    MoveInfo,
    MoveRecordInfo,
    MoveRequest,
    MoveResponse,
    PlacementInfo,
    PositionInfo,
    PresetInfo,
    PresetListResponse,
    SessionResponse,
    SetupRequest,
    SideStatsInfo,
    SummaryResponse,
)


# HTTP status per error code; anything else is a plain 400
ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.CONCURRENT_MODIFICATION: 409,
    ErrorCode.SESSION_NOT_PLAYING: 409,
    ErrorCode.GAME_ALREADY_FINISHED: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


def error_status(code: ErrorCode) -> int:
    return ERROR_STATUS.get(code, 400)


def to_error_response(error: EngineError) -> ErrorResponse:
    return ErrorResponse(
        error=error.message,
        error_code=error.code,
        details={"type": type(error).__name__},
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        session = service.create_session(CreateSessionRequest(side1_preset="Spy Gambit"))
        result = service.make_move(session.session_id, MoveRequest(
            side="side1", from_row=5, from_col=4, to_row=4, to_col=4,
        ))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Sessions idle for longer are dropped whenever a new one is created
    session_ttl: float = 3600

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        side1_setup = None
        if request.side1_setup is not None:
            side1_setup = self._parse_placements(request.side1_setup)
        elif request.side1_preset:
            side1_setup = self._preset(request.side1_preset, Side.SIDE1)

        self.session_manager.cleanup_stale_sessions(self.session_ttl)
        try:
            session = self.session_manager.create_session(
                side1_setup=side1_setup,
                computer_side=Side.SIDE2 if request.vs_computer else None,
                behavior=request.behavior,
                difficulty=request.difficulty,
            )
        except ValueError as e:
            raise InvalidRequest(str(e)) from None
        return self.session_response(session, Side.SIDE1)

    def get_session(self, session_id: str, side: str | None = None) -> SessionResponse:
        session = self.session_manager.get_session(session_id)
        viewer = parse_side(side) if side else None
        return self.session_response(session, viewer)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Game operations
    # =========================================================================

    def commit_setup(self, session_id: str, request: SetupRequest) -> SessionResponse:
        side = parse_side(request.side)
        if request.placements is not None:
            placements = self._parse_placements(request.placements)
        elif request.preset:
            placements = self._preset(request.preset, side)
        elif request.random:
            placements = random_setup(side, self.session_manager.rng)
        else:
            raise InvalidRequest("Provide placements, a preset, or random=true")

        session = self.session_manager.commit_setup(session_id, side, placements)
        return self.session_response(session, side)

    def make_move(self, session_id: str, request: MoveRequest) -> MoveResponse:
        side = parse_side(request.side)
        move = Move.of(request.from_row, request.from_col, request.to_row, request.to_col)

        if not request.auto_reply:
            outcome = self.session_manager.propose_move(session_id, side, move)
            session = self.session_manager.get_session(session_id)
            return self._move_response(session, side, outcome)

        turn = GameLoop(self.session_manager, session_id).play_human_move(side, move)
        session = self.session_manager.get_session(session_id)
        response = self._move_response(session, side, turn.human_outcome)
        response.changes = turn.changes
        if turn.ai_outcome is not None:
            response.ai_move = _move_info(turn.ai_move) if turn.ai_move else None
            response.ai_combat = _combat_info(turn.ai_outcome.combat)
            response.ai_passed = turn.ai_passed
            response.winner = turn.winner.value if turn.winner else None
            response.reason = turn.reason
            response.finished = session.is_finished
        return response

    def ai_move(self, session_id: str, side: str | None = None) -> MoveResponse:
        """Compute and commit one computer move (or a pass when it has none)."""
        ai_side = parse_side(side) if side else None
        turn = GameLoop(self.session_manager, session_id).play_ai_turn(ai_side)
        session = self.session_manager.get_session(session_id)
        viewer = ai_side or session.computer_side or turn.ai_outcome.side
        response = self._move_response(session, viewer.opponent, turn.ai_outcome)
        response.ai_passed = turn.ai_passed
        return response

    def surrender(self, session_id: str, side: str) -> SessionResponse:
        acting = parse_side(side)
        session = self.session_manager.surrender(session_id, acting)
        return self.session_response(session, acting)

    def timeout(self, session_id: str, side: str) -> SessionResponse:
        acting = parse_side(side)
        session = self.session_manager.timeout(session_id, acting)
        return self.session_response(session, acting)

    # =========================================================================
    # Replay and statistics
    # =========================================================================

    def get_history(self, session_id: str, side: str | None = None) -> HistoryResponse:
        """Move list; while playing, only viewer's own pieces are named."""
        session = self.session_manager.get_session(session_id)
        viewer = parse_side(side) if side else None
        initial = None
        if session.initial_board is not None and session.is_finished:
            initial = _board_info(session.initial_board, None, reveal_all=True)
        return HistoryResponse(
            session_id=session.session_id,
            status=session.status.value,
            initial_board=initial,
            moves=[
                _record_info(r, show_piece=session.is_finished or r.side is viewer)
                for r in session.history
            ],
        )

    def get_summary(self, session_id: str) -> SummaryResponse:
        summary = summarize_match(self.session_manager.get_session(session_id))
        return SummaryResponse(
            session_id=summary.session_id,
            status=summary.status,
            winner=summary.winner.value if summary.winner else None,
            reason=summary.reason.value if summary.reason else None,
            move_count=summary.move_count,
            duration=summary.duration,
            flag_captured=summary.flag_captured,
            stats={
                side.value: SideStatsInfo.model_validate(stats)
                for side, stats in summary.stats.items()
            },
        )

    def list_presets(self) -> PresetListResponse:
        presets = [
            PresetInfo(
                name=preset.name,
                description=preset.description,
                placements=[
                    PlacementInfo(rank=p.rank.label, row=p.position.row, col=p.position.col)
                    for p in preset.placements_for(Side.SIDE1)
                ],
            )
            for preset in list_presets()
        ]
        return PresetListResponse(presets=presets, count=len(presets))

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def session_response(self, session: GameSession, viewer: Side | None) -> SessionResponse:
        """Session as seen by viewer; viewer None masks both sides' pieces."""
        board = session.board
        return SessionResponse(
            session_id=session.session_id,
            status=session.status.value,
            current_turn=session.current_turn.value,
            move_count=session.move_count,
            winner=session.winner.value if session.winner else None,
            termination_reason=(
                session.termination_reason.value if session.termination_reason else None
            ),
            computer_side=session.computer_side.value if session.computer_side else None,
            ai_behavior=session.ai_behavior,
            ai_difficulty=session.ai_difficulty,
            setup_committed=sorted(s.value for s in session.setup_committed),
            viewer=viewer.value if viewer else None,
            board=_board_info(board, viewer, reveal_all=session.is_finished),
            last_move_from=_position_info(session.last_move_from),
            last_move_to=_position_info(session.last_move_to),
            created_at=session.created_at,
            started_at=session.started_at,
            finished_at=session.finished_at,
            version=session.version,
        )

    def _move_response(
        self,
        session: GameSession,
        viewer: Side,
        outcome: MoveOutcome,
    ) -> MoveResponse:
        return MoveResponse(
            session_id=session.session_id,
            move=_move_info(outcome.move) if outcome.move else None,
            combat=_combat_info(outcome.combat),
            winner=outcome.winner.value if outcome.winner else None,
            reason=outcome.reason.value if outcome.reason else None,
            finished=outcome.finished,
            changes=list(outcome.changes),
            session=self.session_response(session, viewer),
        )

    def _parse_placements(self, placements: list[PlacementInfo]) -> list[Placement]:
        try:
            return [Placement.of(p.rank, p.row, p.col) for p in placements]
        except ValueError as e:
            raise InvalidRequest(str(e)) from None

    def _preset(self, name: str, side: Side) -> list[Placement]:
        try:
            return preset_placements(name, side)
        except KeyError:
            raise InvalidRequest(f"Unknown preset: {name}") from None


def parse_side(value: str) -> Side:
    try:
        return Side(value)
    except ValueError:
        raise InvalidRequest(f"Unknown side '{value}', expected side1 or side2") from None


def _position_info(pos: Position | None) -> PositionInfo | None:
    if pos is None:
        return None
    return PositionInfo(row=pos.row, col=pos.col)


def _move_info(move: Move) -> MoveInfo:
    return MoveInfo(from_pos=_position_info(move.from_pos), to_pos=_position_info(move.to_pos))


def _combat_info(combat: CombatResult | None) -> CombatInfo | None:
    if combat is None:
        return None
    return CombatInfo(
        attacker=combat.attacker.label,
        defender=combat.defender.label,
        outcome=combat.outcome.value,
    )


def _cell_info(cell) -> CellInfo | None:
    if cell is None:
        return None
    if isinstance(cell, HiddenCell) or cell.rank is None:
        return CellInfo(side=cell.side.value, revealed=cell.revealed)
    return CellInfo(
        side=cell.side.value,
        rank=cell.rank.label,
        rank_value=int(cell.rank),
        revealed=cell.revealed,
    )


def _board_info(
    board: Board,
    viewer: Side | None,
    reveal_all: bool = False,
) -> list[list[CellInfo | None]]:
    if reveal_all:
        grid = [list(row) for row in board.cells]
    elif viewer is None:
        grid = [
            [HiddenCell(side=c.side) if c is not None else None for c in row]
            for row in board.cells
        ]
    else:
        grid = board.view_for(viewer)
    return [[_cell_info(cell) for cell in row] for row in grid]


def _record_info(record: MoveRecord, show_piece: bool = True) -> MoveRecordInfo:
    return MoveRecordInfo(
        move_number=record.move_number,
        side=record.side.value,
        piece=record.piece.label if show_piece and record.piece is not None else None,
        from_pos=_position_info(record.from_pos),
        to_pos=_position_info(record.to_pos),
        kind=record.kind.value if record.kind else None,
        combat=_combat_info(record.combat),
        timestamp=record.timestamp,
    )
