"""
Board Model - Fixed 8x9 grid of optional pieces.

Design principles:
- Immutable: every change returns a new Board
- Safe to share between concurrent read-only AI evaluations
- Cells are None (empty) or a Cell (rank, owner, revealed)
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterator, Mapping

from .pieces import BOARD_COLS, BOARD_ROWS, Rank, Side


@dataclass(frozen=True, order=True)
class Position:
    """A (row, col) coordinate. May lie outside the board."""
    row: int
    col: int

    @property
    def in_bounds(self) -> bool:
        return 0 <= self.row < BOARD_ROWS and 0 <= self.col < BOARD_COLS

    def distance(self, other: Position) -> int:
        """Manhattan distance."""
        return abs(self.row - other.row) + abs(self.col - other.col)

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)

    def neighbors(self) -> Iterator[Position]:
        """In-bounds orthogonal neighbours (up, down, left, right)."""
        for d_row, d_col in DIRECTIONS:
            pos = self.offset(d_row, d_col)
            if pos.in_bounds:
                yield pos

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


# up, down, left, right
DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True)
class Cell:
    """
    An occupied square.

    `revealed` is informational only; it never affects combat.
    """
    rank: Rank
    side: Side
    revealed: bool = False


@dataclass(frozen=True)
class HiddenCell:
    """An opponent piece as seen by a player who may not know its rank."""
    side: Side
    revealed: bool = False
    rank: Rank | None = None


def _empty_grid() -> tuple[tuple[Cell | None, ...], ...]:
    return tuple(tuple(None for _ in range(BOARD_COLS)) for _ in range(BOARD_ROWS))


@dataclass(frozen=True)
class Board:
    """
    Immutable game board.

    Usage:
        board = Board.empty().place(Position(4, 4), Cell(Rank.PRIVATE, Side.SIDE1))
        board.get(Position(4, 4))  # Cell(rank=Rank.PRIVATE, ...)
    """
    cells: tuple[tuple[Cell | None, ...], ...] = field(default_factory=_empty_grid)

    @classmethod
    def empty(cls) -> Board:
        return cls()

    @classmethod
    def from_pieces(cls, pieces: Mapping[Position, Cell]) -> Board:
        """Build a board from a position -> cell mapping."""
        return cls.empty().with_changes(pieces)

    def get(self, pos: Position) -> Cell | None:
        """Cell at pos, or None if empty or out of bounds."""
        if not pos.in_bounds:
            return None
        return self.cells[pos.row][pos.col]

    def is_empty(self, pos: Position) -> bool:
        return self.get(pos) is None

    def with_changes(self, changes: Mapping[Position, Cell | None]) -> Board:
        """Return a new board with the given cells replaced."""
        if not changes:
            return self
        rows = [list(row) for row in self.cells]
        for pos, cell in changes.items():
            if not pos.in_bounds:
                raise ValueError(f"Position {pos} is off the board")
            rows[pos.row][pos.col] = cell
        return Board(cells=tuple(tuple(row) for row in rows))

    def place(self, pos: Position, cell: Cell) -> Board:
        return self.with_changes({pos: cell})

    def clear(self, pos: Position) -> Board:
        return self.with_changes({pos: None})

    def occupied(self) -> Iterator[tuple[Position, Cell]]:
        """All occupied squares, row-major."""
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell is not None:
                    yield Position(r, c), cell

    def pieces_of(self, side: Side) -> Iterator[tuple[Position, Cell]]:
        """All pieces owned by side, row-major."""
        for pos, cell in self.occupied():
            if cell.side is side:
                yield pos, cell

    def ranks_of(self, side: Side) -> list[Rank]:
        return [cell.rank for _, cell in self.pieces_of(side)]

    def count(self, side: Side) -> int:
        return sum(1 for _ in self.pieces_of(side))

    def with_all_hidden(self) -> Board:
        """Copy with every piece's revealed flag reset."""
        return self.with_changes({
            pos: replace(cell, revealed=False)
            for pos, cell in self.occupied()
            if cell.revealed
        })

    def view_for(
        self,
        side: Side,
        reveal_all: bool = False,
    ) -> list[list[Cell | HiddenCell | None]]:
        """
        Grid as seen by one player.

        Own pieces and revealed opponent pieces are shown as-is; the
        opponent's unrevealed pieces keep their owner but lose their rank.
        """
        view: list[list[Cell | HiddenCell | None]] = []
        for row in self.cells:
            view_row: list[Cell | HiddenCell | None] = []
            for cell in row:
                if cell is None or reveal_all or cell.side is side or cell.revealed:
                    view_row.append(cell)
                else:
                    view_row.append(HiddenCell(side=cell.side))
            view.append(view_row)
        return view

    def render(self, perspective: Side | None = None) -> str:
        """Plain-text board for logs and the CLI."""
        lines = ["    " + " ".join(f"{c:>3}" for c in range(BOARD_COLS))]
        grid = self.view_for(perspective) if perspective else [list(r) for r in self.cells]
        for r, row in enumerate(grid):
            tokens = []
            for cell in row:
                if cell is None:
                    tokens.append("  .")
                else:
                    owner = "a" if cell.side is Side.SIDE1 else "b"
                    rank = "??" if cell.rank is None else f"{int(cell.rank):>2}"
                    tokens.append(f"{owner}{rank}")
            lines.append(f"{r:>3} " + " ".join(tokens))
        return "\n".join(lines)
