"""Board constants, piece values, the 8x8 grid, and text-based rendering."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Iterator, Optional, Union

BOARD_SIZE = 8

# Starting rows: Black at the top (rows 0-2), Red at the bottom (rows 5-7)
BLACK_START_ROWS = (0, 1, 2)
RED_START_ROWS = (5, 6, 7)

# Column labels for notation ("A6" = column A, sixth row from the top)
COL_LABELS = "ABCDEFGH"
ROW_LABELS = "12345678"


class Side(IntEnum):
    RED = 0
    BLACK = 1

    @property
    def opponent(self) -> Side:
        return Side.BLACK if self is Side.RED else Side.RED

    @property
    def forward(self) -> int:
        """Row direction a man of this side moves in."""
        return -1 if self is Side.RED else 1

    @property
    def king_row(self) -> int:
        """Row on which a man of this side is crowned."""
        return 0 if self is Side.RED else BOARD_SIZE - 1


@dataclass(frozen=True)
class Piece:
    owner: Side
    is_king: bool = False
    position: tuple[int, int] = (-1, -1)

    @property
    def char(self) -> str:
        if self.owner == Side.RED:
            return "K" if self.is_king else "R"
        return "k" if self.is_king else "B"


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_dark_square(row: int, col: int) -> bool:
    """Playable squares are the ones where row + col is odd."""
    return (row + col) % 2 == 1


class Board:
    """8x8 grid of optional pieces. Knows nothing about the rules."""

    def __init__(self):
        self.grid: list[list[Optional[Piece]]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    def clear(self):
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                self.grid[row][col] = None

    def initialize(self):
        """Clear the grid and set up 12 pieces per side on the dark squares."""
        self.clear()
        for side, rows in ((Side.BLACK, BLACK_START_ROWS), (Side.RED, RED_START_ROWS)):
            for row in rows:
                for col in range(BOARD_SIZE):
                    if is_dark_square(row, col):
                        self.grid[row][col] = Piece(side, False, (row, col))

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        """Get piece at position, or None (also for off-board squares)."""
        if in_bounds(row, col):
            return self.grid[row][col]
        return None

    def place(self, piece: Union[Piece, Side], row: int, col: int,
              is_king: bool = False) -> Piece:
        """Put a piece on a dark square, replacing whatever was there.

        Accepts either a Piece (its stored position is overwritten) or a
        Side, in which case a new man (or king) is created.
        """
        if not in_bounds(row, col):
            raise ValueError(f"Square ({row}, {col}) is off the board")
        if not is_dark_square(row, col):
            raise ValueError(f"Square ({row}, {col}) is a light square")
        if isinstance(piece, Piece):
            placed = replace(piece, position=(row, col))
        else:
            placed = Piece(Side(piece), is_king, (row, col))
        self.grid[row][col] = placed
        return placed

    def move(self, from_rc: tuple[int, int], to_rc: tuple[int, int]):
        """Relocate the piece at from_rc to to_rc. No-op if from_rc is empty.

        No legality or overwrite checks: the caller validates first.
        """
        fr, fc = from_rc
        tr, tc = to_rc
        piece = self.piece_at(fr, fc)
        if piece is None:
            return
        self.grid[fr][fc] = None
        self.grid[tr][tc] = replace(piece, position=(tr, tc))

    def remove(self, row: int, col: int):
        if in_bounds(row, col):
            self.grid[row][col] = None

    def crown(self, row: int, col: int):
        piece = self.piece_at(row, col)
        if piece is not None and not piece.is_king:
            self.grid[row][col] = replace(piece, is_king=True)

    def pieces(self, side: Side) -> Iterator[Piece]:
        """Pieces of a side in row-major order."""
        for row in self.grid:
            for cell in row:
                if cell is not None and cell.owner == side:
                    yield cell

    def count(self, side: Side) -> int:
        return sum(1 for _ in self.pieces(side))

    def __repr__(self) -> str:
        return render_board(self)


def rc_to_notation(row: int, col: int) -> str:
    """Convert (row, col) to a square name like 'A1'."""
    return COL_LABELS[col] + ROW_LABELS[row]


def notation_to_rc(sq: str) -> tuple[int, int]:
    """Convert a square name like 'a6' or 'A6' to (row, col)."""
    sq = sq.strip().upper()
    if len(sq) != 2 or sq[0] not in COL_LABELS or sq[1] not in ROW_LABELS:
        raise ValueError(f"Invalid square: {sq!r}")
    return (ROW_LABELS.index(sq[1]), COL_LABELS.index(sq[0]))


def render_board(board: Board, side_to_move: Side | None = None) -> str:
    """Render the board as a text string, row 1 (Black's back rank) on top.

    Men are R/B, Red kings K, Black kings k. Empty dark squares show '.'.
    """
    lines = []

    if side_to_move is not None:
        lines.append(f"{side_to_move.name.capitalize()} to move")
        lines.append("")

    lines.append("    " + " ".join(COL_LABELS))
    lines.append("  -----------------")
    for row in range(BOARD_SIZE):
        row_str = f"{ROW_LABELS[row]} |"
        for col in range(BOARD_SIZE):
            piece = board.piece_at(row, col)
            if piece is not None:
                row_str += f" {piece.char}"
            elif is_dark_square(row, col):
                row_str += " ."
            else:
                row_str += "  "
        row_str += " |"
        lines.append(row_str)
    lines.append("  -----------------")

    return "\n".join(lines)
