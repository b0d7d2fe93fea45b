"""Game state representation for checkers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from kingrow.game.board import BOARD_SIZE, Board, Piece, Side

__all__ = ["Side", "Piece", "Move", "GameState"]


@dataclass(frozen=True)
class Move:
    """A candidate move from one square to another."""
    from_rc: tuple[int, int]
    to_rc: tuple[int, int]

    @property
    def row_delta(self) -> int:
        return self.to_rc[0] - self.from_rc[0]

    @property
    def col_delta(self) -> int:
        return self.to_rc[1] - self.from_rc[1]

    @property
    def is_jump(self) -> bool:
        return abs(self.row_delta) == 2

    @property
    def captured_rc(self) -> Optional[tuple[int, int]]:
        """Midpoint square jumped over, or None for a simple move."""
        if not self.is_jump:
            return None
        return ((self.from_rc[0] + self.to_rc[0]) // 2,
                (self.from_rc[1] + self.to_rc[1]) // 2)


class GameState:
    """Board, side to move, and the square of a capture chain in progress."""

    def __init__(self, board: Optional[Board] = None, side_to_move: Side = Side.RED):
        if board is None:
            board = Board()
            board.initialize()
        self.board = board
        self.side_to_move: Side = side_to_move
        # Landing square of an unfinished multi-jump, else None
        self.continuation_from: Optional[tuple[int, int]] = None

    def get_piece_at(self, row: int, col: int) -> Optional[Piece]:
        return self.board.piece_at(row, col)

    def get_position_key(self) -> tuple:
        """Return a hashable snapshot of everything a move can change."""
        cells = []
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                cell = self.board.piece_at(row, col)
                if cell is None:
                    cells.append(None)
                else:
                    cells.append((int(cell.owner), cell.is_king))
        return (tuple(cells), self.side_to_move, self.continuation_from)

    def piece_counts(self) -> tuple[int, int]:
        """(red, black) piece counts."""
        return self.board.count(Side.RED), self.board.count(Side.BLACK)
