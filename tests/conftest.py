"""Shared test fixtures for engine tests."""

import pytest

from kingrow.game.board import Board, Side
from kingrow.game.rules import RuleEngine
from kingrow.game.state import GameState


def make_engine(pieces, side_to_move=Side.RED):
    """Engine over an otherwise empty board.

    pieces: iterable of (row, col, side) or (row, col, side, is_king).
    """
    board = Board()
    for entry in pieces:
        row, col, side = entry[:3]
        is_king = entry[3] if len(entry) > 3 else False
        board.place(side, row, col, is_king=is_king)
    return RuleEngine(GameState(board=board, side_to_move=side_to_move))


@pytest.fixture
def engine():
    """Engine at the standard starting position, Red to move."""
    return RuleEngine()


@pytest.fixture
def empty_board():
    return Board()
