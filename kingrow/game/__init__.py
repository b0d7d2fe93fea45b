"""Checkers game engine: board, state, rules, notation."""

from kingrow.game.board import Board, Piece, Side, BOARD_SIZE, render_board, rc_to_notation, notation_to_rc
from kingrow.game.state import GameState, Move
from kingrow.game.rules import (
    RuleEngine, RejectReason, Rejected, TurnEnded, ContinuationRequired, MoveOutcome,
)
from kingrow.game.notation import parse_move, move_to_text, move_to_notation

__all__ = [
    "Board", "Piece", "Side", "BOARD_SIZE", "render_board", "rc_to_notation", "notation_to_rc",
    "GameState", "Move",
    "RuleEngine", "RejectReason", "Rejected", "TurnEnded", "ContinuationRequired", "MoveOutcome",
    "parse_move", "move_to_text", "move_to_notation",
]
