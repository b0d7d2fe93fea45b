"""Move legality, forced captures, move execution, and win conditions.

Standard 8x8 checkers: men move one square diagonally forward, kings in
any diagonal direction. Captures jump an adjacent opposing piece onto the
empty square beyond it and are mandatory whenever one is available. A piece
that lands from a capture with another capture available must keep jumping
before the turn ends. A man reaching the far row is crowned.

Validation never touches the board. apply_move() only mutates state after
validate_move() has accepted the move, so a rejected move leaves the game
exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from kingrow.game.board import Board, in_bounds, rc_to_notation
from kingrow.game.state import GameState, Move, Piece, Side

logger = logging.getLogger("kingrow.rules")

DIAGONAL_DIRS = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


class RejectReason(Enum):
    NO_PIECE_AT_SOURCE = "no_piece_at_source"
    NOT_OWNED_BY_MOVER = "not_owned_by_mover"
    DESTINATION_OCCUPIED_OR_OUT_OF_RANGE = "destination_occupied_or_out_of_range"
    NOT_DIAGONAL_ADJACENT_OR_JUMP = "not_diagonal_adjacent_or_jump"
    WRONG_DIRECTION_FOR_NON_KING = "wrong_direction_for_non_king"
    NO_CAPTIVE_PIECE_TO_JUMP = "no_captive_piece_to_jump"
    CAPTURE_MANDATORY = "capture_mandatory"
    INVALID_CONTINUATION = "invalid_continuation"


_MESSAGES = {
    RejectReason.NO_PIECE_AT_SOURCE: "That square is empty.",
    RejectReason.NOT_OWNED_BY_MOVER: "That piece doesn't belong to you.",
    RejectReason.DESTINATION_OCCUPIED_OR_OUT_OF_RANGE:
        "The destination is occupied or off the board.",
    RejectReason.NOT_DIAGONAL_ADJACENT_OR_JUMP:
        "Pieces move one square diagonally, or two when jumping.",
    RejectReason.WRONG_DIRECTION_FOR_NON_KING: "Only kings can move backwards.",
    RejectReason.NO_CAPTIVE_PIECE_TO_JUMP:
        "Invalid jump (no opponent piece to capture).",
    RejectReason.CAPTURE_MANDATORY:
        "A jump is available and MUST be taken. Please enter a valid jump move.",
    RejectReason.INVALID_CONTINUATION: "You must continue jumping with the same piece.",
}


# Move outcomes
@dataclass(frozen=True)
class Rejected:
    """The move was illegal; the game state is unchanged."""
    reason: RejectReason
    message: str = ""


@dataclass(frozen=True)
class TurnEnded:
    """The move was applied and the other side is now to move."""
    move: Move
    captured: Optional[tuple[int, int]] = None
    promoted: bool = False


@dataclass(frozen=True)
class ContinuationRequired:
    """A capture was applied and the same piece must jump again from from_rc."""
    from_rc: tuple[int, int]
    move: Move
    captured: tuple[int, int]


MoveOutcome = Union[Rejected, TurnEnded, ContinuationRequired]


def _reject(reason: RejectReason, message: Optional[str] = None) -> Rejected:
    return Rejected(reason, message or _MESSAGES[reason])


class RuleEngine:
    """Owns a GameState and is the only thing that mutates it."""

    def __init__(self, state: Optional[GameState] = None):
        self.state = state if state is not None else GameState()

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def side_to_move(self) -> Side:
        return self.state.side_to_move

    @property
    def continuation_from(self) -> Optional[tuple[int, int]]:
        return self.state.continuation_from

    # -- Legality ---------------------------------------------------------

    def _check_geometry(self, piece: Piece, from_rc: tuple[int, int],
                        to_rc: tuple[int, int]) -> Optional[Rejected]:
        """Destination, distance, direction and captive checks for one piece."""
        fr, fc = from_rc
        tr, tc = to_rc
        if not in_bounds(tr, tc) or self.board.piece_at(tr, tc) is not None:
            return _reject(RejectReason.DESTINATION_OCCUPIED_OR_OUT_OF_RANGE)

        dr, dc = tr - fr, tc - fc
        if abs(dr) != abs(dc) or abs(dr) not in (1, 2):
            return _reject(RejectReason.NOT_DIAGONAL_ADJACENT_OR_JUMP)

        if not piece.is_king and dr * piece.owner.forward < 0:
            return _reject(RejectReason.WRONG_DIRECTION_FOR_NON_KING)

        if abs(dr) == 2:
            captive = self.board.piece_at(fr + dr // 2, fc + dc // 2)
            if captive is None or captive.owner == piece.owner:
                return _reject(RejectReason.NO_CAPTIVE_PIECE_TO_JUMP)

        return None

    def _moves_for_piece(self, piece: Piece, distance: int) -> set[Move]:
        row, col = piece.position
        moves = set()
        for dr, dc in DIAGONAL_DIRS:
            to_rc = (row + dr * distance, col + dc * distance)
            if self._check_geometry(piece, piece.position, to_rc) is None:
                moves.add(Move(piece.position, to_rc))
        return moves

    def jumps_from(self, row: int, col: int) -> set[Move]:
        """Legal jumps for the piece on (row, col), whoever owns it."""
        piece = self.board.piece_at(row, col)
        if piece is None:
            return set()
        return self._moves_for_piece(piece, 2)

    def legal_jumps(self, side: Side) -> set[Move]:
        """All legal jumps for every piece of side."""
        jumps: set[Move] = set()
        for piece in self.board.pieces(side):
            jumps |= self._moves_for_piece(piece, 2)
        return jumps

    def legal_simple_moves(self, side: Side) -> set[Move]:
        """All one-square diagonal moves for side, ignoring forced capture."""
        moves: set[Move] = set()
        for piece in self.board.pieces(side):
            moves |= self._moves_for_piece(piece, 1)
        return moves

    def is_capture_forced(self) -> bool:
        """Whether the side to move may only play jumps right now."""
        if self.state.continuation_from is not None:
            return True
        return bool(self.legal_jumps(self.state.side_to_move))

    def legal_moves(self) -> set[Move]:
        """Exactly the moves apply_move() would accept in this position."""
        pending = self.state.continuation_from
        if pending is not None:
            return self.jumps_from(*pending)
        side = self.state.side_to_move
        jumps = self.legal_jumps(side)
        if jumps:
            return jumps
        return self.legal_simple_moves(side)

    def validate_move(self, from_rc: tuple[int, int],
                      to_rc: tuple[int, int]) -> Optional[Rejected]:
        """Check a move for the side to move without changing anything.

        Returns None if the move is legal, else a Rejected with the first
        rule it breaks.
        """
        move = Move(tuple(from_rc), tuple(to_rc))
        side = self.state.side_to_move
        pending = self.state.continuation_from

        if pending is not None:
            message = f"You must continue jumping from {rc_to_notation(*pending)}."
            if move.from_rc != pending:
                return _reject(RejectReason.INVALID_CONTINUATION, message)
            piece = self.board.piece_at(*pending)
            if abs(move.row_delta) != 2:
                return _reject(RejectReason.INVALID_CONTINUATION, message)
            rejection = self._check_geometry(piece, move.from_rc, move.to_rc)
            if rejection is not None:
                return _reject(RejectReason.INVALID_CONTINUATION,
                               f"{message} {rejection.message}")
            return None

        piece = self.board.piece_at(*move.from_rc)
        if piece is None:
            return _reject(RejectReason.NO_PIECE_AT_SOURCE)
        if piece.owner != side:
            return _reject(RejectReason.NOT_OWNED_BY_MOVER)

        # Any non-jump is refused outright while a capture exists
        if abs(move.row_delta) != 2 and self.legal_jumps(side):
            return _reject(RejectReason.CAPTURE_MANDATORY)

        return self._check_geometry(piece, move.from_rc, move.to_rc)

    # -- Execution --------------------------------------------------------

    def apply_move(self, from_rc: tuple[int, int],
                   to_rc: tuple[int, int]) -> MoveOutcome:
        """Validate and, if legal, play a move for the side to move.

        Order of effects: relocate, remove the captured piece, look for a
        further jump by the same piece, crown, hand the turn over.
        """
        rejection = self.validate_move(from_rc, to_rc)
        if rejection is not None:
            logger.debug(f"Rejected {from_rc}->{to_rc} for "
                         f"{self.state.side_to_move.name}: {rejection.reason.value}")
            return rejection

        move = Move(tuple(from_rc), tuple(to_rc))
        side = self.state.side_to_move
        board = self.board

        board.move(move.from_rc, move.to_rc)

        captured = move.captured_rc
        if captured is not None:
            board.remove(*captured)
            logger.debug(f"{side.name} captured at {rc_to_notation(*captured)}")

            if self.jumps_from(*move.to_rc):
                self.state.continuation_from = move.to_rc
                logger.debug(f"{side.name} must continue jumping from "
                             f"{rc_to_notation(*move.to_rc)}")
                return ContinuationRequired(move.to_rc, move, captured)

        promoted = False
        piece = board.piece_at(*move.to_rc)
        if not piece.is_king and move.to_rc[0] == side.king_row:
            board.crown(*move.to_rc)
            promoted = True
            logger.debug(f"{side.name} piece kinged at {rc_to_notation(*move.to_rc)}")

        self.state.continuation_from = None
        self.state.side_to_move = side.opponent
        return TurnEnded(move, captured, promoted)

    # -- Terminal state ---------------------------------------------------

    def check_win(self) -> Optional[Side]:
        """Return the winner, or None while the game is still in progress.

        A side with no pieces loses, and so does a side to move with no
        legal jump or simple move anywhere on the board.
        """
        red, black = self.state.piece_counts()
        if red == 0:
            return Side.BLACK
        if black == 0:
            return Side.RED

        side = self.state.side_to_move
        if not self.legal_jumps(side) and not self.legal_simple_moves(side):
            return side.opponent
        return None
