"""Move text parser and emitter.

Accepted move formats (case-insensitive):
  A6 to B5   Move from A6 to B5 (console input form)
  a6-b5      Simple move
  c3xe5      Jump from C3 over D4 to E5

Squares are a column letter A-H and a row digit 1-8, with row 1 at the top
of the board (Black's back rank).
"""

from __future__ import annotations

import re

from kingrow.game.board import notation_to_rc, rc_to_notation
from kingrow.game.state import Move

_SQUARE = r"([a-h][1-8])"
_MOVE_RE = re.compile(rf"^{_SQUARE}(?:\s+to\s+|\s*-\s*|\s*x\s*){_SQUARE}$", re.IGNORECASE)


def parse_move(text: str) -> Move:
    """Parse move text into a Move.

    Raises:
        ValueError: If the text is malformed or both squares are the same.
    """
    text = text.strip()
    m = _MOVE_RE.match(text)
    if not m:
        raise ValueError(f"Invalid move text: {text!r} (expected e.g. 'A6 to B5')")

    from_rc = notation_to_rc(m.group(1))
    to_rc = notation_to_rc(m.group(2))
    if from_rc == to_rc:
        raise ValueError(f"Move must change squares: {text!r}")
    return Move(from_rc, to_rc)


def move_to_text(move: Move) -> str:
    """Console form, e.g. 'A6 to B5'."""
    return f"{rc_to_notation(*move.from_rc)} to {rc_to_notation(*move.to_rc)}"


def move_to_notation(move: Move) -> str:
    """Compact form: 'A6-B5' for a step, 'C3xE5' for a jump."""
    sep = "x" if move.is_jump else "-"
    return f"{rc_to_notation(*move.from_rc)}{sep}{rc_to_notation(*move.to_rc)}"
