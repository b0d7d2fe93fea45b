#!/usr/bin/env python3
"""Interactive console checkers for two players at one keyboard.

Usage:
    python scripts/play.py
    python scripts/play.py --config configs/play.yaml --show-moves
    python scripts/play.py --log-level DEBUG
"""

import argparse
import logging
import os
import sys
from typing import Optional

import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kingrow.game.board import Side, rc_to_notation, render_board
from kingrow.game.notation import move_to_text, parse_move
from kingrow.game.rules import ContinuationRequired, Rejected, RuleEngine, TurnEnded

logger = logging.getLogger("kingrow.play")

QUIT_COMMANDS = ("q", "quit", "exit")


def load_config(path: Optional[str]) -> dict:
    """Load a YAML config file. A missing file means all defaults."""
    if path is None or not os.path.exists(path):
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def display_state(engine: RuleEngine, show_side_banner: bool = True):
    """Print the current board."""
    side = engine.side_to_move if show_side_banner else None
    print()
    print(render_board(engine.board, side_to_move=side))
    print()


def list_moves(engine: RuleEngine) -> list[str]:
    """Print numbered legal moves and return their text forms."""
    texts = sorted(move_to_text(m) for m in engine.legal_moves())
    for i, text in enumerate(texts):
        print(f"  {i+1:3d}. {text}")
    return texts


def report_outcome(side: Side, outcome):
    """Print what a submitted move did."""
    if isinstance(outcome, Rejected):
        print(outcome.message)
        return

    if outcome.captured is not None:
        print(f"-> PIECE CAPTURED at {rc_to_notation(*outcome.captured)}!")

    if isinstance(outcome, ContinuationRequired):
        print(f"-> MULTI-JUMP AVAILABLE! Player {side.name} must continue "
              f"jumping from {rc_to_notation(*outcome.from_rc)}.")
    elif outcome.promoted:
        print(f"-> {side.name} piece KINGED at {rc_to_notation(*outcome.move.to_rc)}!")


def human_turn(engine: RuleEngine, show_moves: bool = False,
               show_side_banner: bool = True) -> bool:
    """Read moves until the current player's turn is over.

    Returns False if the player quits (or input ends).
    """
    side = engine.side_to_move
    print(f"--- Player {side.name}'s Turn ---")
    if engine.is_capture_forced():
        print("!!! JUMP IS MANDATORY !!! You must take a jump. !!!")
    if show_moves:
        list_moves(engine)

    while True:
        try:
            inp = input("Enter move (e.g., A6 to B5), 'moves', or 'exit': ").strip()
        except EOFError:
            return False

        if inp.lower() in QUIT_COMMANDS:
            return False
        if inp.lower() == "moves":
            list_moves(engine)
            continue

        try:
            move = parse_move(inp)
        except ValueError:
            print("Invalid input format or coordinates. Try again (e.g., A6 to B5).")
            continue

        outcome = engine.apply_move(move.from_rc, move.to_rc)
        report_outcome(side, outcome)

        if isinstance(outcome, TurnEnded):
            logger.info(f"{side.name} played {move_to_text(move)}")
            return True
        if isinstance(outcome, ContinuationRequired):
            logger.info(f"{side.name} jumped {move_to_text(move)}, chain continues")
            display_state(engine, show_side_banner)
            if show_moves:
                list_moves(engine)


def play_game(config: Optional[dict] = None) -> Optional[Side]:
    """Play a full game. Returns the winner, or None if the game was abandoned."""
    config = config or {}
    display_cfg = config.get("display", {})
    show_moves = display_cfg.get("show_legal_moves", False)
    show_side_banner = display_cfg.get("show_side_banner", True)

    engine = RuleEngine()

    print("=" * 43)
    print("        WELCOME TO CONSOLE CHECKERS")
    print("=" * 43)
    print("Red (R) starts at the bottom. Black (B) at the top.")
    print("Input format: [COLROW] to [COLROW] (e.g., A6 to B5)")

    while True:
        display_state(engine, show_side_banner)

        winner = engine.check_win()
        if winner is not None:
            print("*" * 43)
            print(f"        PLAYER {winner.name} WINS!")
            print("*" * 43)
            logger.info(f"Game over, {winner.name} wins")
            return winner

        if not human_turn(engine, show_moves, show_side_banner):
            print("Game exited by player.")
            return None


def main():
    parser = argparse.ArgumentParser(description="Play checkers in the console")
    parser.add_argument("--config", type=str, default="configs/play.yaml")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Override logging level (e.g. DEBUG)")
    parser.add_argument("--show-moves", action="store_true",
                        help="List legal moves every turn")
    args = parser.parse_args()

    config = load_config(args.config)
    log_cfg = config.get("logging", {})
    level = args.log_level or log_cfg.get("level", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=log_cfg.get("format", "%(asctime)s [%(name)s] %(levelname)s %(message)s"),
    )

    if args.show_moves:
        config.setdefault("display", {})["show_legal_moves"] = True

    play_game(config)


if __name__ == "__main__":
    main()
