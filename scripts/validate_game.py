#!/usr/bin/env python3
"""Rule validation for the checkers engine.

Plays thousands of seeded random-move games and checks, after every move:
1. Board invariants (piece positions match their squares, light squares empty)
2. Piece counts never grow, kings never revert
3. Forced capture is honoured and multi-jumps keep the same side to move
4. Every turn-ending move hands the turn to the other side

Then reports health metrics:
1. Win condition distribution
2. Average game length
3. First-player (Red) advantage
4. Multi-jump and promotion coverage
5. Positional deadlocks (kings shuffling)

Usage:
    python scripts/validate_game.py [--config configs/validation.yaml] [--num-games 2000]
"""

import argparse
import json
import logging
import os
import random
import sys
import time
from collections import Counter
from multiprocessing import Pool, cpu_count

import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kingrow.game.board import BOARD_SIZE, Side, is_dark_square
from kingrow.game.notation import move_to_notation
from kingrow.game.rules import ContinuationRequired, Rejected, RuleEngine
from kingrow.game.state import GameState

logger = logging.getLogger("kingrow.validate")


def check_invariants(state: GameState, previous_counts: tuple[int, int]) -> list[str]:
    """Return a description of every board invariant the state breaks."""
    problems = []
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            piece = state.board.piece_at(row, col)
            if piece is None:
                continue
            if not is_dark_square(row, col):
                problems.append(f"piece on light square ({row}, {col})")
            if piece.position != (row, col):
                problems.append(f"piece at ({row}, {col}) thinks it is at {piece.position}")

    counts = state.piece_counts()
    for side, before, after in zip(Side, previous_counts, counts):
        if after > before:
            problems.append(f"{side.name} piece count grew from {before} to {after}")
    return problems


def play_random_game(args):
    """Play a single random-move game. Designed for multiprocessing."""
    game_id, max_moves, seed = args
    rng = random.Random(seed)

    engine = RuleEngine()
    state = engine.state

    states_seen = Counter()
    violations = []
    num_moves = 0
    num_turns = 0
    captures = 0
    promotions = 0
    chain = 0
    longest_chain = 0

    winner = engine.check_win()
    while winner is None and num_moves < max_moves:
        moves = sorted(engine.legal_moves(), key=lambda m: (m.from_rc, m.to_rc))
        if not moves:
            violations.append("no legal moves but check_win() returned None")
            break

        side = engine.side_to_move
        forced = engine.is_capture_forced()
        counts_before = state.piece_counts()
        move = rng.choice(moves)
        was_king = state.board.piece_at(*move.from_rc).is_king

        outcome = engine.apply_move(move.from_rc, move.to_rc)
        num_moves += 1

        if isinstance(outcome, Rejected):
            violations.append(f"legal move {move_to_notation(move)} rejected: "
                              f"{outcome.reason.value}")
            break
        if forced and not move.is_jump:
            violations.append(f"simple move {move_to_notation(move)} accepted "
                              f"while a capture was forced")

        violations.extend(check_invariants(state, counts_before))

        landed = state.board.piece_at(*move.to_rc)
        if was_king and not landed.is_king:
            violations.append(f"king reverted at {move_to_notation(move)}")

        if outcome.captured is not None:
            captures += 1
            chain += 1
            if state.board.piece_at(*outcome.captured) is not None:
                violations.append(f"captured square still occupied after "
                                  f"{move_to_notation(move)}")

        if isinstance(outcome, ContinuationRequired):
            if engine.side_to_move != side:
                violations.append("side to move changed mid-chain")
            continue

        longest_chain = max(longest_chain, chain)
        chain = 0
        num_turns += 1
        if outcome.promoted:
            promotions += 1
        if not landed.is_king and move.to_rc[0] == side.king_row:
            violations.append(f"{side.name} man not crowned on row {side.king_row}")
        if engine.side_to_move != side.opponent:
            violations.append("turn did not pass to the other side")

        states_seen[state.get_position_key()] += 1
        winner = engine.check_win()

    if winner is not None:
        red, black = state.piece_counts()
        loser_count = red if winner == Side.BLACK else black
        win_condition = "no_pieces" if loser_count == 0 else "no_moves"
    else:
        win_condition = "move_limit"

    max_state_repeats = max(states_seen.values()) if states_seen else 0

    return {
        "game_id": game_id,
        "winner": int(winner) if winner is not None else None,
        "win_condition": win_condition,
        "num_moves": num_moves,
        "num_turns": num_turns,
        "captures": captures,
        "longest_chain": longest_chain,
        "promotions": promotions,
        "max_state_repeats": max_state_repeats,
        "violations": violations,
    }


def analyze_results(results: list[dict]) -> dict:
    """Analyze game results and compute health metrics."""
    n = len(results)

    # Win condition distribution
    win_conds = Counter(r["win_condition"] for r in results)
    win_cond_pcts = {k: v / n * 100 for k, v in win_conds.items()}

    # Game length
    lengths = [r["num_moves"] for r in results]
    avg_length = sum(lengths) / n
    min_length = min(lengths)
    max_length = max(lengths)

    # First-player advantage
    red_wins = sum(1 for r in results if r["winner"] == int(Side.RED))
    black_wins = sum(1 for r in results if r["winner"] == int(Side.BLACK))
    decisive = red_wins + black_wins
    red_rate = red_wins / decisive * 100 if decisive > 0 else 50.0

    move_limit_rate = win_conds.get("move_limit", 0) / n * 100

    # Rule coverage
    avg_captures = sum(r["captures"] for r in results) / n
    multi_jump_games = sum(1 for r in results if r["longest_chain"] >= 2)
    promotion_games = sum(1 for r in results if r["promotions"] > 0)

    deadlock_games = sum(1 for r in results if r["max_state_repeats"] > 5)

    violation_count = sum(len(r["violations"]) for r in results)
    violation_games = sum(1 for r in results if r["violations"])

    return {
        "num_games": n,
        "win_conditions": win_cond_pcts,
        "avg_length": avg_length,
        "min_length": min_length,
        "max_length": max_length,
        "red_win_rate": red_rate,
        "move_limit_rate": move_limit_rate,
        "avg_captures": avg_captures,
        "multi_jump_rate": multi_jump_games / n * 100,
        "promotion_rate": promotion_games / n * 100,
        "deadlock_rate": deadlock_games / n * 100,
        "violation_count": violation_count,
        "violation_games": violation_games,
    }


def check_health(metrics: dict) -> list[tuple[str, bool, str]]:
    """Check health metrics against thresholds.

    Returns list of (metric_name, passed, description).
    """
    checks = []

    # Rule invariants: any violation is a bug
    vc = metrics["violation_count"]
    checks.append(("invariants", vc == 0,
                   f"{vc} invariant violations in {metrics['violation_games']} games"))

    # Games should mostly finish
    decisive_pct = 100 - metrics["move_limit_rate"]
    checks.append(("decisive_games", decisive_pct > 50,
                   f"Decisive games {decisive_pct:.1f}% (target >50%)"))

    # Average game length
    avg = metrics["avg_length"]
    passed = 20 <= avg <= 300
    checks.append(("avg_length", passed,
                   f"Average length {avg:.1f} plies (target 20-300)"))

    # Coverage: chains and kings must actually happen in random play
    mj = metrics["multi_jump_rate"]
    checks.append(("multi_jump_coverage", mj > 0,
                   f"Multi-jumps in {mj:.1f}% of games (target >0%)"))
    pr = metrics["promotion_rate"]
    checks.append(("promotion_coverage", pr > 0,
                   f"Promotions in {pr:.1f}% of games (target >0%)"))

    # First-player advantage, loose bounds for random play
    wr = metrics["red_win_rate"]
    passed = 35 <= wr <= 65
    checks.append(("first_player_advantage", passed,
                   f"Red win rate {wr:.1f}% (target 35-65%)"))

    return checks


def main():
    parser = argparse.ArgumentParser(description="Validate checkers rules with random playouts")
    parser.add_argument("--config", type=str, default="configs/validation.yaml")
    parser.add_argument("--num-games", type=int, default=None,
                        help="Number of games to simulate")
    parser.add_argument("--max-moves", type=int, default=None,
                        help="Ply limit per game")
    parser.add_argument("--workers", type=int, default=None,
                        help="Number of parallel workers (default: cpu_count)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Base random seed")
    parser.add_argument("--output", type=str, default=None,
                        help="Save results to JSON file")
    args = parser.parse_args()

    config = {}
    if os.path.exists(args.config):
        with open(args.config) as f:
            config = yaml.safe_load(f) or {}

    log_cfg = config.get("logging", {})
    logging.basicConfig(
        level=getattr(logging, str(log_cfg.get("level", "INFO")).upper(), logging.INFO),
        format=log_cfg.get("format", "%(asctime)s [%(name)s] %(message)s"),
    )

    val_cfg = config.get("validation", {})
    num_games = args.num_games or val_cfg.get("num_games", 500)
    max_moves = args.max_moves or val_cfg.get("max_moves", 400)
    num_workers = args.workers or val_cfg.get("workers") or min(cpu_count(), 6)
    base_seed = args.seed if args.seed is not None else val_cfg.get("seed")
    if base_seed is None:
        base_seed = random.randint(0, 2**31)
    output = args.output or val_cfg.get("output")

    logger.info(f"Running {num_games} games (max {max_moves} plies), "
                f"{num_workers} workers, base seed {base_seed}")

    game_args = [(i, max_moves, base_seed + i) for i in range(num_games)]

    start_time = time.time()
    with Pool(num_workers) as pool:
        results = list(pool.imap_unordered(play_random_game, game_args, chunksize=10))
    elapsed = time.time() - start_time

    print(f"Completed {len(results)} games in {elapsed:.1f}s "
          f"({len(results)/elapsed:.1f} games/sec)")
    print()

    metrics = analyze_results(results)
    checks = check_health(metrics)

    print("=" * 60)
    print("  RULE HEALTH METRICS")
    print("=" * 60)
    print()

    print("Win Condition Distribution:")
    for cond, pct in metrics["win_conditions"].items():
        print(f"  {cond:25s} {pct:6.1f}%")
    print()

    print(f"Game Length: avg={metrics['avg_length']:.1f}, "
          f"min={metrics['min_length']}, max={metrics['max_length']}")
    print(f"Red Win Rate: {metrics['red_win_rate']:.1f}%")
    print(f"Captures per game: {metrics['avg_captures']:.1f}")
    print(f"Games with multi-jumps: {metrics['multi_jump_rate']:.1f}%")
    print(f"Games with promotions:  {metrics['promotion_rate']:.1f}%")
    print(f"Positional deadlocks:   {metrics['deadlock_rate']:.1f}%")
    print()

    for r in results:
        for v in r["violations"]:
            logger.warning(f"game {r['game_id']}: {v}")

    print("=" * 60)
    print("  HEALTH CHECKS")
    print("=" * 60)
    all_passed = True
    for name, passed, desc in checks:
        status = "PASS" if passed else "FAIL"
        marker = " " if passed else "!"
        print(f"  [{status}]{marker} {desc}")
        if not passed:
            all_passed = False
    print()

    if all_passed:
        print("ALL CHECKS PASSED")
    else:
        print("SOME CHECKS FAILED")
    print()

    if output:
        with open(output, "w") as f:
            json.dump({"metrics": metrics, "checks": [(n, p, d) for n, p, d in checks]}, f, indent=2)
        print(f"Results saved to {output}")

    if not all_passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
