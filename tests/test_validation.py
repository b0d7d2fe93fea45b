"""Tests for the random-playout rule validation harness."""

import pytest

from kingrow.game.board import Board, Piece, Side
from kingrow.game.state import GameState

from scripts.validate_game import (
    analyze_results, check_health, check_invariants, play_random_game,
)


def _make_result(winner=0, win_condition="no_pieces", num_moves=80, captures=12,
                 longest_chain=1, promotions=0, max_state_repeats=1, violations=None):
    return {
        "game_id": 0,
        "winner": winner,
        "win_condition": win_condition,
        "num_moves": num_moves,
        "num_turns": num_moves,
        "captures": captures,
        "longest_chain": longest_chain,
        "promotions": promotions,
        "max_state_repeats": max_state_repeats,
        "violations": violations or [],
    }


class TestCheckInvariants:
    def test_clean_start(self):
        state = GameState()
        assert check_invariants(state, (12, 12)) == []

    def test_piece_on_light_square(self):
        board = Board()
        board.grid[0][0] = Piece(Side.RED, False, (0, 0))
        problems = check_invariants(GameState(board=board), (1, 0))
        assert any("light square" in p for p in problems)

    def test_position_mismatch(self):
        board = Board()
        board.grid[0][1] = Piece(Side.BLACK, False, (5, 4))
        problems = check_invariants(GameState(board=board), (0, 1))
        assert any("thinks it is at" in p for p in problems)

    def test_count_grew(self):
        state = GameState()
        problems = check_invariants(state, (11, 12))
        assert problems == ["RED piece count grew from 11 to 12"]


class TestPlayRandomGame:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_no_violations(self, seed):
        result = play_random_game((seed, 400, seed))
        assert result["violations"] == []
        assert result["win_condition"] in ("no_pieces", "no_moves", "move_limit")
        assert result["num_moves"] <= 400

    def test_deterministic_for_seed(self):
        assert play_random_game((0, 200, 42)) == play_random_game((0, 200, 42))

    def test_move_limit(self):
        result = play_random_game((7, 1, 123))
        assert result["num_moves"] == 1
        assert result["winner"] is None
        assert result["win_condition"] == "move_limit"

    def test_decisive_game_has_winner(self):
        results = [play_random_game((i, 1000, i)) for i in range(10)]
        for r in results:
            if r["win_condition"] != "move_limit":
                assert r["winner"] in (int(Side.RED), int(Side.BLACK))


class TestAnalyzeResults:
    def test_basic_analysis(self):
        results = [
            _make_result(0, "no_pieces", 80),
            _make_result(1, "no_moves", 120),
            _make_result(None, "move_limit", 200),
        ]
        metrics = analyze_results(results)
        assert metrics["num_games"] == 3
        assert "no_pieces" in metrics["win_conditions"]
        assert metrics["avg_length"] == pytest.approx(133.33, abs=1)
        assert metrics["move_limit_rate"] == pytest.approx(33.33, abs=0.1)

    def test_win_rate_calculation(self):
        results = [_make_result(0)] * 6 + [_make_result(1)] * 4
        metrics = analyze_results(results)
        assert metrics["red_win_rate"] == pytest.approx(60.0)

    def test_coverage_rates(self):
        results = [
            _make_result(longest_chain=3, promotions=2),
            _make_result(longest_chain=1, promotions=0),
        ]
        metrics = analyze_results(results)
        assert metrics["multi_jump_rate"] == pytest.approx(50.0)
        assert metrics["promotion_rate"] == pytest.approx(50.0)

    def test_violations_counted(self):
        results = [_make_result(violations=["a", "b"]), _make_result()]
        metrics = analyze_results(results)
        assert metrics["violation_count"] == 2
        assert metrics["violation_games"] == 1


class TestHealthChecks:
    def test_healthy_rules(self):
        results = []
        for i in range(100):
            winner = i % 2
            results.append(_make_result(winner, "no_pieces", 90,
                                        longest_chain=2 if i % 3 == 0 else 1,
                                        promotions=1 if i % 4 == 0 else 0))
        checks = check_health(analyze_results(results))
        assert all(passed for _, passed, _ in checks)

    def test_violation_fails_invariants(self):
        results = [_make_result(violations=["king reverted"])]
        checks = dict((name, passed) for name, passed, _ in check_health(analyze_results(results)))
        assert not checks["invariants"]

    def test_stalled_games_flagged(self):
        results = [_make_result(None, "move_limit", 400)] * 10
        checks = dict((name, passed) for name, passed, _ in check_health(analyze_results(results)))
        assert not checks["decisive_games"]
        assert not checks["avg_length"]
