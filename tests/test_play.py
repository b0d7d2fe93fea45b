"""Tests for the interactive console game."""

from kingrow.game.board import Side
from kingrow.game.rules import RejectReason, Rejected

from scripts.play import human_turn, load_config, play_game, report_outcome

from conftest import make_engine


def _feed(monkeypatch, answers):
    """Make input() return the given answers, then raise EOFError."""
    it = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / "nope.yaml")) == {}
        assert load_config(None) == {}

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "play.yaml"
        path.write_text("display:\n  show_legal_moves: true\n")
        assert load_config(str(path)) == {"display": {"show_legal_moves": True}}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == {}


class TestHumanTurn:
    def test_simple_move_ends_turn(self, monkeypatch, capsys):
        engine = make_engine([(5, 0, Side.RED), (0, 1, Side.BLACK)])
        _feed(monkeypatch, ["A6 to B5"])
        assert human_turn(engine)
        assert engine.side_to_move == Side.BLACK
        assert engine.board.piece_at(4, 1) is not None

    def test_bad_input_reprompts(self, monkeypatch, capsys):
        engine = make_engine([(5, 0, Side.RED), (0, 1, Side.BLACK)])
        _feed(monkeypatch, ["hello", "A6 to A5", "A6 to B5"])
        assert human_turn(engine)
        out = capsys.readouterr().out
        assert "Invalid input format" in out
        assert "Pieces move one square diagonally" in out

    def test_quit(self, monkeypatch):
        engine = make_engine([(5, 0, Side.RED), (0, 1, Side.BLACK)])
        _feed(monkeypatch, ["exit"])
        assert not human_turn(engine)
        assert engine.side_to_move == Side.RED

    def test_end_of_input_quits(self, monkeypatch):
        engine = make_engine([(5, 0, Side.RED), (0, 1, Side.BLACK)])
        _feed(monkeypatch, [])
        assert not human_turn(engine)

    def test_mandatory_jump_announced(self, monkeypatch, capsys):
        engine = make_engine([(5, 2, Side.RED), (4, 3, Side.BLACK), (5, 6, Side.RED)])
        _feed(monkeypatch, ["G6 to H5", "C6 to E4"])
        assert human_turn(engine)
        out = capsys.readouterr().out
        assert "JUMP IS MANDATORY" in out
        assert "MUST be taken" in out
        assert "PIECE CAPTURED at D5" in out

    def test_capture_and_kinging(self, monkeypatch, capsys):
        engine = make_engine([(2, 1, Side.RED), (1, 2, Side.BLACK), (3, 6, Side.BLACK)])
        _feed(monkeypatch, ["B3 to D1"])
        assert human_turn(engine)
        out = capsys.readouterr().out
        assert "PIECE CAPTURED at C2" in out
        assert "RED piece KINGED at D1" in out

    def test_multi_jump(self, monkeypatch, capsys):
        engine = make_engine([
            (2, 1, Side.BLACK), (3, 2, Side.RED), (5, 4, Side.RED), (7, 0, Side.RED),
        ], side_to_move=Side.BLACK)
        _feed(monkeypatch, ["B3 to D5", "A1 to B2", "D5 to F7"])
        assert human_turn(engine)
        out = capsys.readouterr().out
        assert "MULTI-JUMP AVAILABLE" in out
        assert "continue jumping from D5" in out
        assert engine.side_to_move == Side.RED
        assert engine.state.piece_counts() == (1, 1)

    def test_moves_command_lists_moves(self, monkeypatch, capsys):
        engine = make_engine([(5, 0, Side.RED), (0, 1, Side.BLACK)])
        _feed(monkeypatch, ["moves", "q"])
        human_turn(engine)
        out = capsys.readouterr().out
        assert "1. A6 to B5" in out


class TestReportOutcome:
    def test_rejection_message(self, capsys):
        report_outcome(Side.RED, Rejected(RejectReason.NO_PIECE_AT_SOURCE, "That square is empty."))
        assert "That square is empty." in capsys.readouterr().out


class TestPlayGame:
    def test_exit_immediately(self, monkeypatch, capsys):
        _feed(monkeypatch, ["q"])
        assert play_game() is None
        out = capsys.readouterr().out
        assert "WELCOME TO CONSOLE CHECKERS" in out
        assert "Game exited by player." in out

    def test_turns_alternate(self, monkeypatch, capsys):
        _feed(monkeypatch, ["A6 to B5", "B3 to C4", "quit"])
        play_game({"display": {"show_side_banner": True}})
        out = capsys.readouterr().out
        assert "Player RED's Turn" in out
        assert "Player BLACK's Turn" in out
        assert "Black to move" in out

    def test_show_legal_moves_option(self, monkeypatch, capsys):
        _feed(monkeypatch, ["q"])
        play_game({"display": {"show_legal_moves": True}})
        out = capsys.readouterr().out
        assert "A6 to B5" in out
