"""Tests for the UCI session loop."""

import io
import logging
import threading

import chess
import pydantic
import pytest

from interface.config import SessionConfig
from interface.uci import UciHandler, run_uci_loop
from uzi.gui import Go
from uzi.opt import CheckOpt, Opponent, PlayerType, SpinOpt, Title

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


def _run(lines: list[str], handler: UciHandler | None = None) -> tuple[UciHandler, list[str]]:
    out = io.StringIO()
    if handler is None:
        handler = UciHandler(out=out)
    else:
        handler._out = out
    run_uci_loop(handler, io.StringIO("\n".join(lines) + "\n"))
    return handler, out.getvalue().splitlines()


class TestHandshake:
    def test_uci(self) -> None:
        _, lines = _run(["uci"])
        assert lines == ["id name uzi", "id author uzi developers", "uciok"]

    def test_uci_declares_options(self) -> None:
        config = SessionConfig(
            name="funnychess",
            author="Omar S",
            options=(SpinOpt("Hash", 16, 1, 1024), CheckOpt("Ponder")),
        )
        _, lines = _run(["uci"], UciHandler(config))
        assert lines == [
            "id name funnychess",
            "id author Omar S",
            "option name Hash type spin default 16 min 1 max 1024",
            "option name Ponder type check default false",
            "uciok",
        ]

    def test_isready(self) -> None:
        _, lines = _run(["isready"])
        assert lines == ["readyok"]

    def test_blank_lines_are_skipped(self) -> None:
        _, lines = _run(["", "   ", "isready"])
        assert lines == ["readyok"]

    def test_quit_ends_the_session(self) -> None:
        _, lines = _run(["quit", "isready"])
        assert lines == []


class TestErrors:
    def test_malformed_line_is_logged_and_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="interface.uci"):
            _, lines = _run(["go depth abc", "isready"])
        assert lines == ["readyok"]
        assert "bad number" in caplog.text

    def test_strict_session_rejects_trailing_tokens(self) -> None:
        _, lines = _run(["isready now", "isready"], UciHandler(SessionConfig(strict=True)))
        assert lines == ["readyok"]

    def test_lenient_session_ignores_trailing_tokens(self) -> None:
        _, lines = _run(["isready now"])
        assert lines == ["readyok"]


class TestState:
    def test_setoption(self) -> None:
        handler, _ = _run(["setoption name Skill Level value 3", "setoption name Clear Hash"])
        assert handler.options == {"Skill Level": "3", "Clear Hash": None}

    def test_uci_opponent_is_parsed(self) -> None:
        handler, _ = _run(["setoption name UCI_Opponent value GM 2800 human Gary Kasparov"])
        assert handler.opponent == Opponent(Title.GM, 2800, PlayerType.HUMAN, "Gary Kasparov")
        assert handler.options["UCI_Opponent"] == "GM 2800 human Gary Kasparov"

    def test_malformed_uci_opponent_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="interface.uci"):
            handler, _ = _run(
                [
                    "setoption name UCI_Opponent value none none computer Shredder",
                    "setoption name UCI_Opponent value XM 2800 human A",
                ]
            )
        assert handler.opponent == Opponent(None, None, PlayerType.COMPUTER, "Shredder")
        assert "bad title" in caplog.text

    def test_debug(self) -> None:
        handler, _ = _run(["debug on"])
        assert handler.debug is True

    def test_position_startpos_moves(self) -> None:
        handler, _ = _run(["position startpos moves e2e4 e7e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        expected.push_uci("e7e5")
        assert handler.board.fen() == expected.fen()

    def test_position_fen(self) -> None:
        handler, _ = _run([f"position fen {FOOLS_MATE}"])
        assert handler.board.fen() == FOOLS_MATE

    def test_illegal_move_stops_replay(self) -> None:
        handler, _ = _run(["position startpos moves e2e4 e2e4 e7e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        assert handler.board.fen() == expected.fen()

    def test_invalid_fen_keeps_board(self) -> None:
        handler, _ = _run(["position startpos moves e2e4", "position fen a b c d e f"])
        assert handler.board.move_stack == [chess.Move.from_uci("e2e4")]

    def test_ucinewgame_resets_board(self) -> None:
        handler, _ = _run(["position startpos moves e2e4", "ucinewgame"])
        assert handler.board.fen() == chess.STARTING_FEN


class TestSearch:
    def test_go_answers_bestmove(self) -> None:
        _, lines = _run(["position startpos", "go depth 1"])
        assert len(lines) == 1
        assert lines[0].startswith("bestmove ")
        move = chess.Move.from_uci(lines[0].split()[1])
        assert move in chess.Board().legal_moves

    def test_searchmoves_restricts_default_search(self) -> None:
        _, lines = _run(["position startpos", "go searchmoves g1f3 infinite", "stop"])
        assert lines == ["bestmove g1f3"]

    def test_game_over_sends_null_move(self) -> None:
        _, lines = _run([f"position fen {FOOLS_MATE}", "go movetime 100"])
        assert lines == ["bestmove 0000"]

    def test_search_hook(self) -> None:
        seen: list[Go] = []

        class FixedEngine(UciHandler):
            def search(self, board: chess.Board, go: Go, stop_event: threading.Event) -> chess.Move | None:
                seen.append(go)
                return chess.Move.from_uci("d2d4")

        _, lines = _run(["go wtime 1000 btime 1000"], FixedEngine())
        assert lines == ["bestmove d2d4"]
        assert seen == [Go(wtime=1000, btime=1000)]

    def test_failing_search_sends_null_move(self) -> None:
        class BrokenEngine(UciHandler):
            def search(self, board: chess.Board, go: Go, stop_event: threading.Event) -> chess.Move | None:
                raise RuntimeError("boom")

        _, lines = _run(["go infinite", "stop"], BrokenEngine())
        assert lines == ["bestmove 0000"]

    def test_stop_sets_event(self) -> None:
        started = threading.Event()

        class WaitingEngine(UciHandler):
            def search(self, board: chess.Board, go: Go, stop_event: threading.Event) -> chess.Move | None:
                started.set()
                stop_event.wait(timeout=5.0)
                return chess.Move.from_uci("e2e4")

        handler = WaitingEngine(out=io.StringIO())
        handler.handle_go(Go(infinite=True))
        assert started.wait(timeout=5.0)
        handler.handle_stop()
        assert handler.search_thread is None
        assert handler._out.getvalue() == "bestmove e2e4\n"

    def test_infinite_holds_bestmove_until_stop(self) -> None:
        out = io.StringIO()
        handler = UciHandler(out=out)
        handler.handle_go(Go(infinite=True))
        handler.search_thread.join(timeout=0.2)
        assert handler.search_thread.is_alive()
        assert out.getvalue() == ""
        handler.handle_stop()
        assert out.getvalue().startswith("bestmove ")

    def test_infinite_in_session_answers_after_stop(self) -> None:
        _, lines = _run(["position startpos", "go infinite", "isready", "stop"])
        assert lines[0] == "readyok"
        assert len(lines) == 2 and lines[1].startswith("bestmove ")

    def test_ponderhit_releases_finite_ponder(self) -> None:
        out = io.StringIO()
        handler = UciHandler(out=out)
        handler.handle_go(Go(ponder=True, wtime=1000, btime=1000))
        handler.search_thread.join(timeout=0.2)
        assert out.getvalue() == ""
        handler.handle_ponderhit()
        handler.search_thread.join(timeout=2.0)
        assert out.getvalue().startswith("bestmove ")

    def test_ponderhit_does_not_release_infinite(self) -> None:
        out = io.StringIO()
        handler = UciHandler(out=out)
        handler.handle_go(Go(ponder=True, infinite=True))
        handler.handle_ponderhit()
        handler.search_thread.join(timeout=0.2)
        assert out.getvalue() == ""
        handler.handle_stop()
        assert out.getvalue().startswith("bestmove ")


class TestConfig:
    def test_defaults(self) -> None:
        config = SessionConfig()
        assert (config.name, config.strict, config.options) == ("uzi", False, ())

    def test_identity_is_stripped(self) -> None:
        assert SessionConfig(name="  funnychess ").name == "funnychess"

    @pytest.mark.parametrize("field", ["name", "author"])
    def test_blank_identity_rejected(self, field: str) -> None:
        with pytest.raises(pydantic.ValidationError):
            SessionConfig(**{field: "   "})

    def test_identity_with_line_break_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            SessionConfig(name="fun\nchess")
