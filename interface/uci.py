"""
UCI session loop built on the uzi codec.

Reads GUI commands line by line, parses them with uzi.gui.parse, and answers
with formatted uzi.engcmd values. The loop owns the transport concerns the
codec leaves out: the current board, the search thread, and stdout.

Protocol overview:
    GUI → Engine: uci, debug, isready, setoption, ucinewgame, position, go,
                  stop, ponderhit, quit
    Engine → GUI: id name, id author, option, uciok, readyok, bestmove

Threading model:
    The loop runs on the main thread and never blocks on the search. "go"
    starts a daemon thread that calls UciHandler.search(); the main thread
    keeps reading stdin so it can handle "stop" at any time. A
    threading.Event is shared with the search to ask it to finish early.

Critical rule: NEVER print to stdout except for valid UCI responses.
Diagnostics go through logging, which main() points at stderr.
"""

import logging
import sys
import threading
from typing import TextIO

import chess

from interface.config import SessionConfig
from uzi.constants import QUIT, UCI_OPPONENT
from uzi.engcmd import BestMove, EngCmd, IdAuthor, IdName, ReadyOk, UciOk
from uzi.err import UziErr
from uzi.gui import (
    Debug,
    Go,
    GuiCmd,
    IsReady,
    NewGame,
    Ponderhit,
    Pos,
    SetOpt,
    StartPos,
    Stop,
    Uci,
    parse,
)
from uzi.opt import Opponent

_log = logging.getLogger(__name__)


class UciHandler:
    """
    Stateful handler for one UCI session.

    Subclass and override search() to plug in an engine; everything else is
    protocol bookkeeping.

    Attributes:
        config:        Identity, declared options, and parsing policy.
        board:         The current position, updated by "position" commands.
        debug:         Whether the GUI asked for debug output.
        options:       Values received through "setoption", by option id.
        opponent:      The last valid UCI_Opponent value, or None.
        search_thread: The active search thread, or None.
        stop_event:    Set to ask the running search to stop.
        reply_gate:    Set once bestmove may be sent. An infinite or ponder
                       search holds its reply until then.
    """

    def __init__(self, config: SessionConfig | None = None, out: TextIO | None = None) -> None:
        self.config = config if config is not None else SessionConfig()
        self.board: chess.Board = chess.Board()
        self.debug = False
        self.options: dict[str, str | None] = {}
        self.opponent: Opponent | None = None
        self.search_thread: threading.Thread | None = None
        self.stop_event: threading.Event = threading.Event()
        self.reply_gate: threading.Event = threading.Event()
        self._go: Go | None = None
        self._out = out
        self._send_lock = threading.Lock()

    def send(self, cmd: EngCmd) -> None:
        """
        Write one engine command and flush immediately.

        GUIs read line by line; an unflushed line leaves them waiting. The
        lock keeps lines from the search thread and the main thread whole.
        """
        out = self._out if self._out is not None else sys.stdout
        with self._send_lock:
            print(cmd, file=out, flush=True)

    def handle(self, cmd: GuiCmd) -> None:
        """Dispatch a parsed command to its handler."""
        if isinstance(cmd, Uci):
            self.handle_uci()
        elif isinstance(cmd, Debug):
            self.handle_debug(cmd)
        elif isinstance(cmd, IsReady):
            self.handle_isready()
        elif isinstance(cmd, SetOpt):
            self.handle_setoption(cmd)
        elif isinstance(cmd, NewGame):
            self.handle_ucinewgame()
        elif isinstance(cmd, Pos):
            self.handle_position(cmd)
        elif isinstance(cmd, Go):
            self.handle_go(cmd)
        elif isinstance(cmd, Stop):
            self.handle_stop()
        elif isinstance(cmd, Ponderhit):
            self.handle_ponderhit()

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        """Identify the engine, declare its options, and finish with uciok."""
        self.send(IdName(self.config.name))
        self.send(IdAuthor(self.config.author))
        for option in self.config.options:
            self.send(option)
        self.send(UciOk())

    def handle_debug(self, cmd: Debug) -> None:
        self.debug = cmd.on
        _log.info("uci: debug %s", "on" if cmd.on else "off")

    def handle_isready(self) -> None:
        """Answer at once; there is no lazy initialization to wait for."""
        self.send(ReadyOk())

    def handle_setoption(self, cmd: SetOpt) -> None:
        """
        Record an option assignment.

        The value is stored as raw text; interpreting it against the declared
        option type is up to the engine (see UciOpt.as_int() and friends).
        UCI_Opponent is the exception: its value is parsed here, and a
        malformed one is logged and leaves the previous opponent in place.
        """
        self.options[cmd.opt.name] = cmd.opt.value
        _log.info("uci: option %r = %r", cmd.opt.name, cmd.opt.value)
        if cmd.opt.name == UCI_OPPONENT:
            try:
                self.opponent = cmd.opt.opponent()
            except UziErr as e:
                _log.warning("uci: ignoring %s %r: %s", UCI_OPPONENT, cmd.opt.value, e)

    def handle_ucinewgame(self) -> None:
        """Stop any running search and reset the board."""
        self._stop_search()
        self.board = chess.Board()

    def handle_position(self, cmd: Pos) -> None:
        """
        Set the board from a "position" command.

        The FEN text is only checked here, when python-chess builds the board.
        Replayed moves must be legal; the replay stops at the first illegal
        move and keeps the position reached so far.
        """
        if isinstance(cmd.pos, StartPos):
            board = chess.Board()
        else:
            try:
                board = chess.Board(cmd.pos.fen)
            except ValueError as exc:
                _log.warning("uci: invalid FEN %r: %s", cmd.pos.fen, exc)
                return

        for move in cmd.moves:
            if move in board.legal_moves:
                board.push(move)
            else:
                _log.warning("uci: illegal move in position command: %s", move.uci())
                break

        self.board = board

    def handle_go(self, cmd: Go) -> None:
        """
        Start search() on a copy of the board in a background thread.

        The thread always ends by sending bestmove; a null move ("0000") is
        sent when the search has nothing to play or fails. In infinite or
        ponder mode the reply waits for "stop" (or "ponderhit" when pondering
        without infinite), even if search() returned earlier.
        """
        self._stop_search()
        self.stop_event = threading.Event()
        self.reply_gate = threading.Event()
        self._go = cmd

        # The main thread may receive the next "position" while the search is
        # still running, so the search gets its own board.
        board_copy = self.board.copy()
        stop_event = self.stop_event
        reply_gate = self.reply_gate
        if not (cmd.infinite or cmd.ponder):
            reply_gate.set()

        def search_and_reply() -> None:
            try:
                move = self.search(board_copy, cmd, stop_event)
            except Exception:
                _log.exception("search error")
                move = None
            reply_gate.wait()
            self.send(BestMove(move if move is not None else chess.Move.null()))

        self.search_thread = threading.Thread(target=search_and_reply, daemon=True)
        self.search_thread.start()

    def handle_stop(self) -> None:
        """Signal the search to stop and wait for its bestmove."""
        self._stop_search()

    def handle_ponderhit(self) -> None:
        """The pondered move was played; a finite search may now reply."""
        _log.info("uci: ponderhit")
        if self._go is not None and not self._go.infinite:
            self.reply_gate.set()

    def handle_quit(self) -> None:
        """Stop the search. No reply is expected after "quit"."""
        self._stop_search()

    # -----------------------------------------------------------------------
    # Search hook
    # -----------------------------------------------------------------------

    def search(
        self,
        board: chess.Board,
        go: Go,
        stop_event: threading.Event,
    ) -> chess.Move | None:
        """
        Choose a move for ``board`` within the limits of ``go``.

        Runs on the search thread. Implementations should return promptly once
        ``stop_event`` is set. The default plays the first legal move, or
        returns None when the game is over.
        """
        legal = list(board.legal_moves)
        if go.search_moves is not None:
            legal = [move for move in legal if move in go.search_moves]
        return legal[0] if legal else None

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _stop_search(self) -> None:
        """
        Signal the current search thread to stop and wait for it to exit.

        The join has a 2-second timeout so a misbehaving search cannot hang
        the loop.
        """
        self.stop_event.set()
        self.reply_gate.set()
        if self.search_thread is not None and self.search_thread.is_alive():
            self.search_thread.join(timeout=2.0)
        self.search_thread = None


def run_uci_loop(handler: UciHandler | None = None, stdin: TextIO | None = None) -> None:
    """
    Main UCI protocol loop.

    Reads lines until "quit" or end of input and dispatches each parsed
    command to the handler.

    Error handling:
        A line the codec rejects is logged with its error kind and skipped,
        so one malformed line never ends a game. Errors raised by a handler
        are logged with their traceback and the loop continues.
    """
    if handler is None:
        handler = UciHandler()
    if stdin is None:
        stdin = sys.stdin

    for raw_line in stdin:
        line = raw_line.strip()
        if not line:
            continue
        if line == QUIT:
            break

        try:
            cmd = parse(line, strict=handler.config.strict)
        except UziErr as e:
            _log.warning("uci: ignoring %r: %s", line, e)
            continue

        try:
            handler.handle(cmd)
        except Exception:
            _log.exception("uci: unhandled error for %r", line)

    handler.handle_quit()


def main() -> None:
    logging.basicConfig(stream=sys.stderr, level=logging.INFO)
    run_uci_loop()


if __name__ == "__main__":
    main()
