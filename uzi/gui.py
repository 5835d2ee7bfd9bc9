"""
GUI → engine commands: data model, builders, and the line parser.

A GUI drives an engine with nine commands:

    uci, debug, isready, setoption, ucinewgame, position, go, stop, ponderhit

Each is represented by one frozen dataclass; GuiCmd is the union of them.
parse() turns one complete line into a GuiCmd or raises a single UziErr.
str() on any GuiCmd gives back its canonical line, so every command parsed
here can be written by a GUI as well.

Grammar notes:
    - Tokens are separated by any run of whitespace. Spacing is significant
      only inside free-text payloads (setoption id and value).
    - "position" and "go" have many optional parts that may arrive in any
      order, so their fields are accumulated in a builder and validated once
      the whole line has been read (PosBuilder, GoBuilder).
    - Moves are opaque chess.Move tokens; only their syntax is checked.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Union

import chess

from uzi.constants import (
    DEBUG,
    FEN,
    FEN_FIELD_COUNT,
    GO,
    GO_COUNT_KEYWORDS,
    GO_KEYWORDS,
    GO_TIME_KEYWORDS,
    IS_READY,
    MOVES,
    NAME,
    NEW_GAME,
    OFF,
    ON,
    PONDERHIT,
    POSITION,
    SET_OPTION,
    START_POS,
    STOP,
    UCI,
    VALUE,
)
from uzi.err import ErrKind, UziErr
from uzi.opt import UciOpt
from uzi.tokens import TokenStream, parse_int, parse_move, parse_uint

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Uci:
    """uci: switch the engine to UCI mode."""

    def __str__(self) -> str:
        return UCI


@dataclass(frozen=True)
class Debug:
    """debug [on | off]: toggle the engine's debug output."""

    on: bool

    def __str__(self) -> str:
        return f"{DEBUG} {ON if self.on else OFF}"


@dataclass(frozen=True)
class IsReady:
    """isready: synchronization ping, always answered with readyok."""

    def __str__(self) -> str:
        return IS_READY


@dataclass(frozen=True)
class SetOpt:
    """setoption name <id> [value <x>]"""

    opt: UciOpt

    def __str__(self) -> str:
        return str(self.opt)


@dataclass(frozen=True)
class NewGame:
    """ucinewgame: the next position belongs to a different game."""

    def __str__(self) -> str:
        return NEW_GAME


@dataclass(frozen=True)
class Stop:
    def __str__(self) -> str:
        return STOP


@dataclass(frozen=True)
class Ponderhit:
    """ponderhit: the opponent played the move the engine was pondering on."""

    def __str__(self) -> str:
        return PONDERHIT


@dataclass(frozen=True)
class StartPos:
    def __str__(self) -> str:
        return START_POS


@dataclass(frozen=True)
class Fen:
    """A base position given as FEN text. Stored, not validated."""

    fen: str

    def __str__(self) -> str:
        return f"{FEN} {self.fen}"


PosOpt = Union[StartPos, Fen]


@dataclass(frozen=True)
class Pos:
    """
    position [startpos | fen <fen>] [moves <move1> ... <movei>]

    Attributes:
        pos:   The base position.
        moves: Moves played from the base position, in the order played.
    """

    pos: PosOpt
    moves: tuple[chess.Move, ...] = ()

    def __str__(self) -> str:
        line = f"{POSITION} {self.pos}"
        if self.moves:
            line += f" {MOVES} " + " ".join(move.uci() for move in self.moves)
        return line


@dataclass(frozen=True)
class Go:
    """
    go [opts]: start calculating on the position set up with "position".

    Attributes:
        search_moves: Restrict the search to these moves.
        ponder:       Search in pondering mode.
        wtime, btime: Milliseconds left on White's / Black's clock.
        winc, binc:   White's / Black's increment per move in milliseconds.
        moves_to_go:  Moves until the next time control (sudden death if unset).
        depth:        Search this many plies only.
        nodes:        Search this many nodes only.
        mate:         Search for a mate in this many moves.
        move_time:    Search exactly this many milliseconds.
        infinite:     Search until "stop".
    """

    search_moves: tuple[chess.Move, ...] | None = None
    ponder: bool = False
    wtime: int | None = None
    btime: int | None = None
    winc: int | None = None
    binc: int | None = None
    moves_to_go: int | None = None
    depth: int | None = None
    nodes: int | None = None
    mate: int | None = None
    move_time: int | None = None
    infinite: bool = False

    def __str__(self) -> str:
        parts = [GO]
        if self.search_moves is not None:
            parts.append("searchmoves")
            parts.extend(move.uci() for move in self.search_moves)
        if self.ponder:
            parts.append("ponder")
        for keyword, value in (
            ("wtime", self.wtime),
            ("btime", self.btime),
            ("winc", self.winc),
            ("binc", self.binc),
            ("movestogo", self.moves_to_go),
            ("depth", self.depth),
            ("nodes", self.nodes),
            ("mate", self.mate),
            ("movetime", self.move_time),
        ):
            if value is not None:
                parts.append(f"{keyword} {value}")
        if self.infinite:
            parts.append("infinite")
        return " ".join(parts)


GuiCmd = Union[Uci, Debug, IsReady, SetOpt, NewGame, Pos, Go, Stop, Ponderhit]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


class GoBuilder:
    """
    Accumulates "go" options in any order and validates them once.

    Setters never fail and never look at each other; a later call for the
    same option replaces the earlier value. build() hands the fields over to
    the Go it returns, leaving the builder empty.
    """

    def __init__(self) -> None:
        self._fields: dict[str, object] = {}

    def search_moves(self, moves: Iterable[chess.Move]) -> "GoBuilder":
        self._fields["search_moves"] = tuple(moves)
        return self

    def ponder(self) -> "GoBuilder":
        self._fields["ponder"] = True
        return self

    def wtime(self, ms: int) -> "GoBuilder":
        self._fields["wtime"] = ms
        return self

    def btime(self, ms: int) -> "GoBuilder":
        self._fields["btime"] = ms
        return self

    def winc(self, ms: int) -> "GoBuilder":
        self._fields["winc"] = ms
        return self

    def binc(self, ms: int) -> "GoBuilder":
        self._fields["binc"] = ms
        return self

    def moves_to_go(self, moves: int) -> "GoBuilder":
        self._fields["moves_to_go"] = moves
        return self

    def depth(self, plies: int) -> "GoBuilder":
        self._fields["depth"] = plies
        return self

    def nodes(self, nodes: int) -> "GoBuilder":
        self._fields["nodes"] = nodes
        return self

    def mate(self, moves: int) -> "GoBuilder":
        self._fields["mate"] = moves
        return self

    def move_time(self, ms: int) -> "GoBuilder":
        self._fields["move_time"] = ms
        return self

    def infinite(self) -> "GoBuilder":
        self._fields["infinite"] = True
        return self

    def build(self) -> Go:
        """
        Return the accumulated Go and reset the builder.

        Raises:
            UziErr: NOTHING_SET_FOR_GO if no option was set.
        """
        if not self._fields:
            raise UziErr(ErrKind.NOTHING_SET_FOR_GO)
        fields, self._fields = self._fields, {}
        return Go(**fields)


class PosBuilder:
    """
    Accumulates a "position" command.

    start_pos() and fen() both set the base position; the last call wins.
    Moves are kept in the order add_move() was called.
    """

    def __init__(self) -> None:
        self._pos: PosOpt | None = None
        self._moves: list[chess.Move] = []

    def start_pos(self) -> "PosBuilder":
        self._pos = StartPos()
        return self

    def fen(self, fen: str) -> "PosBuilder":
        self._pos = Fen(fen)
        return self

    def add_move(self, move: chess.Move) -> "PosBuilder":
        self._moves.append(move)
        return self

    def build(self) -> Pos:
        """
        Return the accumulated Pos and reset the builder.

        Raises:
            UziErr: POSITION if neither start_pos() nor fen() was called.
        """
        if self._pos is None:
            raise UziErr(ErrKind.POSITION)
        pos = Pos(self._pos, tuple(self._moves))
        self._pos = None
        self._moves = []
        return pos


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

_NO_ARGS: dict[str, type] = {
    UCI: Uci,
    IS_READY: IsReady,
    NEW_GAME: NewGame,
    STOP: Stop,
    PONDERHIT: Ponderhit,
}

_GO_SETTERS = {
    "wtime": GoBuilder.wtime,
    "btime": GoBuilder.btime,
    "winc": GoBuilder.winc,
    "binc": GoBuilder.binc,
    "movetime": GoBuilder.move_time,
    "movestogo": GoBuilder.moves_to_go,
    "depth": GoBuilder.depth,
    "nodes": GoBuilder.nodes,
    "mate": GoBuilder.mate,
}


def parse(line: str, *, strict: bool = False) -> GuiCmd:
    """
    Parse one line sent by a GUI.

    Args:
        line:   A complete command line, without its newline.
        strict: Reject tokens trailing a command that takes no more
                arguments (uci, isready, ucinewgame, stop, ponderhit,
                debug on|off). By default they are ignored.

    Returns:
        The parsed command.

    Raises:
        UziErr: the first grammar violation found. MISSING_CMD for a blank
                line, UNKNOWN_OPT for an unknown command keyword.
    """
    tokens = TokenStream(line)
    keyword = tokens.next()

    if keyword is None:
        raise UziErr(ErrKind.MISSING_CMD)
    if keyword in _NO_ARGS:
        _expect_end(tokens, keyword, strict)
        return _NO_ARGS[keyword]()
    if keyword == DEBUG:
        return _parse_debug(tokens, strict)
    if keyword == SET_OPTION:
        return _parse_setoption(tokens)
    if keyword == POSITION:
        return _parse_position(tokens)
    if keyword == GO:
        return _parse_go(tokens)
    raise UziErr(ErrKind.UNKNOWN_OPT, repr(keyword))


def _expect_end(tokens: TokenStream, keyword: str, strict: bool) -> None:
    rest = tokens.remainder()
    if not rest:
        return
    if strict:
        raise UziErr(ErrKind.UNKNOWN_OPT, f"{rest!r} after {keyword!r}")
    _log.debug("ignoring %r after %r", rest, keyword)


def _parse_debug(tokens: TokenStream, strict: bool) -> Debug:
    token = tokens.next()
    if token == ON:
        cmd = Debug(True)
    elif token == OFF:
        cmd = Debug(False)
    else:
        raise UziErr(ErrKind.MISSING_ON_OFF, repr(token))
    _expect_end(tokens, DEBUG, strict)
    return cmd


def _parse_setoption(tokens: TokenStream) -> SetOpt:
    """setoption name <id> [value <x>]: the id ends at "value", the value at end of line."""
    if tokens.next() != NAME:
        raise UziErr(ErrKind.SET_OPT_ERR, "expected 'name'")
    name = tokens.take_until({VALUE})
    if not name:
        raise UziErr(ErrKind.SET_OPT_ERR, "empty option id")

    value = None
    if tokens.next() == VALUE:
        value = tokens.remainder()
    return SetOpt(UciOpt(name, value))


def _parse_position(tokens: TokenStream) -> Pos:
    """
    position [startpos | fen <6 fields>] [moves <move1> ... <movei>]

    The FEN is re-joined with single spaces and kept as text. A missing base
    position is left for PosBuilder.build() to report.
    """
    builder = PosBuilder()
    token = tokens.next()

    if token == START_POS:
        builder.start_pos()
        token = tokens.next()
    elif token == FEN:
        fields = [tokens.next() for _ in range(FEN_FIELD_COUNT)]
        if None in fields or MOVES in fields:
            raise UziErr(ErrKind.WHAT, f"FEN needs {FEN_FIELD_COUNT} fields")
        builder.fen(" ".join(fields))
        token = tokens.next()
    elif token is not None and token != MOVES:
        raise UziErr(ErrKind.UNKNOWN_OPT, repr(token))

    if token == MOVES:
        for move in tokens:
            builder.add_move(parse_move(move))
    elif token is not None:
        raise UziErr(ErrKind.WHAT, f"unexpected {token!r} in position")

    return builder.build()


def _parse_go(tokens: TokenStream) -> Go:
    """
    go [searchmoves <moves>] [ponder] [wtime <x>] ... [infinite]

    searchmoves takes every following token up to the next go keyword, so a
    move list never swallows the option after it.
    """
    builder = GoBuilder()

    for keyword in tokens:
        if keyword == "searchmoves":
            moves = []
            while tokens.peek() is not None and tokens.peek() not in GO_KEYWORDS:
                moves.append(parse_move(next(tokens)))
            if not moves:
                raise UziErr(ErrKind.GO_ERR, "searchmoves needs at least one move")
            builder.search_moves(moves)
        elif keyword == "ponder":
            builder.ponder()
        elif keyword == "infinite":
            builder.infinite()
        elif keyword in GO_TIME_KEYWORDS:
            raw = _go_argument(tokens, keyword)
            try:
                ms = parse_int(raw)
            except UziErr:
                raise UziErr.bad_millis(keyword, raw) from None
            _GO_SETTERS[keyword](builder, ms)
        elif keyword in GO_COUNT_KEYWORDS:
            _GO_SETTERS[keyword](builder, parse_uint(_go_argument(tokens, keyword)))
        else:
            raise UziErr(ErrKind.UNKNOWN_OPT, f"go {keyword!r}")

    return builder.build()


def _go_argument(tokens: TokenStream, keyword: str) -> str:
    token = tokens.next()
    if token is None:
        raise UziErr(ErrKind.GO_ERR, f"{keyword} needs a value")
    return token
