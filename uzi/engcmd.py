"""
Engine → GUI commands and their canonical text.

An engine answers a GUI with:

    id name <x> / id author <x>   identity, in response to "uci"
    uciok                         all ids and options have been sent
    readyok                       answer to "isready"
    bestmove <m1> [ponder <m2>]   the search has stopped; one per "go"
    info [opts]                   search progress
    option name <id> ...          option declarations (see uzi.opt)

Each command is a frozen dataclass whose str() is its line, without a
trailing newline. Formatting never fails. Free text (id name, id author,
info string) is rejected at construction if it holds a line break, so
every command stays a single line.

The "info" line emits its fields in one fixed order regardless of how the
Info value was built:

    depth seldepth node time pv multipv score currmove hashfull nps tbhits
    sbhits cpuload string refutation currline

GUIs read fields such as the pv together with their neighbours, so the
order has to be the same on every line. Permille values (hashfull, cpuload)
are written as given, even outside [0, 1000].
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Iterable, Union

import chess

from uzi.constants import BEST_MOVE, ID, INFO, READY_OK, UCI_OK
from uzi.opt import HasOpt


def _moves_text(moves: Iterable[chess.Move]) -> str:
    return "".join(f" {move.uci()}" for move in moves)


def _require_one_line(keyword: str, text: str) -> None:
    if "\n" in text or "\r" in text:
        raise ValueError(f"{keyword} text must not contain a line break")


# ---------------------------------------------------------------------------
# Info sub-structures
# ---------------------------------------------------------------------------


class ScoreBound(Enum):
    LOWER = "lowerbound"
    UPPER = "upperbound"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Score:
    """
    score cp <x> [<mate>] [lowerbound | upperbound]

    Attributes:
        cp:    Score in centipawns from the engine's point of view.
        mate:  Mate in this many moves; negative when the engine is mated.
               Independent of cp, both may be sent together.
        bound: Set when the score is only a lower or upper bound.
    """

    cp: int
    mate: int | None = None
    bound: ScoreBound | None = None

    def __str__(self) -> str:
        line = f"score cp {self.cp}"
        if self.mate is not None:
            line += f" {self.mate}"
        if self.bound is not None:
            line += f" {self.bound}"
        return line


@dataclass(frozen=True)
class MultiPv:
    """multipv <rank> <moves>: one of the k best lines, rank 1 being the best."""

    rank: int
    moves: tuple[chess.Move, ...] = ()

    def __str__(self) -> str:
        return f"multipv {self.rank}{_moves_text(self.moves)}"


@dataclass(frozen=True)
class CurrLine:
    """
    currline [<cpunr>] <moves>: the line a CPU is currently calculating.

    cpu_id is left out when the engine searches on a single CPU; the
    formatter omits it only when it is None.
    """

    cpu_id: int | None = None
    line: tuple[chess.Move, ...] = ()

    def __str__(self) -> str:
        text = "currline"
        if self.cpu_id is not None:
            text += f" {self.cpu_id}"
        return text + _moves_text(self.line)


@dataclass(frozen=True)
class Refutation:
    """refutation <move> <line>: refuted_move is refuted by the line ``moves``."""

    refuted_move: chess.Move
    moves: tuple[chess.Move, ...] = ()

    def __str__(self) -> str:
        return f"refutation {self.refuted_move.uci()}{_moves_text(self.moves)}"


# ---------------------------------------------------------------------------
# Info
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Info:
    """
    info [opts]: search information; any subset of fields may be present.

    Attributes:
        depth:         Search depth in plies.
        sel_depth:     Selective search depth in plies. Requires depth.
        node:          Nodes searched.
        time:          Time searched, written in whole milliseconds.
        pv:            The best line found.
        multi_pv:      Rank and line in multi-pv mode.
        score:         The engine's evaluation.
        curr_move:     Move currently being searched.
        hash_full:     Hash table fill, in permille.
        nodes_per_sec: Nodes searched per second.
        tb_hits:       Positions found in endgame tablebases.
        sb_hits:       Positions found in the Shredder endgame databases.
        cpu_load:      CPU usage of the engine, in permille.
        string:        Free text, written verbatim.
        refutation:    A refuted move and the line refuting it.
        curr_line:     The line currently being calculated.
    """

    depth: int | None = None
    sel_depth: int | None = None
    node: int | None = None
    time: timedelta | None = None
    pv: tuple[chess.Move, ...] | None = None
    multi_pv: MultiPv | None = None
    score: Score | None = None
    curr_move: chess.Move | None = None
    hash_full: int | None = None
    nodes_per_sec: int | None = None
    tb_hits: int | None = None
    sb_hits: int | None = None
    cpu_load: int | None = None
    string: str | None = None
    refutation: Refutation | None = None
    curr_line: CurrLine | None = None

    def __post_init__(self) -> None:
        if self.sel_depth is not None and self.depth is None:
            raise ValueError("info seldepth requires depth")
        if self.string is not None:
            _require_one_line("info string", self.string)

    def __str__(self) -> str:
        parts = [INFO]
        if self.depth is not None:
            parts.append(f"depth {self.depth}")
        if self.sel_depth is not None:
            parts.append(f"seldepth {self.sel_depth}")
        if self.node is not None:
            parts.append(f"node {self.node}")
        if self.time is not None:
            parts.append(f"time {self.time // timedelta(milliseconds=1)}")
        if self.pv is not None:
            parts.append(f"pv{_moves_text(self.pv)}")
        if self.multi_pv is not None:
            parts.append(str(self.multi_pv))
        if self.score is not None:
            parts.append(str(self.score))
        if self.curr_move is not None:
            parts.append(f"currmove {self.curr_move.uci()}")
        if self.hash_full is not None:
            parts.append(f"hashfull {self.hash_full}")
        if self.nodes_per_sec is not None:
            parts.append(f"nps {self.nodes_per_sec}")
        if self.tb_hits is not None:
            parts.append(f"tbhits {self.tb_hits}")
        if self.sb_hits is not None:
            parts.append(f"sbhits {self.sb_hits}")
        if self.cpu_load is not None:
            parts.append(f"cpuload {self.cpu_load}")
        if self.string is not None:
            parts.append(f"string {self.string}")
        if self.refutation is not None:
            parts.append(str(self.refutation))
        if self.curr_line is not None:
            parts.append(str(self.curr_line))
        return " ".join(parts)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IdName:
    name: str

    def __post_init__(self) -> None:
        _require_one_line("id name", self.name)

    def __str__(self) -> str:
        return f"{ID} name {self.name}"


@dataclass(frozen=True)
class IdAuthor:
    author: str

    def __post_init__(self) -> None:
        _require_one_line("id author", self.author)

    def __str__(self) -> str:
        return f"{ID} author {self.author}"


@dataclass(frozen=True)
class UciOk:
    def __str__(self) -> str:
        return UCI_OK


@dataclass(frozen=True)
class ReadyOk:
    def __str__(self) -> str:
        return READY_OK


@dataclass(frozen=True)
class BestMove:
    """
    bestmove <best> [ponder <ponder>]

    Must be sent once for every "go", including after "stop" in pondering
    mode. ponder is the reply the engine would like to think about.
    """

    best: chess.Move
    ponder: chess.Move | None = None

    def __str__(self) -> str:
        line = f"{BEST_MOVE} {self.best.uci()}"
        if self.ponder is not None:
            line += f" ponder {self.ponder.uci()}"
        return line


EngCmd = Union[IdName, IdAuthor, UciOk, ReadyOk, BestMove, Info, HasOpt]


def to_text(cmd: EngCmd) -> str:
    """Canonical line for an engine command, without a trailing newline."""
    return str(cmd)
