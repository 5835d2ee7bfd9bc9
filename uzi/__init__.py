"""
uzi: a codec for the Universal Chess Interface (UCI) text protocol.

Lines sent by a GUI are parsed into GuiCmd values; EngCmd values produced by
an engine are formatted into the lines a GUI expects. Both directions work
on one complete line at a time and keep no state between calls.

Modules:
    constants — Command keywords and grammar constants
    err       — Error taxonomy (UziErr, ErrKind)
    tokens    — Token stream over a line, token value parsers
    opt       — Option declarations (option) and assignments (setoption)
    gui       — GUI → engine commands, builders, and parse()
    engcmd    — Engine → GUI commands and their text form

Quick start::

    from uzi import parse, BestMove
    import chess

    cmd = parse("position startpos moves e2e4 e7e5")
    line = str(BestMove(chess.Move.from_uci("g1f3")))
"""

from uzi.engcmd import (
    BestMove,
    CurrLine,
    EngCmd,
    IdAuthor,
    IdName,
    Info,
    MultiPv,
    ReadyOk,
    Refutation,
    Score,
    ScoreBound,
    UciOk,
    to_text,
)
from uzi.err import ErrKind, UziErr
from uzi.gui import (
    Debug,
    Fen,
    Go,
    GoBuilder,
    GuiCmd,
    IsReady,
    NewGame,
    Ponderhit,
    Pos,
    PosBuilder,
    SetOpt,
    StartPos,
    Stop,
    Uci,
    parse,
)
from uzi.opt import (
    ButtonOpt,
    CheckOpt,
    ComboOpt,
    HasOpt,
    Opponent,
    PlayerType,
    SpinOpt,
    StringOpt,
    Title,
    UciOpt,
    parse_has_opt,
    parse_opponent,
)
from uzi.tokens import TokenStream

__all__ = [
    # Errors
    "ErrKind",
    "UziErr",
    # GUI → engine
    "GuiCmd",
    "Uci",
    "Debug",
    "IsReady",
    "SetOpt",
    "NewGame",
    "Pos",
    "Go",
    "Stop",
    "Ponderhit",
    "StartPos",
    "Fen",
    "GoBuilder",
    "PosBuilder",
    "parse",
    # Engine → GUI
    "EngCmd",
    "IdName",
    "IdAuthor",
    "UciOk",
    "ReadyOk",
    "BestMove",
    "Info",
    "Score",
    "ScoreBound",
    "MultiPv",
    "CurrLine",
    "Refutation",
    "to_text",
    # Options
    "HasOpt",
    "CheckOpt",
    "SpinOpt",
    "ComboOpt",
    "ButtonOpt",
    "StringOpt",
    "UciOpt",
    "Opponent",
    "Title",
    "PlayerType",
    "parse_has_opt",
    "parse_opponent",
    # Tokens
    "TokenStream",
]
