"""
Protocol constants: command keywords, sub-keywords, and grammar sizes.

Every literal keyword the parser and formatter match against is defined here
so that the grammar tables can be read in one place. All keywords are exact
and case-sensitive; the UCI protocol never folds case.
"""

# ---------------------------------------------------------------------------
# GUI → engine commands
# ---------------------------------------------------------------------------

UCI: str = "uci"
DEBUG: str = "debug"
IS_READY: str = "isready"
SET_OPTION: str = "setoption"
NEW_GAME: str = "ucinewgame"
POSITION: str = "position"
GO: str = "go"
STOP: str = "stop"
PONDERHIT: str = "ponderhit"

GUI_COMMANDS: frozenset[str] = frozenset(
    {UCI, DEBUG, IS_READY, SET_OPTION, NEW_GAME, POSITION, GO, STOP, PONDERHIT}
)

# Not a GuiCmd: the session loop ends on it before the parser is consulted.
QUIT: str = "quit"

# ---------------------------------------------------------------------------
# Engine → GUI commands
# ---------------------------------------------------------------------------

ID: str = "id"
UCI_OK: str = "uciok"
READY_OK: str = "readyok"
BEST_MOVE: str = "bestmove"
INFO: str = "info"
OPTION: str = "option"

ENGINE_COMMANDS: frozenset[str] = frozenset(
    {ID, UCI_OK, READY_OK, BEST_MOVE, INFO, OPTION}
)

# ---------------------------------------------------------------------------
# "go" sub-keywords
# ---------------------------------------------------------------------------
# searchmoves is variadic and stops at the first token found in GO_KEYWORDS.
# The time-valued keywords report BadMillis; the counters report BadNumber.

GO_TIME_KEYWORDS: tuple[str, ...] = ("wtime", "btime", "winc", "binc", "movetime")
GO_COUNT_KEYWORDS: tuple[str, ...] = ("movestogo", "depth", "nodes", "mate")
GO_FLAG_KEYWORDS: tuple[str, ...] = ("ponder", "infinite")

GO_KEYWORDS: frozenset[str] = frozenset(
    ("searchmoves",) + GO_TIME_KEYWORDS + GO_COUNT_KEYWORDS + GO_FLAG_KEYWORDS
)

# ---------------------------------------------------------------------------
# "info" sub-keywords, in canonical emission order
# ---------------------------------------------------------------------------

INFO_KEYWORDS: tuple[str, ...] = (
    "depth",
    "seldepth",
    "node",
    "time",
    "pv",
    "multipv",
    "score",
    "currmove",
    "hashfull",
    "nps",
    "tbhits",
    "sbhits",
    "cpuload",
    "string",
    "refutation",
    "currline",
)

# ---------------------------------------------------------------------------
# "position" / "setoption" / "option" grammar
# ---------------------------------------------------------------------------

START_POS: str = "startpos"
FEN: str = "fen"
MOVES: str = "moves"

# piece placement, side to move, castling, en passant, halfmove, fullmove
FEN_FIELD_COUNT: int = 6

NAME: str = "name"
VALUE: str = "value"

OPTION_TYPE: str = "type"
OPTION_ATTRIBUTES: frozenset[str] = frozenset({"default", "min", "max", "var"})

# String options declare an empty default with this placeholder.
EMPTY_STRING: str = "<empty>"

ON: str = "on"
OFF: str = "off"
TRUE: str = "true"
FALSE: str = "false"

# ---------------------------------------------------------------------------
# UCI_Opponent value grammar
# ---------------------------------------------------------------------------

UCI_OPPONENT: str = "UCI_Opponent"
NONE: str = "none"
