"""
Engine options: declarations sent by the engine and assignments sent by the GUI.

Two halves of the same sub-protocol live here:

    option name <id> type <t> [default <x>] [min <x>] [max <x>] [var <x>]*
        Sent by the engine after "uci" to declare a configurable parameter.
        Modeled as one dataclass per option type (HasOpt).

    setoption name <id> [value <x>]
        Sent by the GUI to change a parameter. Modeled as UciOpt, which keeps
        the value as raw text. Typed accessors interpret it on demand; the
        codec never checks a value against the option's declared range.

UCI_Opponent is the one standard option whose value has its own grammar:

    [GM|IM|FM|WGM|WIM|none] [<elo>|none] [computer|human] <name>

e.g. "setoption name UCI_Opponent value GM 2800 human Gary Kasparov".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from uzi.constants import (
    EMPTY_STRING,
    FALSE,
    NAME,
    NONE,
    OPTION,
    OPTION_ATTRIBUTES,
    OPTION_TYPE,
    SET_OPTION,
    TRUE,
    VALUE,
)
from uzi.err import ErrKind, UziErr
from uzi.tokens import TokenStream, parse_int, parse_uint


def parse_bool(token: str | None) -> bool:
    """Parse ``true``/``false``, raising BAD_BOOL for anything else."""
    if token == TRUE:
        return True
    if token == FALSE:
        return False
    raise UziErr(ErrKind.BAD_BOOL, repr(token))


def _bool_text(value: bool) -> str:
    return TRUE if value else FALSE


# ---------------------------------------------------------------------------
# Option declarations (engine → GUI)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CheckOpt:
    """A boolean option, e.g. ``option name Ponder type check default false``."""

    name: str
    default: bool = False

    def __str__(self) -> str:
        return f"{OPTION} {NAME} {self.name} {OPTION_TYPE} check default {_bool_text(self.default)}"


@dataclass(frozen=True)
class SpinOpt:
    """An integer option with bounds, e.g. ``type spin default 16 min 1 max 1024``."""

    name: str
    default: int = 0
    min: int = 0
    max: int = 0

    def __str__(self) -> str:
        return (
            f"{OPTION} {NAME} {self.name} {OPTION_TYPE} spin "
            f"default {self.default} min {self.min} max {self.max}"
        )


@dataclass(frozen=True)
class ComboOpt:
    """A choice among predefined strings, one ``var`` per choice."""

    name: str
    default: str = ""
    vars: tuple[str, ...] = ()

    def __str__(self) -> str:
        line = f"{OPTION} {NAME} {self.name} {OPTION_TYPE} combo default {self.default}"
        for var in self.vars:
            line += f" var {var}"
        return line


@dataclass(frozen=True)
class ButtonOpt:
    """An action with no value, e.g. ``option name Clear Hash type button``."""

    name: str

    def __str__(self) -> str:
        return f"{OPTION} {NAME} {self.name} {OPTION_TYPE} button"


@dataclass(frozen=True)
class StringOpt:
    """A free-text option. An empty default is written as ``<empty>``."""

    name: str
    default: str = ""

    def __str__(self) -> str:
        default = self.default or EMPTY_STRING
        return f"{OPTION} {NAME} {self.name} {OPTION_TYPE} string default {default}"


HasOpt = Union[CheckOpt, SpinOpt, ComboOpt, ButtonOpt, StringOpt]


def parse_has_opt(line: str) -> HasOpt:
    """
    Parse an ``option ...`` declaration line.

    Attributes may appear in any order after the type. Attributes that the
    type does not use are ignored; a missing ``default`` falls back to the
    type's zero value. Check and spin values are one token each; combo and
    string values, and every ``var``, run up to the next attribute keyword.

    Raises:
        UziErr: UNKNOWN_OPT for an unknown type or attribute keyword,
                SET_OPT_ERR when ``name`` or ``type`` is missing,
                BAD_BOOL / BAD_NUMBER for malformed check or spin values.
    """
    tokens = TokenStream(line)
    if tokens.next() != OPTION:
        raise UziErr(ErrKind.UNKNOWN_OPT, line.strip())
    if tokens.next() != NAME:
        raise UziErr(ErrKind.SET_OPT_ERR, "expected 'name'")

    name = tokens.take_until({OPTION_TYPE})
    if not name or tokens.next() != OPTION_TYPE:
        raise UziErr(ErrKind.SET_OPT_ERR, "expected 'name <id> type <t>'")
    kind = tokens.next()
    single_token = kind in ("check", "spin")

    attrs: dict[str, str] = {}
    choices: list[str] = []
    for key in tokens:
        if key not in OPTION_ATTRIBUTES:
            raise UziErr(ErrKind.UNKNOWN_OPT, repr(key))
        if single_token and key != "var":
            text = tokens.next() or ""
        else:
            text = tokens.take_until(OPTION_ATTRIBUTES)
        if key == "var":
            choices.append(text)
        else:
            attrs[key] = text

    if kind == "check":
        default = attrs.get("default")
        return CheckOpt(name, parse_bool(default) if default is not None else False)
    if kind == "spin":
        return SpinOpt(
            name,
            default=parse_int(attrs.get("default", "0")),
            min=parse_int(attrs.get("min", "0")),
            max=parse_int(attrs.get("max", "0")),
        )
    if kind == "combo":
        return ComboOpt(name, attrs.get("default", ""), tuple(choices))
    if kind == "button":
        return ButtonOpt(name)
    if kind == "string":
        default = attrs.get("default", "")
        return StringOpt(name, "" if default == EMPTY_STRING else default)
    raise UziErr(ErrKind.UNKNOWN_OPT, f"option type {kind!r}")


# ---------------------------------------------------------------------------
# UCI_Opponent
# ---------------------------------------------------------------------------


class Title(Enum):
    GM = "GM"
    IM = "IM"
    FM = "FM"
    WGM = "WGM"
    WIM = "WIM"


class PlayerType(Enum):
    COMPUTER = "computer"
    HUMAN = "human"


@dataclass(frozen=True)
class Opponent:
    """The opponent described by a ``UCI_Opponent`` value."""

    title: Title | None
    elo: int | None
    player_type: PlayerType
    name: str

    def __str__(self) -> str:
        title = NONE if self.title is None else self.title.value
        elo = NONE if self.elo is None else str(self.elo)
        return f"{title} {elo} {self.player_type.value} {self.name}"


def parse_opponent(text: str) -> Opponent:
    """
    Parse the value of a ``UCI_Opponent`` assignment.

    Raises:
        UziErr: BAD_TITLE for an unknown title, BAD_PLAYER_TYPE when the third
                field is neither ``computer`` nor ``human``, BAD_OPPONENT for a
                missing field or a malformed elo.
    """
    tokens = TokenStream(text)

    title_token = tokens.next()
    if title_token is None:
        raise UziErr(ErrKind.BAD_OPPONENT, "missing title")
    title = None
    if title_token != NONE:
        try:
            title = Title(title_token)
        except ValueError:
            raise UziErr(ErrKind.BAD_TITLE, repr(title_token)) from None

    elo_token = tokens.next()
    if elo_token is None:
        raise UziErr(ErrKind.BAD_OPPONENT, "missing elo")
    elo = None
    if elo_token != NONE:
        try:
            elo = parse_uint(elo_token)
        except UziErr:
            raise UziErr(ErrKind.BAD_OPPONENT, f"bad elo {elo_token!r}") from None

    type_token = tokens.next()
    if type_token is None:
        raise UziErr(ErrKind.BAD_OPPONENT, "missing player type")
    try:
        player_type = PlayerType(type_token)
    except ValueError:
        raise UziErr(ErrKind.BAD_PLAYER_TYPE, repr(type_token)) from None

    name = tokens.remainder()
    if not name:
        raise UziErr(ErrKind.BAD_OPPONENT, "missing name")
    return Opponent(title, elo, player_type, name)


# ---------------------------------------------------------------------------
# Option assignments (GUI → engine)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UciOpt:
    """
    The payload of ``setoption name <id> [value <x>]``.

    Attributes:
        name:  Option id as written, inner spacing preserved.
        value: Raw value text, or None when no ``value`` keyword was sent
               (button options).
    """

    name: str
    value: str | None = None

    def __str__(self) -> str:
        line = f"{SET_OPTION} {NAME} {self.name}"
        if self.value is not None:
            line += f" {VALUE} {self.value}"
        return line

    def as_bool(self) -> bool:
        """Value of a check option."""
        return parse_bool(self.value)

    def as_int(self) -> int:
        """Value of a spin option."""
        if self.value is None:
            raise UziErr(ErrKind.BAD_NUMBER, f"{self.name} has no value")
        return parse_int(self.value)

    def opponent(self) -> Opponent:
        """Value of ``UCI_Opponent``."""
        if self.value is None:
            raise UziErr(ErrKind.BAD_OPPONENT, "missing value")
        return parse_opponent(self.value)
