"""
Error taxonomy shared by every parser in the package.

Malformed input is an expected condition, so every fallible entry point
raises exactly one UziErr and never returns a partially built command.
The failure kind is a closed enum; callers branch on ``err.kind`` rather
than on exception subclasses.
"""

from enum import Enum


class ErrKind(Enum):
    """Closed set of parse and validation failure kinds."""

    MISSING_CMD = "missing command"
    UNKNOWN_OPT = "unknown keyword"
    BAD_NUMBER = "bad number"
    BAD_BOOL = "bad boolean"
    BAD_MILLIS = "bad milliseconds"
    BAD_OPPONENT = "bad opponent"
    BAD_PLAYER_TYPE = "bad player type"
    BAD_TITLE = "bad title"
    MISSING_ON_OFF = "missing on/off"
    POSITION = "no initial position"
    GO_ERR = "malformed go option"
    NOTHING_SET_FOR_GO = "nothing set for go"
    SET_OPT_ERR = "malformed setoption"
    WHAT = "malformed command"


class UziErr(ValueError):
    """
    A protocol line could not be parsed or a command could not be built.

    Attributes:
        kind:   The failure kind.
        detail: Optional human-readable context (offending token, etc.).
        field:  For BAD_MILLIS, the go keyword whose argument failed.
        raw:    For BAD_MILLIS, the raw token that failed to parse.
    """

    def __init__(self, kind: ErrKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        self.field: str | None = None
        self.raw: str | None = None
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)

    @classmethod
    def bad_millis(cls, field: str, raw: str) -> "UziErr":
        """Build the BAD_MILLIS error for a time-valued ``go`` keyword."""
        err = cls(ErrKind.BAD_MILLIS, f"{field} {raw!r}")
        err.field = field
        err.raw = raw
        return err
