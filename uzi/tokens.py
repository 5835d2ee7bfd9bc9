"""
Token stream over a single protocol line.

Tokens are produced lazily from the original line, so a parser can stop
tokenizing at any point and take the rest of the line verbatim. Free-text
payloads such as ``setoption name <id> value <x>`` depend on this: their
inner spacing must survive parsing.
"""

import re
from typing import Container, Iterator

import chess

from uzi.err import ErrKind, UziErr

_TOKEN_RE = re.compile(r"\S+")


class TokenStream:
    """
    Lazy, non-restartable view of the whitespace-separated tokens of a line.

    Attributes:
        start: Offset in the line where the last consumed token starts.
        end:   Offset in the line just past the last consumed token.
    """

    def __init__(self, line: str) -> None:
        self._line = line
        self._matches: Iterator[re.Match[str]] = _TOKEN_RE.finditer(line)
        self._peeked: re.Match[str] | None = None
        self.start = 0
        self.end = 0

    def __iter__(self) -> "TokenStream":
        return self

    def __next__(self) -> str:
        match = self._peeked if self._peeked is not None else next(self._matches)
        self._peeked = None
        self.start, self.end = match.span()
        return match.group()

    def next(self) -> str | None:
        """Consume and return the next token, or None at end of line."""
        return next(self, None)

    def peek(self) -> str | None:
        """Return the next token without consuming it, or None at end of line."""
        if self._peeked is None:
            self._peeked = next(self._matches, None)
        return None if self._peeked is None else self._peeked.group()

    def remainder(self) -> str:
        """
        Consume and return the rest of the line as written.

        The whitespace separating the remainder from the last consumed token,
        and any trailing whitespace, are not part of the result; spacing
        between the remaining words is kept exactly.
        """
        text = self._line[self.end:].strip()
        self._peeked = None
        for _ in self._matches:
            pass
        self.start = self.end = len(self._line)
        return text

    def take_until(self, stop: Container[str]) -> str:
        """
        Consume tokens up to (not including) the first one found in ``stop``.

        Returns the consumed tokens as they appear in the line, inner spacing
        included, or an empty string when the next token is already a stop
        word or the line has ended.
        """
        first = None
        while self.peek() is not None and self.peek() not in stop:
            next(self)
            if first is None:
                first = self.start
        if first is None:
            return ""
        return self.text(first, self.end)

    def text(self, start: int, end: int) -> str:
        """Slice of the original line between two token offsets."""
        return self._line[start:end]


# ---------------------------------------------------------------------------
# Token values
# ---------------------------------------------------------------------------
# int() accepts "+5", " 5", "1_000" and non-ASCII digits; the protocol does
# not, so tokens are matched against an explicit pattern first.

_UINT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"-?[0-9]+")


def parse_uint(token: str) -> int:
    """Parse a non-negative decimal integer token, raising BAD_NUMBER."""
    if not _UINT_RE.fullmatch(token):
        raise UziErr(ErrKind.BAD_NUMBER, repr(token))
    return int(token)


def parse_int(token: str) -> int:
    """Parse a signed decimal integer token, raising BAD_NUMBER."""
    if not _INT_RE.fullmatch(token):
        raise UziErr(ErrKind.BAD_NUMBER, repr(token))
    return int(token)


def parse_move(token: str) -> chess.Move:
    """
    Parse a move token in coordinate notation (``e2e4``, ``e7e8q``, ``0000``).

    The move is opaque to the codec: only its syntax is checked here, never
    its legality.
    """
    try:
        return chess.Move.from_uci(token)
    except ValueError as exc:
        raise UziErr(ErrKind.WHAT, f"bad move {token!r}") from exc
