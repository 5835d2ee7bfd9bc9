"""
Session configuration for the UCI loop.

The identity an engine reports in answer to "uci", the options it declares,
and how strictly GUI lines are parsed. Validated with pydantic so that a
misconfigured engine fails at start-up, not in the middle of a game.
"""

from pydantic import BaseModel, field_validator

from uzi.opt import HasOpt


class SessionConfig(BaseModel):
    """
    Settings for one UCI session.

    Fields:
        name:    Sent as "id name <name>".
        author:  Sent as "id author <author>".
        strict:  Reject tokens trailing argument-less commands instead of
                 ignoring them.
        options: Declarations sent as "option ..." lines before "uciok".
    """

    name: str = "uzi"
    author: str = "uzi developers"
    strict: bool = False
    options: tuple[HasOpt, ...] = ()

    @field_validator("name", "author")
    @classmethod
    def strip_identity(cls, v: str) -> str:
        """Identity lines must carry some text once surrounding spaces are gone."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        if "\n" in v or "\r" in v:
            raise ValueError("must fit on one line")
        return v
