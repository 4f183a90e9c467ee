"""Shared types, limits and string helpers used across the compiler."""

from __future__ import annotations

from enum import Enum

MAX_FILE_SIZE = 65536
"""Maximum size (in characters) of any Decaf source file."""

MAX_LINE_LEN = 256
"""Maximum length (in characters) of any single line of input."""

MAX_TOKEN_LEN = 256
"""Maximum length (in characters) of any single token, including terminator."""

MAX_ERROR_LEN = 256
"""Maximum length (in characters) of any error message."""

MAX_ID_LEN = 256
"""Maximum length (in characters) of any identifier, including terminator."""


class DecafType(Enum):
    """Valid Decaf types.

    Variables can only be INT or BOOL; the others track the return type of
    a void function or the type of a string argument.
    """

    UNKNOWN = "???"
    INT = "int"
    BOOL = "bool"
    VOID = "void"
    STR = "str"

    def __str__(self) -> str:
        return self.value


class DecafError(Exception):
    """Fatal error raised by the front end (lexing or parsing)."""

    def __init__(self, message: str) -> None:
        # Error messages are bounded in length, like every other buffer.
        super().__init__(message[: MAX_ERROR_LEN - 1])

    @property
    def message(self) -> str:
        return self.args[0]


_ESCAPES = str.maketrans({
    "\n": "\\n",
    "\t": "\\t",
    '"': '\\"',
    "\\": "\\\\",
})

_DOUBLE_ESCAPES = str.maketrans({
    "\n": "\\\\n",
    "\t": "\\\\t",
    '"': '\\\\\\"',
    "\\": "\\\\\\\\",
})


def escape_string(text: str) -> str:
    """Return a string literal's text with escape codes inserted."""
    return text.translate(_ESCAPES)


def doubly_escape_string(text: str) -> str:
    """Return a string literal's text with doubled escape codes (for DOT/ILOC output)."""
    return text.translate(_DOUBLE_ESCAPES)