"""Tokens and the first-in-first-out token queue."""

from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Iterator, Optional

from decafc.common import MAX_TOKEN_LEN


class TokenType(Enum):
    """Valid token types; the value is the name used in output."""

    ID = "ID"
    DECLIT = "DECLIT"
    HEXLIT = "HEXLIT"
    STRLIT = "STRLIT"
    KEY = "KEYWORD"
    SYM = "SYMBOL"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A single token with its type, raw text and source line."""

    type: TokenType
    text: str
    line: int

    def __post_init__(self) -> None:
        if len(self.text) >= MAX_TOKEN_LEN:
            object.__setattr__(self, "text", self.text[: MAX_TOKEN_LEN - 1])

    def matches(self, type: TokenType, text: str) -> bool:
        """Return True if this token has the given type and text."""
        return self.type is type and self.text == text[: MAX_TOKEN_LEN - 1]

    def __str__(self) -> str:
        return f"{self.type.value:<8} [line {self.line:03d}]  {self.text}"


@dataclass
class TokenQueue:
    """First-in-first-out queue of tokens."""

    _tokens: deque = field(default_factory=deque)

    def add(self, token: Token) -> None:
        """Append a token to the back of the queue."""
        self._tokens.append(token)

    def peek(self) -> Optional[Token]:
        """Return the front token without removing it, or None if empty."""
        return self._tokens[0] if self._tokens else None

    def remove(self) -> Optional[Token]:
        """Remove and return the front token, or None if empty."""
        return self._tokens.popleft() if self._tokens else None

    def is_empty(self) -> bool:
        return not self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __bool__(self) -> bool:
        return bool(self._tokens)

    def format(self) -> str:
        """Return the debug listing of all tokens, one per line."""
        return "".join(f"{token}\n" for token in self._tokens)

    def print(self, out: Optional[IO[str]] = None) -> None:
        """Write the debug listing to the given stream (stdout by default)."""
        (out if out is not None else sys.stdout).write(self.format())