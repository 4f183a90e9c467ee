"""Lexical analysis: turn Decaf source text into a queue of tokens."""

from __future__ import annotations

import re

from decafc.common import DecafError
from decafc.tokens import Token, TokenQueue, TokenType

KEYWORDS = frozenset({
    "def", "if", "else", "while", "return", "break", "continue",
    "int", "bool", "void", "true", "false",
})
"""Words that lex as keywords."""

RESERVED = frozenset({
    "for", "callout", "class", "interface", "extends", "implements",
    "new", "this", "string", "float", "double", "null",
})
"""Words that may not appear in a program at all."""

_WHITESPACE = re.compile(r"[ \n\t\r]+")
_COMMENT = re.compile(r"//[^\n]*")
_STRING = re.compile(r'"(?:[^\\"\r\n]|\\[nt"\\])*"')
_IDENTIFIER = re.compile(r"[a-zA-Z][a-zA-Z_0-9]*")
_DECIMAL = re.compile(r"0|[1-9][0-9]*")
_HEX = re.compile(r"0x[a-fA-F0-9]+")
_MULTI_SYMBOL = re.compile(r"<=|>=|==|!=|&&|\|\|")
_SYMBOL = re.compile(r"[()+{}\[\]!<>;.,*\-=/%]")


def lex(text: str) -> TokenQueue:
    """Convert a string containing a Decaf program into a queue of tokens.

    Raises DecafError on an invalid token or a reserved word.
    """
    tokens = TokenQueue()
    line = 1
    pos = 0

    while pos < len(text):
        if match := _WHITESPACE.match(text, pos):
            line += match.group().count("\n")
        elif match := _COMMENT.match(text, pos):
            pass
        elif match := _STRING.match(text, pos):
            tokens.add(Token(TokenType.STRLIT, match.group(), line))
        elif match := _IDENTIFIER.match(text, pos):
            word = match.group()
            if word in KEYWORDS:
                tokens.add(Token(TokenType.KEY, word, line))
            elif word in RESERVED:
                raise DecafError(f"Invalid use of reserved word: {text[pos:]}\n")
            else:
                tokens.add(Token(TokenType.ID, word, line))
        elif match := _DECIMAL.match(text, pos):
            if hex_match := _HEX.match(text, pos):
                match = hex_match
                tokens.add(Token(TokenType.HEXLIT, match.group(), line))
            else:
                tokens.add(Token(TokenType.DECLIT, match.group(), line))
        elif (match := _MULTI_SYMBOL.match(text, pos)) or (match := _SYMBOL.match(text, pos)):
            tokens.add(Token(TokenType.SYM, match.group(), line))
        else:
            raise DecafError(f"Invalid token: {text[pos:]}\n")

        pos = match.end()

    return tokens