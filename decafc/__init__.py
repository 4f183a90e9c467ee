"""Decaf compiler front end: lexer, parser and syntax tree tools."""

__version__ = "0.1.0"