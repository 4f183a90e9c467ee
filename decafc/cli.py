"""Command-line drivers for the lexer and the parser."""

from __future__ import annotations

import subprocess
import sys
from typing import Optional, Sequence

from decafc.common import MAX_FILE_SIZE, DecafError
from decafc.lexer import lex
from decafc.parser import parse
from decafc.visitor import GenerateASTGraph, format_tree

GRAPH_FILE = "tree.dot"
"""DOT file written by the parser driver."""

IMAGE_FILE = "tree.png"
"""Image rendered from the DOT file by GraphViz."""


def read_source(filename: str) -> str:
    """Return at most MAX_FILE_SIZE characters of a source file.

    Raises OSError if the file cannot be read.
    """
    with open(filename, "r", encoding="utf-8", errors="replace", newline="") as source:
        return source.read(MAX_FILE_SIZE)


def _load(argv: Optional[Sequence[str]]) -> Optional[str]:
    """Check the arguments and read the named file; report problems on stderr."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        program = sys.argv[0] if sys.argv and sys.argv[0] else "decafc"
        sys.stderr.write(f"Usage: {program} <decaf-filename>\n")
        return None
    filename = args[0]
    try:
        return read_source(filename)
    except OSError:
        sys.stderr.write(f"Could not read file: {filename}")
        return None


def lex_main(argv: Optional[Sequence[str]] = None) -> int:
    """Lex a Decaf file and print its tokens; return the exit status."""
    text = _load(argv)
    if text is None:
        return 1
    try:
        tokens = lex(text)
    except DecafError as error:
        sys.stderr.write(error.message)
        return 1
    tokens.print(sys.stdout)
    return 0


def _render_graph(tree) -> None:
    """Write the tree as a DOT file and try to render it with GraphViz."""
    try:
        with open(GRAPH_FILE, "w", encoding="utf-8") as graph:
            GenerateASTGraph(graph).traverse(tree)
    except OSError:
        return
    try:
        subprocess.run(["dot", "-Tpng", "-o", IMAGE_FILE, GRAPH_FILE], check=False)
    except OSError:
        sys.stderr.write("Could not generate AST image\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Lex and parse a Decaf file, print its AST and draw it; return the exit status."""
    text = _load(argv)
    if text is None:
        return 1
    try:
        tree = parse(lex(text))
    except DecafError as error:
        sys.stderr.write(error.message)
        return 1
    sys.stdout.write(format_tree(tree))
    _render_graph(tree)
    return 0


if __name__ == "__main__":
    sys.exit(main())