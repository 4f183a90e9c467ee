"""AST traversal (visitor pattern) and the standard tree visitors."""

from __future__ import annotations

import io
from typing import IO

from decafc.common import DecafError, DecafType, doubly_escape_string, escape_string
from decafc.nodes import ASTNode, NodeType

_HOOK_NAMES = {
    NodeType.PROGRAM: "program",
    NodeType.VARDECL: "vardecl",
    NodeType.FUNCDECL: "funcdecl",
    NodeType.BLOCK: "block",
    NodeType.ASSIGNMENT: "assignment",
    NodeType.CONDITIONAL: "conditional",
    NodeType.WHILELOOP: "whileloop",
    NodeType.RETURNSTMT: "return",
    NodeType.BREAKSTMT: "break",
    NodeType.CONTINUESTMT: "continue",
    NodeType.BINARYOP: "binaryop",
    NodeType.UNARYOP: "unaryop",
    NodeType.LOCATION: "location",
    NodeType.FUNCCALL: "funccall",
    NodeType.LITERAL: "literal",
}

_HIDDEN_GRAPH_ATTRIBUTES = frozenset({"dotid", "depth", "parent"})


class NodeVisitor:
    """Depth-first AST traversal with pre-, in- and post-visit hooks.

    Subclasses define ``previsit_<kind>`` / ``postvisit_<kind>`` methods
    (e.g. ``previsit_block``); kinds without a specific hook fall back to
    ``previsit_default`` / ``postvisit_default``. ``invisit_binaryop``, if
    defined, runs between the left and right operands of a binary operation.
    """

    def traverse(self, node: ASTNode) -> None:
        """Visit ``node`` and all of its descendants."""
        kind = _HOOK_NAMES.get(getattr(node, "node_type", None))
        if kind is None:
            raise DecafError("ERROR: Unhandled node traversal\n")

        getattr(self, f"previsit_{kind}", self.previsit_default)(node)
        if node.node_type is NodeType.BINARYOP:
            self.traverse(node.left)
            invisit = getattr(self, "invisit_binaryop", None)
            if invisit is not None:
                invisit(node)
            self.traverse(node.right)
        else:
            for child in node.children():
                self.traverse(child)
        getattr(self, f"postvisit_{kind}", self.postvisit_default)(node)

    def previsit_default(self, node: ASTNode) -> None:
        """Action before a node's children when no specific hook exists."""

    def postvisit_default(self, node: ASTNode) -> None:
        """Action after a node's children when no specific hook exists."""


def _describe_literal(node: ASTNode) -> str:
    line = node.source_line
    if node.literal_type is DecafType.INT:
        return f"Literal type=int value={node.value} [line {line}]"
    if node.literal_type is DecafType.BOOL:
        return f"Literal type=bool value={'true' if node.value else 'false'} [line {line}]"
    if node.literal_type is DecafType.STR:
        return f'Literal type=string value="{escape_string(node.value)}" [line {line}]'
    if node.literal_type is DecafType.VOID:
        return "Literal type=void"
    return ""


def _describe(node: ASTNode) -> str:
    line = node.source_line
    match node.node_type:
        case NodeType.PROGRAM:
            return f"Program [line {line}]"
        case NodeType.VARDECL:
            return (f'VarDecl name="{node.name}" type={node.type} '
                    f"is_array={'yes' if node.is_array else 'no'} "
                    f"array_length={node.array_length} [line {line}]")
        case NodeType.FUNCDECL:
            params = ",".join(f"{p.name}:{p.type}" for p in node.parameters)
            return (f'FuncDecl name="{node.name}" return_type={node.return_type} '
                    f"parameters={{{params}}} [line {line}]")
        case NodeType.BLOCK:
            return f"Block [line {line}]"
        case NodeType.ASSIGNMENT:
            return f"Assignment [line {line}]"
        case NodeType.CONDITIONAL:
            return f"Conditional [line {line}]"
        case NodeType.WHILELOOP:
            return f"Whileloop [line {line}]"
        case NodeType.RETURNSTMT:
            return f"Return [line {line}]"
        case NodeType.BREAKSTMT:
            return f"Break [line {line}]"
        case NodeType.CONTINUESTMT:
            return f"Continue [line {line}]"
        case NodeType.BINARYOP:
            return f'Binaryop op="{node.operator}" [line {line}]'
        case NodeType.UNARYOP:
            return f'Unaryop op="{node.operator}" [line {line}]'
        case NodeType.LOCATION:
            return f'Location name="{node.name}" [line {line}]'
        case NodeType.FUNCCALL:
            return f'FuncCall name="{node.name}" [line {line}]'
        case NodeType.LITERAL:
            return _describe_literal(node)
    return ""


class PrintVisitor(NodeVisitor):
    """Pretty-prints the tree, indenting each node by its "depth" attribute."""

    def __init__(self, output: IO[str]) -> None:
        self.output = output

    def previsit_default(self, node: ASTNode) -> None:
        depth = node.get_attribute("depth") if node.has_attribute("depth") else 0
        self.output.write("  " * depth + _describe(node) + "\n")


def _graph_detail(node: ASTNode) -> str:
    match node.node_type:
        case NodeType.VARDECL | NodeType.FUNCDECL | NodeType.FUNCCALL | NodeType.LOCATION:
            return f" name='{node.name}'"
        case NodeType.BINARYOP | NodeType.UNARYOP:
            return f" op='{node.operator}'"
        case NodeType.LITERAL:
            if node.literal_type is DecafType.INT:
                return f" value={node.value}"
            if node.literal_type is DecafType.BOOL:
                return f" value={'true' if node.value else 'false'}"
            if node.literal_type is DecafType.STR:
                return f" value='{doubly_escape_string(node.value)}'"
    return ""


class GenerateASTGraph(NodeVisitor):
    """Writes the tree as a GraphViz DOT digraph."""

    def __init__(self, output: IO[str]) -> None:
        self.output = output
        self._next_id = 0

    def _assign_dotid(self, node: ASTNode) -> None:
        node.set_attribute("dotid", self._next_id)
        self._next_id += 1

    def _generate_dot(self, node: ASTNode) -> None:
        node_id = node.get_attribute("dotid")
        label = f"{node.node_type}{_graph_detail(node)}"
        for key, (value, printer) in reversed(node.attributes.items()):
            if key not in _HIDDEN_GRAPH_ATTRIBUTES:
                label += f"\\n{key}: {printer(value)}"
        self.output.write(f'{node_id} [shape=box, label="{label}"];\n')
        for child in node.children():
            self.output.write(f"{node_id} -> {child.get_attribute('dotid')};\n")

    def previsit_default(self, node: ASTNode) -> None:
        self._assign_dotid(node)

    def postvisit_default(self, node: ASTNode) -> None:
        self._generate_dot(node)

    def previsit_program(self, node: ASTNode) -> None:
        self.output.write("digraph AST {\n")
        self._assign_dotid(node)

    def postvisit_program(self, node: ASTNode) -> None:
        self._generate_dot(node)
        self.output.write("}\n")


class SetParentVisitor(NodeVisitor):
    """Sets a "parent" attribute on every non-root node."""

    def previsit_default(self, node: ASTNode) -> None:
        for child in node.children():
            child.set_attribute("parent", node)


class CalcDepthVisitor(NodeVisitor):
    """Sets a "depth" attribute: 0 for the program, parent's depth + 1 otherwise.

    Requires the "parent" links set by SetParentVisitor.
    """

    def previsit_program(self, node: ASTNode) -> None:
        node.set_attribute("depth", 0, str)

    def previsit_default(self, node: ASTNode) -> None:
        parent = node.get_attribute("parent")
        node.set_attribute("depth", parent.get_attribute("depth") + 1, str)


def format_tree(tree: ASTNode) -> str:
    """Link parents, compute depths and return the pretty-printed tree."""
    SetParentVisitor().traverse(tree)
    CalcDepthVisitor().traverse(tree)
    buffer = io.StringIO()
    PrintVisitor(buffer).traverse(tree)
    return buffer.getvalue()