"""Abstract syntax tree nodes for Decaf programs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Union

from decafc.common import MAX_ID_LEN, MAX_LINE_LEN, DecafType

AttributePrinter = Callable[[Any], str]


def _placeholder(value: Any) -> str:
    return "(...)"


def _bounded(text: str, limit: int) -> str:
    return text[: limit - 1]


class NodeType(Enum):
    """Kinds of AST node; the value is the display name."""

    PROGRAM = "Program"
    VARDECL = "VarDecl"
    FUNCDECL = "FuncDecl"
    BLOCK = "Block"
    ASSIGNMENT = "Assignment"
    CONDITIONAL = "Conditional"
    WHILELOOP = "WhileLoop"
    RETURNSTMT = "Return"
    BREAKSTMT = "Break"
    CONTINUESTMT = "Continue"
    BINARYOP = "BinaryOp"
    UNARYOP = "UnaryOp"
    LOCATION = "Location"
    FUNCCALL = "FuncCall"
    LITERAL = "Literal"

    def __str__(self) -> str:
        return self.value


class BinaryOpType(Enum):
    """Binary operators; the value is the source symbol."""

    OROP = "||"
    ANDOP = "&&"
    EQOP = "=="
    NEQOP = "!="
    LTOP = "<"
    LEOP = "<="
    GEOP = ">="
    GTOP = ">"
    ADDOP = "+"
    SUBOP = "-"
    MULOP = "*"
    DIVOP = "/"
    MODOP = "%"

    def __str__(self) -> str:
        return self.value


class UnaryOpType(Enum):
    """Unary operators; the value is the source symbol."""

    NEGOP = "-"
    NOTOP = "!"

    def __str__(self) -> str:
        return self.value


@dataclass
class Parameter:
    """A formal function parameter."""

    name: str
    type: DecafType

    def __post_init__(self) -> None:
        self.name = _bounded(self.name, MAX_ID_LEN)


@dataclass(eq=False)
class ASTNode:
    """Base of all AST nodes: a source line and named attributes.

    ``attributes`` maps each key to ``(value, dot_printer)``; reversing it
    gives the newest key first, with replaced keys keeping their place.
    """

    node_type: ClassVar[NodeType]

    source_line: int = field(kw_only=True)
    attributes: dict = field(default_factory=dict, init=False, repr=False)

    def set_attribute(self, key: str, value: Any,
                      dot_printer: Optional[AttributePrinter] = None) -> None:
        """Set an attribute; a replaced value keeps its original printer."""
        if key in self.attributes:
            _, printer = self.attributes[key]
            self.attributes[key] = (value, printer)
        else:
            self.attributes[key] = (value, dot_printer or _placeholder)

    def get_attribute(self, key: str) -> Any:
        """Return an attribute's value; raise KeyError if it is missing."""
        try:
            return self.attributes[key][0]
        except KeyError:
            raise KeyError(f"No '{key}' attribute") from None

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes

    def children(self) -> list[ASTNode]:
        """Return child nodes in traversal order."""
        return []


@dataclass(eq=False)
class ProgramNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.PROGRAM

    variables: list[ASTNode]
    functions: list[ASTNode]
    source_line: int = field(default=1, kw_only=True)

    def children(self) -> list[ASTNode]:
        return [*self.variables, *self.functions]


@dataclass(eq=False)
class VarDeclNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.VARDECL

    name: str
    type: DecafType
    is_array: bool = False
    array_length: int = 1

    def __post_init__(self) -> None:
        self.name = _bounded(self.name, MAX_ID_LEN)


@dataclass(eq=False)
class FuncDeclNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.FUNCDECL

    name: str
    return_type: DecafType
    parameters: list[Parameter]
    body: ASTNode

    def __post_init__(self) -> None:
        self.name = _bounded(self.name, MAX_ID_LEN)

    def children(self) -> list[ASTNode]:
        return [self.body]


@dataclass(eq=False)
class BlockNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.BLOCK

    variables: list[ASTNode]
    statements: list[ASTNode]

    def children(self) -> list[ASTNode]:
        return [*self.variables, *self.statements]


@dataclass(eq=False)
class AssignmentNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.ASSIGNMENT

    location: ASTNode
    value: ASTNode

    def children(self) -> list[ASTNode]:
        return [self.location, self.value]


@dataclass(eq=False)
class ConditionalNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.CONDITIONAL

    condition: ASTNode
    if_block: ASTNode
    else_block: Optional[ASTNode] = None

    def children(self) -> list[ASTNode]:
        nodes = [self.condition, self.if_block]
        if self.else_block is not None:
            nodes.append(self.else_block)
        return nodes


@dataclass(eq=False)
class WhileLoopNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.WHILELOOP

    condition: ASTNode
    body: ASTNode

    def children(self) -> list[ASTNode]:
        return [self.condition, self.body]


@dataclass(eq=False)
class ReturnNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.RETURNSTMT

    value: Optional[ASTNode] = None

    def children(self) -> list[ASTNode]:
        return [] if self.value is None else [self.value]


@dataclass(eq=False)
class BreakNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.BREAKSTMT


@dataclass(eq=False)
class ContinueNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.CONTINUESTMT


@dataclass(eq=False)
class BinaryOpNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.BINARYOP

    operator: BinaryOpType
    left: ASTNode
    right: ASTNode

    def children(self) -> list[ASTNode]:
        return [self.left, self.right]


@dataclass(eq=False)
class UnaryOpNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.UNARYOP

    operator: UnaryOpType
    child: ASTNode

    def children(self) -> list[ASTNode]:
        return [self.child]


@dataclass(eq=False)
class LocationNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.LOCATION

    name: str
    index: Optional[ASTNode] = None

    def __post_init__(self) -> None:
        self.name = _bounded(self.name, MAX_ID_LEN)

    def children(self) -> list[ASTNode]:
        return [] if self.index is None else [self.index]


@dataclass(eq=False)
class FuncCallNode(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.FUNCCALL

    name: str
    arguments: list[ASTNode]

    def __post_init__(self) -> None:
        self.name = _bounded(self.name, MAX_ID_LEN)

    def children(self) -> list[ASTNode]:
        return list(self.arguments)


@dataclass(eq=False)
class LiteralNode(ASTNode):
    """A literal; its Decaf type follows from the Python type of the value.

    Integers are held as 32-bit signed values; strings are bounded in length.
    """

    node_type: ClassVar[NodeType] = NodeType.LITERAL

    value: Union[int, bool, str]
    literal_type: DecafType = field(init=False)

    def __post_init__(self) -> None:
        if isinstance(self.value, bool):
            self.literal_type = DecafType.BOOL
        elif isinstance(self.value, int):
            self.literal_type = DecafType.INT
            self.value = ((self.value + 2**31) % 2**32) - 2**31
        elif isinstance(self.value, str):
            self.literal_type = DecafType.STR
            self.value = _bounded(self.value, MAX_LINE_LEN)
        else:
            raise TypeError(f"unsupported literal value: {self.value!r}")