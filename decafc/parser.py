"""Recursive-descent parser: turn a queue of tokens into an abstract syntax tree."""

from __future__ import annotations

import re
from typing import Optional

from decafc.common import DecafError, DecafType
from decafc.nodes import (
    AssignmentNode,
    ASTNode,
    BinaryOpNode,
    BinaryOpType,
    BlockNode,
    BreakNode,
    ConditionalNode,
    ContinueNode,
    FuncCallNode,
    FuncDeclNode,
    LiteralNode,
    LocationNode,
    Parameter,
    ProgramNode,
    ReturnNode,
    UnaryOpNode,
    UnaryOpType,
    VarDeclNode,
    WhileLoopNode,
)
from decafc.tokens import Token, TokenQueue, TokenType

_TYPES = {"int": DecafType.INT, "bool": DecafType.BOOL, "void": DecafType.VOID}

# Binary operators grouped by precedence level, loosest binding first.
_BINARY_LEVELS: tuple[dict[str, BinaryOpType], ...] = (
    {"||": BinaryOpType.OROP},
    {"&&": BinaryOpType.ANDOP},
    {"==": BinaryOpType.EQOP, "!=": BinaryOpType.NEQOP},
    {"<": BinaryOpType.LTOP, "<=": BinaryOpType.LEOP,
     ">": BinaryOpType.GTOP, ">=": BinaryOpType.GEOP},
    {"+": BinaryOpType.ADDOP, "-": BinaryOpType.SUBOP},
    {"*": BinaryOpType.MULOP, "/": BinaryOpType.DIVOP, "%": BinaryOpType.MODOP},
)
_UNARY_LEVEL = len(_BINARY_LEVELS)

_UNARY_OPS = {"-": UnaryOpType.NEGOP, "!": UnaryOpType.NOTOP}

_ESCAPE = re.compile(r"\\(.?)", re.DOTALL)
_UNESCAPED = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}

_LONG_MIN = -(2 ** 63)
_LONG_MAX = 2 ** 63 - 1


def _integer_value(text: str) -> int:
    """Read an integer literal with C prefix rules, saturating to a 64-bit range."""
    lowered = text.lower()
    if lowered.startswith("0x"):
        value = int(lowered[2:], 16)
    elif len(text) > 1 and text.startswith("0"):
        value = int(text[1:], 8)
    else:
        value = int(text, 10)
    return max(_LONG_MIN, min(_LONG_MAX, value))


def _unescape_match(match: re.Match) -> str:
    char = match.group(1)
    return _UNESCAPED.get(char, "\\" + char)


def _string_literal(token: Token) -> LiteralNode:
    """Strip the quotes from a string token and decode its escape codes."""
    text = _ESCAPE.sub(_unescape_match, token.text[1:])[:-1]
    return LiteralNode(text, source_line=token.line)


class _Parser:
    """Parsing state: the queue of tokens still to be consumed."""

    def __init__(self, tokens: TokenQueue) -> None:
        self.tokens = tokens

    # token helpers

    def next_line(self) -> int:
        token = self.tokens.peek()
        if token is None:
            raise DecafError("Unexpected end of input\n")
        return token.line

    def check(self, type: TokenType, text: Optional[str] = None) -> bool:
        token = self.tokens.peek()
        if token is None:
            return False
        if text is None:
            return token.type is type
        return token.matches(type, text)

    def expect(self, type: TokenType, text: str) -> None:
        token = self.tokens.remove()
        if token is None:
            raise DecafError(f"Unexpected end of input (expected '{text}')\n")
        if not token.matches(type, text):
            raise DecafError(
                f"Expected '{text}' but found '{token.text}' on line {self.next_line()}\n"
            )

    def discard(self) -> None:
        if self.tokens.remove() is None:
            raise DecafError("Unexpected end of input\n")

    def parse_type(self) -> DecafType:
        token = self.tokens.remove()
        if token is None:
            raise DecafError("Unexpected end of input (expected type)\n")
        if token.type is not TokenType.KEY or token.text not in _TYPES:
            raise DecafError(f"Invalid type '{token.text}' on line {self.next_line()}\n")
        return _TYPES[token.text]

    def parse_id(self) -> str:
        token = self.tokens.remove()
        if token is None:
            raise DecafError("Unexpected end of input (expected identifier)\n")
        if token.type is not TokenType.ID:
            raise DecafError(f"Invalid ID '{token.text}' on line {self.next_line()}\n")
        return token.text

    # grammar

    def program(self) -> ProgramNode:
        variables: list[ASTNode] = []
        functions: list[ASTNode] = []
        while not self.tokens.is_empty():
            if self.check(TokenType.KEY, "def"):
                functions.append(self.function_declaration())
            elif self.check(TokenType.KEY):
                variables.append(self.variable_declaration())
            else:
                raise DecafError(
                    f"Unexpected token in program on line {self.next_line()}. Expecting a "
                    "function declaration or a variable declaration.\n"
                )
        return ProgramNode(variables, functions)

    def variable_declaration(self) -> VarDeclNode:
        line = self.next_line()
        var_type = self.parse_type()
        name = self.parse_id()
        is_array = False
        length = 1
        if self.check(TokenType.SYM, "["):
            is_array = True
            self.expect(TokenType.SYM, "[")
            size = self.tokens.remove()
            if size is None:
                raise DecafError("Unexpected end of input\n")
            if size.type is not TokenType.DECLIT:
                raise DecafError(f"Invalid array size on line {line}\n")
            length = _integer_value(size.text)
            self.expect(TokenType.SYM, "]")
        self.expect(TokenType.SYM, ";")
        return VarDeclNode(name, var_type, is_array, length, source_line=line)

    def function_declaration(self) -> FuncDeclNode:
        line = self.next_line()
        self.expect(TokenType.KEY, "def")
        return_type = self.parse_type()
        name = self.parse_id()
        self.expect(TokenType.SYM, "(")
        parameters: list[Parameter] = []
        if not self.check(TokenType.SYM, ")"):
            parameters = self.function_parameters()
        self.expect(TokenType.SYM, ")")
        body = self.braced_block()
        return FuncDeclNode(name, return_type, parameters, body, source_line=line)

    def function_parameters(self) -> list[Parameter]:
        if self.tokens.is_empty():
            raise DecafError("Unexpected end of input (function parameters)\n")
        parameters = []
        while True:
            param_type = self.parse_type()
            parameters.append(Parameter(self.parse_id(), param_type))
            if not self.check(TokenType.SYM, ","):
                return parameters
            self.expect(TokenType.SYM, ",")

    def braced_block(self) -> BlockNode:
        line = self.next_line()
        self.expect(TokenType.SYM, "{")
        variables: list[ASTNode] = []
        while any(self.check(TokenType.KEY, name) for name in _TYPES):
            variables.append(self.variable_declaration())
        statements: list[ASTNode] = []
        while not self.check(TokenType.SYM, "}"):
            statements.append(self.statement())
        self.expect(TokenType.SYM, "}")
        return BlockNode(variables, statements, source_line=line)

    def statement(self) -> ASTNode:
        line = self.next_line()

        if self.check(TokenType.KEY, "if"):
            self.expect(TokenType.KEY, "if")
            self.expect(TokenType.SYM, "(")
            condition = self.expression()
            self.expect(TokenType.SYM, ")")
            if_block = self.braced_block()
            else_block = None
            if self.check(TokenType.KEY, "else"):
                self.expect(TokenType.KEY, "else")
                else_block = self.braced_block()
            return ConditionalNode(condition, if_block, else_block, source_line=line)

        if self.check(TokenType.KEY, "while"):
            self.expect(TokenType.KEY, "while")
            self.expect(TokenType.SYM, "(")
            condition = self.expression()
            self.expect(TokenType.SYM, ")")
            body = self.braced_block()
            return WhileLoopNode(condition, body, source_line=line)

        if self.check(TokenType.KEY, "return"):
            self.expect(TokenType.KEY, "return")
            value = None
            if not self.check(TokenType.SYM, ";"):
                value = self.expression()
            self.expect(TokenType.SYM, ";")
            return ReturnNode(value, source_line=line)

        if self.check(TokenType.KEY, "break"):
            self.expect(TokenType.KEY, "break")
            self.expect(TokenType.SYM, ";")
            return BreakNode(source_line=line)

        if self.check(TokenType.KEY, "continue"):
            self.expect(TokenType.KEY, "continue")
            self.expect(TokenType.SYM, ";")
            return ContinueNode(source_line=line)

        if self.check(TokenType.ID):
            name = self.parse_id()
            if self.check(TokenType.SYM, "("):
                arguments = self.call_arguments()
                self.expect(TokenType.SYM, ";")
                return FuncCallNode(name, arguments, source_line=line)
            location = LocationNode(name, self.optional_index(), source_line=line)
            self.expect(TokenType.SYM, "=")
            value = self.expression()
            self.expect(TokenType.SYM, ";")
            return AssignmentNode(location, value, source_line=line)

        raise DecafError(f"Invalid statement on line {line}\n")

    def call_arguments(self) -> list[ASTNode]:
        """Parse '(' Args? ')' after a function name."""
        self.expect(TokenType.SYM, "(")
        arguments: list[ASTNode] = []
        if not self.check(TokenType.SYM, ")"):
            if self.tokens.is_empty():
                raise DecafError(
                    "Unexpected end of input when trying to parse function call arguments.\n"
                )
            while True:
                arguments.append(self.expression())
                if not self.check(TokenType.SYM, ","):
                    break
                self.expect(TokenType.SYM, ",")
        self.expect(TokenType.SYM, ")")
        return arguments

    def optional_index(self) -> Optional[ASTNode]:
        """Parse an optional '[' Expr ']' after a location name."""
        if not self.check(TokenType.SYM, "["):
            return None
        self.expect(TokenType.SYM, "[")
        index = self.expression()
        self.expect(TokenType.SYM, "]")
        return index

    def expression(self) -> ASTNode:
        if self.tokens.is_empty():
            raise DecafError("Unexpected end of input when trying to parse an expression.\n")
        return self.binary(0)

    def binary(self, level: int) -> ASTNode:
        line = self.next_line()
        if level == _UNARY_LEVEL:
            return self.unary()
        operators = _BINARY_LEVELS[level]
        left = self.binary(level + 1)
        while True:
            token = self.tokens.peek()
            if token is None or token.type is not TokenType.SYM or token.text not in operators:
                return left
            operator = operators[token.text]
            self.discard()
            right = self.binary(level + 1)
            left = BinaryOpNode(operator, left, right, source_line=line)

    def unary(self) -> ASTNode:
        line = self.next_line()
        token = self.tokens.peek()
        if token.type is TokenType.SYM and token.text in _UNARY_OPS:
            self.discard()
            return UnaryOpNode(_UNARY_OPS[token.text], self.base(), source_line=line)
        return self.base()

    def base(self) -> ASTNode:
        line = self.next_line()

        if self.check(TokenType.SYM, "("):
            self.expect(TokenType.SYM, "(")
            inner = self.expression()
            self.expect(TokenType.SYM, ")")
            return inner

        token = self.tokens.peek()
        if token.type in (TokenType.HEXLIT, TokenType.DECLIT, TokenType.STRLIT) \
                or token.text in ("true", "false"):
            literal = self.literal()
            self.discard()
            return literal

        if self.check(TokenType.ID):
            name = self.parse_id()
            if self.check(TokenType.SYM, "("):
                return FuncCallNode(name, self.call_arguments(), source_line=line)
            return LocationNode(name, self.optional_index(), source_line=line)

        raise DecafError(f"Invalid base expression on line: {line}\n")

    def literal(self) -> LiteralNode:
        token = self.tokens.peek()
        if token is None:
            raise DecafError("Unexpected end of input. Expecting a literal to parse.\n")
        if token.type in (TokenType.DECLIT, TokenType.HEXLIT):
            return LiteralNode(_integer_value(token.text), source_line=token.line)
        if token.type is TokenType.STRLIT:
            return _string_literal(token)
        if token.text in ("true", "false"):
            return LiteralNode(token.text == "true", source_line=token.line)
        raise DecafError(f"Unsupported type when parsing literal. Line: {token.line}\n")


def parse(tokens: Optional[TokenQueue]) -> ProgramNode:
    """Convert a queue of tokens into an abstract syntax tree.

    The tokens are consumed. Raises DecafError on any syntax error.
    """
    if tokens is None:
        raise DecafError("Input token queue pointer was null.\n")
    return _Parser(tokens).program()