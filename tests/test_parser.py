import pytest

from decafc.common import DecafError, DecafType
from decafc.lexer import lex
from decafc.nodes import (
    AssignmentNode,
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
from decafc.parser import parse
from decafc.tokens import Token, TokenQueue, TokenType


def _parse(source):
    return parse(lex(source))


def _main_statements(body):
    tree = _parse("def int main() { " + body + " }")
    return tree.functions[0].body.statements


def _return_value(expression):
    (stmt,) = _main_statements(f"return {expression};")
    assert isinstance(stmt, ReturnNode)
    return stmt.value


def test_empty_program():
    tree = _parse("")
    assert isinstance(tree, ProgramNode)
    assert tree.variables == [] and tree.functions == []


def test_global_scalar_variable():
    tree = _parse("int a;")
    (var,) = tree.variables
    assert isinstance(var, VarDeclNode)
    assert (var.name, var.type, var.is_array, var.array_length) == ("a", DecafType.INT, False, 1)


def test_global_array_variable():
    (var,) = _parse("bool flags[10];").variables
    assert var.type is DecafType.BOOL
    assert var.is_array is True
    assert var.array_length == 10


def test_array_size_must_be_decimal():
    with pytest.raises(DecafError, match="Invalid array size"):
        _parse("int a[0x10];")


def test_function_with_parameters():
    tree = _parse("def int add(int a, bool b) { return a; }")
    (func,) = tree.functions
    assert isinstance(func, FuncDeclNode)
    assert func.name == "add"
    assert func.return_type is DecafType.INT
    assert func.parameters == [Parameter("a", DecafType.INT), Parameter("b", DecafType.BOOL)]
    assert isinstance(func.body, BlockNode)


def test_void_function_without_parameters():
    (func,) = _parse("def void f() { return; }").functions
    assert func.parameters == []
    assert func.return_type is DecafType.VOID
    (ret,) = func.body.statements
    assert ret.value is None


def test_globals_and_functions_kept_in_order():
    tree = _parse("int a; def int f() { return 0; } bool b; def int g() { return 1; }")
    assert [v.name for v in tree.variables] == ["a", "b"]
    assert [f.name for f in tree.functions] == ["f", "g"]


def test_multiplication_binds_tighter_than_addition():
    expr = _return_value("2 + 3 * 4")
    assert isinstance(expr, BinaryOpNode)
    assert expr.operator is BinaryOpType.ADDOP
    assert expr.left.value == 2
    assert expr.right.operator is BinaryOpType.MULOP
    assert (expr.right.left.value, expr.right.right.value) == (3, 4)


def test_binary_operators_are_left_associative():
    expr = _return_value("1 - 2 - 3")
    assert expr.operator is BinaryOpType.SUBOP
    assert expr.left.operator is BinaryOpType.SUBOP
    assert (expr.left.left.value, expr.left.right.value, expr.right.value) == (1, 2, 3)


def test_parentheses_override_precedence():
    expr = _return_value("(1 + 2) * 3")
    assert expr.operator is BinaryOpType.MULOP
    assert expr.left.operator is BinaryOpType.ADDOP
    assert expr.right.value == 3


@pytest.mark.parametrize("source, operator", [
    ("a || b", BinaryOpType.OROP),
    ("a && b", BinaryOpType.ANDOP),
    ("a == b", BinaryOpType.EQOP),
    ("a != b", BinaryOpType.NEQOP),
    ("a < b", BinaryOpType.LTOP),
    ("a <= b", BinaryOpType.LEOP),
    ("a > b", BinaryOpType.GTOP),
    ("a >= b", BinaryOpType.GEOP),
    ("a + b", BinaryOpType.ADDOP),
    ("a - b", BinaryOpType.SUBOP),
    ("a * b", BinaryOpType.MULOP),
    ("a / b", BinaryOpType.DIVOP),
    ("a % b", BinaryOpType.MODOP),
])
def test_each_binary_operator(source, operator):
    expr = _return_value(source)
    assert expr.operator is operator
    assert (expr.left.name, expr.right.name) == ("a", "b")


def test_or_is_loosest_operator():
    expr = _return_value("a && b || c == d")
    assert expr.operator is BinaryOpType.OROP
    assert expr.left.operator is BinaryOpType.ANDOP
    assert expr.right.operator is BinaryOpType.EQOP


def test_unary_negation_and_not():
    neg = _return_value("-4")
    assert isinstance(neg, UnaryOpNode)
    assert neg.operator is UnaryOpType.NEGOP
    assert neg.child.value == 4
    inverted = _return_value("!true")
    assert inverted.operator is UnaryOpType.NOTOP
    assert inverted.child.value is True


def test_literals():
    assert _return_value("0xff").value == 0xFF
    assert _return_value("false").literal_type is DecafType.BOOL
    assert _return_value("false").value is False
    assert _return_value("123").value == 123


def test_string_literal_escapes_are_decoded():
    expr = _return_value('"a\\n\\tb\\"c\\\\"')
    assert isinstance(expr, LiteralNode)
    assert expr.literal_type is DecafType.STR
    assert expr.value == 'a\n\tb"c\\'


def test_unknown_escape_keeps_backslash():
    queue = TokenQueue()
    for token in [Token(TokenType.KEY, "def", 1), Token(TokenType.KEY, "int", 1),
                  Token(TokenType.ID, "main", 1), Token(TokenType.SYM, "(", 1),
                  Token(TokenType.SYM, ")", 1), Token(TokenType.SYM, "{", 1),
                  Token(TokenType.KEY, "return", 1), Token(TokenType.STRLIT, '"a\\qb"', 1),
                  Token(TokenType.SYM, ";", 1), Token(TokenType.SYM, "}", 1)]:
        queue.add(token)
    (ret,) = parse(queue).functions[0].body.statements
    assert ret.value.value == "a\\qb"


def test_conditional_with_and_without_else():
    with_else, without_else = _main_statements(
        "if (x) { y = 1; } else { y = 2; } if (x) { y = 3; }")
    assert isinstance(with_else, ConditionalNode)
    assert with_else.condition.name == "x"
    assert isinstance(with_else.else_block, BlockNode)
    assert with_else.else_block.statements[0].value.value == 2
    assert without_else.else_block is None


def test_while_break_continue():
    (loop,) = _main_statements("while (a < 10) { break; continue; }")
    assert isinstance(loop, WhileLoopNode)
    assert loop.condition.operator is BinaryOpType.LTOP
    assert [type(s) for s in loop.body.statements] == [BreakNode, ContinueNode]


def test_assignment_to_array_element():
    (stmt,) = _main_statements("a[i + 1] = 2;")
    assert isinstance(stmt, AssignmentNode)
    assert isinstance(stmt.location, LocationNode)
    assert stmt.location.name == "a"
    assert stmt.location.index.operator is BinaryOpType.ADDOP
    assert stmt.value.value == 2


def test_function_calls_as_statement_and_expression():
    call_stmt, ret = _main_statements("print(1, x); return add(2, f());")
    assert isinstance(call_stmt, FuncCallNode)
    assert call_stmt.name == "print"
    assert [type(a) for a in call_stmt.arguments] == [LiteralNode, LocationNode]
    call = ret.value
    assert isinstance(call, FuncCallNode)
    assert call.name == "add"
    assert call.arguments[0].value == 2
    assert isinstance(call.arguments[1], FuncCallNode)
    assert call.arguments[1].arguments == []


def test_block_variables_come_before_statements():
    tree = _parse("def int main() { int x; bool y; x = 1; return x; }")
    body = tree.functions[0].body
    assert [v.name for v in body.variables] == ["x", "y"]
    assert [type(s) for s in body.statements] == [AssignmentNode, ReturnNode]


def test_declaration_after_statement_is_rejected():
    with pytest.raises(DecafError, match="Invalid statement"):
        _parse("def int main() { x = 1; int y; }")


def test_source_lines_follow_tokens():
    tree = _parse("def int main()\n{\n  int x;\n  x = 1\n  + 2;\n  return x;\n}\n")
    func = tree.functions[0]
    body = func.body
    var = body.variables[0]
    assign, ret = body.statements
    assert body.source_line == func.source_line + 1
    assert var.source_line == body.source_line + 1
    assert assign.source_line == var.source_line + 1
    assert assign.value.source_line == assign.value.left.source_line
    assert assign.value.right.source_line == assign.value.left.source_line + 1
    assert ret.source_line == assign.source_line + 2


def test_parse_consumes_tokens():
    tokens = lex("int a; def int main() { return a; }")
    parse(tokens)
    assert tokens.is_empty()


def test_none_input_raises():
    with pytest.raises(DecafError, match="Input token queue pointer was null"):
        parse(None)


def test_statement_at_top_level_is_rejected():
    with pytest.raises(DecafError, match="Unexpected token in program"):
        _parse("x = 1;")


def test_mismatched_token_reports_expected_and_found():
    with pytest.raises(DecafError) as info:
        _parse("int a = 1;")
    assert info.value.message == "Expected ';' but found '=' on line 1\n"


def test_invalid_type_reported():
    with pytest.raises(DecafError, match="Invalid type 'foo'"):
        _parse("def foo main() { }")


def test_missing_closing_brace_is_end_of_input():
    with pytest.raises(DecafError, match="Unexpected end of input"):
        _parse("def int main() { return 0;")


def test_invalid_base_expression():
    with pytest.raises(DecafError, match="Invalid base expression"):
        _parse("def int main() { return ); }")


def test_missing_identifier_after_type():
    with pytest.raises(DecafError, match="Invalid ID"):
        _parse("int 5;")