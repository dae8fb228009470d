import pytest

from ast_nodes import *
from errors import ParseError
from parser import DEFAULT_BINOP_PRECEDENCE, Parser
from tokens import TokenType
from tests.utils import parse_expr, surface


def num(value):
    return NumberExprNode(value=float(value))


def var(name):
    return VariableExprNode(name=name)


def binop(op, left, right):
    return BinaryExprNode(operator=op, left=left, right=right)


# Expressions


def test_multiplication_binds_tighter_than_addition():
    assert parse_expr("1+2*3") == binop("+", num(1), binop("*", num(2), num(3)))


def test_subtraction_is_left_associative():
    assert parse_expr("1-2-3") == binop("-", binop("-", num(1), num(2)), num(3))


def test_parentheses_override_precedence():
    assert parse_expr("(1+2)*3") == binop("*", binop("+", num(1), num(2)), num(3))


@pytest.mark.parametrize(
    "src, expected",
    [
        ("1*2+3*4", "((1 * 2) + (3 * 4))"),
        ("1+2*3-4", "((1 + (2 * 3)) - 4)"),
        ("a<b+c*d", "(a < (b + (c * d)))"),
        ("a*b<c", "((a * b) < c)"),
        ("a+b+c+d", "(((a + b) + c) + d)"),
        ("((x))", "x"),
        ("2*(3-x)*y", "((2 * (3 - x)) * y)"),
    ],
)
def test_precedence_climbing_shapes(src, expected):
    assert surface(src) == expected


def test_variable_reference():
    assert parse_expr("x") == var("x")


def test_call_preserves_argument_order_and_count():
    assert parse_expr("foo(y, 4.0)") == CallExprNode(
        callee="foo", args=(var("y"), num(4.0))
    )


def test_call_without_arguments():
    assert parse_expr("foo()") == CallExprNode(callee="foo", args=())


def test_nested_calls_and_expression_arguments():
    assert surface("f(g(x), 1+2) * 2") == "(f(g(x), (1 + 2)) * 2)"


def test_expression_stops_at_non_operator_token():
    parser = Parser.from_text("a b")
    body = parser.parse_top_level_expr().unwrap().body

    assert body == var("a")
    assert parser.current.value == "b"


# Declarations


def test_definition_round_trip():
    parser = Parser.from_text("def foo(x y) x + y")
    func = parser.parse_definition().unwrap()

    assert isinstance(func, FunctionNode)
    assert func.proto.name == "foo"
    assert func.proto.params == ("x", "y")
    assert func.body == binop("+", var("x"), var("y"))
    assert parser.current.type == TokenType.EOF


def test_definition_without_parameters():
    func = Parser.from_text("def one() 1").parse_definition().unwrap()

    assert func.proto == PrototypeNode(name="one", params=())
    assert func.body == num(1)


def test_duplicate_parameter_names_are_accepted():
    func = Parser.from_text("def f(x x) x").parse_definition().unwrap()

    assert func.proto.params == ("x", "x")


def test_extern_is_a_bare_prototype():
    proto = Parser.from_text("extern sin(a)").parse_extern().unwrap()

    assert proto == PrototypeNode(name="sin", params=("a",))


def test_top_level_expression_is_wrapped_in_anonymous_function():
    func = Parser.from_text("1 + x").parse_top_level_expr().unwrap()

    assert func.proto.name == ANON_FUNCTION_NAME
    assert func.proto.params == ()
    assert func.proto.is_anonymous
    assert func.body == binop("+", num(1), var("x"))


# Errors


@pytest.mark.parametrize(
    "src, entry, message",
    [
        ("(1+2", "parse_top_level_expr", "expected ')'"),
        ("foo(1 2)", "parse_top_level_expr", "Expected ')' or ',' in argument list"),
        (")", "parse_top_level_expr", "unknown token when expecting an expression"),
        ("1 +", "parse_top_level_expr", "unknown token when expecting an expression"),
        ("1.2.3 + 1", "parse_top_level_expr", "malformed number '1.2.3'"),
        ("def 1(x) x", "parse_definition", "Expected function name in prototype"),
        ("def foo x", "parse_definition", "Expected '(' in prototype"),
        ("def foo(x, y) x", "parse_definition", "Expected ')' in prototype"),
        ("def foo(x)", "parse_definition", "unknown token when expecting an expression"),
        ("extern", "parse_extern", "Expected function name in prototype"),
        ("extern f(", "parse_extern", "Expected ')' in prototype"),
    ],
)
def test_errors_are_reported_as_failed_results(src, entry, message):
    result = getattr(Parser.from_text(src), entry)()

    assert not result.ok
    assert result.node is None
    assert result.error.message == message


def test_error_carries_source_position():
    result = Parser.from_text("def foo(x, y) x").parse_definition()

    assert (result.error.line, result.error.column) == (1, 10)
    assert str(result.error) == "line 1, column 10: Expected ')' in prototype"
    assert result.error.token.is_char(",")


def test_unwrap_raises_the_carried_error():
    result = Parser.from_text(")").parse_top_level_expr()

    with pytest.raises(ParseError, match="unknown token"):
        result.unwrap()


def test_failure_stops_at_the_offending_token():
    parser = Parser.from_text("foo(1 2) + 3")
    parser.parse_top_level_expr()

    assert parser.current.type == TokenType.NUMBER
    assert parser.current.value == 2.0


def test_entry_points_check_their_keyword():
    assert not Parser.from_text("foo(x) x").parse_definition().ok
    assert not Parser.from_text("sin(x)").parse_extern().ok


# Precedence table


def test_operator_added_through_the_table_only():
    table = dict(DEFAULT_BINOP_PRECEDENCE, **{"/": 40})

    assert surface("a - b / c", table) == "(a - (b / c))"
    assert surface("a / b * c", table) == "((a / b) * c)"


def test_character_missing_from_table_ends_the_expression():
    parser = Parser.from_text("a / b")
    body = parser.parse_top_level_expr().unwrap().body

    assert body == var("a")
    assert parser.current.is_char("/")


def test_non_positive_precedence_is_not_an_operator():
    assert parse_expr("1 + 2", {"+": 0, "*": 40}) == num(1)
    assert parse_expr("1 + 2", {"+": -5}) == num(1)


def test_custom_levels_change_the_tree():
    # `+` binding tighter than `*`
    assert surface("1+2*3", {"+": 50, "*": 10}) == "((1 + 2) * 3)"


def test_parser_copies_its_table():
    parser = Parser.from_text("1")
    parser.precedence["/"] = 40

    assert "/" not in DEFAULT_BINOP_PRECEDENCE


def test_table_keys_must_be_single_characters():
    with pytest.raises(ValueError):
        Parser.from_text("1", {"**": 50})


def test_precedence_levels_must_be_integers():
    with pytest.raises(ValueError):
        Parser.from_text("1", {"+": "20"})
    with pytest.raises(ValueError):
        Parser.from_text("1", {"+": 2.5})
    with pytest.raises(ValueError):
        Parser.from_text("1", {"+": True})


# Nesting


def test_moderately_deep_nesting_parses():
    depth = 100

    assert parse_expr("(" * depth + "1" + ")" * depth) == num(1)
    assert surface("f(" * depth + "x" + ")" * depth) == "f(" * depth + "x" + ")" * depth
    nested_sum = "1+(" * depth + "2" + ")" * depth
    assert surface(nested_sum).count("+") == depth


def test_nesting_beyond_the_limit_fails_cleanly():
    parser = Parser.from_text("((1)) (1)", max_depth=2)

    result = parser.parse_top_level_expr()
    assert not result.ok
    assert result.error.message == "expression nested too deeply"
    assert parser.depth == 0

    # Depth bookkeeping is reset, so the parser stays usable.
    while not parser.current.is_char("("):
        parser.advance()
    assert parser.parse_top_level_expr().unwrap().body == num(1)


def test_deeply_nested_input_does_not_raise():
    result = Parser.from_text("(" * 5000 + "1" + ")" * 5000).parse_top_level_expr()

    assert not result.ok
    assert result.error.message == "expression nested too deeply"


def test_stack_exhaustion_becomes_a_failed_result(monkeypatch):
    parser = Parser.from_text("x")

    def _exhausted():
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr(parser, "parse_expression", _exhausted)
    result = parser.parse_top_level_expr()

    assert not result.ok
    assert result.error.message == "expression nested too deeply"
