from __future__ import annotations

from textwrap import dedent
from typing import List, Tuple

import pytest

from tests.support.harness import ParseError, parse_source
from ruslang.tree import Tree, param_names, tree_label


def _shape(node: object) -> object:
    """Collapse an expression tree into nested tuples for compact comparison."""
    match tree_label(node):
        case "number" | "string" | "boolean":
            return node.children[0]
        case "ident":
            return str(node.children[0])
        case "binop":
            left, op, right = node.children
            return (str(op), _shape(left), _shape(right))
        case "call":
            name, args = node.children
            return ("call", str(name), [_shape(a) for a in args.children])
        case "assign":
            name, value = node.children
            return ("=", str(name), _shape(value))
    raise AssertionError(f"unexpected node {node!r}")


def _expr(source: str) -> Tree:
    program = parse_source(f"{source};")
    (stmt,) = program.children
    assert tree_label(stmt) == "exprstmt"
    return stmt.children[0]


PRECEDENCE_CASES: List[Tuple[str, str, object]] = [
    ("mul-binds-tighter", "1 + 2 * 3", ("+", 1.0, ("*", 2.0, 3.0))),
    ("mul-first", "2 * 3 + 1", ("+", ("*", 2.0, 3.0), 1.0)),
    ("add-left-assoc", "1 - 2 - 3", ("-", ("-", 1.0, 2.0), 3.0)),
    ("div-left-assoc", "8 / 4 / 2", ("/", ("/", 8.0, 4.0), 2.0)),
    ("compare-lowest", "1 + 2 == 3", ("==", ("+", 1.0, 2.0), 3.0)),
    ("compare-left-assoc", "a < b == c", ("==", ("<", "a", "b"), "c")),
    ("parens-override", "(1 + 2) * 3", ("*", ("+", 1.0, 2.0), 3.0)),
    ("call-args", "f(1, x + 1)", ("call", "f", [1.0, ("+", "x", 1.0)])),
    ("call-nullary", "g()", ("call", "g", [])),
    ("call-nested", "sqrt(sin(x))", ("call", "sqrt", [("call", "sin", ["x"])])),
    ("assign-is-expr", "x = y = 3", ("=", "x", ("=", "y", 3.0))),
    ("assign-rhs-full-expr", "x = 1 + 2 * 3", ("=", "x", ("+", 1.0, ("*", 2.0, 3.0)))),
    ("assign-inside-call", "print(x = 2)", ("call", "print", [("=", "x", 2.0)])),
    ("literals", "true == false", ("==", True, False)),
    ("string-concat", '"a" + "b"', ("+", "a", "b")),
]


@pytest.mark.parametrize(
    "source, expected",
    [pytest.param(src, shape, id=name) for name, src, shape in PRECEDENCE_CASES],
)
def test_expression_shapes(source: str, expected: object) -> None:
    assert _shape(_expr(source)) == expected


def test_statement_kinds() -> None:
    program = parse_source(
        dedent(
            """\
            let x = 1;
            function f(a, b) { return a + b; }
            if (x > 0) { print(x); } else { print(0); }
            while (x < 3) { x = x + 1; }
            return x;
            f(1, 2);
            """
        )
    )
    assert [tree_label(s) for s in program.children] == [
        "letstmt",
        "fnstmt",
        "ifstmt",
        "whilestmt",
        "returnstmt",
        "exprstmt",
    ]


def test_fn_declaration_shape() -> None:
    program = parse_source("function add(a, b) { let c = a + b; return c; }")
    fn = program.children[0]
    name, params, body = fn.children

    assert str(name) == "add"
    assert tree_label(params) == "paramlist"
    assert param_names(fn) == ["a", "b"]
    assert [tree_label(s) for s in body.children] == ["letstmt", "returnstmt"]


def test_if_without_else_has_empty_slot() -> None:
    program = parse_source("if (true) { print(1); }")
    _, then_body, else_body = program.children[0].children

    assert tree_label(then_body) == "block"
    assert else_body is None


def test_empty_blocks_and_program() -> None:
    assert parse_source("").children == []
    program = parse_source("function noop() {} while (false) {}")
    assert program.children[0].children[2].children == []
    assert program.children[1].children[1].children == []


def test_russian_keywords_parse_like_english() -> None:
    ru = parse_source("пусть x = 1; если (x == 1) { печать(x); } иначе { вернуть x; }")
    en = parse_source("let x = 1; if (x == 1) { печать(x); } else { return x; }")
    assert ru == en


PARSE_ERROR_CASES = [
    pytest.param("let x = 1", "Expected ';', got end of input", id="missing-semicolon"),
    pytest.param("x + 1", "Expected ';'", id="expr-stmt-needs-semicolon"),
    pytest.param("let = 1;", "Expected identifier, got '='", id="let-missing-name"),
    pytest.param("let x 1;", "Expected '=', got number 1.0", id="let-missing-assign"),
    pytest.param("if x > 1 { }", "Expected '(', got identifier 'x'", id="if-needs-parens"),
    pytest.param("while (true) print(1);", "Expected '{'", id="while-needs-block"),
    pytest.param("if (true) { } else if (false) { }", "Expected '{', got 'if'", id="no-else-if"),
    pytest.param("function (a) { }", "Expected identifier", id="fn-missing-name"),
    pytest.param("function f(a b) { }", "Expected ')', got identifier 'b'", id="params-need-commas"),
    pytest.param("function f(1) { }", "Expected identifier, got number", id="param-must-be-name"),
    pytest.param("f(1 2);", "Expected ')'", id="args-need-commas"),
    pytest.param("f(1,);", "Unexpected token ')'", id="trailing-comma"),
    pytest.param("let x = -1;", "Unexpected token '-'", id="no-unary-minus"),
    pytest.param("{ let x = 1; }", "Unexpected token '{'", id="bare-block"),
    pytest.param("function f() { return 1;", "Expected '}', got end of input", id="unclosed-block"),
    pytest.param("1 = 2;", "Expected ';', got '='", id="assign-needs-name"),
    pytest.param("(1 + 2;", "Expected ')', got ';'", id="unclosed-paren"),
    pytest.param("return;", "Unexpected token ';'", id="return-needs-value"),
]


@pytest.mark.parametrize("source, message", PARSE_ERROR_CASES)
def test_parse_errors(source: str, message: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source(source)

    assert message in str(exc_info.value)


def test_parse_error_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source("let x = 1;\nlet y = ;")

    err = exc_info.value
    assert (err.line, err.column) == (2, 9)
    assert str(err).endswith("at line 2, col 9")
