from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    RusNameError,
    RusNumber,
    RusZeroDivisionError,
    execute_source,
    parse_source,
    run_runtime_case,
)
from ruslang.evaluator import execute

SCENARIOS = [
    pytest.param(
        "let g = 1; function f() { return g; } f();",
        None,
        RusNameError,
        id="callee-cannot-see-caller-vars",
    ),
    pytest.param(
        "function f() { return 1; } function g() { return f(); } let result = g();",
        ("number", 1),
        None,
        id="function-table-is-global",
    ),
    pytest.param(
        "let x = 10; function f(x) { x = x + 1; return x; } let y = f(1); let result = x;",
        ("number", 10),
        None,
        id="param-shadows-and-restores",
    ),
    pytest.param(
        "let x = 10; function f(a) { let x = a; return x; } let y = f(3); let result = x + y;",
        ("number", 13),
        None,
        id="callee-let-does-not-leak",
    ),
    pytest.param(
        dedent(
            """\
            function outer(n) {
                let local = n * 2;
                let inner_result = inner(n);
                return local + inner_result;
            }
            function inner(m) { return m + 1; }
            let result = outer(5);
            """
        ),
        ("number", 16),
        None,
        id="nested-call-restores-callee-env",
    ),
    pytest.param(
        dedent(
            """\
            function outer(n) {
                let local = 1;
                return peek();
            }
            function peek() { return local; }
            outer(1);
            """
        ),
        None,
        RusNameError,
        id="no-dynamic-scope",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping_scenarios(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_variable_not_found_message() -> None:
    run_runtime_case(
        "let g = 1; function f() { return g; } f();",
        ("error", "variable 'g' not found"),
        None,
    )


def test_caller_environment_restored_verbatim() -> None:
    source = dedent(
        """\
        let a = 1;
        let b = "two";
        function clobber(a) { b = 99; let c = 3; return a; }
        clobber(7);
        """
    )
    frame, _, _ = execute_source(source)

    assert sorted(frame.vars) == ["a", "b"]
    assert frame.get("a") == RusNumber(1.0)
    assert frame.get("b").value == "two"


def test_environment_restored_after_failed_call() -> None:
    frame, _, _ = execute_source("let keep = 1; function bad(x) { return x / 0; }")

    with pytest.raises(RusZeroDivisionError):
        execute(parse_source("bad(1);"), frame)

    assert frame.vars == {"keep": RusNumber(1.0)}


def test_each_run_starts_empty() -> None:
    run_runtime_case("let leftover = 1; function f() { return 1; }", ("output", ""), None)
    run_runtime_case("print(leftover);", ("error", "variable 'leftover' not found"), None)
    run_runtime_case("f();", ("error", "function 'f' not found"), None)
