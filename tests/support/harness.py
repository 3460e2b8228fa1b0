from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from ruslang.evaluator import execute
from ruslang.lexer_rd import LexError, tokenize
from ruslang.parser_rd import ParseError, parse_source
from ruslang.runner import CompilationResult, run as run_program
from ruslang.runtime import (
    Frame,
    PlotData,
    RusArityError,
    RusBool,
    RusDomainError,
    RusEmpty,
    RusFn,
    RusNameError,
    RusNumber,
    RusPlotError,
    RusRuntimeError,
    RusString,
    RusTypeError,
    RusZeroDivisionError,
    Settings,
)

RuntimeExpectation = Optional[Tuple[str, object]]

# Variable that value-kind scenarios bind their answer to
RESULT_VAR = "result"


def execute_source(
    source: str, settings: Optional[Settings] = None
) -> Tuple[Frame, List[str], List[PlotData]]:
    """Parse and execute without the façade so runtime errors propagate."""
    output: List[str] = []
    plots: List[PlotData] = []
    frame = Frame(settings=settings, output=output.append, plot=plots.append)
    execute(parse_source(source), frame)
    return frame, output, plots


def verify_value(value: object, kind: str, expected: object) -> None:
    match kind:
        case "number":
            assert isinstance(
                value, RusNumber
            ), f"expected number, got {type(value).__name__}"
            assert (
                abs(value.value - float(expected)) <= 1e-9
            ), f"expected {expected}, got {value.value}"
            return
        case "string":
            assert isinstance(
                value, RusString
            ), f"expected RusString, got {type(value).__name__}"
            assert value.value == expected, f"expected {expected!r}, got {value.value!r}"
            return
        case "bool":
            assert isinstance(
                value, RusBool
            ), f"expected bool, got {type(value).__name__}"
            assert value.value is bool(expected), f"expected {expected}, got {value.value}"
            return
        case "empty":
            assert isinstance(
                value, RusEmpty
            ), f"expected RusEmpty, got {type(value).__name__}"
            return
        case _:
            raise AssertionError(f"unknown value kind {kind}")


def verify_result(result: CompilationResult, kind: str, expected: object) -> None:
    """Check a façade result against an ("output", text) or ("error", fragment) expectation."""
    match kind:
        case "output":
            assert result.success, f"expected success, got errors {result.errors!r}"
            assert result.errors == []
            assert result.output == expected, f"expected {expected!r}, got {result.output!r}"
            return
        case "error":
            assert not result.success, f"expected failure, got output {result.output!r}"
            assert len(result.errors) == 1, f"expected one error, got {result.errors!r}"
            assert (
                str(expected) in result.errors[0]
            ), f"expected {expected!r} in {result.errors[0]!r}"
            return
        case _:
            raise AssertionError(f"unknown result kind {kind}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    """
    Execute one runtime scenario.

    - expected_exc set => executing the source must raise it.
    - ("output" | "error", ...) => checked against the façade result.
    - value kinds => checked against the `result` variable after execution.
    """
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            execute_source(source)
        return

    if expectation is None:
        execute_source(source)
        return

    kind, expected = expectation
    if kind in ("output", "error"):
        verify_result(run_program(source), kind, expected)
        return

    frame, _, _ = execute_source(source)
    verify_value(frame.get(RESULT_VAR), kind, expected)
