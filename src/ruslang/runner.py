from __future__ import annotations

import json
import logging
import sys
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from lark import Tree

from .evaluator import execute
from .files import load_text
from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError, parse
from .runtime import Frame, PlotData, RusRuntimeError, Settings, init_stdlib
from .utils import debug_py_trace_enabled

logger = logging.getLogger(__name__)

@dataclass
class CompilationResult:
    success: bool
    output: str = ""
    errors: List[str] = field(default_factory=list)
    plots: List[PlotData] = field(default_factory=list)
    # exception behind a failed run, kept for debugging only
    cause: Optional[BaseException] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "output": self.output,
            "errors": list(self.errors),
            "plots": [plot.to_dict() for plot in self.plots],
        }

class _Failure(Exception):
    """Carries a phase diagnostic from a pipeline step to `run`."""

    def __init__(self, phase: str, exc: BaseException):
        super().__init__(f"{phase} error: {exc}")
        self.phase = phase
        self.cause = exc

def _lex(source: str):
    try:
        return tokenize(source)
    except LexError as exc:
        raise _Failure("lexical", exc) from exc

def _parse(tokens) -> Tree:
    try:
        return parse(tokens)
    except ParseError as exc:
        raise _Failure("syntax", exc) from exc
    except RecursionError as exc:
        raise _Failure("syntax", RecursionError("expression too deeply nested")) from exc

def _evaluate(program: Tree, frame: Frame) -> None:
    try:
        execute(program, frame)
    except RusRuntimeError as exc:
        raise _Failure("runtime", exc) from exc
    except RecursionError as exc:
        raise _Failure("runtime", RecursionError("maximum call depth exceeded")) from exc

def run(source: str, settings: Optional[Settings]=None) -> CompilationResult:
    """
    Tokenize, parse and evaluate one script.

    Every call owns a fresh Frame and accumulators. Failures in any phase are
    reported in the result instead of raised; output and plots produced
    before a runtime failure are kept.
    """
    init_stdlib()

    output: List[str] = []
    plots: List[PlotData] = []
    frame = Frame(settings=settings, output=output.append, plot=plots.append)

    try:
        logger.debug("tokenizing %d characters", len(source))
        tokens = _lex(source)
        logger.debug("parsing %d tokens", len(tokens))
        program = _parse(tokens)
        logger.debug("evaluating %d top-level statements", len(program.children))
        _evaluate(program, frame)
    except _Failure as failure:
        logger.debug("%s", failure, exc_info=failure.cause)
        return CompilationResult(
            success=False,
            output="".join(output),
            errors=[str(failure)],
            plots=plots,
            cause=failure.cause,
        )

    return CompilationResult(success=True, output="".join(output), plots=plots)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """
    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    if Path(arg).exists():
        return load_text(arg)

    return arg

def _print_result(result: CompilationResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    sys.stdout.write(result.output)

    for plot in result.plots:
        print(f"[plot] {plot.label}: {len(plot.points)} points", file=sys.stderr)

    for err in result.errors:
        print(f"Error: {err}", file=sys.stderr)

    if result.cause is not None and debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_exception(result.cause)), file=sys.stderr, end="")

def main() -> None:
    locale = "en"
    as_json = False
    arg = None
    it = iter(sys.argv[1:])

    for token in it:
        if token == "--json":
            as_json = True
            continue

        if token == "--verbose":
            logging.basicConfig(level=logging.DEBUG)
            continue

        if token == "--repl":
            from .repl import repl
            repl(locale=locale)
            return

        if token.startswith("--locale="):
            locale = token.split("=", 1)[1]
            continue

        if token == "--locale":
            try:
                locale = next(it)
            except StopIteration:
                raise SystemExit("--locale flag requires a value") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    try:
        settings = Settings(locale=locale)
    except ValueError as exc:
        raise SystemExit(str(exc)) from None

    source = _load_source(arg or "-")
    result = run(source, settings=settings)
    _print_result(result, as_json)

    if not result.success:
        raise SystemExit(1)

if __name__ == "__main__":
    main()
