from __future__ import annotations

import importlib
from typing import Callable, List, Tuple

from .tree import Node
from .types import (
    RusEmpty, RusNumber, RusString, RusBool, RusFn,
    RusValue, Frame, PlotData, Settings,
    RusRuntimeError, RusTypeError, RusNameError, RusArityError,
    RusZeroDivisionError, RusDomainError, RusPlotError,
    StdlibFunction, StdlibFn, Builtins,
)

EvalFunc = Callable[[Node, Frame], RusValue]

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("ruslang.stdlib")
    _STDLIB_INITIALIZED = True

def register_stdlib(name: str, *, arity: int | None = None, lazy: bool = False, aliases: Tuple[str, ...] = ()):
    def dec(fn: StdlibFn):
        entry = StdlibFunction(fn=fn, arity=arity, lazy=lazy)

        for key in (name, *aliases):
            Builtins.stdlib_functions[key] = entry

        return fn

    return dec

def is_builtin(name: str) -> bool:
    return name in Builtins.stdlib_functions

def call_function(name: str, arg_nodes: List[Node], frame: Frame, eval_func: EvalFunc) -> RusValue:
    """Resolve a call by name: builtins first, then the function table."""
    builtin = Builtins.stdlib_functions.get(name)
    if builtin is not None:
        return call_builtin(name, builtin, arg_nodes, frame, eval_func)

    fn = frame.lookup_function(name)
    if fn is None:
        raise RusNameError(f"function '{name}' not found")

    args = [eval_func(node, frame) for node in arg_nodes]

    return call_rusfn(fn, args, frame)

def call_builtin(name: str, builtin: StdlibFunction, arg_nodes: List[Node], frame: Frame, eval_func: EvalFunc) -> RusValue:
    if builtin.lazy:
        return builtin.fn(frame, arg_nodes)

    args = [eval_func(node, frame) for node in arg_nodes]

    if builtin.arity is not None and len(args) != builtin.arity:
        raise RusArityError(f"{name} expects {builtin.arity} argument(s); got {len(args)}")

    return builtin.fn(frame, args)

def call_rusfn(fn: RusFn, args: List[RusValue], frame: Frame) -> RusValue:
    """
    Call semantics:
    - arguments are already evaluated in the caller's environment
    - arity must match len(fn.params)
    - the body sees only its parameters; the caller's variables are put back
      verbatim once the body finishes
    """
    from .evaluator import exec_block  # local import to avoid cycle

    if len(args) != len(fn.params):
        raise RusArityError(
            f"function '{fn.name}' expects {len(fn.params)} argument(s); got {len(args)}"
        )

    with frame.isolated(dict(zip(fn.params, args))):
        produced = exec_block(fn.body, frame)

    return produced if produced is not None else RusEmpty()
