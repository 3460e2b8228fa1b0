"""Built-in functions (print, math, plot) registered via the runtime registry."""

from __future__ import annotations

import logging
import math
import time
from typing import List, Tuple

from lark import Tree

from .runtime import (
    Frame,
    PlotData,
    RusDomainError,
    RusEmpty,
    RusFn,
    RusNumber,
    RusPlotError,
    RusValue,
    register_stdlib,
)
from .eval.common import require_number
from .tree import token_name, tree_label
from .utils import format_value

logger = logging.getLogger(__name__)

@register_stdlib("print", aliases=("печать",))
def std_print(frame: Frame, args: List[RusValue]) -> RusEmpty:
    locale = frame.settings.locale
    rendered = [format_value(arg, locale) for arg in args]
    frame.emit_output(" ".join(rendered) + "\n")
    return RusEmpty()

# ---------------- Math ----------------

def _math_call(name: str, fn, x: float) -> RusNumber:
    try:
        return RusNumber(fn(x))
    except OverflowError:
        return RusNumber(math.inf)
    except ValueError:
        raise RusDomainError(f"{name} is undefined for {x}") from None

@register_stdlib("sin", arity=1)
def std_sin(_frame: Frame, args: List[RusValue]) -> RusNumber:
    return _math_call("sin", math.sin, require_number(args[0], "sin"))

@register_stdlib("cos", arity=1)
def std_cos(_frame: Frame, args: List[RusValue]) -> RusNumber:
    return _math_call("cos", math.cos, require_number(args[0], "cos"))

@register_stdlib("exp", arity=1)
def std_exp(_frame: Frame, args: List[RusValue]) -> RusNumber:
    return _math_call("exp", math.exp, require_number(args[0], "exp"))

@register_stdlib("log", arity=1)
def std_log(_frame: Frame, args: List[RusValue]) -> RusNumber:
    x = require_number(args[0], "log")

    if x <= 0:
        raise RusDomainError(f"log is undefined for non-positive values; got {x:g}")

    return _math_call("log", math.log, x)

@register_stdlib("sqrt", arity=1)
def std_sqrt(_frame: Frame, args: List[RusValue]) -> RusNumber:
    x = require_number(args[0], "sqrt")

    if x < 0:
        raise RusDomainError(f"sqrt is undefined for negative values; got {x:g}")

    return _math_call("sqrt", math.sqrt, x)

# ---------------- Plot ----------------

@register_stdlib("plot", lazy=True, aliases=("график",))
def std_plot(frame: Frame, arg_nodes: List[Tree]) -> RusEmpty:
    """plot(name, from, to): sample a one-parameter function over [from, to]."""
    from .evaluator import eval_node  # local import to avoid cycle

    if len(arg_nodes) < 3:
        raise RusPlotError("plot expects (function, from, to)")

    target = arg_nodes[0]
    if tree_label(target) != 'ident':
        raise RusPlotError("plot: first argument must be a function name")
    name = token_name(target.children[0])

    start = eval_node(arg_nodes[1], frame)
    if not isinstance(start, RusNumber):
        raise RusPlotError("plot: second argument must be a number")

    stop = eval_node(arg_nodes[2], frame)
    if not isinstance(stop, RusNumber):
        raise RusPlotError("plot: third argument must be a number")

    fn = frame.lookup_function(name)
    if fn is None:
        raise RusPlotError(f"plot: function '{name}' not found")
    if len(fn.params) != 1:
        raise RusPlotError(f"plot: function '{name}' must take 1 parameter; got {len(fn.params)}")

    points = sample_function(fn, start.value, stop.value, frame)
    logger.debug("generated %d points for %s", len(points), name)

    frame.emit_plot(PlotData(
        points=points,
        color=frame.settings.plot_color,
        label=name,
        timestamp=int(time.time() * 1000),
    ))

    return RusEmpty()

def sample_function(fn: RusFn, start: float, stop: float, frame: Frame) -> List[Tuple[float, float]]:
    """
    Evaluate `fn` at evenly spaced x over [start, stop].

    The environment is saved once; each sample runs with only the parameter
    bound. Samples that are not finite numbers are dropped.
    """
    from .evaluator import exec_block  # local import to avoid cycle

    intervals = frame.settings.plot_intervals
    step = (stop - start) / intervals
    param = fn.params[0]
    points: List[Tuple[float, float]] = []

    with frame.isolated({}):
        for i in range(intervals + 1):
            x = start + i * step
            frame.rebind({param: RusNumber(x)})
            produced = exec_block(fn.body, frame)

            if isinstance(produced, RusNumber) and math.isfinite(produced.value):
                points.append((x, produced.value))

    return points
