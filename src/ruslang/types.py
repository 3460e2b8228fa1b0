from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple
from typing_extensions import TypeAlias

from lark import Tree

# ---------- Value Model ----------

@dataclass
class RusEmpty:
    def __repr__(self) -> str:
        return "empty"

@dataclass
class RusNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        return str(int(v)) if v.is_integer() else str(v)

@dataclass
class RusString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class RusBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class RusFn:
    """Declared function: parameter names plus body, held by value."""
    params: List[str]
    body: Tree
    name: str = "<anonymous>"
    def __repr__(self) -> str:
        param_desc = ", ".join(self.params) if self.params else "nullary"
        return f"<function {self.name} params={param_desc}>"

RusValue: TypeAlias = RusNumber | RusString | RusBool | RusFn | RusEmpty

# ---------- Boundary records ----------

@dataclass(frozen=True)
class Settings:
    """Per-request configuration handed to the façade."""
    locale: str = "en"
    plot_color: str = "#0066cc"
    plot_intervals: int = 200

    def __post_init__(self) -> None:
        if self.locale not in ("en", "ru"):
            raise ValueError(f"unsupported locale {self.locale!r}")
        if self.plot_intervals < 1:
            raise ValueError("plot_intervals must be positive")

@dataclass
class PlotData:
    points: List[Tuple[float, float]]
    color: str
    label: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "points": [[x, y] for x, y in self.points],
            "color": self.color,
            "label": self.label,
            "timestamp": self.timestamp,
        }

OutputSink = Callable[[str], None]
PlotSink = Callable[[PlotData], None]

# ---------- Builtins ----------

StdlibFn = Callable[['Frame', List[Any]], RusValue]

@dataclass(frozen=True)
class StdlibFunction:
    fn: StdlibFn
    arity: Optional[int] = None
    # lazy builtins receive argument nodes instead of evaluated values
    lazy: bool = False

class Builtins:
    stdlib_functions: Dict[str, StdlibFunction] = {}

# ---------- Per-request interpreter state ----------

def _stdout_sink(text: str) -> None:
    sys.stdout.write(text)

def _discard_plot(_plot: PlotData) -> None:
    return None

class Frame:
    """Flat variable environment plus function table for one execution.

    There is no parent chain: a user call or a plot sample replaces `vars`
    wholesale and puts the caller's mapping back afterwards.
    """

    def __init__(self, settings: Optional[Settings]=None, output: Optional[OutputSink]=None,
                 plot: Optional[PlotSink]=None):
        self.vars: Dict[str, RusValue] = {}
        self.functions: Dict[str, RusFn] = {}
        self.settings = settings or Settings()
        self._output = output or _stdout_sink
        self._plot = plot or _discard_plot

    def define(self, name: str, val: RusValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> RusValue:
        if name in self.vars:
            return self.vars[name]

        raise RusNameError(f"variable '{name}' not found")

    def declare_function(self, name: str, fn: RusFn) -> None:
        self.functions[name] = fn

    def lookup_function(self, name: str) -> Optional[RusFn]:
        return self.functions.get(name)

    def emit_output(self, text: str) -> None:
        self._output(text)

    def emit_plot(self, plot: PlotData) -> None:
        self._plot(plot)

    @contextmanager
    def isolated(self, bindings: Mapping[str, RusValue]) -> Iterator[None]:
        """Swap in a fresh environment holding only `bindings`."""
        saved = self.vars
        self.vars = dict(bindings)

        try:
            yield
        finally:
            self.vars = saved

    def rebind(self, bindings: Mapping[str, RusValue]) -> None:
        self.vars = dict(bindings)

# ---------- Exceptions ----------

class RusRuntimeError(Exception):
    rus_meta: Optional[Tuple[int, int]]

    def __init__(self, message: str):
        super().__init__(message)
        self.rus_meta = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        if self.rus_meta is None:
            return msg

        line, col = self.rus_meta
        return f"{msg} (line {line}, col {col})"

class RusTypeError(RusRuntimeError):
    pass

class RusNameError(RusRuntimeError):
    pass

class RusArityError(RusRuntimeError):
    pass

class RusZeroDivisionError(RusRuntimeError):
    def __init__(self, message: str = "division by zero"):
        super().__init__(message)

class RusDomainError(RusRuntimeError):
    pass

class RusPlotError(RusRuntimeError):
    pass
