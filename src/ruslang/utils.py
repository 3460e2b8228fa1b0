from __future__ import annotations

import math
import os
from decimal import Decimal

from .types import RusBool, RusEmpty, RusFn, RusNumber, RusString, RusValue

# Spellings that depend on the configured locale
_LOCALE_WORDS = {
    "en": {"true": "true", "false": "false", "function": "<function>", "empty": "empty"},
    "ru": {"true": "истина", "false": "ложь", "function": "<функция>", "empty": "пусто"},
}

def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    # Shortest round-trip digits, always positional (no exponent)
    return format(Decimal(repr(value)), "f")

def format_value(value: RusValue, locale: str = "en") -> str:
    """Render a runtime value the way print shows it."""
    words = _LOCALE_WORDS[locale]

    match value:
        case RusNumber(value=v):
            return format_number(v)
        case RusString(value=s):
            return s
        case RusBool(value=b):
            return words["true"] if b else words["false"]
        case RusFn():
            return words["function"]
        case RusEmpty():
            return words["empty"]

    raise TypeError(f"not a runtime value: {type(value).__name__}")

def type_name(value: RusValue) -> str:
    match value:
        case RusNumber():
            return "number"
        case RusString():
            return "string"
        case RusBool():
            return "boolean"
        case RusFn():
            return "function"
        case RusEmpty():
            return "empty"

    return type(value).__name__

def debug_py_trace_enabled() -> bool:
    """CLI/REPL switch for echoing Python tracebacks alongside diagnostics."""
    raw = os.environ.get("RUSLANG_DEBUG_PY_TRACE", "")
    return raw.strip().lower() in ("1", "true", "yes", "on")
