from __future__ import annotations

from ..runtime import RusBool, RusNumber, RusTypeError, RusValue
from ..utils import type_name

def require_number(value: RusValue, context: str) -> float:
    if isinstance(value, RusNumber):
        return value.value

    raise RusTypeError(f"{context} expects a number; got {type_name(value)}")

def require_bool(value: RusValue, context: str) -> bool:
    if isinstance(value, RusBool):
        return value.value

    raise RusTypeError(f"{context} condition must be a boolean; got {type_name(value)}")
