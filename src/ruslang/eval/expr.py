from __future__ import annotations

from typing import Callable

from lark import Token, Tree

from ..runtime import (
    Frame,
    RusBool,
    RusNumber,
    RusString,
    RusTypeError,
    RusValue,
    RusZeroDivisionError,
)
from ..utils import type_name

EvalFunc = Callable[[Tree, Frame], RusValue]

def eval_binop(n: Tree, frame: Frame, eval_func: EvalFunc) -> RusValue:
    left_node, op, right_node = n.children
    lhs = eval_func(left_node, frame)
    rhs = eval_func(right_node, frame)

    return apply_binary_operator(op, lhs, rhs)

def apply_binary_operator(op: Token, lhs: RusValue, rhs: RusValue) -> RusValue:
    match (op.type, lhs, rhs):
        case ('PLUS', RusNumber(value=l), RusNumber(value=r)):
            return RusNumber(l + r)
        case ('MINUS', RusNumber(value=l), RusNumber(value=r)):
            return RusNumber(l - r)
        case ('STAR', RusNumber(value=l), RusNumber(value=r)):
            return RusNumber(l * r)
        case ('SLASH', RusNumber(value=l), RusNumber(value=r)):
            if r == 0.0:
                raise RusZeroDivisionError()
            return RusNumber(l / r)
        case ('EQ', RusNumber(value=l), RusNumber(value=r)):
            return RusBool(l == r)
        case ('NEQ', RusNumber(value=l), RusNumber(value=r)):
            return RusBool(l != r)
        case ('GT', RusNumber(value=l), RusNumber(value=r)):
            return RusBool(l > r)
        case ('LT', RusNumber(value=l), RusNumber(value=r)):
            return RusBool(l < r)
        case ('GTE', RusNumber(value=l), RusNumber(value=r)):
            return RusBool(l >= r)
        case ('LTE', RusNumber(value=l), RusNumber(value=r)):
            return RusBool(l <= r)
        case ('PLUS', RusString(value=l), RusString(value=r)):
            return RusString(l + r)

    raise RusTypeError(
        f"unsupported operation: {type_name(lhs)} {op.value} {type_name(rhs)}"
    )
