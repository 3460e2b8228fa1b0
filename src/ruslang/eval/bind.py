from __future__ import annotations

from typing import Callable

from lark import Tree

from ..runtime import Frame, RusValue
from ..tree import token_name

EvalFunc = Callable[[Tree, Frame], RusValue]

def eval_let_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> None:
    name_tok, value_node = n.children
    frame.define(token_name(name_tok), eval_func(value_node, frame))

def eval_assign(n: Tree, frame: Frame, eval_func: EvalFunc) -> RusValue:
    """`name = expr` stores into the current environment and yields the value."""
    name_tok, value_node = n.children
    value = eval_func(value_node, frame)
    frame.define(token_name(name_tok), value)

    return value
