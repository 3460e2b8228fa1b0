from __future__ import annotations

from typing import Callable, Optional

from lark import Tree

from ..runtime import Frame, RusValue
from .blocks import ExecFunc, exec_body
from .common import require_bool

EvalFunc = Callable[[Tree, Frame], RusValue]

def eval_if_stmt(n: Tree, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> Optional[RusValue]:
    cond_node, then_body, else_body = n.children

    if require_bool(eval_func(cond_node, frame), "if"):
        return exec_body(then_body, frame, exec_func)

    if else_body is not None:
        return exec_body(else_body, frame, exec_func)

    return None

def eval_while_stmt(n: Tree, frame: Frame, eval_func: EvalFunc, exec_func: ExecFunc) -> Optional[RusValue]:
    cond_node, body = n.children

    # No iteration cap: a loop whose condition stays true runs until interrupted
    while require_bool(eval_func(cond_node, frame), "while"):
        produced = exec_body(body, frame, exec_func)
        if produced is not None:
            return produced

    return None
