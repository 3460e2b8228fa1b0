from __future__ import annotations

from typing import Callable

from lark import Tree

from ..runtime import Frame, RusFn, RusValue, call_function
from ..tree import param_names, token_name

EvalFunc = Callable[[Tree, Frame], RusValue]

def eval_fn_def(n: Tree, frame: Frame) -> None:
    """Store (params, body) in the function table; redeclaration overwrites."""
    name_tok, _, body = n.children
    name = token_name(name_tok)

    frame.declare_function(name, RusFn(params=param_names(n), body=body, name=name))

def eval_call(n: Tree, frame: Frame, eval_func: EvalFunc) -> RusValue:
    name_tok, args = n.children

    return call_function(token_name(name_tok), args.children, frame, eval_func)
