from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from lark import Tree

from .runtime import (
    Frame,
    RusBool,
    RusNumber,
    RusRuntimeError,
    RusString,
    RusValue,
    init_stdlib,
)
from .tree import Node, node_position, token_name, tree_label

from .eval.bind import eval_assign, eval_let_stmt
from .eval.blocks import eval_program, exec_body
from .eval.expr import eval_binop
from .eval.fn import eval_call, eval_fn_def
from .eval.loops import eval_if_stmt, eval_while_stmt

# Python frame budget while a script runs. One script-level call costs roughly
# twenty interpreter frames, so this admits a few thousand nested calls before
# RecursionError reports runaway recursion.
RECURSION_LIMIT = 50_000

@contextmanager
def _recursion_limit(limit: int) -> Iterator[None]:
    saved = sys.getrecursionlimit()
    sys.setrecursionlimit(max(saved, limit))

    try:
        yield
    finally:
        sys.setrecursionlimit(saved)

def _maybe_attach_location(exc: RusRuntimeError, node: Node) -> None:
    if exc.rus_meta is not None:
        return

    exc.rus_meta = node_position(node)

# ---------------- Public API ----------------

def execute(program: Tree, frame: Frame) -> None:
    """Run a parsed program against `frame`; runtime errors propagate."""
    init_stdlib()

    if tree_label(program) != 'program':
        raise RusRuntimeError(f"Expected a program tree, got {tree_label(program)!r}")

    with _recursion_limit(RECURSION_LIMIT):
        eval_program(program, frame, exec_stmt)

def exec_block(block: Tree, frame: Frame) -> Optional[RusValue]:
    """Run a statement block; returns the produced value of a `return`, if any."""
    return exec_body(block, frame, exec_stmt)

# ---------------- Statements ----------------

def exec_stmt(n: Tree, frame: Frame) -> Optional[RusValue]:
    try:
        return _exec_stmt_inner(n, frame)
    except RusRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

def _exec_stmt_inner(n: Tree, frame: Frame) -> Optional[RusValue]:
    match n.data:
        case 'letstmt':
            eval_let_stmt(n, frame, eval_node)
            return None
        case 'ifstmt':
            return eval_if_stmt(n, frame, eval_node, exec_stmt)
        case 'whilestmt':
            return eval_while_stmt(n, frame, eval_node, exec_stmt)
        case 'returnstmt':
            return eval_node(n.children[0], frame)
        case 'exprstmt':
            eval_node(n.children[0], frame)
            return None
        case 'fnstmt':
            eval_fn_def(n, frame)
            return None

    raise RusRuntimeError(f"Unknown statement node {n.data!r}")

# ---------------- Expressions ----------------

def eval_node(n: Tree, frame: Frame) -> RusValue:
    try:
        return _eval_node_inner(n, frame)
    except RusRuntimeError as e:
        _maybe_attach_location(e, n)
        raise

def _eval_node_inner(n: Tree, frame: Frame) -> RusValue:
    match n.data:
        case 'number':
            return RusNumber(n.children[0])
        case 'string':
            return RusString(n.children[0])
        case 'boolean':
            return RusBool(n.children[0])
        case 'ident':
            return frame.get(token_name(n.children[0]))
        case 'binop':
            return eval_binop(n, frame, eval_node)
        case 'call':
            return eval_call(n, frame, eval_node)
        case 'assign':
            return eval_assign(n, frame, eval_node)

    raise RusRuntimeError(f"Unknown expression node {n.data!r}")
