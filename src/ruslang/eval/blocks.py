from __future__ import annotations

from typing import Callable, List, Optional

from lark import Tree

from ..runtime import Frame, RusValue

# Statement executor: returns the produced value of a `return`, else None
ExecFunc = Callable[[Tree, Frame], Optional[RusValue]]

def exec_statements(stmts: List[Tree], frame: Frame, exec_func: ExecFunc) -> Optional[RusValue]:
    """Run statements in order, stopping at the first one that produces a value."""
    for stmt in stmts:
        produced = exec_func(stmt, frame)
        if produced is not None:
            return produced

    return None

def exec_body(block: Tree, frame: Frame, exec_func: ExecFunc) -> Optional[RusValue]:
    return exec_statements(block.children, frame, exec_func)

def eval_program(program: Tree, frame: Frame, exec_func: ExecFunc) -> None:
    """Run top-level statements. A top-level `return` value is discarded."""
    for stmt in program.children:
        exec_func(stmt, frame)
