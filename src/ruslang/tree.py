"""AST model: labelled lark Tree/Token nodes plus builders and accessors.

Node shapes (children in order):

    program      stmt*
    letstmt      IDENT, expr
    ifstmt       expr, block, block | None
    whilestmt    expr, block
    returnstmt   expr
    exprstmt     expr
    fnstmt       IDENT, paramlist, block
    block        stmt*
    paramlist    IDENT*

    number       float
    string       str
    boolean      bool
    ident        IDENT
    binop        expr, OP, expr        OP type is one of BINARY_OPS
    call         IDENT, args
    args         expr*
    assign       IDENT, expr
"""
from __future__ import annotations

from typing import Any, List, Optional, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

from .token_types import TT, Tok

Node: TypeAlias = Union[Tree, Token]

# Operator token types carried by binop nodes
BINARY_OPS = {
    TT.PLUS: 'PLUS',
    TT.MINUS: 'MINUS',
    TT.STAR: 'STAR',
    TT.SLASH: 'SLASH',
    TT.EQ: 'EQ',
    TT.NEQ: 'NEQ',
    TT.GT: 'GT',
    TT.LT: 'LT',
    TT.GTE: 'GTE',
    TT.LTE: 'LTE',
}

def ident_token(tok: Tok) -> Token:
    return Token('IDENT', tok.value, line=tok.line, column=tok.column)

def op_token(tok: Tok) -> Token:
    return Token(BINARY_OPS[tok.type], tok.value, line=tok.line, column=tok.column)

# ---------------- Builders ----------------

def program(stmts: List[Tree]) -> Tree:
    return Tree('program', stmts)

def block(stmts: List[Tree]) -> Tree:
    return Tree('block', stmts)

def let_stmt(name: Token, value: Tree) -> Tree:
    return Tree('letstmt', [name, value])

def if_stmt(cond: Tree, then: Tree, otherwise: Optional[Tree]) -> Tree:
    return Tree('ifstmt', [cond, then, otherwise])

def while_stmt(cond: Tree, body: Tree) -> Tree:
    return Tree('whilestmt', [cond, body])

def return_stmt(value: Tree) -> Tree:
    return Tree('returnstmt', [value])

def expr_stmt(value: Tree) -> Tree:
    return Tree('exprstmt', [value])

def fn_stmt(name: Token, params: List[Token], body: Tree) -> Tree:
    return Tree('fnstmt', [name, Tree('paramlist', params), body])

def number(value: float) -> Tree:
    return Tree('number', [value])

def string(value: str) -> Tree:
    return Tree('string', [value])

def boolean(value: bool) -> Tree:
    return Tree('boolean', [value])

def ident(name: Token) -> Tree:
    return Tree('ident', [name])

def binop(left: Tree, op: Token, right: Tree) -> Tree:
    return Tree('binop', [left, op, right])

def call(name: Token, args: List[Tree]) -> Tree:
    return Tree('call', [name, Tree('args', args)])

def assign(name: Token, value: Tree) -> Tree:
    return Tree('assign', [name, value])

# ---------------- Accessors ----------------

def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Any]:
    if not is_tree(node):
        return []

    return list(node.children)

def token_name(node: Any) -> str:
    """Identifier text carried by a name token."""
    if not is_token(node):
        raise TypeError(f"expected name token, got {type(node).__name__}")
    return str(node.value)

def param_names(fn_node: Tree) -> List[str]:
    _, params, _ = fn_node.children
    return [token_name(p) for p in params.children]

def node_position(node: Any) -> Optional[tuple[int, int]]:
    """First (line, column) found in a subtree, if any token carries one."""
    if is_token(node):
        line = getattr(node, 'line', None)
        if line is None:
            return None
        return line, node.column

    for child in tree_children(node):
        found = node_position(child)
        if found is not None:
            return found

    return None
