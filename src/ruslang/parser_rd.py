"""
Recursive Descent Parser for ruslang

Structure:
- Lexer: Token stream from source (lexer_rd)
- Parser: Recursive descent, one token of lookahead, no backtracking
- AST: lark Tree/Token nodes as described in tree.py
"""

from typing import List, Optional

from lark import Token, Tree

from . import tree as ast
from .token_types import TT, Tok

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

class Parser:
    """
    Recursive descent parser for ruslang.

    Expression precedence (lowest to highest):
    1. compare (==, !=, >, <, >=, <=)
    2. add (+, -)
    3. mul (*, /)
    4. primary (literals, identifiers, calls, assignment, parens)

    Every binary tier is left-associative. Assignment is only recognised
    right after a bare identifier in primary position and is itself an
    expression.
    """

    COMPARE_OPS = (TT.EQ, TT.NEQ, TT.GT, TT.LT, TT.GTE, TT.LTE)

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None, 0, 0)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Tok(TT.EOF, None, prev.line, prev.column)
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            expected = Tok(token_type, None).describe()
            raise ParseError(f"Expected {expected}, got {self.current.describe()}", self.current)
        return self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse entire program"""
        stmts = []

        while not self.check(TT.EOF):
            stmts.append(self.parse_statement())

        return ast.program(stmts)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        """
        Parse a single statement.

        Statements include:
        - Declarations (let, function)
        - Control flow (if, while, return)
        - Expression statements terminated by ';'
        """
        if self.check(TT.LET):
            return self.parse_let_stmt()
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.WHILE):
            return self.parse_while_stmt()
        if self.check(TT.FUNCTION):
            return self.parse_fn_stmt()
        if self.check(TT.RETURN):
            return self.parse_return_stmt()

        expr = self.parse_expr()
        self.expect(TT.SEMI)
        return ast.expr_stmt(expr)

    def parse_let_stmt(self) -> Tree:
        """Parse variable declaration: let name = expr;"""
        self.expect(TT.LET)
        name = self.expect(TT.IDENT)
        self.expect(TT.ASSIGN)
        value = self.parse_expr()
        self.expect(TT.SEMI)
        return ast.let_stmt(ast.ident_token(name), value)

    def parse_if_stmt(self) -> Tree:
        """
        Parse if statement:
        if (expr) { body } [else { body }]
        """
        self.expect(TT.IF)
        cond = self.parse_condition()
        then_body = self.parse_block()

        else_body = None
        if self.match(TT.ELSE):
            else_body = self.parse_block()

        return ast.if_stmt(cond, then_body, else_body)

    def parse_while_stmt(self) -> Tree:
        """Parse while loop: while (expr) { body }"""
        self.expect(TT.WHILE)
        cond = self.parse_condition()
        body = self.parse_block()
        return ast.while_stmt(cond, body)

    def parse_fn_stmt(self) -> Tree:
        """Parse function declaration: function name(params) { body }"""
        self.expect(TT.FUNCTION)
        name = self.expect(TT.IDENT)

        self.expect(TT.LPAR)
        params = self.parse_param_list()
        self.expect(TT.RPAR)

        body = self.parse_block()
        return ast.fn_stmt(ast.ident_token(name), params, body)

    def parse_param_list(self) -> List[Token]:
        """Parse comma-separated parameter names (possibly empty)"""
        params: List[Token] = []
        if self.check(TT.RPAR):
            return params

        params.append(ast.ident_token(self.expect(TT.IDENT)))
        while self.match(TT.COMMA):
            params.append(ast.ident_token(self.expect(TT.IDENT)))

        return params

    def parse_return_stmt(self) -> Tree:
        """Parse return statement: return expr;"""
        self.expect(TT.RETURN)
        value = self.parse_expr()
        self.expect(TT.SEMI)
        return ast.return_stmt(value)

    def parse_condition(self) -> Tree:
        self.expect(TT.LPAR)
        cond = self.parse_expr()
        self.expect(TT.RPAR)
        return cond

    def parse_block(self) -> Tree:
        """Parse brace block: { stmt* }"""
        self.expect(TT.LBRACE)
        stmts = []
        while not self.check(TT.RBRACE, TT.EOF):
            stmts.append(self.parse_statement())
        self.expect(TT.RBRACE)
        return ast.block(stmts)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Tree:
        return self.parse_compare_expr()

    def parse_compare_expr(self) -> Tree:
        """Parse comparison: add ((== | != | > | < | >= | <=) add)*"""
        left = self.parse_add_expr()

        while self.check(*self.COMPARE_OPS):
            op = self.advance()
            right = self.parse_add_expr()
            left = ast.binop(left, ast.op_token(op), right)

        return left

    def parse_add_expr(self) -> Tree:
        """Parse addition/subtraction: expr + expr"""
        left = self.parse_mul_expr()

        while self.check(TT.PLUS, TT.MINUS):
            op = self.advance()
            right = self.parse_mul_expr()
            left = ast.binop(left, ast.op_token(op), right)

        return left

    def parse_mul_expr(self) -> Tree:
        """Parse multiplication/division: expr * expr"""
        left = self.parse_primary_expr()

        while self.check(TT.STAR, TT.SLASH):
            op = self.advance()
            right = self.parse_primary_expr()
            left = ast.binop(left, ast.op_token(op), right)

        return left

    def parse_primary_expr(self) -> Tree:
        """
        Parse primary expressions:
        - Literals (numbers, strings, true, false)
        - Identifiers, calls name(args), assignment name = expr
        - Parenthesized expressions
        """
        if self.check(TT.NUMBER):
            return ast.number(self.advance().value)

        if self.check(TT.STRING):
            return ast.string(self.advance().value)

        if self.match(TT.TRUE):
            return ast.boolean(True)
        if self.match(TT.FALSE):
            return ast.boolean(False)

        if self.check(TT.IDENT):
            name = ast.ident_token(self.advance())

            if self.match(TT.LPAR):
                args = self.parse_arg_list()
                self.expect(TT.RPAR)
                return ast.call(name, args)

            if self.match(TT.ASSIGN):
                value = self.parse_expr()
                return ast.assign(name, value)

            return ast.ident(name)

        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR)
            return expr

        raise ParseError(f"Unexpected token {self.current.describe()}", self.current)

    def parse_arg_list(self) -> List[Tree]:
        """Parse comma-separated call arguments (possibly empty)"""
        args: List[Tree] = []
        if self.check(TT.RPAR):
            return args

        args.append(self.parse_expr())
        while self.match(TT.COMMA):
            args.append(self.parse_expr())

        return args


def parse(tokens: List[Tok]) -> Tree:
    """Parse a token sequence into a program tree"""
    return Parser(tokens).parse()


def parse_source(source: str) -> Tree:
    """
    Parse ruslang source code to AST.

    Returns the program Tree consumed by the evaluator.
    """
    from .lexer_rd import tokenize

    return parse(tokenize(source))
