"""
Token Types for the ruslang tokenizer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # Keywords
    LET = auto()
    FUNCTION = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    RETURN = auto()
    TRUE = auto()
    FALSE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    ASSIGN = auto()

    # Comparison
    EQ = auto()
    NEQ = auto()
    GT = auto()
    LT = auto()
    GTE = auto()
    LTE = auto()

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    SEMI = auto()

    # Special
    EOF = auto()


# Display spellings used in diagnostics
TT_DISPLAY = {
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.LET: "'let'",
    TT.FUNCTION: "'function'",
    TT.IF: "'if'",
    TT.ELSE: "'else'",
    TT.WHILE: "'while'",
    TT.RETURN: "'return'",
    TT.TRUE: "'true'",
    TT.FALSE: "'false'",
    TT.PLUS: "'+'",
    TT.MINUS: "'-'",
    TT.STAR: "'*'",
    TT.SLASH: "'/'",
    TT.ASSIGN: "'='",
    TT.EQ: "'=='",
    TT.NEQ: "'!='",
    TT.GT: "'>'",
    TT.LT: "'<'",
    TT.GTE: "'>='",
    TT.LTE: "'<='",
    TT.LPAR: "'('",
    TT.RPAR: "')'",
    TT.LBRACE: "'{'",
    TT.RBRACE: "'}'",
    TT.COMMA: "','",
    TT.SEMI: "';'",
    TT.EOF: "end of input",
}


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0
    end_line: int = 0
    end_column: int = 0

    def describe(self) -> str:
        if self.type in (TT.NUMBER, TT.STRING, TT.IDENT) and self.value is not None:
            return f"{TT_DISPLAY[self.type]} {self.value!r}"
        return TT_DISPLAY[self.type]

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
