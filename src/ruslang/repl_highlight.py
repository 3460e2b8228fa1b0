"""prompt_toolkit lexer for live ruslang syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import LexError, tokenize
from .runtime import init_stdlib, is_builtin
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.LET: "keyword",
    TT.FUNCTION: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.WHILE: "keyword",
    TT.RETURN: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.ASSIGN: "operator",
    TT.EQ: "operator",
    TT.NEQ: "operator",
    TT.GT: "operator",
    TT.LT: "operator",
    TT.GTE: "operator",
    TT.LTE: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.SEMI: "punctuation",
}


def token_group(tokens: list[Tok], idx: int) -> str:
    """Highlight group for tokens[idx]; builtin names followed by '(' read as functions."""
    tok = tokens[idx]
    group = _TT_GROUP.get(tok.type, "")

    if tok.type == TT.IDENT and is_builtin(tok.value):
        nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
        if nxt is not None and nxt.type == TT.LPAR:
            return "function"

    return group


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    init_stdlib()

    try:
        tokens = tokenize(text)
    except LexError:
        return [("", text)]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF or tok.line != 1:
            continue

        start = tok.column - 1
        end = tok.end_column - 1 if tok.end_line == 1 else len(text)

        # Unstyled gap before token (whitespace, comments).
        if start > pos:
            result.append(("", text[pos:start]))

        result.append((GROUP_STYLE[token_group(tokens, i)], text[start:end]))
        pos = end

    if pos < len(text):
        result.append(("", text[pos:]))

    return result


class RusLexer(Lexer):
    """Per-line highlighter backed by the real tokenizer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(lines):
                return []
            return highlight_line(lines[lineno])

        return get_line
