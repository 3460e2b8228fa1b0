"""
Lexer for ruslang - Recursive Descent Parser

Tokenizes ruslang source code into a stream of tokens.

Features:
- Single-pass tokenization
- English and Russian keyword spellings
- Position tracking (line, column)
- Lenient literals: unterminated strings and block comments run to end of input
"""

from typing import List

from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    ruslang lexer.

    Whitespace is insignificant. Comments are `// ...` to end of line and
    `/* ... */` (an unterminated block comment swallows the rest of the input).
    """

    # Keyword mapping
    KEYWORDS = {
        'let': TT.LET,
        'function': TT.FUNCTION,
        'fn': TT.FUNCTION,
        'if': TT.IF,
        'else': TT.ELSE,
        'while': TT.WHILE,
        'return': TT.RETURN,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'пусть': TT.LET,
        'функция': TT.FUNCTION,
        'фн': TT.FUNCTION,
        'если': TT.IF,
        'иначе': TT.ELSE,
        'пока': TT.WHILE,
        'вернуть': TT.RETURN,
        'истина': TT.TRUE,
        'ложь': TT.FALSE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('>=', TT.GTE),
        ('<=', TT.LTE),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('=', TT.ASSIGN),
        ('>', TT.GT),
        ('<', TT.LT),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        (',', TT.COMMA),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

        # Start of the token being scanned
        self.start_line = 1
        self.start_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.mark_start()
        self.emit(TT.EOF, None)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        if self.skip_whitespace():
            return

        # Comments
        if self.peek() == '/' and self.peek(1) == '/':
            self.skip_line_comment()
            return
        if self.peek() == '/' and self.peek(1) == '*':
            self.skip_block_comment()
            return

        self.mark_start()

        # String literals
        if self.peek() == '"':
            self.scan_string()
            return

        # Numbers
        if self.peek().isdigit():
            self.scan_number()
            return

        # Identifiers and keywords
        if self.peek().isalpha() or self.peek() == '_':
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (no escapes)"""
        self.advance()  # Opening quote
        value = ''

        while self.pos < len(self.source) and self.peek() != '"':
            value += self.advance()

        # Unterminated strings run to end of input
        if self.pos < len(self.source):
            self.advance()  # Closing quote

        self.emit(TT.STRING, value)

    def scan_number(self):
        """Scan number literal: longest run of digits and dots"""
        value = ''

        while self.peek().isdigit() or self.peek() == '.':
            value += self.advance()

        # Malformed numerals such as 1.2.3 read as zero
        try:
            number = float(value)
        except ValueError:
            number = 0.0

        self.emit(TT.NUMBER, number)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        value = ''

        while self.peek().isalnum() or self.peek() == '_':
            value += self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str)
                return

        ch = self.peek()
        if ch == '!':
            raise LexError("Expected '=' after '!'", self.line, self.column)

        raise LexError(f"Unexpected character '{ch}'", self.line, self.column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def mark_start(self):
        self.start_line = self.line
        self.start_column = self.column

    def skip_whitespace(self) -> bool:
        """Skip whitespace including newlines, return True if any skipped"""
        skipped = False
        while self.pos < len(self.source) and self.peek().isspace():
            self.advance()
            skipped = True
        return skipped

    def skip_line_comment(self):
        """Skip comment until end of line"""
        while self.pos < len(self.source) and self.peek() != '\n':
            self.advance()

    def skip_block_comment(self):
        """Skip /* ... */; unterminated comments consume the rest of the input"""
        self.advance(2)
        while self.pos < len(self.source):
            if self.peek() == '*' and self.peek(1) == '/':
                self.advance(2)
                return
            self.advance()

    def emit(self, token_type: TT, value):
        """Emit a token"""
        tok = Tok(
            type=token_type,
            value=value,
            line=self.start_line,
            column=self.start_column,
            end_line=self.line,
            end_column=self.column,
        )
        self.tokens.append(tok)

class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")

def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
