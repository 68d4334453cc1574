"""Tokenizer for the Ketch language.

Ketch is indentation sensitive. The lexer turns leading whitespace into
INDENT/DEDENT tokens by comparing each line's indentation width against a
stack of currently open widths, and ends every logical line with a NEWLINE
token. Blank lines, comment-only lines and anything inside parentheses do
not take part in indentation, so a call or a `for` header may be split
across several lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import LexError


class TokenType(Enum):
    # keywords
    LET = 'let'
    PRINT = 'print'
    IF = 'if'
    ELSE = 'else'
    WHILE = 'while'
    FOR = 'for'
    FUNCTION = 'function'
    RETURN = 'return'

    # names and literals
    IDENT = 'identifier'
    NUMBER = 'number'
    STRING = 'string'

    # + - * / ! < > == != <= >= && ||
    OP = 'operator'
    ASSIGN = '='

    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'
    COMMA = ','
    COLON = ':'
    SEMICOLON = ';'

    # layout
    NEWLINE = 'newline'
    INDENT = 'indent'
    DEDENT = 'dedent'
    EOF = 'end of input'


KEYWORDS = {
    'let': TokenType.LET,
    'print': TokenType.PRINT,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'while': TokenType.WHILE,
    'for': TokenType.FOR,
    'function': TokenType.FUNCTION,
    'return': TokenType.RETURN,
}

TWO_CHAR_OPS = {'==', '!=', '<=', '>=', '&&', '||'}
SINGLE_CHAR_OPS = {'+', '-', '*', '/', '!', '<', '>'}
PUNCTUATION = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    ',': TokenType.COMMA,
    ':': TokenType.COLON,
    ';': TokenType.SEMICOLON,
}

TAB_WIDTH = 4
DIGITS = '0123456789'


def is_ident_start(c: str) -> bool:
    return c == '_' or ('a' <= c <= 'z') or ('A' <= c <= 'Z')


def is_ident_char(c: str) -> bool:
    return is_ident_start(c) or c in DIGITS


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int

    def describe(self) -> str:
        """Short form used in parser error messages."""
        if self.type in (TokenType.IDENT, TokenType.NUMBER, TokenType.OP):
            return f"{self.type.value} {self.value!r}"
        if self.type == TokenType.STRING:
            return f"string {self.value!r}"
        if self.type.value in KEYWORDS:
            return f"keyword {self.type.value!r}"
        if self.type in (TokenType.NEWLINE, TokenType.INDENT, TokenType.DEDENT, TokenType.EOF):
            return self.type.value
        return repr(self.type.value)

    def __str__(self) -> str:
        return f"{self.type.name}({self.value!r}) at {self.line}:{self.column}"


class Lexer:
    """Single-use scanner. All state, including the indentation stack, lives
    on the instance and is discarded with it."""

    def __init__(self, source: str):
        self.source = source.replace('\r\n', '\n')
        self.length = len(self.source)
        self.pos = 0
        self.line = 1
        self.col = 1
        self.depth = 0  # open parentheses
        self.indent_stack: List[int] = [0]
        self.tokens: List[Token] = []

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        if i < self.length:
            return self.source[i]
        return ''

    def advance(self, n: int = 1):
        for _ in range(n):
            if self.pos < self.length and self.source[self.pos] == '\n':
                self.line += 1
                self.col = 1
            else:
                self.col += 1
            self.pos += 1

    def emit(self, type_: TokenType, value: str, line: int, column: int):
        self.tokens.append(Token(type_, value, line, column))

    def error(self, message: str, line: int = 0, column: int = 0) -> LexError:
        return LexError(f"{message} at {line or self.line}:{column or self.col}")

    def tokenize(self) -> List[Token]:
        at_line_start = True
        while self.pos < self.length:
            if at_line_start and self.depth == 0:
                at_line_start = False
                width = self.measure_indent()
                c = self.peek()
                if c in ('', '\n', '#'):
                    # blank or comment-only line
                    self.skip_comment()
                    if self.peek() == '\n':
                        self.advance()
                    at_line_start = True
                    continue
                self.handle_indent(width)
                continue
            at_line_start = False
            c = self.peek()
            if c == '\n':
                if self.depth == 0:
                    self.emit(TokenType.NEWLINE, '\n', self.line, self.col)
                    at_line_start = True
                self.advance()
                continue
            if c in (' ', '\t', '\r'):
                self.advance()
                continue
            if c == '#':
                self.skip_comment()
                continue
            if c in ('"', "'"):
                self.read_string()
                continue
            if c in DIGITS:
                self.read_number()
                continue
            if is_ident_start(c):
                self.read_word()
                continue
            self.read_symbol()

        if self.tokens and self.tokens[-1].type not in (TokenType.NEWLINE, TokenType.DEDENT):
            self.emit(TokenType.NEWLINE, '', self.line, self.col)
        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self.emit(TokenType.DEDENT, '', self.line, self.col)
        self.emit(TokenType.EOF, '', self.line, self.col)
        return self.tokens

    def measure_indent(self) -> int:
        width = 0
        while True:
            c = self.peek()
            if c == ' ':
                width += 1
            elif c == '\t':
                width += TAB_WIDTH
            else:
                break
            self.advance()
        return width

    def handle_indent(self, width: int):
        top = self.indent_stack[-1]
        if width > top:
            self.indent_stack.append(width)
            self.emit(TokenType.INDENT, '', self.line, 1)
            return
        while width < self.indent_stack[-1]:
            self.indent_stack.pop()
            self.emit(TokenType.DEDENT, '', self.line, 1)
        if width != self.indent_stack[-1]:
            raise self.error(
                f"inconsistent indentation: width {width} does not match any enclosing block",
                self.line, 1,
            )

    def skip_comment(self):
        if self.peek() != '#':
            return
        while self.pos < self.length and self.peek() != '\n':
            self.advance()

    def read_string(self):
        quote = self.peek()
        line, column = self.line, self.col
        self.advance()
        start = self.pos
        while self.pos < self.length and self.peek() != quote:
            if self.peek() == '\n':
                raise self.error("unterminated string literal", line, column)
            self.advance()
        if self.pos >= self.length:
            raise self.error("unterminated string literal", line, column)
        value = self.source[start:self.pos]
        self.advance()
        self.emit(TokenType.STRING, value, line, column)

    def read_number(self):
        line, column = self.line, self.col
        start = self.pos
        while self.peek() and self.peek() in DIGITS:
            self.advance()
        if self.peek() == '.':
            self.advance()
            if not (self.peek() and self.peek() in DIGITS):
                raise self.error(
                    f"malformed number {self.source[start:self.pos]!r}: expected digit after '.'",
                    line, column,
                )
            while self.peek() and self.peek() in DIGITS:
                self.advance()
        self.emit(TokenType.NUMBER, self.source[start:self.pos], line, column)

    def read_word(self):
        line, column = self.line, self.col
        start = self.pos
        while self.peek() and is_ident_char(self.peek()):
            self.advance()
        word = self.source[start:self.pos]
        self.emit(KEYWORDS.get(word, TokenType.IDENT), word, line, column)

    def read_symbol(self):
        c = self.peek()
        line, column = self.line, self.col
        pair = c + self.peek(1)
        if pair in TWO_CHAR_OPS:
            self.advance(2)
            self.emit(TokenType.OP, pair, line, column)
            return
        if c in SINGLE_CHAR_OPS:
            self.advance()
            self.emit(TokenType.OP, c, line, column)
            return
        if c == '=':
            self.advance()
            self.emit(TokenType.ASSIGN, c, line, column)
            return
        if c in PUNCTUATION:
            if c == '(':
                self.depth += 1
            elif c == ')' and self.depth > 0:
                self.depth -= 1
            self.advance()
            self.emit(PUNCTUATION[c], c, line, column)
            return
        raise self.error(f"unexpected character {c!r}", line, column)


def tokenize(source: str) -> List[Token]:
    """Convert Ketch source code into a list of tokens ending with EOF."""
    return Lexer(source).tokenize()
