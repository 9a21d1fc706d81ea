"""Tokenizer for BrnoScript.

The lexer produces the whole token list up front, terminated by an EOF
token. Operators are matched longest-first; `&`, `|` and `?` only exist as
the doubled operators `&&`, `||` and `??`. Comments and whitespace produce
no tokens. Every token records the line and column of its first character.
"""

from __future__ import annotations

from typing import List, Optional

from .errors import LexerError
from .tokens import KEYWORDS, Token, TokenType, is_digit, is_identifier_part, is_identifier_start


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    '[': TokenType.LEFT_BRACKET,
    ']': TokenType.RIGHT_BRACKET,
    '.': TokenType.DOT,
    ',': TokenType.COMMA,
}

# First character -> ordered (continuation, token type) candidates, plus the
# type to use when no continuation matches (None means the bare character is
# not an operator).
OPERATORS = {
    '+': ((('+', TokenType.PLUS_PLUS), ('=', TokenType.PLUS_EQUAL)), TokenType.PLUS),
    '-': ((('-', TokenType.MINUS_MINUS), ('=', TokenType.MINUS_EQUAL)), TokenType.MINUS),
    '*': ((('*', TokenType.STAR_STAR), ('=', TokenType.STAR_EQUAL)), TokenType.STAR),
    '/': ((('=', TokenType.SLASH_EQUAL),), TokenType.SLASH),
    '%': ((('=', TokenType.PERCENT_EQUAL),), TokenType.PERCENT),
    '!': ((('=', TokenType.BANG_EQUAL),), TokenType.BANG),
    '=': ((('=', TokenType.EQUAL_EQUAL),), TokenType.EQUAL),
    '<': ((('=', TokenType.LESS_EQUAL),), TokenType.LESS),
    '>': ((('=', TokenType.GREATER_EQUAL),), TokenType.GREATER),
    '&': ((('&', TokenType.AND_AND),), None),
    '|': ((('|', TokenType.OR_OR),), None),
    '?': ((('?', TokenType.QUESTION_QUESTION),), None),
}

WHITESPACE = (' ', '\t', '\r', '\n')


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        while True:
            self.skip_whitespace()
            if self.at_end():
                break
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line, self.column))
        return self.tokens

    # Character helpers

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.source):
            return self.source[index]
        return '\0'

    def advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def add(self, type_: TokenType, lexeme: str, line: int, column: int, literal=None):
        self.tokens.append(Token(type_, lexeme, literal, line, column))

    # Scanning

    def skip_whitespace(self):
        while not self.at_end() and self.peek() in WHITESPACE:
            self.advance()

    def scan_token(self):
        line, column = self.line, self.column
        c = self.advance()

        if c in SINGLE_CHAR_TOKENS:
            self.add(SINGLE_CHAR_TOKENS[c], c, line, column)
            return
        if c == '/' and self.peek() == '/':
            self.skip_line_comment()
            return
        if c == '/' and self.peek() == '*':
            self.skip_block_comment()
            return
        if c in OPERATORS:
            self.scan_operator(c, line, column)
            return
        if c == '"':
            self.scan_string(line, column)
            return
        if is_digit(c):
            self.scan_number(c, line, column)
            return
        if is_identifier_start(c):
            self.scan_identifier(c, line, column)
            return
        raise LexerError(f"unexpected character {c!r}", line, column)

    def scan_operator(self, first: str, line: int, column: int):
        candidates, fallback = OPERATORS[first]
        for second, type_ in candidates:
            if self.peek() == second:
                self.advance()
                self.add(type_, first + second, line, column)
                return
        if fallback is None:
            raise LexerError(f"expected '{first}{first}', got a lone '{first}'", line, column)
        self.add(fallback, first, line, column)

    def skip_line_comment(self):
        while not self.at_end() and self.peek() != '\n':
            self.advance()

    def skip_block_comment(self):
        self.advance()  # '*'
        # An unterminated comment runs to the end of the input.
        while not self.at_end() and not (self.peek() == '*' and self.peek(1) == '/'):
            self.advance()
        if not self.at_end():
            self.advance()
            self.advance()

    def scan_string(self, line: int, column: int):
        chars: List[str] = []
        while not self.at_end() and self.peek() != '"':
            chars.append(self.advance())
        if self.at_end():
            raise LexerError("unterminated string literal", line, column)
        self.advance()  # closing quote
        value = ''.join(chars)
        self.add(TokenType.STRING, f'"{value}"', line, column, value)

    def scan_number(self, first: str, line: int, column: int):
        chars = [first]
        while is_digit(self.peek()):
            chars.append(self.advance())
        if self.peek() == '.' and is_digit(self.peek(1)):
            chars.append(self.advance())
            while is_digit(self.peek()):
                chars.append(self.advance())
        text = ''.join(chars)
        self.add(TokenType.NUMBER, text, line, column, float(text))

    def scan_identifier(self, first: str, line: int, column: int):
        chars = [first]
        while not self.at_end() and is_identifier_part(self.peek()):
            chars.append(self.advance())
        text = ''.join(chars)
        type_: Optional[TokenType] = KEYWORDS.get(text)
        if type_ is None:
            self.add(TokenType.IDENTIFIER, text, line, column, text)
        else:
            self.add(type_, text, line, column)


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens ending with EOF."""
    return Lexer(source).tokenize()
