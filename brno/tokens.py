"""Token definitions for BrnoScript.

The lexer turns source text into a flat list of `Token` records. Keywords
are ordinary identifiers whose spelling appears in `KEYWORDS`; the table is
case-sensitive and spelled in the Brno dialect, so the identifier character
classes below are Unicode-aware rather than ASCII-only.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict


class TokenType(Enum):
    # Punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    COMMA = auto()
    DOT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    AND_AND = auto()
    OR_OR = auto()
    PLUS_EQUAL = auto()
    MINUS_EQUAL = auto()
    STAR_EQUAL = auto()
    SLASH_EQUAL = auto()
    PERCENT_EQUAL = auto()
    PLUS_PLUS = auto()
    MINUS_MINUS = auto()
    STAR_STAR = auto()
    QUESTION_QUESTION = auto()

    # Literals
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()

    # Statement terminator
    TERMINATOR = auto()

    # Keywords
    LET = auto()
    FUN = auto()
    RETURN = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    PRINT = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    IMPORT = auto()
    TRY = auto()
    CATCH = auto()
    FINALLY = auto()
    BREAK = auto()
    CONTINUE = auto()
    FOR = auto()

    EOF = auto()


KEYWORDS: Dict[str, TokenType] = {
    'nech': TokenType.LET,
    'rob': TokenType.FUN,
    'vrat': TokenType.RETURN,
    'esli': TokenType.IF,
    'inak': TokenType.ELSE,
    'šalina': TokenType.WHILE,
    'vyblij': TokenType.PRINT,
    'rožni': TokenType.TRUE,
    'zhasni': TokenType.FALSE,
    'null': TokenType.NULL,
    'piča': TokenType.TERMINATOR,
    'vokno': TokenType.IMPORT,
    'zkus': TokenType.TRY,
    'chyť': TokenType.CATCH,
    'potom': TokenType.FINALLY,
    'vypadni': TokenType.BREAK,
    'přeskoč': TokenType.CONTINUE,
    'okruh': TokenType.FOR,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Any
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.line}:{self.column})"


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_identifier_start(ch: str) -> bool:
    return ch == '_' or unicodedata.category(ch).startswith('L')


def is_identifier_part(ch: str) -> bool:
    if ch == '_':
        return True
    category = unicodedata.category(ch)
    return category.startswith('L') or category.startswith('N')
