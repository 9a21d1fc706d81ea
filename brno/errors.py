from dataclasses import dataclass
from typing import Any, Optional, Union

from brno.types import ErrorVal, to_string


class LexerError(Exception):
    """Raised when source text cannot be tokenized."""
    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"[LEX] {message} at {line}:{column}")
        self.message = message
        self.line = line
        self.column = column


class ParseError(Exception):
    """Raised when the token stream does not match the grammar."""
    def __init__(self, message: str, lexeme: str, line: int, column: int):
        super().__init__(f"[PARSE] {message} at token '{lexeme}' at {line}:{column}")
        self.message = message
        self.lexeme = lexeme
        self.line = line
        self.column = column


class BrnoError(Exception):
    """Exception type used to propagate thrown BrnoScript values.

    Runtime errors throw an `ErrorVal`; `házej(x)` throws `x` itself. Only
    `chyť` clauses intercept it.
    """
    def __init__(self, value: Any):
        super().__init__(describe(value))
        self.value = value
        self.line: Optional[int] = None

    @property
    def name(self) -> str:
        if isinstance(self.value, ErrorVal):
            return self.value.name
        return 'Thrown'

    def format(self) -> str:
        where = f" (line {self.line})" if self.line else ''
        return f"{describe(self.value)}{where}"


def describe(value: Any) -> str:
    if isinstance(value, ErrorVal):
        return f"{value.name}: {value.message}"
    return f"uncaught value: {to_string(value)}"


@dataclass(frozen=True)
class ReturnSignal:
    value: Any


class BreakSignal:
    def __repr__(self) -> str:
        return 'BREAK'


class ContinueSignal:
    def __repr__(self) -> str:
        return 'CONTINUE'


BREAK = BreakSignal()
CONTINUE = ContinueSignal()

# What executing a statement produces: None when control falls through.
Outcome = Union[None, ReturnSignal, BreakSignal, ContinueSignal]
