# BrnoScript language package
# This package provides a lexer, parser and async tree-walking interpreter
# for BrnoScript, a small scripting language with Brno-dialect keywords.
from .capabilities import Capabilities
from .errors import BrnoError, LexerError, ParseError
from .interpreter import FunctionValue, Interpreter, run_program, run_source
from .lexer import tokenize
from .parser import parse_program
from .types import ErrorVal

__all__ = [
    'Capabilities',
    'BrnoError',
    'LexerError',
    'ParseError',
    'ErrorVal',
    'FunctionValue',
    'Interpreter',
    'parse_program',
    'run_program',
    'run_source',
    'tokenize',
]
