"""Arbitrary-precision integer calculator: lexer, parser and evaluator."""

import sys

# Literals and results are unbounded, so decimal conversion must be too.
sys.set_int_max_str_digits(0)

from .evaluator import Evaluator, evaluate  # noqa: E402
from .lexer import RESULT_VARIABLE, Lexer, Token, TokenType, tokenize  # noqa: E402
from .parser import Parser, parse  # noqa: E402

__all__ = [
    'Evaluator',
    'Lexer',
    'Parser',
    'RESULT_VARIABLE',
    'Token',
    'TokenType',
    'evaluate',
    'parse',
    'tokenize',
]
