"""Exception hierarchy for the lexer, parser and evaluator.

Every stage raises the first error it meets; the REPL is the only place that
catches them and turns them into a printed message.
"""

from __future__ import annotations

from typing import Any, Sequence


class CalcError(Exception):
    """Base class for all calculator errors."""
    pass


# --------------------------
# Lexer errors
# --------------------------

class LexerError(CalcError):
    """Raised for errors during tokenization."""
    pass


class InvalidTokenError(LexerError):
    """Raised when the character at ``index`` cannot start a token."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Invalid token at index {index}")


class ReservedNameError(LexerError):
    """Raised when an identifier collides with a command name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"`{name}` is a reserved name and cannot be used as a variable")


# --------------------------
# Parser errors
# --------------------------

class ParseError(CalcError):
    """Raised for parsing errors."""
    pass


class UnclosedParenthesisError(ParseError):
    def __init__(self) -> None:
        super().__init__("Expected `)`")


class InvalidExpressionError(ParseError):
    """Raised when a token slice does not reduce to any production."""

    def __init__(self, tokens: Sequence[Any] = ()):
        self.tokens = list(tokens)
        if self.tokens:
            text = " ".join(str(t.value) for t in self.tokens)
            super().__init__(f"Invalid expression: {text}")
        else:
            super().__init__("Expected expression")


class DoubleNegationError(ParseError):
    def __init__(self) -> None:
        super().__init__("Double negation is not allowed, use parentheses")


class NestingTooDeepError(ParseError):
    def __init__(self) -> None:
        super().__init__("Expression nested too deeply")


# --------------------------
# Evaluation errors
# --------------------------

class EvalError(CalcError):
    """Raised for errors during evaluation, e.g. domain errors."""
    pass


class DivisionByZeroError(EvalError):
    def __init__(self, dividend: int):
        self.dividend = dividend
        super().__init__(f"Attempted dividing {dividend} by zero")


class UnknownVariableError(EvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown variable `{name}`")


class UnknownFunctionError(EvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown function `{name}`")


class WrongArgumentCountError(EvalError):
    def __init__(self, name: str, expected: int, actual: int):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Function `{name}` expects {expected} argument(s) but {actual} were given"
        )


class InvalidFunctionArgumentError(EvalError):
    """Raised by a function rule when an argument is outside its domain."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NegativeShiftError(EvalError):
    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(f"Cannot shift by a negative amount ({amount})")


class ShiftTooLargeError(EvalError):
    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(f"Shift amount {amount} is too large")


class EvaluationTooDeepError(EvalError):
    def __init__(self) -> None:
        super().__init__("Expression nested too deeply to evaluate")
