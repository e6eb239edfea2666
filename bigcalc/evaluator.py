from __future__ import annotations

import logging
from typing import Mapping, MutableMapping

from .errors import (
    DivisionByZeroError,
    EvalError,
    EvaluationTooDeepError,
    NegativeShiftError,
    ShiftTooLargeError,
    UnknownFunctionError,
    UnknownVariableError,
    WrongArgumentCountError,
)
from .functions import FUNCTIONS, Function
from .lexer import RESULT_VARIABLE
from .nodes import (
    AddOp,
    Assign,
    Assignment,
    ASTNode,
    BareExpr,
    BitwiseOp,
    Call,
    Literal,
    MulOp,
    Negate,
    Parenthesized,
    Variable,
)

logger = logging.getLogger(__name__)

# Largest shift amount, the range of an unsigned 16-bit integer.
MAX_SHIFT = 65535

VariableStore = MutableMapping[str, int]


def _trunc_div(dividend: int, divisor: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


def _trunc_mod(dividend: int, divisor: int) -> int:
    """Remainder of ``_trunc_div``; takes the sign of the dividend."""
    return dividend - divisor * _trunc_div(dividend, divisor)


def _shift_amount(amount: int) -> int:
    if amount < 0:
        raise NegativeShiftError(amount)
    if amount > MAX_SHIFT:
        raise ShiftTooLargeError(amount)
    return amount


class Evaluator:
    """Evaluates expression trees against a caller-owned variable store."""

    def __init__(self, functions: Mapping[str, Function] = FUNCTIONS):
        self.functions = functions

    def evaluate(self, tree: Assignment, store: VariableStore) -> str:
        """Evaluate ``tree`` and bind the result, returning the bound name.

        The store is written only once the whole right-hand side evaluated
        successfully.
        """
        if isinstance(tree, Assign):
            name, expr = tree.name, tree.rhs
        elif isinstance(tree, BareExpr):
            name, expr = RESULT_VARIABLE, tree.expr
        else:
            raise EvalError(f"Unsupported AST root: {type(tree).__name__}")
        try:
            value = self.eval(expr, store)
        except RecursionError:
            raise EvaluationTooDeepError() from None
        store[name] = value
        logger.debug(f"Bound {name} = {value}")
        return name

    def eval(self, node: ASTNode, store: Mapping[str, int]) -> int:
        """Evaluate a sub-tree and return its value or raise EvalError."""
        if isinstance(node, Literal):
            return int(node.value)
        if isinstance(node, Variable):
            if node.name not in store:
                raise UnknownVariableError(node.name)
            return store[node.name]
        if isinstance(node, Parenthesized):
            return self.eval(node.expr, store)
        if isinstance(node, Negate):
            return -self.eval(node.operand, store)
        if isinstance(node, Call):
            return self._call(node, store)
        if isinstance(node, (BitwiseOp, AddOp, MulOp)):
            lhs = self.eval(node.lhs, store)
            rhs = self.eval(node.rhs, store)
            return self._binary(node.op, lhs, rhs)
        raise EvalError(f"Unsupported AST node: {type(node).__name__}")

    def _binary(self, op: str, lhs: int, rhs: int) -> int:
        if op == '|':
            return lhs | rhs
        if op == '&':
            return lhs & rhs
        if op == '^':
            return lhs ^ rhs
        if op == '<<':
            return lhs << _shift_amount(rhs)
        if op == '>>':
            return lhs >> _shift_amount(rhs)
        if op == '+':
            return lhs + rhs
        if op == '-':
            return lhs - rhs
        if op == '*':
            return lhs * rhs
        if op == '/':
            if rhs == 0:
                raise DivisionByZeroError(lhs)
            return _trunc_div(lhs, rhs)
        if op == '%':
            if rhs == 0:
                raise DivisionByZeroError(lhs)
            return _trunc_mod(lhs, rhs)
        raise EvalError(f"Unknown binary operator: {op}")

    def _call(self, node: Call, store: Mapping[str, int]) -> int:
        func = self.functions.get(node.name)
        if func is None:
            raise UnknownFunctionError(node.name)
        args = [self.eval(arg, store) for arg in node.args]
        if len(args) != func.arity:
            raise WrongArgumentCountError(node.name, func.arity, len(args))
        return func(args)


def evaluate(tree: Assignment, store: VariableStore) -> str:
    """Evaluate a parsed line with the default function table."""
    return Evaluator().evaluate(tree, store)
