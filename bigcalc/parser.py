from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .errors import (
    DoubleNegationError,
    InvalidExpressionError,
    NestingTooDeepError,
    UnclosedParenthesisError,
)
from .lexer import RESULT_VARIABLE, Token, TokenType
from .nodes import (
    AddOp,
    Assign,
    Assignment,
    BareExpr,
    BitwiseExpr,
    BitwiseOp,
    Call,
    Expr,
    Factor,
    Literal,
    MulOp,
    Negate,
    Parenthesized,
    Term,
    Variable,
)

logger = logging.getLogger(__name__)

# Operators per precedence level, loosest first.
BITWISE_OPS: Dict[str, str] = {
    TokenType.OR: '|',
    TokenType.AND: '&',
    TokenType.XOR: '^',
    TokenType.SHL: '<<',
    TokenType.SHR: '>>',
}

ADDITIVE_OPS: Dict[str, str] = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
}

MULTIPLICATIVE_OPS: Dict[str, str] = {
    TokenType.MULT: '*',
    TokenType.DIV: '/',
    TokenType.MOD: '%',
}


def _matching_paren(tokens: Sequence[Token], open_index: int) -> int:
    """Return the index of the ')' closing the '(' at ``open_index``."""
    depth = 0
    for i in range(open_index, len(tokens)):
        tok_type = tokens[i].type
        if tok_type == TokenType.LPAREN:
            depth += 1
        elif tok_type == TokenType.RPAREN:
            depth -= 1
            if depth == 0:
                return i
    raise UnclosedParenthesisError()


def _find_operator(tokens: Sequence[Token], ops: Dict[str, str]) -> Optional[int]:
    """Index of the first operator of a level outside parentheses, or None.

    A '-' in first position is a negation, never a subtraction.
    """
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.type == TokenType.LPAREN:
            i = _matching_paren(tokens, i)
        elif tok.type in ops and not (tok.type == TokenType.MINUS and i == 0):
            return i
        i += 1
    return None


def _split_arguments(tokens: Sequence[Token]) -> List[Sequence[Token]]:
    """Split the inside of a call's parentheses on top-level commas."""
    if not tokens:
        return []
    parts: List[Sequence[Token]] = []
    start = 0
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.type == TokenType.LPAREN:
            i = _matching_paren(tokens, i)
        elif tok.type == TokenType.COMMA:
            parts.append(tokens[start:i])
            start = i + 1
        i += 1
    parts.append(tokens[start:])
    return parts


class Parser:
    """Recursive descent parser over a token slice.

    Each level splits its slice on the first operator of that level found
    outside parentheses: the left part is parsed at the same level and the
    right part at the next tighter one. The right part therefore cannot
    contain another operator of the same level, so ``1 + 2 + 3`` is rejected
    while ``(1 + 2) + 3`` and ``1 * 2 + 3`` are accepted.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)

    def parse(self) -> Assignment:
        tokens = self.tokens
        try:
            if (len(tokens) >= 2 and tokens[0].type == TokenType.IDENT
                    and tokens[1].type == TokenType.ASSIGN):
                tree: Assignment = Assign(tokens[0].value, self.parse_bitwise(tokens[2:]))
            else:
                tree = BareExpr(self.parse_bitwise(tokens))
            logger.debug(f"Parsed tree: {tree!r}")
        except RecursionError:
            raise NestingTooDeepError() from None
        return tree

    def parse_bitwise(self, tokens: Sequence[Token]) -> BitwiseExpr:
        i = _find_operator(tokens, BITWISE_OPS)
        if i is None:
            return self.parse_expr(tokens)
        return BitwiseOp(
            BITWISE_OPS[tokens[i].type],
            self.parse_bitwise(tokens[:i]),
            self.parse_expr(tokens[i + 1:]),
        )

    def parse_expr(self, tokens: Sequence[Token]) -> Expr:
        if (len(tokens) >= 2 and tokens[0].type == TokenType.MINUS
                and tokens[1].type == TokenType.MINUS):
            raise DoubleNegationError()
        i = _find_operator(tokens, ADDITIVE_OPS)
        if i is None:
            if tokens and tokens[0].type == TokenType.MINUS:
                return Negate(self.parse_expr(tokens[1:]))
            return self.parse_term(tokens)
        return AddOp(
            ADDITIVE_OPS[tokens[i].type],
            self.parse_expr(tokens[:i]),
            self.parse_term(tokens[i + 1:]),
        )

    def parse_term(self, tokens: Sequence[Token]) -> Term:
        i = _find_operator(tokens, MULTIPLICATIVE_OPS)
        if i is None:
            return self.parse_factor(tokens)
        return MulOp(
            MULTIPLICATIVE_OPS[tokens[i].type],
            self.parse_term(tokens[:i]),
            self.parse_factor(tokens[i + 1:]),
        )

    def parse_factor(self, tokens: Sequence[Token]) -> Factor:
        if not tokens:
            raise InvalidExpressionError()
        first = tokens[0]
        if len(tokens) == 1:
            if first.type == TokenType.NUMBER:
                return Literal(first.value)
            if first.type == TokenType.IDENT:
                return Variable(first.value)
            if first.type == TokenType.RESULT:
                return Variable(RESULT_VARIABLE)
            raise InvalidExpressionError(tokens)
        if first.type == TokenType.LPAREN:
            if _matching_paren(tokens, 0) != len(tokens) - 1:
                raise InvalidExpressionError(tokens)
            return Parenthesized(self.parse_expr(tokens[1:-1]))
        if first.type == TokenType.FUNC and tokens[1].type == TokenType.LPAREN:
            if _matching_paren(tokens, 1) != len(tokens) - 1:
                raise InvalidExpressionError(tokens)
            args = [self.parse_expr(part) for part in _split_arguments(tokens[2:-1])]
            return Call(first.value, args)
        raise InvalidExpressionError(tokens)


def parse(tokens: Sequence[Token]) -> Assignment:
    """Parse a token sequence into an Assign or BareExpr tree or raise a ParseError."""
    return Parser(tokens).parse()
