"""Expression tree produced by the parser.

The tree has four levels, loosest binding first: bitwise/shift operators,
additive operators (plus negation), multiplicative operators and factors.
A level with no operator is represented directly by its child node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union


@dataclass
class ASTNode:
    """Base AST node."""
    pass


# Factors

@dataclass
class Literal(ASTNode):
    value: int


@dataclass
class Variable(ASTNode):
    name: str


@dataclass
class Parenthesized(ASTNode):
    expr: 'Expr'


@dataclass
class Call(ASTNode):
    name: str
    args: List['Expr']


Factor = Union[Literal, Variable, Parenthesized, Call]


# Terms: '*', '/', '%'

@dataclass
class MulOp(ASTNode):
    op: str
    lhs: 'Term'
    rhs: Factor


Term = Union[MulOp, Factor]


# Expressions: '+', '-' and leading negation

@dataclass
class AddOp(ASTNode):
    op: str
    lhs: 'Expr'
    rhs: Term


@dataclass
class Negate(ASTNode):
    operand: 'Expr'


Expr = Union[AddOp, Negate, Term]


# Bitwise expressions: '|', '&', '^', '<<', '>>'

@dataclass
class BitwiseOp(ASTNode):
    op: str
    lhs: 'BitwiseExpr'
    rhs: Expr


BitwiseExpr = Union[BitwiseOp, Expr]


# Line roots

@dataclass
class Assign(ASTNode):
    name: str
    rhs: BitwiseExpr


@dataclass
class BareExpr(ASTNode):
    expr: BitwiseExpr


Assignment = Union[Assign, BareExpr]
