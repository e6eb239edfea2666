from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Collection, List

from .errors import InvalidTokenError, ReservedNameError

logger = logging.getLogger(__name__)

# Store key and input character for the last bare-expression result.
RESULT_VARIABLE = '$'


class TokenType:
    """Enumeration of token types."""
    NUMBER = 'NUMBER'
    PLUS = 'PLUS'
    MINUS = 'MINUS'
    MULT = 'MULT'
    DIV = 'DIV'
    MOD = 'MOD'
    AND = 'AND'
    OR = 'OR'
    XOR = 'XOR'
    SHL = 'SHL'
    SHR = 'SHR'
    LPAREN = 'LPAREN'
    RPAREN = 'RPAREN'
    ASSIGN = 'ASSIGN'
    COMMA = 'COMMA'
    IDENT = 'IDENT'
    FUNC = 'FUNC'
    RESULT = 'RESULT'


@dataclass(frozen=True)
class Token:
    """Represents a token with type, value, and character position."""
    type: str
    value: Any
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"


_SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MULT,
    '/': TokenType.DIV,
    '%': TokenType.MOD,
    '&': TokenType.AND,
    '|': TokenType.OR,
    '^': TokenType.XOR,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '=': TokenType.ASSIGN,
    ',': TokenType.COMMA,
}

# Shift operators are the doubled character, nothing else may follow a lone '<' or '>'.
_SHIFT_TOKENS = {
    '<': TokenType.SHL,
    '>': TokenType.SHR,
}

_RADIX_PREFIXES = {
    'x': (16, frozenset('0123456789abcdefABCDEF')),
    'b': (2, frozenset('01')),
}


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    """Tokenizer for calculator input lines.

    Produces tokens for numbers, operators, parentheses, identifiers, function
    names and the result variable. '-' is always an operator; negative values
    are built by the parser.

    ``reserved_names`` is a read-only lookup of words that may not be used as
    identifiers (the REPL's command names).
    """

    def __init__(self, text: str, reserved_names: Collection[str] = ()):
        self.text = text
        self.reserved_names = reserved_names
        self.pos = 0
        self.len = len(text)

    def _peek(self, n: int = 0) -> str:
        i = self.pos + n
        return self.text[i] if i < self.len else ''

    def _advance(self, n: int = 1) -> None:
        self.pos += n

    def _read_run(self, accept) -> str:
        start = self.pos
        while self._peek() and accept(self._peek()):
            self._advance()
        return self.text[start:self.pos]

    def _read_number(self) -> Token:
        start = self.pos
        prefix = self._peek(1)
        if self._peek() == '0' and prefix in _RADIX_PREFIXES:
            radix, digits = _RADIX_PREFIXES[prefix]
            self._advance(2)
            raw = self._read_run(str.isalnum)
            if not raw or not set(raw) <= digits:
                raise InvalidTokenError(start)
            return Token(TokenType.NUMBER, int(raw, radix), start)
        raw = self._read_run(_is_digit)
        return Token(TokenType.NUMBER, int(raw), start)

    def _read_ident(self) -> Token:
        start = self.pos
        raw = self._read_run(str.isalnum)
        if raw in self.reserved_names:
            raise ReservedNameError(raw)
        return Token(TokenType.IDENT, raw, start)

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while self.pos < self.len:
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif _is_digit(ch):
                tokens.append(self._read_number())
            elif ch.isalpha():
                tokens.append(self._read_ident())
            elif ch == RESULT_VARIABLE:
                tokens.append(Token(TokenType.RESULT, ch, self.pos))
                self._advance()
            elif ch in _SHIFT_TOKENS:
                if self._peek(1) != ch:
                    raise InvalidTokenError(self.pos)
                tokens.append(Token(_SHIFT_TOKENS[ch], ch * 2, self.pos))
                self._advance(2)
            elif ch in _SINGLE_CHAR_TOKENS:
                tokens.append(Token(_SINGLE_CHAR_TOKENS[ch], ch, self.pos))
                self._advance()
            else:
                raise InvalidTokenError(self.pos)
        tokens = _tag_function_names(tokens)
        logger.debug(f"Tokenized {self.text!r} into {len(tokens)} tokens")
        return tokens


def _tag_function_names(tokens: List[Token]) -> List[Token]:
    """Retag identifiers that are immediately followed by '(' as function names."""
    tagged: List[Token] = []
    for i, tok in enumerate(tokens):
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if tok.type == TokenType.IDENT and nxt is not None and nxt.type == TokenType.LPAREN:
            tok = Token(TokenType.FUNC, tok.value, tok.pos)
        tagged.append(tok)
    return tagged


def tokenize(line: str, reserved_names: Collection[str] = ()) -> List[Token]:
    """Convert one line of text into tokens or raise a LexerError."""
    return Lexer(line, reserved_names).tokenize()
