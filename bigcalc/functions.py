from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping

from .errors import InvalidFunctionArgumentError

# Largest exponent accepted by pow, the range of an unsigned 32-bit integer.
MAX_EXPONENT = 2**32 - 1


@dataclass(frozen=True)
class Function:
    """A named function with a fixed arity.

    ``rule`` receives exactly ``arity`` evaluated arguments; the evaluator
    checks the count before calling it.
    """
    name: str
    arity: int
    rule: Callable[[List[int]], int]

    def __call__(self, args: List[int]) -> int:
        return self.rule(args)


def _sqrt(args: List[int]) -> int:
    (num,) = args
    if num < 0:
        raise InvalidFunctionArgumentError(
            f"sqrt function does not take negative argument. Passed {num}"
        )
    return math.isqrt(num)


def _pow(args: List[int]) -> int:
    base, exponent = args
    if exponent < 0:
        raise InvalidFunctionArgumentError(
            f"pow function does not take negative exponent. Passed {exponent}"
        )
    if exponent > MAX_EXPONENT:
        raise InvalidFunctionArgumentError(
            f"pow exponent must be at most {MAX_EXPONENT}. Passed {exponent}"
        )
    return base ** exponent


_FUNCTIONS: Dict[str, Function] = {}


def _register(name: str, arity: int, rule: Callable[[List[int]], int]) -> None:
    _FUNCTIONS[name] = Function(name, arity, rule)


_register('sqrt', 1, _sqrt)
_register('pow', 2, _pow)

# Read-only view consulted by the evaluator.
FUNCTIONS: Mapping[str, Function] = MappingProxyType(_FUNCTIONS)

# Function names for help and completion
FUNCTION_NAMES = sorted(FUNCTIONS)
