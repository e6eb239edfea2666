"""REPL commands, display modes and per-session state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class Command(Enum):
    EXIT = 'exit'
    VARS = 'vars'
    BIN = 'bin'
    DEC = 'dec'
    HEX = 'hex'
    CLEAR = 'clear'

    @classmethod
    def lookup(cls, line: str) -> Optional['Command']:
        """Return the command spelled exactly by ``line``, if any."""
        try:
            return cls(line)
        except ValueError:
            return None


# Names the lexer must refuse as identifiers.
RESERVED_NAMES = frozenset(c.value for c in Command)


class DisplayMode(Enum):
    DECIMAL = 'dec'
    HEX = 'hex'
    BINARY = 'bin'


def format_value(value: int, mode: DisplayMode) -> str:
    """Render ``value`` in ``mode``; hex and binary put the sign before the prefix.

    Negative values print as ``-0xFF``, not ``0x-FF`` as a plain
    ``0x{:X}`` of a signed big integer would.
    """
    sign = '-' if value < 0 else ''
    magnitude = abs(value)
    if mode is DisplayMode.HEX:
        return f"{sign}0x{magnitude:X}"
    if mode is DisplayMode.BINARY:
        return f"{sign}0b{magnitude:b}"
    return str(value)


class ExitRequested(Exception):
    """Raised by the exit command to end the read loop."""
    pass


@dataclass
class Session:
    """State owned by one REPL: the variable store and the display mode."""
    variables: Dict[str, int] = field(default_factory=dict)
    display_mode: DisplayMode = DisplayMode.DECIMAL
    clear_screen: Callable[[], None] = lambda: None

    def format_variable(self, name: str) -> str:
        return f"\\> {name} = {format_value(self.variables[name], self.display_mode)}"

    def run_command(self, command: Command) -> Optional[str]:
        """Execute ``command`` and return text to print, if any."""
        logger.debug(f"Running command {command.value}")
        if command is Command.EXIT:
            raise ExitRequested()
        if command is Command.VARS:
            if not self.variables:
                return None
            return "\n".join(self.format_variable(name) for name in self.variables)
        if command is Command.BIN:
            self.display_mode = DisplayMode.BINARY
            return None
        if command is Command.DEC:
            self.display_mode = DisplayMode.DECIMAL
            return None
        if command is Command.HEX:
            self.display_mode = DisplayMode.HEX
            return None
        if command is Command.CLEAR:
            self.variables.clear()
            self.clear_screen()
            return None
        raise ValueError(f"Unknown command: {command}")
