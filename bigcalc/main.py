# Interactive arbitrary-precision integer calculator.
#
# Each input line is either a command (exit, vars, bin, dec, hex, clear) or an
# expression run through tokenize -> parse -> evaluate. Expressions are either
# bare (the value is bound to the result variable '$') or assignments
# (`name = expr`). Errors abort the current line only and leave the variables
# untouched.
#
# Configuration comes from a .env file and the environment, overridden by
# command-line flags.

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Iterator, List, Optional, Tuple

from dotenv import load_dotenv
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory
from prompt_toolkit.shortcuts import clear
from pydantic import BaseModel, ValidationError, field_validator

from .commands import RESERVED_NAMES, Command, DisplayMode, ExitRequested, Session
from .errors import CalcError
from .evaluator import Evaluator
from .functions import FUNCTION_NAMES
from .lexer import RESULT_VARIABLE, tokenize
from .parser import parse

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE = "~/.bigcalc_history"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LOG_LEVELS = {'CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'}

# --------------------------
# Configuration
# --------------------------

class Settings(BaseModel):
    """Validated runtime configuration."""
    display_mode: DisplayMode = DisplayMode.DECIMAL
    history_file: str = os.path.expanduser(DEFAULT_HISTORY_FILE)
    log_level: str = 'WARNING'

    @field_validator('history_file')
    @classmethod
    def history_file_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('History file cannot be empty')
        return os.path.expanduser(v.strip())

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return level


def load_settings(argv: Optional[List[str]] = None) -> Settings:
    """Build settings from .env, environment variables and flags, in rising priority."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="Arbitrary-precision integer calculator.")
    parser.add_argument(
        "--mode",
        type=str,
        choices=[m.value for m in DisplayMode],
        default=os.getenv("BIGCALC_DISPLAY_MODE", DisplayMode.DECIMAL.value),
        help="Initial display mode (default: dec).",
    )
    parser.add_argument(
        "--history-file",
        type=str,
        default=os.getenv("BIGCALC_HISTORY_FILE", DEFAULT_HISTORY_FILE),
        help=f"File used for line history (default: {DEFAULT_HISTORY_FILE}).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("BIGCALC_LOG_LEVEL", "WARNING"),
        help="Logging level written to stderr (default: WARNING).",
    )
    args = parser.parse_args(argv)
    return Settings(
        display_mode=args.mode,
        history_file=args.history_file,
        log_level=args.log_level,
    )

# --------------------------
# REPL
# --------------------------

class REPL:
    """Read-Eval-Print Loop for the calculator."""

    def __init__(self, settings: Optional[Settings] = None, evaluator: Optional[Evaluator] = None):
        self.settings = settings or Settings()
        self.session = Session(display_mode=self.settings.display_mode)
        self.evaluator = evaluator or Evaluator()
        self.history_file = self.settings.history_file

    def completion_words(self) -> List[str]:
        words = [c.value for c in Command] + list(FUNCTION_NAMES)
        words += [name for name in self.session.variables if name != RESULT_VARIABLE]
        return words

    def evaluate_line(self, line: str) -> Tuple[bool, Optional[str]]:
        """Evaluate a single line (either command or expression). Returns (ok, output).

        Raises ExitRequested for the exit command.
        """
        text = line.strip()
        command = Command.lookup(text)
        if command is not None:
            return True, self.session.run_command(command)
        try:
            tokens = tokenize(text, RESERVED_NAMES)
            tree = parse(tokens)
            name = self.evaluator.evaluate(tree, self.session.variables)
        except CalcError as e:
            logger.info(f"Rejected line {text!r}: {e}")
            return False, str(e)
        return True, self.session.format_variable(name)

    def _handle(self, line: str) -> None:
        if not line.strip():
            return
        ok, out = self.evaluate_line(line)
        if out is None:
            return
        if ok:
            print(out)
        else:
            print(out, file=sys.stderr)

    def _prompt_lines(self) -> Iterator[str]:
        session: PromptSession = PromptSession(history=FileHistory(self.history_file))
        while True:
            completer = WordCompleter(self.completion_words())
            try:
                yield session.prompt('> ', completer=completer)
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                return

    def repl_loop(self) -> None:
        """Read lines until end of input or the exit command."""
        interactive = sys.stdin.isatty()
        if interactive:
            self.session.clear_screen = clear
            lines: Iterator[str] = self._prompt_lines()
        else:
            lines = iter(sys.stdin)
        try:
            for line in lines:
                self._handle(line)
        except ExitRequested:
            logger.debug("Exit requested")

# --------------------------
# Entry point
# --------------------------

def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings(argv)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logger.debug(f"Starting with {settings!r}")
    repl = REPL(settings)
    try:
        repl.repl_loop()
    except OSError as e:
        logger.error(f"Unexpected IO error: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
