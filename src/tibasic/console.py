## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
from typing import Callable, Iterable, Protocol

from .types import Expression
from .errors import TiInputError


class Console(Protocol):
    def write(self, text: str) -> None: ...
    def write_line(self, text: str) -> None: ...
    def read_line(self) -> str | None: ...


class TerminalConsole:
    """Console backed by the process' standard streams."""

    def write(self, text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def write_line(self, text: str) -> None:
        print(text)

    def read_line(self) -> str | None:
        try:
            return input()
        except EOFError:
            return None


class ScriptedConsole:
    """Console fed from a list of input lines, recording everything written."""

    def __init__(self, inputs: Iterable[str] = ()):
        self.inputs = list(inputs)
        self.prompts: list[str] = []
        self.lines: list[str] = []

    def write(self, text: str) -> None:
        self.prompts.append(text)

    def write_line(self, text: str) -> None:
        self.lines.append(text)

    def read_line(self) -> str | None:
        return self.inputs.pop(0) if self.inputs else None


class InputBridge:
    """Blocking read of one non-empty line, parsed on demand into an expression."""

    def __init__(self, console: Console, parse_expression: Callable[[str], Expression]):
        self.console = console
        self.parse_expression = parse_expression

    def read(self, prompt: str) -> str:
        while True:
            self.console.write(prompt)
            if (line := self.console.read_line()) is None:
                raise TiInputError(f"Input ended while waiting for `{prompt}`.")
            if line.strip():
                return line.strip()

    def request(self, prompt: str) -> Expression:
        return self.parse_expression(self.read(prompt))
