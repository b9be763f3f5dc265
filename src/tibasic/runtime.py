## tibasic — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any

from .types import Statement, Expression, Value, to_value
from .errors import TiTypeError
from .parser import parse, parse_expression
from .linker import build_label_index
from .console import Console, TerminalConsole
from .environment import Environment
from .evaluator import Evaluator
from .interpreter import interpret


class Runtime:
    """Minimal runtime facade focused on embedding; the environment outlives each run."""

    def __init__(self, console: Console | None = None, environment: Environment | None = None):
        self.console = console if console is not None else TerminalConsole()
        self.environment = environment if environment is not None else Environment()

    # Front end ───────────────────────────────────────────────────────────────────────────────
    def parse(self, source: str, filename: str | None = None) -> Statement | None:
        return parse(source, filename=filename)

    def labels(self, head: Statement | None) -> dict[str, Statement]:
        return build_label_index(head)

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, source: str, filename: str | None = None, verbosity: int = 0,
            stats: dict | None = None) -> Environment:
        head = parse(source, filename=filename)
        return self.execute(head, filename=filename, verbosity=verbosity, stats=stats)

    def execute(self, head: Statement | None, filename: str | None = None, verbosity: int = 0,
                stats: dict | None = None) -> Environment:
        try:
            return interpret(self.labels(head), head, environment=self.environment, console=self.console,
                             parse_expression=parse_expression, verbosity=verbosity, stats=stats)
        except Exception as exc:
            if getattr(exc, 'ti_meta', None) is not None:
                exc.ti_meta.setdefault('filename', filename)
            raise

    def evaluate(self, expression: str | Expression) -> Value:
        if isinstance(expression, str):
            expression = parse_expression(expression)
        return Evaluator(self.environment).evaluate(expression)

    # Variables ───────────────────────────────────────────────────────────────────────────────
    def get(self, name: str) -> Value:
        return self.environment.get(name)

    def assign(self, name: str, value: Any) -> None:
        try:
            value = to_value(value)
        except TypeError as exc:
            raise TiTypeError(str(exc), ti_name=name) from None
        self.environment.assign(name, value)

    def reset(self) -> None:
        self.environment = Environment()
