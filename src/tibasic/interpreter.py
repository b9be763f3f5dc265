## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Callable

from .types import (Statement, Expression, ExpressionStatement, Disp, Assign, AssignElement, Prompt, Input,
                    If, While, For, Label, Goto, Stop, Flow, Jump, Halt, PROCEED, HALT)
from .errors import TiError, TiParseError, TiInputSyntaxError, TiLabelError, TiStepError
from .environment import Environment
from .evaluator import Evaluator, expect_number
from .console import Console, TerminalConsole, InputBridge
from .formatting import format_value, show_step


class Interpreter:
    """Executes statement chains against one environment.

    Every statement returns a control-flow result: `PROCEED` to continue along its
    chain, `Jump` to leave all enclosing blocks for a label, `HALT` to end the run.
    Blocks hand any non-`PROCEED` result straight back to their caller, and only
    `interpret` resolves jumps against the label index.
    """

    def __init__(self, environment: Environment | None = None, console: Console | None = None,
                 parse_expression: Callable[[str], Expression] | None = None, verbosity=0, stats=None):
        if parse_expression is None:
            from .parser import parse_expression
        self.environment = environment if environment is not None else Environment()
        self.console = console if console is not None else TerminalConsole()
        self.evaluator = Evaluator(self.environment)
        self.input = InputBridge(self.console, parse_expression)
        self.verbosity = verbosity
        self.stats = stats
        self.step = 0

    def interpret(self, labels: dict[str, Statement], head: Statement | None) -> Environment:
        statement, first_step = head, self.step
        try:
            while statement is not None:
                match self.execute(statement):
                    case Jump(label=label, line=line):
                        if (target := labels.get(label)) is None:
                            raise TiLabelError(f"Label `{label}` is not defined.", ti_name=label, ti_meta={'line': line})
                        statement = target
                    case Halt():
                        break
                    case _:
                        statement = statement.next
        finally:
            if self.stats is not None:
                self.stats['steps'] = self.stats.get('steps', 0) + self.step - first_step
        return self.environment

    def execute_chain(self, head: Statement | None) -> Flow:
        statement = head
        while statement is not None:
            if (flow := self.execute(statement)) is not PROCEED:
                return flow
            statement = statement.next
        return PROCEED

    def execute(self, stmt: Statement) -> Flow:
        if self.verbosity > 0:
            show_step(self.step, stmt)
        self.step += 1
        try:
            return self._dispatch(stmt)
        except TiError as exc:
            # Innermost statement that saw the fault owns the location.
            if exc.ti_meta is None or exc.ti_meta.get('line') is None:
                exc.ti_meta = {**(exc.ti_meta or {}), 'line': stmt.line}
            raise

    def _dispatch(self, stmt: Statement) -> Flow:
        evaluate = self.evaluator.evaluate

        match stmt:
            case ExpressionStatement(expression=expression):
                evaluate(expression)
            case Disp(items=items):
                for item in items:
                    self.console.write_line(item if isinstance(item, str) else format_value(evaluate(item)))
            case Assign(name=name, expression=expression):
                self.environment.assign(name, evaluate(expression))
            case AssignElement(name=name, index=index, expression=expression):
                value = evaluate(expression)
                self.environment.assign_list_element(name, value, evaluate(index))
            case Prompt(names=names):
                for name in names:
                    self._read_into(name + "?", name)
            case Input(prompt=prompt, name=name):
                self._read_into(prompt, name)
            case If(condition=condition, then_head=then_head, else_head=else_head):
                return self.execute_chain(then_head if self.evaluator.condition(condition, 'If') else else_head)
            case While(condition=condition, body=body):
                while self.evaluator.condition(condition, 'While'):
                    if (flow := self.execute_chain(body)) is not PROCEED:
                        return flow
            case For():
                return self._for_loop(stmt)
            case Label():
                pass
            case Goto(label=label):
                return Jump(label, stmt.line)
            case Stop():
                return HALT
            case _:
                raise NotImplementedError(f"Unknown statement `{type(stmt).__name__}`.")
        return PROCEED

    def _read_into(self, prompt: str, name: str) -> None:
        text = self.input.read(prompt)
        try:
            expression = self.input.parse_expression(text)
        except TiParseError as exc:
            # Never incomplete: the program itself is whole, only the typed line is bad.
            raise TiInputSyntaxError(f"Typed input `{text}` is not an expression.", text=text,
                                     column=exc.column, token=exc.token) from None
        self.environment.assign(name, self.evaluator.evaluate(expression))

    def _for_loop(self, stmt: For) -> Flow:
        # End and step are frozen before the start value is stored, and never re-read.
        end = expect_number(self.evaluator.evaluate(stmt.end), "`For(` end")
        step = expect_number(self.evaluator.evaluate(stmt.step), "`For(` step")
        self.environment.assign(stmt.name, self.evaluator.evaluate(stmt.start))
        if step == 0.0:
            raise TiStepError("`For(` step must not be zero.", ti_name=stmt.name)

        counter = expect_number(self.environment.get(stmt.name), "`For(` start")
        while (counter <= end) if step > 0 else (counter >= end):
            self.environment.assign(stmt.name, counter)
            if (flow := self.execute_chain(stmt.body)) is not PROCEED:
                return flow
            counter += step
        return PROCEED


def interpret(labels: dict[str, Statement], head: Statement | None, environment: Environment | None = None,
              console: Console | None = None, parse_expression=None, verbosity=0, stats=None) -> Environment:
    interpreter = Interpreter(environment, console, parse_expression, verbosity=verbosity, stats=stats)
    return interpreter.interpret(labels, head)
