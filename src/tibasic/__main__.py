## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# tibasic — An interpreter for a small calculator-style BASIC dialect.
#

import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .types import ExpressionStatement
from .errors import TiError, TiParseError, TiIncompleteParse, TiInputSyntaxError, TiLoadError
from .loader import load_source, resolve_program, trim_lines
from .console import TerminalConsole
from .formatting import write_without_ansi, format_value, format_source_lines, format_parse_error_context
from .runtime import Runtime


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    ignore: bool
    stats: bool
    plain: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class TiRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime(console=TerminalConsole())
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if not is_repl and not self.ignore: sys.exit(1)

    def _handle_exception(self, exc, filename: str, source: str, is_repl: bool = False) -> None:
        if isinstance(exc, TiInputSyntaxError):
            meta = exc.ti_meta or {}
            context = format_source_lines(source, meta.get('filename') or filename, meta.get('line'))
            context += format_parse_error_context('<TYPED>', 1, exc.column, exc.token, source=exc.text)
            self._maybe_fatal_error("SYNTAX ERROR.", f"\033[1;97m{exc.label}\033[0m {exc}", type(exc).__name__, context, is_repl)
        elif isinstance(exc, TiParseError):
            context = format_parse_error_context(filename, exc.line, exc.column, exc.token, source=source)
            context += f"\n\033[90m{str(exc).replace(chr(10), ' ').replace(chr(9), ' ')}\033[0m\n"
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, TiLoadError):
            print(f'\033[30;43m FILE ERROR. \033[0m {exc}', file=sys.stderr)
            sys.exit(1)
        elif isinstance(exc, TiError):
            meta = exc.ti_meta or {}
            detail = f"\033[1;97m{exc.label}\033[0m {exc}"
            context = format_source_lines(source, meta.get('filename') or filename, meta.get('line'))
            self._maybe_fatal_error("RUNTIME ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, Exception):
            print(f'\033[30;43m INTERNAL ERROR. \033[0m Running `\033[97m{filename}\033[0m` failed! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            traceback.print_exc()
            self.failure = True
            if not is_repl and not self.ignore: sys.exit(1)

    def load_item(self, name: str) -> ExecutionItem:
        if name == '-':
            return ExecutionItem(trim_lines(sys.stdin.read()), '<STDIN>')
        path = resolve_program(name) or Path(name)
        try:
            return ExecutionItem(load_source(path), str(path))
        except TiLoadError as exc:
            # Load failures end the whole process, even with --ignore.
            self._handle_exception(exc, str(path), '')

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False) -> None:
        try:
            self.runtime.run(source, filename=filename, verbosity=self.verbose, stats=self.total_stats)
        except (TiError, Exception) as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
        else:
            self.executed_items += 1

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('tibasic - Calculator BASIC REPL; type Ctrl+C to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                source += line.strip() + "\n"

                try:
                    head = self.runtime.parse(source, filename='<REPL>')
                except TiIncompleteParse:
                    continue
                except TiParseError as exc:
                    self._handle_exception(exc, '<REPL>', source, is_repl=True)
                    source = ""
                    continue
                source, text = "", source

                try:
                    if isinstance(head, ExpressionStatement) and head.next is None:
                        print("\033[90m>>>\033[0m", format_value(self.runtime.evaluate(head.expression)))
                    else:
                        self.runtime.execute(head, filename='<REPL>', verbosity=self.verbose, stats=self.total_stats)
                except (TiError, Exception) as exc:
                    self._handle_exception(exc, '<REPL>', text, is_repl=True)

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


def _inline_command_source(index: int, command: str) -> ExecutionItem:
    return ExecutionItem(trim_lines(command), f'<INPUT_{index}>')


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace every statement as it executes.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore runtime errors and continue with the next program.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, ignore: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, ignore=ignore, stats=stats, plain=plain)


@cli.command('run-file')
@click.argument('scripts', nargs=-1, required=True)
@click.pass_context
def run_file(ctx: click.Context, scripts: tuple[str, ...]) -> None:
    runner = TiRunner(ctx.obj['config'])
    runner.execute_items([runner.load_item(name) for name in scripts])
    ctx.exit(runner.finalize())


@cli.command('run-cmd')
@click.argument('commands', nargs=-1, required=True)
@click.pass_context
def run_cmd(ctx: click.Context, commands: tuple[str, ...]) -> None:
    runner = TiRunner(ctx.obj['config'])
    runner.execute_items([_inline_command_source(i, c) for i, c in enumerate(commands, start=1)])
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = TiRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


def _collect_commands(tokens: list[str]) -> list[str]:
    commands, index = [], 0
    while index < len(tokens):
        token = tokens[index]
        if token in ('-c', '--command'):
            if index + 1 >= len(tokens):
                raise click.BadParameter("Missing inline program after -c/--command option.")
            commands.append(tokens[index + 1])
            index += 2
        elif token.startswith('--command='):
            commands.append(token.split('=', 1)[1])
            index += 1
        else:
            raise click.BadParameter(f"Unexpected argument `{token}` after inline program.")
    return commands


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g = [t for t in a if t in ('--ignore', '--stats', '--plain', '-i', '-p') or (t.startswith('-v') and set(t[1:]) == {'v'}) or t == '--verbose']
    r = [t for t in a if t not in g]

    if len(r) == 0:
        # No args: if stdin has data, treat it as a program, else start the REPL.
        cmd, tail = ('run-file', ['-']) if not sys.stdin.isatty() else ('run-repl', [])
    elif '--repl' in r or '-r' in r:
        cmd, tail = 'run-repl', []
    elif any(t in ('-c', '--command') or t.startswith('--command=') for t in r):
        cmd, tail = 'run-cmd', _collect_commands(r)
    else:
        cmd, tail = 'run-file', r

    cli.main(args=[*g, cmd, '--', *tail] if tail else [*g, cmd], prog_name='tibasic')


if __name__ == "__main__":
    main()
