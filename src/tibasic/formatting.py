## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Value, Statement, is_list


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_number(x: float) -> str:
    return str(x)

def format_value(value: Value) -> str:
    if is_list(value):
        return '{' + ' '.join(format_number(x) for x in value) + '}'
    return format_number(value)


def format_statement(stmt: Statement, width=72) -> str:
    text = stmt.text.split('\n', 1)[0] or type(stmt).__name__
    return text if len(text) <= width else text[:width-2] + ' …'

def show_step(step: int, stmt: Statement, width=72) -> None:
    line = f"{stmt.line:>4}" if stmt.line is not None else '   ?'
    print(f"\033[90m{step:>3} :\033[0m \033[90m{line} |\033[0m {format_statement(stmt, width)}")


def format_source_lines(source: str | None, filename: str | None, line: int | None) -> str:
    header = f"\033[97m  File \"{filename or '<INPUT>'}\", line {line if line is not None else '?'}\033[0m\n"
    if not source or line is None: return header
    lines = source.splitlines()
    if not 0 < line <= len(lines): return header
    return header + f"    {lines[line-1].strip()}\n"


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = source.splitlines(keepends=True) if source else open(filename, 'r', encoding='utf-8').readlines()
    line, column, token_value = line or 1, column or 0, token_value or ''
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column > 0 and column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token_value)-1]}\033[0m" +
                    line_content[column+len(token_value)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
