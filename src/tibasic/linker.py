## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Statement, If, While, For, Label, iter_chain


def sub_chains(stmt: Statement) -> list[Statement | None]:
    match stmt:
        case If(then_head=then_head, else_head=else_head): return [then_head, else_head]
        case While(body=body) | For(body=body): return [body]
    return []


def iter_statements(head: Statement | None):
    """Every statement of the program in textual order, descending into block bodies."""
    for stmt in iter_chain(head):
        yield stmt
        for sub in sub_chains(stmt):
            yield from iter_statements(sub)


def build_label_index(head: Statement | None) -> dict[str, Statement]:
    """Map each label to its chain position; the first of duplicate labels wins."""
    labels: dict[str, Statement] = {}
    for stmt in iter_statements(head):
        if isinstance(stmt, Label):
            labels.setdefault(stmt.name, stmt)
    return labels
