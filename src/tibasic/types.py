## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field, KW_ONLY


class TiList(list):
    """Growable list of floats, addressed from 1 like the calculator's lists."""

    @property
    def size(self) -> int:
        return len(self)

    def get(self, index: int) -> float:
        return self[index - 1]

    def set(self, index: int, value: float) -> None:
        self[index - 1] = value

    def copy(self) -> "TiList":
        return TiList(self)


# The only two runtime kinds: Number is a plain float, List is a TiList.
Value = float | TiList

TRUE, FALSE = 1.0, 0.0


def is_number(x) -> bool: return isinstance(x, float)
def is_list(x) -> bool: return isinstance(x, TiList)

def kind_name(x) -> str:
    if is_number(x): return 'number'
    if is_list(x): return 'list'
    return type(x).__name__

def to_value(x) -> Value:
    """Coerce a Python value supplied by embedding code into a runtime value."""
    if isinstance(x, bool): raise TypeError("Booleans must be given as 1 or 0.")
    if isinstance(x, TiList): return x.copy()
    if isinstance(x, (int, float)): return float(x)
    if isinstance(x, (list, tuple)): return TiList(to_value(i) for i in x)
    raise TypeError(f"No runtime value for `{type(x).__name__}`.")


# CONTROL FLOW ─────────────────────────────────────────────────────────────────────────────
class Flow:
    __slots__ = ()

@dataclass(frozen=True)
class Proceed(Flow):
    pass

@dataclass(frozen=True)
class Halt(Flow):
    pass

@dataclass(frozen=True)
class Jump(Flow):
    label: str
    line: int | None = None

PROCEED, HALT = Proceed(), Halt()


# EXPRESSIONS ──────────────────────────────────────────────────────────────────────────────
@dataclass
class Expression:
    _: KW_ONLY
    line: int | None = field(default=None, compare=False, repr=False)

@dataclass
class Literal(Expression):
    value: float

@dataclass
class Variable(Expression):
    name: str

@dataclass
class Element(Expression):
    name: str
    index: Expression

@dataclass
class ListLiteral(Expression):
    items: list

@dataclass
class Grouping(Expression):
    inside: Expression

@dataclass
class Unary(Expression):
    operator: str
    right: Expression

@dataclass
class Binary(Expression):
    operator: str
    left: Expression
    right: Expression

@dataclass
class Logical(Expression):
    operator: str
    left: Expression
    right: Expression


# STATEMENTS ───────────────────────────────────────────────────────────────────────────────
# Statements are identity-linked chain positions, so equality stays by identity.
@dataclass(eq=False)
class Statement:
    _: KW_ONLY
    line: int | None = None
    text: str = ''
    next: "Statement | None" = field(default=None, repr=False)

@dataclass(eq=False)
class ExpressionStatement(Statement):
    expression: Expression

@dataclass(eq=False)
class Disp(Statement):
    items: list                   # Expression, or str for verbatim text.

@dataclass(eq=False)
class Assign(Statement):
    name: str
    expression: Expression

@dataclass(eq=False)
class AssignElement(Statement):
    name: str
    index: Expression
    expression: Expression

@dataclass(eq=False)
class Prompt(Statement):
    names: list[str]

@dataclass(eq=False)
class Input(Statement):
    prompt: str
    name: str

@dataclass(eq=False)
class If(Statement):
    condition: Expression
    then_head: Statement | None
    else_head: Statement | None = None

@dataclass(eq=False)
class While(Statement):
    condition: Expression
    body: Statement | None

@dataclass(eq=False)
class For(Statement):
    name: str
    start: Expression
    end: Expression
    step: Expression
    body: Statement | None

@dataclass(eq=False)
class Label(Statement):
    name: str

@dataclass(eq=False)
class Goto(Statement):
    label: str

@dataclass(eq=False)
class Stop(Statement):
    pass


def link_chain(statements: list[Statement]) -> Statement | None:
    """Thread `next` through the statements in textual order and return the head."""
    for current, following in zip(statements, statements[1:]):
        current.next = following
    return statements[0] if statements else None

def iter_chain(head: Statement | None):
    while head is not None:
        yield head
        head = head.next
