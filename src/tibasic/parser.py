## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark
from lark import v_args

from .types import (Statement, Expression, Literal, Variable, Element, ListLiteral, Grouping, Unary, Binary,
                    Logical, ExpressionStatement, Disp, Assign, AssignElement, Prompt, Input, If, While, For,
                    Label, Goto, Stop, link_chain)
from .errors import TiParseError, TiIncompleteParse


GRAMMAR = r"""start: _eol? (statement (_eol statement)* _eol?)?
expression_input: expr

?statement: assign | assign_element
          | disp | prompt | input
          | if_block | if_single | while_block | for_block
          | label | goto | stop
          | expr                                              -> expression_statement

assign: expr STORE (VAR | list_name)
assign_element: expr STORE list_name "(" expr ")"
disp: "Disp" _disp_item ("," _disp_item)*
_disp_item: expr | STRING
prompt: "Prompt" _name ("," _name)*
input: "Input" (STRING ",")? _name
if_block: "If" expr _eol "Then" block ("Else" block)? "End"
if_single: "If" expr _eol statement
while_block: "While" expr block "End"
for_block: "For(" _name "," expr "," expr ("," expr)? ")"? block "End"
block: (_eol statement)* _eol
label: "Lbl" LABEL
goto: "Goto" LABEL
stop: "Stop"

_name: VAR | list_name
list_name: LIST_NAME | CUSTOM_NAME
_eol: _NL+

// EXPRESSIONS, loosest binding first.
?expr: or_expr
?or_expr: and_expr | or_expr "or" and_expr                  -> logical_or
?and_expr: comparison | and_expr "and" comparison          -> logical_and
?comparison: sum | comparison COMPARE sum                  -> compare
?sum: product | sum "+" product                            -> add
    | sum "-" product                                      -> sub
?product: unary | product "*" unary                        -> mul
        | product "/" unary                                -> div
?unary: power
      | "-" unary                                          -> neg
      | "⁻" unary                                          -> neg
      | "+" unary                                          -> pos
?power: atom | power "^" exponent                          -> pow
?exponent: atom
         | "-" exponent                                    -> neg
         | "⁻" exponent                                    -> neg
?atom: NUMBER                                              -> number
     | VAR                                                 -> variable
     | list_name                                           -> variable
     | list_name "(" expr ")"                              -> element
     | "{" expr ("," expr)* "}"                            -> list_literal
     | "(" expr ")"                                        -> grouping

// TOKENS
STORE: "→" | "->"
COMPARE: /<=|>=|!=|[≤≥≠<>=]/
NUMBER: /(?:\d+\.?\d*|\.\d+)(?:ᴇ[-⁻]?\d+)?/
STRING: /"[^"\n]*"/
LIST_NAME: /L[₁₂₃₄₅₆1-6]/
CUSTOM_NAME: /ʟ[A-Zθ][A-Z0-9θ]{0,4}/
LABEL: /[A-Z0-9θ]{1,2}/
VAR: /[A-Z]/
_NL: /\n|:/

// WHITESPACE
%ignore /[ \t\r]+/
"""


COMPARE_SYMBOLS = {'<=': '≤', '>=': '≥', '!=': '≠'}
SUBSCRIPTS = str.maketrans('123456', '₁₂₃₄₅₆')

_PARSER = None

def _get_parser() -> lark.Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = lark.Lark(GRAMMAR, start=['start', 'expression_input'], parser="lalr",
                            lexer="contextual", propagate_positions=True)
    return _PARSER


def normalize_list_name(name: str) -> str:
    return name.translate(SUBSCRIPTS) if name.startswith('L') else name

def parse_number(text: str) -> float:
    return float(text.replace('ᴇ', 'e').replace('⁻', '-'))

def _unquote(token) -> str:
    return str(token)[1:-1]

def _is_string(node) -> bool:
    return isinstance(node, lark.Token) and node.type == 'STRING'


@v_args(meta=True)
class ChainBuilder(lark.Transformer):
    """Turns the parse tree into linked statement chains and expression trees."""

    def __init__(self, source: str):
        super().__init__()
        self.source = source

    def _pos(self, meta) -> dict:
        if meta.empty: return {'line': None, 'text': ''}
        return {'line': meta.line, 'text': self.source[meta.start_pos:meta.end_pos].strip()}

    def _line(self, meta) -> int | None:
        return None if meta.empty else meta.line

    # Program structure.
    def start(self, meta, children): return link_chain(children)
    def block(self, meta, children): return link_chain(children)
    def expression_input(self, meta, children): return children[0]

    # Statements.
    def expression_statement(self, meta, children):
        return ExpressionStatement(children[0], **self._pos(meta))

    def assign(self, meta, children):
        value, _, name = children
        return Assign(str(name), value, **self._pos(meta))

    def assign_element(self, meta, children):
        value, _, name, index = children
        return AssignElement(name, index, value, **self._pos(meta))

    def disp(self, meta, children):
        items = [_unquote(c) if _is_string(c) else c for c in children]
        return Disp(items, **self._pos(meta))

    def prompt(self, meta, children):
        return Prompt([str(c) for c in children], **self._pos(meta))

    def input(self, meta, children):
        prompt = _unquote(children[0]) if len(children) == 2 else "?"
        return Input(prompt, str(children[-1]), **self._pos(meta))

    def if_block(self, meta, children):
        condition, then_head, *rest = children
        return If(condition, then_head, rest[0] if rest else None, **self._pos(meta))

    def if_single(self, meta, children):
        condition, statement = children
        return If(condition, link_chain([statement]), None, **self._pos(meta))

    def while_block(self, meta, children):
        condition, body = children
        return While(condition, body, **self._pos(meta))

    def for_block(self, meta, children):
        if len(children) == 5:
            name, start, end, step, body = children
        else:
            (name, start, end, body), step = children, Literal(1.0)
        return For(str(name), start, end, step, body, **self._pos(meta))

    def label(self, meta, children): return Label(str(children[0]), **self._pos(meta))
    def goto(self, meta, children): return Goto(str(children[0]), **self._pos(meta))
    def stop(self, meta, children): return Stop(**self._pos(meta))

    # Expressions.
    def list_name(self, meta, children): return normalize_list_name(str(children[0]))
    def number(self, meta, children): return Literal(parse_number(children[0]), line=self._line(meta))
    def variable(self, meta, children): return Variable(str(children[0]), line=self._line(meta))
    def element(self, meta, children): return Element(children[0], children[1], line=self._line(meta))
    def list_literal(self, meta, children): return ListLiteral(list(children), line=self._line(meta))
    def grouping(self, meta, children): return Grouping(children[0], line=self._line(meta))

    def neg(self, meta, children): return Unary('-', children[0], line=self._line(meta))
    def pos(self, meta, children): return Unary('+', children[0], line=self._line(meta))

    def _binary(op):
        def build(self, meta, children):
            return Binary(op, children[0], children[1], line=self._line(meta))
        return build

    add, sub, mul, div, pow = _binary('+'), _binary('-'), _binary('*'), _binary('/'), _binary('^')
    del _binary

    def compare(self, meta, children):
        left, op, right = children
        return Binary(COMPARE_SYMBOLS.get(str(op), str(op)), left, right, line=self._line(meta))

    def logical_or(self, meta, children): return Logical('or', *children, line=self._line(meta))
    def logical_and(self, meta, children): return Logical('and', *children, line=self._line(meta))


def _parse(source: str, start: str, filename: str | None):
    try:
        tree = _get_parser().parse(source, start=start)
    except lark.exceptions.UnexpectedInput as exc:
        def attr(k): return getattr(exc, k, None)
        token = attr('token')
        at_end = isinstance(exc, lark.exceptions.UnexpectedEOF) or getattr(token, 'type', None) == '$END'
        token_val = '' if at_end else str(token if token is not None else attr('char') or '')
        error_class = TiIncompleteParse if at_end else TiParseError
        raise error_class(str(exc), filename=filename, line=attr('line'), column=attr('column'), token=token_val) from None
    return ChainBuilder(source).transform(tree)


def parse(source: str, filename: str | None = None) -> Statement | None:
    """Parse a whole program and return the head of its top-level statement chain."""
    return _parse(source, 'start', filename)


def parse_expression(text: str, filename: str | None = '<INPUT>') -> Expression:
    """Parse a single expression, as typed at a `Prompt` or `Input`."""
    return _parse(text.strip(), 'expression_input', filename)
