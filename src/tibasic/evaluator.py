## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import math

from .types import (Expression, Literal, Variable, Element, ListLiteral, Grouping, Unary, Binary, Logical,
                    TiList, Value, TRUE, FALSE, is_number, kind_name)
from .errors import TiTypeError, TiArithmeticError
from .environment import Environment


## ARITHMETIC
def _finite(result: float, b: float, op: str, a: float) -> float:
    if math.isinf(result): raise TiArithmeticError(f"{b}{op}{a} is too large.", label="ERR:OVERFLOW")
    return result

def op_add(b: float, a: float) -> float: return _finite(b + a, b, '+', a)
def op_sub(b: float, a: float) -> float: return _finite(b - a, b, '-', a)
def op_mul(b: float, a: float) -> float: return _finite(b * a, b, '*', a)
def op_div(b: float, a: float) -> float:
    if a == 0.0: raise TiArithmeticError("Division by zero.", label="ERR:DIVIDE BY 0")
    return _finite(b / a, b, '/', a)
def op_pow(b: float, a: float) -> float:
    try:
        return math.pow(b, a)
    except OverflowError:
        raise TiArithmeticError(f"{b}^{a} is too large.", label="ERR:OVERFLOW") from None
    except ValueError:
        raise TiArithmeticError(f"{b}^{a} has no real result.", label="ERR:DOMAIN") from None
## COMPARISON
def op_gt(b: float, a: float) -> float: return TRUE if b > a else FALSE
def op_gte(b: float, a: float) -> float: return TRUE if b >= a else FALSE
def op_lt(b: float, a: float) -> float: return TRUE if b < a else FALSE
def op_lte(b: float, a: float) -> float: return TRUE if b <= a else FALSE
def op_equal(b: float, a: float) -> float: return TRUE if b == a else FALSE
def op_differ(b: float, a: float) -> float: return TRUE if b != a else FALSE
## LOGIC
def op_and(b: float, a: float) -> float: return TRUE if is_true(b) and is_true(a) else FALSE
def op_or(b: float, a: float) -> float: return TRUE if is_true(b) or is_true(a) else FALSE


BINARY_OPERATORS = {
    '+': op_add, '-': op_sub, '*': op_mul, '/': op_div, '^': op_pow,
    '>': op_gt, '≥': op_gte, '<': op_lt, '≤': op_lte, '=': op_equal, '≠': op_differ,
}
LOGICAL_OPERATORS = {'and': op_and, 'or': op_or}


def is_true(value: float) -> bool:
    return value != FALSE


def expect_number(value: Value, what: str) -> float:
    if not is_number(value):
        raise TiTypeError(f"{what} expects a number, got {kind_name(value)}.")
    return value


class Evaluator:
    """Reduces expression trees to runtime values, reading variables from the environment."""

    def __init__(self, environment: Environment):
        self.environment = environment

    def evaluate(self, expr: Expression) -> Value:
        match expr:
            case Literal(value=value):
                return value
            case Variable(name=name):
                return self.environment.get(name)
            case Grouping(inside=inside):
                return self.evaluate(inside)
            case Element(name=name, index=index):
                return self.environment.get_list_element(name, self.evaluate(index))
            case ListLiteral(items=items):
                return TiList(expect_number(self.evaluate(it), "List element") for it in items)
            case Unary(operator=op, right=right):
                value = expect_number(self.evaluate(right), f"Operator `{op}`")
                return -value if op == '-' else value
            case Logical(operator=op, left=left, right=right):
                # Both sides always run; the dialect has no short-circuit.
                lhs, rhs = self.evaluate(left), self.evaluate(right)
                return LOGICAL_OPERATORS[op](expect_number(lhs, f"Operator `{op}`"), expect_number(rhs, f"Operator `{op}`"))
            case Binary(operator=op, left=left, right=right):
                lhs, rhs = self.evaluate(left), self.evaluate(right)
                return BINARY_OPERATORS[op](expect_number(lhs, f"Operator `{op}`"), expect_number(rhs, f"Operator `{op}`"))
        raise NotImplementedError(f"Unknown expression `{type(expr).__name__}`.")

    def condition(self, expr: Expression, keyword: str) -> bool:
        return is_true(expect_number(self.evaluate(expr), f"`{keyword}` condition"))
