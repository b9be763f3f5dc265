## tibasic — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tibasic.types import Literal, Variable, Grouping, Unary, Binary, Logical, Element, TiList
from tibasic.environment import Environment
from tibasic.evaluator import Evaluator
from tibasic.parser import parse_expression
from tibasic.errors import TiTypeError, TiArithmeticError, TiNameError, TiIndexError


def evaluate(text: str, env: Environment | None = None):
    return Evaluator(env or Environment()).evaluate(parse_expression(text))


@pytest.mark.parametrize("text, expected", [
    ("1+2", 3.0), ("7-10", -3.0), ("3*4", 12.0), ("1/4", 0.25), ("2^10", 1024.0),
    ("2+3*4", 14.0), ("(2+3)*4", 20.0), ("2^3^2", 64.0), ("-2^2", -4.0), ("2^-1", 0.5),
    ("⁻3+1", -2.0), ("+5", 5.0), ("1.5ᴇ2", 150.0), (".5", 0.5),
])
def test_arithmetic(text, expected):
    assert evaluate(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("2>1", 1.0), ("1>2", 0.0), ("2≥2", 1.0), ("2>=3", 0.0), ("1<2", 1.0), ("2≤1", 0.0),
    ("1<=1", 1.0), ("3=3", 1.0), ("3≠3", 0.0), ("3!=4", 1.0), ("1+1=2", 1.0),
])
def test_comparisons_yield_one_or_zero(text, expected):
    assert evaluate(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("1 and 1", 1.0), ("1 and 0", 0.0), ("0 or 0", 0.0), ("0 or 5", 1.0),
    ("2 and ⁻3", 1.0), ("0 or 1 and 0", 0.0), ("1 or 1 and 0", 1.0),
])
def test_logical_operators(text, expected):
    assert evaluate(text) == expected


def test_logical_operators_evaluate_both_sides():
    # No short-circuit: the undefined right-hand side is still looked up.
    with pytest.raises(TiNameError):
        evaluate("0 and ʟNOPE")
    with pytest.raises(TiNameError):
        evaluate("1 or ʟNOPE")


def test_logical_operator_rejects_lists():
    with pytest.raises(TiTypeError, match="`and`"):
        evaluate("L₁ and 1")
    with pytest.raises(TiTypeError, match="`or`"):
        evaluate("1 or {1,2}")


@pytest.mark.parametrize("text", ["L₁+1", "2*L₂", "L₁^2", "{1}>0", "-L₁"])
def test_arithmetic_on_lists_is_type_mismatch(text):
    with pytest.raises(TiTypeError):
        evaluate(text)


def test_division_by_zero():
    with pytest.raises(TiArithmeticError) as info:
        evaluate("1/0")
    assert info.value.label == "ERR:DIVIDE BY 0"


def test_power_without_real_result():
    with pytest.raises(TiArithmeticError) as info:
        evaluate("(⁻8)^(1/3)")
    assert info.value.label == "ERR:DOMAIN"


@pytest.mark.parametrize("text", ["10^400", "10^200*10^200", "1ᴇ308+1ᴇ308", "⁻1ᴇ308-1ᴇ308", "1ᴇ308/0.1"])
def test_overflow_is_an_arithmetic_fault(text):
    with pytest.raises(TiArithmeticError) as info:
        evaluate(text)
    assert info.value.label == "ERR:OVERFLOW"


def test_variables_and_elements():
    env = Environment()
    env.assign('A', 4.0)
    env.assign('L₂', TiList([5.0, 6.0]))
    assert evaluate("A*2", env) == 8.0
    assert evaluate("L2(2)+A", env) == 10.0
    assert evaluate("L₂", env) == [5.0, 6.0]
    with pytest.raises(TiIndexError):
        evaluate("L₂(3)", env)


def test_list_literal_builds_fresh_list():
    value = evaluate("{1,2+3,A}")
    assert isinstance(value, TiList) and value == [1.0, 5.0, 0.0]
    with pytest.raises(TiTypeError):
        evaluate("{1,L₁}")


def test_nodes_without_parser():
    env = Environment()
    tree = Grouping(Binary('-', Unary('-', Literal(2.0)), Variable('B')))
    env.assign('B', 3.0)
    assert Evaluator(env).evaluate(tree) == -5.0
    assert Evaluator(env).evaluate(Logical('or', Literal(0.0), Literal(0.0))) == 0.0
    assert Evaluator(env).evaluate(Element("L₁", Literal(1.0))) == 1.0


def test_pure_expression_is_idempotent():
    env = Environment()
    env.assign('X', 3.0)
    env.assign('L₁', TiList([2.0, 4.0]))
    expr = parse_expression("(X^2+L₁(2))/(X-1)")
    evaluator = Evaluator(env)
    assert evaluator.evaluate(expr) == evaluator.evaluate(expr) == 6.5
