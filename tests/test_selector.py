from __future__ import annotations

import pytest

from symopt.errors import InputError
from symopt.selector import select_method
from symopt.symbolic import Expression


def test_constraints_select_lagrangian():
    assert select_method("x^2 + y^2", ["x + y - 1"]) == "lagrangian"
    assert select_method("x^4", ["x - 1"], strategy="degree") == "lagrangian"


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("(x-2)^2 + (y-3)^2", "gradient"),
        ("x^2 + y^3", "newton"),
        ("x^4 + y^2", "newton"),
        ("x*y + exp(x)", "newton"),
        ("x**2 + y**2", "gradient"),
    ],
)
def test_textual_rule(expression, expected):
    assert select_method(expression, []) == expected


def test_textual_rule_on_parsed_expression():
    assert select_method(Expression.parse("(x - 1)**2 + y**2")) == "gradient"
    assert select_method(Expression.parse("x**3 - y")) == "newton"


def test_textual_rule_misreads_exponents_starting_with_two():
    # x^21 contains the text "^2"
    assert select_method("x^21 + y") == "gradient"
    assert select_method("x^21 + y", strategy="degree") == "newton"


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("(x-2)^2 + (y-3)^2", "gradient"),
        ("x*y", "gradient"),
        ("x^3 + y^2", "newton"),
        ("sin(x) + y^2", "newton"),
    ],
)
def test_degree_rule(expression, expected):
    assert select_method(expression, strategy="degree") == expected


def test_unknown_strategy():
    with pytest.raises(InputError):
        select_method("x^2", strategy="magic")
