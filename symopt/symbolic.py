# ---------- Symbolic Expression Interface ----------
# Every derivative and numeric evaluation used by the solvers goes through here.

import math
from typing import Callable, Iterable, Mapping, Optional, Sequence

import numpy as np
import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)
from sympy.polys.polyerrors import PolynomialError

from ._types import Matrix, Vector
from .errors import EvaluationError, ExpressionParseError

TRANSFORMATIONS = standard_transformations + (convert_xor, implicit_multiplication)
"""`^` is read as a power and `2x` as `2*x`; multi-letter names are never split."""


class Expression:
    """
    An immutable scalar expression of named variables, backed by `sympy`.

    Only differentiation, numeric evaluation and printing are exposed.
    The canonical string uses `^` for powers, e.g., `(x - 2)^2 + (y - 3)^2`.
    """

    def __init__(self, expr: sp.Expr):
        self._expr: sp.Expr = sp.sympify(expr)

        self._compiled: dict[tuple[str, ...], Callable[..., object]] = {}
        """Lambdified numeric functions, keyed by the ordered argument names."""

    @classmethod
    def parse(
        cls, text: "str | Expression", variables: Iterable[str] = ()
    ) -> "Expression":
        """
        Parses an expression string, e.g., `(x-2)^2 + 3xy` or `x**2 + sin(y)`.\\
        Names listed in `variables` are always read as plain symbols,
        so that e.g. `E` or `S` are not taken for sympy constants.
        """
        if isinstance(text, Expression):
            return text
        if not isinstance(text, str) or not text.strip():
            raise ExpressionParseError(f"Empty or invalid expression: {text!r}")

        local_dict = {name: sp.Symbol(name) for name in variables}
        try:
            expr = parse_expr(
                text, local_dict=local_dict, transformations=TRANSFORMATIONS
            )
        except Exception as e:
            raise ExpressionParseError(f"Could not parse {text!r}: {e}") from e

        if not isinstance(expr, sp.Expr):
            raise ExpressionParseError(f"{text!r} is not a scalar expression.")
        return cls(expr)

    @property
    def sympy(self) -> sp.Expr:
        return self._expr

    @property
    def variables(self) -> tuple[str, ...]:
        """Names of the free variables, sorted."""
        return tuple(sorted(s.name for s in self._expr.free_symbols))

    @property
    def canonical(self) -> str:
        return sp.sstr(self._expr).replace("**", "^")

    def differentiate(self, var: str) -> "Expression":
        return Expression(sp.diff(self._expr, sp.Symbol(var)))

    def _compile(self, names: tuple[str, ...]) -> Callable[..., object]:
        if names not in self._compiled:
            symbols = [sp.Symbol(n) for n in names]
            self._compiled[names] = sp.lambdify(symbols, self._expr, modules="numpy")
        return self._compiled[names]

    def evaluate(self, binding: Mapping[str, float]) -> float:
        """
        Evaluates the expression at `binding`, a map of variable name to value.

        Raises:
            EvaluationError: If a variable is missing from `binding`,
                or the value is not a finite real number.
        """
        names = self.variables
        if missing := [n for n in names if n not in binding]:
            raise EvaluationError(
                f"Incomplete binding for {self.canonical}: missing {', '.join(missing)}"
            )

        fn = self._compile(names)
        try:
            with np.errstate(all="ignore"):
                value = np.asarray(fn(*(float(binding[n]) for n in names)))
        except (ArithmeticError, ValueError, TypeError) as e:
            raise EvaluationError(f"Could not evaluate {self.canonical}: {e}") from e

        if np.iscomplexobj(value):
            if value.imag != 0:
                raise EvaluationError(f"{self.canonical} is not real at {dict(binding)}")
            value = value.real
        result = float(value)
        if not math.isfinite(result):
            raise EvaluationError(f"{self.canonical} is not finite at {dict(binding)}")
        return result

    def degree(self, variables: Optional[Sequence[str]] = None) -> int | None:
        """
        Total polynomial degree in `variables` (default: all free variables).\\
        Returns None if the expression is not a polynomial in them.
        """
        names = tuple(variables) if variables is not None else self.variables
        if not names:
            return 0
        try:
            poly = sp.Poly(self._expr, *(sp.Symbol(n) for n in names))
        except PolynomialError:
            return None
        return int(poly.total_degree())

    def __str__(self) -> str:
        return self.canonical

    def __repr__(self) -> str:
        return f"Expression({self.canonical!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        return bool(self._expr == other._expr)

    def __hash__(self) -> int:
        return hash(self._expr)


# ---------- Collaborator contract ----------
def differentiate(expr: Expression, var: str) -> Expression:
    return expr.differentiate(var)


def evaluate(expr: Expression, binding: Mapping[str, float]) -> float:
    return expr.evaluate(binding)


def gradient(expr: Expression, variables: Sequence[str]) -> list[Expression]:
    """Partial derivatives of `expr`, in the order of `variables`."""
    return [expr.differentiate(v) for v in variables]


def hessian(expr: Expression, variables: Sequence[str]) -> list[list[Expression]]:
    """
    All second partial derivatives.\\
    `H[i][j] = d/dv_j (d/dv_i expr)`
    """
    return [[g.differentiate(v) for v in variables] for g in gradient(expr, variables)]


def lagrangian(
    objective: Expression,
    constraints: Sequence[Expression],
    multipliers: Sequence[str],
) -> Expression:
    """
    The augmented objective for equality constraints `g_i = 0`.

    `L = f + sum_i lambda_i * g_i`
    """
    assert len(constraints) == len(multipliers), "One multiplier per constraint."
    expr = objective.sympy
    for g, name in zip(constraints, multipliers):
        expr = expr + sp.Symbol(name) * g.sympy
    return Expression(expr)


def evaluate_vector(exprs: Sequence[Expression], binding: Mapping[str, float]) -> Vector:
    return np.array([e.evaluate(binding) for e in exprs], dtype=np.float64)


def evaluate_matrix(
    exprs: Sequence[Sequence[Expression]], binding: Mapping[str, float]
) -> Matrix:
    return np.array(
        [[e.evaluate(binding) for e in row] for row in exprs], dtype=np.float64
    )
