# ---------- Optimization Driver ----------

import logging
import math
from numbers import Integral, Real
from typing import Optional, Sequence

import numpy as np

from ._types import Observer, OptimisationResult, Vector
from .cancel import CancelToken
from .config import (
    DEFAULT_ALPHA,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_METHOD,
    DEFAULT_TOLERANCE,
    METHODS,
)
from .errors import InputError, UnknownMethodError
from .parser import detect_variables
from .selector import select_method
from .solvers import GradientDescent, IterativeSolver, Lagrangian, Newton
from .symbolic import Expression

logger = logging.getLogger(__name__)


def _check_variables(variables: Sequence[str]) -> tuple[str, ...]:
    names = tuple(variables)
    if not names:
        raise InputError("At least one variable is required.")
    for name in names:
        if not isinstance(name, str) or not name.isidentifier():
            raise InputError(f"Invalid variable name: {name!r}")
    if len(set(names)) != len(names):
        raise InputError(f"Variable names must be distinct: {', '.join(names)}")
    return names


def _check_references(expr: Expression, variables: tuple[str, ...], what: str) -> None:
    if unknown := [v for v in expr.variables if v not in variables]:
        raise InputError(
            f"The {what} {expr.canonical} uses unknown variables: {', '.join(unknown)}"
        )


def _check_point(initial_point: Optional[Sequence[float]], n: int) -> Vector:
    if initial_point is None:
        return np.zeros(n)
    try:
        x0 = np.array([float(v) for v in initial_point], dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InputError(f"Initial point must be numeric: {e}") from e
    if x0.shape != (n,):
        raise InputError(f"Initial point needs {n} values, got {x0.size}.")
    if not np.all(np.isfinite(x0)):
        raise InputError("Initial point must be finite.")
    return x0


def _check_parameters(alpha: float, max_iterations: int, tolerance: float) -> None:
    if isinstance(alpha, bool) or not isinstance(alpha, Real) or not (
        math.isfinite(alpha) and alpha > 0
    ):
        raise InputError(f"alpha must be a finite positive number, got {alpha!r}")
    if (
        isinstance(max_iterations, bool)
        or not isinstance(max_iterations, Integral)
        or max_iterations <= 0
    ):
        raise InputError(f"max_iterations must be a positive integer, got {max_iterations!r}")
    if isinstance(tolerance, bool) or not isinstance(tolerance, Real) or not (
        math.isfinite(tolerance) and tolerance > 0
    ):
        raise InputError(f"tolerance must be a finite positive number, got {tolerance!r}")


def solve(
    expression: "str | Expression",
    variables: Optional[Sequence[str]] = None,
    initial_point: Optional[Sequence[float]] = None,
    constraints: Sequence["str | Expression"] = (),
    alpha: float = DEFAULT_ALPHA,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
    method: str = DEFAULT_METHOD,
    *,
    observer: Optional[Observer] = None,
    cancel_token: Optional[CancelToken] = None,
    selection_strategy: str = "textual",
) -> OptimisationResult:
    """
    Minimises `expression`, subject to `constraints == 0`, from `initial_point`.

    Parameters:
        expression: Objective, as a string (e.g., `(x-2)^2 + (y-3)^2`) or an `Expression`.
        variables: Ordered variable names. Detected from the expression if omitted.
        initial_point: One value per variable. Defaults to the origin.
        constraints: Equality constraints `g_i`, each required to equal zero.
        alpha: Fixed step size for `gradient` and `lagrangian`.
        max_iterations: Maximum number of iterations.
        tolerance: Convergence tolerance on the step displacement.
        method: One of `auto`, `gradient`, `newton`, `lagrangian`.
        observer: Called once per iteration with an `IterationSnapshot`.
        cancel_token: Checked once per iteration; a cancelled run returns early.
        selection_strategy: `textual` or `degree`, used when `method == "auto"`.

    Raises:
        UnknownMethodError: If `method` is not recognised.
        InputError: If any other input is invalid. Nothing is iterated in either case.
    """
    if method not in METHODS:
        raise UnknownMethodError(method)

    if variables is None:
        variables = sorted(
            {v for e in (expression, *constraints) for v in detect_variables(e)}
        )
    names = _check_variables(variables)

    objective = Expression.parse(expression, names)
    constraint_exprs = [Expression.parse(g, names) for g in constraints]
    _check_references(objective, names, "objective")
    for g in constraint_exprs:
        _check_references(g, names, "constraint")

    x0 = _check_point(initial_point, len(names))
    _check_parameters(alpha, max_iterations, tolerance)

    if method == "auto":
        method = select_method(objective, constraint_exprs, selection_strategy)
        logger.info("Selected method %r for %s", method, objective.canonical)

    common = dict(
        max_iterations=int(max_iterations),
        tolerance=float(tolerance),
        observer=observer,
        cancel_token=cancel_token,
    )
    solver: IterativeSolver
    if method == "gradient":
        solver = GradientDescent(objective, names, alpha=float(alpha), **common)
    elif method == "newton":
        solver = Newton(objective, names, **common)
    else:
        solver = Lagrangian(objective, names, constraint_exprs, alpha=float(alpha), **common)

    result = solver.run(x0)
    logger.info(
        "%s finished with status %s after %d iterations",
        result.method,
        result.status,
        result.iterations,
    )
    return result
