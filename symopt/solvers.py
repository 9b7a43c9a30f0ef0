# ---------- Solvers ----------

import logging
from typing import NamedTuple, Optional, Sequence

import numpy as np

from ._types import (
    CANCELLED,
    CONVERGED,
    FAILED,
    MAX_ITERATIONS,
    IterationSnapshot,
    Matrix,
    Observer,
    OptimisationResult,
    Point,
    Vector,
)
from .cancel import CancelToken
from .config import (
    DEFAULT_ALPHA,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    MULTIPLIER_INIT,
    MULTIPLIER_PREFIX,
)
from .convergence import displacement, has_converged
from .errors import EvaluationError, SingularSystemError
from .linalg import LinearSystem
from .symbolic import (
    Expression,
    evaluate_matrix,
    evaluate_vector,
    gradient,
    hessian,
    lagrangian,
)
from .utils import format_vector

logger = logging.getLogger(__name__)


class Step(NamedTuple):
    """A candidate step `x_k -> x_{k+1}`, as produced by `IterativeSolver.step`."""

    point: Vector
    gradient: Vector
    explanation: str
    hessian: Optional[Matrix] = None


def _as_point(x: Vector) -> Point:
    return tuple(float(v) for v in x)


# ---------- Solver Template ----------
class IterativeSolver:
    """
    A base template class for the iterative solvers, minimising a symbolic objective.

    `x_{k+1} = STEP(x_k)`\\
    where `STEP` is the solver-specific update,
    `x_k` is the point at iteration `k`.

    A run stops when `||x_{k+1} - x_k|| < tol` (the converging step is kept),
    after `max_iterations` steps, when a step cannot be evaluated, or when cancelled.
    """

    method_name: str = ""
    """Display name, reported as `OptimisationResult.method`."""

    def __init__(
        self,
        objective: Expression,
        variables: Sequence[str],
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tolerance: float = DEFAULT_TOLERANCE,
        observer: Optional[Observer] = None,
        cancel_token: Optional[CancelToken] = None,
        **kwargs,
    ):
        # Solver-specific parameters, e.g., `alpha`
        self.config = kwargs

        self.name = self.method_name or self.__class__.__name__

        self.objective = objective
        self.variables: tuple[str, ...] = tuple(variables)

        self.state_variables: tuple[str, ...] = self.variables
        """Variables the iteration runs over. Indexes every internal point and gradient."""

        self.max_iterations = max_iterations
        self.tol = tolerance
        self.observer = observer
        self.cancel_token = cancel_token

    def initialise_state(self) -> None:
        """
        Prepares the symbolic derivatives, once per run, before the first step.\\
        [Optional]: Override to set up solver-specific state.
        """
        pass

    def initial_state(self, x0: Vector) -> Vector:
        """Maps the caller's initial point to the internal state vector."""
        return x0

    def project(self, x: Vector) -> Point:
        """Restricts an internal state vector to the original variables."""
        return _as_point(x[: len(self.variables)])

    def multipliers(self, x: Vector) -> tuple[float, ...]:
        return ()

    def bind(self, x: Vector) -> dict[str, float]:
        return {name: float(v) for name, v in zip(self.state_variables, x)}

    def step(self, x: Vector, k: int) -> Step:
        """
        Computes the candidate step from `x_k`.\\
        [Required]: This method should be implemented by subclasses to define the specific update rule.
        Parameters:
            x: Current state, i.e., `x_k`.
            k: Current iteration number, starting at 0.
        Returns:
            The candidate `x_{k+1}`, with the gradient at `x_k` and the explanation of the step.
        Raises:
            EvaluationError, SingularSystemError: The step cannot be computed.
        """
        raise NotImplementedError

    def _checked(self, x_new: Vector, k: int) -> Vector:
        if not np.all(np.isfinite(x_new)):
            raise EvaluationError(f"step {k} produced a non-finite point")
        return x_new

    def failure_note(self, k: int, error: Exception) -> str:
        if isinstance(error, SingularSystemError):
            return f"Matrix inversion failed at step {k}: {error}"
        return f"Evaluation failed at step {k}: {error}"

    def _notify(self, k: int, x: Vector, step: Step, dx: float, converged: bool) -> None:
        if self.observer is None:
            return
        self.observer(
            IterationSnapshot(
                method=self.name,
                iteration=k,
                variables=self.state_variables,
                point=_as_point(x),
                gradient=_as_point(step.gradient),
                next_point=_as_point(step.point),
                displacement=dx,
                converged=converged,
                hessian=None
                if step.hessian is None
                else tuple(_as_point(row) for row in step.hessian),
            )
        )

    def run(self, x0: Sequence[float]) -> OptimisationResult:
        """
        Runs the solver from the initial point `x0` (one entry per original variable).

        Failures inside the loop are not raised: the run ends with the trajectory
        accumulated so far and a terminal note in the explanations.
        """
        x: Vector = self.initial_state(np.array(x0, dtype=np.float64))
        self.initialise_state()

        trajectory: list[Point] = [self.project(x)]
        explanations: list[str] = []
        status = MAX_ITERATIONS

        for k in range(self.max_iterations):
            if self.cancel_token is not None and self.cancel_token.cancelled:
                explanations.append(f"Cancelled before step {k}.")
                status = CANCELLED
                break

            try:
                step = self.step(x, k)
            except (EvaluationError, SingularSystemError) as e:
                logger.warning("%s stopped at step %d: %s", self.name, k, e)
                explanations.append(self.failure_note(k, e))
                status = FAILED
                break

            # Checked before appending, but the converging step is still kept
            converged = has_converged(x, step.point, self.tol)
            dx = displacement(x, step.point)
            trajectory.append(self.project(step.point))
            explanations.append(step.explanation)
            logger.debug("%s step %d: ||dx|| = %.3e", self.name, k, dx)
            self._notify(k, x, step, dx, converged)

            x = step.point
            if converged:
                explanations.append(f"Converged at step {k} with tolerance {self.tol}.")
                status = CONVERGED
                break
        else:
            explanations.append(
                f"Stopped after {self.max_iterations} iterations without reaching tolerance {self.tol}."
            )

        return OptimisationResult(
            method=self.name,
            solution=trajectory[-1],
            trajectory=tuple(trajectory),
            explanations=tuple(explanations),
            status=status,
            variables=self.variables,
            multipliers=self.multipliers(x),
        )


# ---------- Solver Implementations ----------
class GradientDescent(IterativeSolver):
    """
    Fixed-step Gradient Descent.

    `x_{k+1} = x_k - alpha f'(x_k)`\\
    where `alpha` is the step size.
    """

    method_name = "Gradient Descent"

    def initialise_state(self):
        self.alpha = float(self.config.get("alpha", DEFAULT_ALPHA))
        self.gradient = gradient(self.objective, self.state_variables)

    def step(self, x, k):
        grad = evaluate_vector(self.gradient, self.bind(x))
        x_new = self._checked(x - self.alpha * grad, k)
        explanation = (
            f"Step {k}: We start with x = {format_vector(x, None)}. "
            f"Using Gradient Descent, we compute gradients ∇f = {format_vector(grad)}, "
            f"then update using x_new = x - α * ∇f = {format_vector(x_new)}."
        )
        return Step(x_new, grad, explanation)


class Newton(IterativeSolver):
    """
    Newton's Method, with a unit step.

    `x_{k+1} = x_k - H(x_k)^{-1} f'(x_k)`\\
    where `H` is the Hessian, built symbolically once per run.
    """

    method_name = "Newton"

    def initialise_state(self):
        self.gradient = gradient(self.objective, self.state_variables)
        self.hessian = hessian(self.objective, self.state_variables)

    def step(self, x, k):
        binding = self.bind(x)
        grad = evaluate_vector(self.gradient, binding)
        hess = evaluate_matrix(self.hessian, binding)

        delta = LinearSystem(hess, grad).solve()
        x_new = self._checked(x - delta, k)
        explanation = (
            f"Step {k}: x = {format_vector(x, None)}, ∇f = {format_vector(grad)}, "
            f"Hessian inverse × ∇f = Δ = {format_vector(delta)}, "
            f"x_new = x - Δ = {format_vector(x_new)}."
        )
        return Step(x_new, grad, explanation, hess)


def multiplier_names(count: int, variables: Sequence[str]) -> tuple[str, ...]:
    """Names `lam0`, `lam1`, ..., with `_` appended to the prefix until none collides with `variables`."""
    prefix = MULTIPLIER_PREFIX
    taken = set(variables)
    while any(f"{prefix}{i}" in taken for i in range(count)):
        prefix += "_"
    return tuple(f"{prefix}{i}" for i in range(count))


class Lagrangian(IterativeSolver):
    """
    Fixed-step primal-dual gradient method for equality constraints `g_i(x) = 0`.

    `L(x, lambda) = f(x) + sum_i lambda_i g_i(x)`\\
    `x_{k+1} = x_k - alpha dL/dx`\\
    `lambda_{k+1} = lambda_k + alpha dL/dlambda`

    Every multiplier starts at `MULTIPLIER_INIT`. Convergence is tested on the
    full `(x, lambda)` step; the returned trajectory holds `x` only.
    """

    method_name = "Lagrangian"

    def __init__(
        self,
        objective: Expression,
        variables: Sequence[str],
        constraints: Sequence[Expression],
        **kwargs,
    ):
        super().__init__(objective, variables, **kwargs)
        self.constraints: tuple[Expression, ...] = tuple(constraints)
        self.multiplier_names = multiplier_names(len(self.constraints), self.variables)
        self.state_variables = self.variables + self.multiplier_names
        self.lagrangian = lagrangian(objective, self.constraints, self.multiplier_names)

    def initialise_state(self):
        self.alpha = float(self.config.get("alpha", DEFAULT_ALPHA))
        self.gradient = gradient(self.lagrangian, self.state_variables)

        # Descent along x, ascent along the multipliers
        n, m = len(self.variables), len(self.multiplier_names)
        self.direction: Vector = np.concatenate([np.ones(n), -np.ones(m)])

    def initial_state(self, x0):
        return np.concatenate([x0, np.full(len(self.multiplier_names), MULTIPLIER_INIT)])

    def multipliers(self, x):
        return _as_point(x[len(self.variables) :])

    def step(self, x, k):
        grad = evaluate_vector(self.gradient, self.bind(x))
        x_new = self._checked(x - self.alpha * self.direction * grad, k)

        n = len(self.variables)
        explanation = (
            f"Step {k}: x = {format_vector(x[:n], None)}, λ = {format_vector(x[n:], None)}, "
            f"∇L = {format_vector(grad)}, "
            f"(x, λ)_new = (x - α * ∇ₓL, λ + α * ∇λL) = {format_vector(x_new)}."
        )
        return Step(x_new, grad, explanation)
