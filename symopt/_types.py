# ---------- symopt types ----------

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeAlias

import numpy as np
import numpy.typing as npt

# Type aliases
Vector: TypeAlias = npt.NDArray[np.float64]
"""A type alias for a 1D numpy array of real numbers."""

Matrix: TypeAlias = npt.NDArray[np.float64]
"""A type alias for a 2D numpy array of real numbers."""

Point: TypeAlias = tuple[float, ...]
"""An immutable point, one coordinate per variable."""

# Run outcomes
CONVERGED = "converged"
MAX_ITERATIONS = "max_iterations"
FAILED = "failed"
CANCELLED = "cancelled"


@dataclass(frozen=True)
class OptimisationResult:
    """
    The outcome of one solver run.

    `trajectory[0]` is the initial point, `solution == trajectory[-1]`,
    and both are restricted to the original variables (no multipliers).
    """

    method: str
    """Display name of the solver, e.g., `Gradient Descent`."""

    solution: Point
    trajectory: tuple[Point, ...]

    explanations: tuple[str, ...]
    """One entry per iteration, plus at most one terminal note."""

    status: str = MAX_ITERATIONS
    """One of `converged`, `max_iterations`, `failed`, `cancelled`."""

    variables: tuple[str, ...] = ()

    multipliers: tuple[float, ...] = ()
    """Final Lagrange multipliers (Lagrangian method only)."""

    @property
    def converged(self) -> bool:
        return self.status == CONVERGED

    @property
    def iterations(self) -> int:
        """Number of accepted iterations, i.e., `len(trajectory) - 1`."""
        return len(self.trajectory) - 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "variables": list(self.variables),
            "solution": list(self.solution),
            "trajectory": [list(p) for p in self.trajectory],
            "explanations": list(self.explanations),
            "status": self.status,
            "multipliers": list(self.multipliers),
        }


@dataclass(frozen=True)
class IterationSnapshot:
    """State handed to an observer once per accepted iteration."""

    method: str
    iteration: int

    variables: tuple[str, ...]
    """State variables, multipliers included for the Lagrangian method."""

    point: Point
    gradient: Point
    next_point: Point
    displacement: float
    converged: bool
    hessian: Optional[tuple[Point, ...]] = field(default=None)


Observer: TypeAlias = Callable[[IterationSnapshot], None]
"""A per-iteration callback."""
