# ---------- Linear Algebra collaborator ----------

import numpy as np

from ._types import Matrix, Vector
from .config import SINGULAR_CONDITION_LIMIT
from .errors import SingularSystemError


def invert(matrix: Matrix) -> Matrix:
    """
    Inverts a square matrix.

    Raises:
        SingularSystemError: If the matrix is singular, numerically singular
            (condition number above `SINGULAR_CONDITION_LIMIT`), or not finite.
    """
    A = np.asarray(matrix, dtype=np.float64)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise SingularSystemError(f"Cannot invert a matrix of shape {A.shape}.")
    if not np.all(np.isfinite(A)):
        raise SingularSystemError("Matrix has non-finite entries.")

    with np.errstate(all="ignore"):
        cond = float(np.linalg.cond(A))
    if not np.isfinite(cond) or cond > SINGULAR_CONDITION_LIMIT:
        raise SingularSystemError(f"Matrix is singular (condition number {cond:.3g}).")

    try:
        return np.linalg.inv(A)
    except np.linalg.LinAlgError as e:
        raise SingularSystemError(str(e)) from e


def multiply(a: Matrix, b: Matrix | Vector) -> Matrix | Vector:
    return np.asarray(a, dtype=np.float64) @ np.asarray(b, dtype=np.float64)


class LinearSystem:
    """
    A class to represent and solve a square linear system of equations `Ax = b`.
    """

    def __init__(self, A: Matrix, b: Vector):
        self.A = np.asarray(A, dtype=np.float64)
        self.b = np.asarray(b, dtype=np.float64)

        self.m, self.n = self.A.shape
        assert self.m == self.b.shape[0], "A and b must have compatible dimensions."

    def solve(self) -> Vector:
        """Solves the linear system `Ax = b`, as `x = A^{-1} b`."""
        return multiply(invert(self.A), self.b)
