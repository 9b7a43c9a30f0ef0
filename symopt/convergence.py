# ---------- Convergence Tracker ----------

from typing import Sequence

import numpy as np


def displacement(prev: Sequence[float], curr: Sequence[float]) -> float:
    """Euclidean step length `||x_{k+1} - x_k||_2`."""
    a = np.asarray(prev, dtype=np.float64)
    b = np.asarray(curr, dtype=np.float64)
    assert a.shape == b.shape, "Points must have the same dimension."
    return float(np.sqrt(np.sum((b - a) ** 2)))


def has_converged(prev: Sequence[float], curr: Sequence[float], tol: float) -> bool:
    return displacement(prev, curr) < tol
