# ---------- symopt configuration ----------
# Module-level defaults shared by the driver, the solvers and the CLI.

import numpy as np

# ---------- Iteration defaults ----------
DEFAULT_ALPHA: float = 0.1
"""Fixed step size `alpha` for Gradient Descent and the Lagrangian method."""

DEFAULT_MAX_ITERATIONS: int = 100
"""Maximum number of iterations performed by a single solver run."""

DEFAULT_TOLERANCE: float = 1e-6
"""Tolerance on the step displacement `||x_{k+1} - x_k||` for convergence."""

DEFAULT_METHOD: str = "auto"
"""Method used when the caller does not name one."""

METHODS: tuple[str, ...] = ("auto", "gradient", "newton", "lagrangian")
"""Accepted method names. `auto` defers to the method selector."""

# ---------- Lagrangian ----------
MULTIPLIER_INIT: float = 1.0
"""Initial value of every Lagrange multiplier."""

MULTIPLIER_PREFIX: str = "lam"
"""
Prefix of the synthetic multiplier names, i.e., `lam0`, `lam1`, ...\\
A trailing `_` is appended until the names do not collide with the user's variables.
"""

# ---------- Newton ----------
SINGULAR_CONDITION_LIMIT: float = float(1.0 / np.finfo(np.float64).eps)
"""Hessians whose condition number exceeds this are treated as singular."""

# ---------- Explanations ----------
EXPLAIN_DECIMALS: int = 4
"""Number of decimals shown for gradients and updated points in explanations."""
