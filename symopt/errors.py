# ---------- symopt errors ----------

import numpy as np


class OptimisationError(Exception):
    """Base class for every error raised by `symopt`."""


class InputError(OptimisationError, ValueError):
    """
    The caller supplied an invalid problem or parameter.\\
    Raised before any iteration runs.
    """


class UnknownMethodError(InputError):
    """The requested method is not one of `auto`, `gradient`, `newton`, `lagrangian`."""

    def __init__(self, method: str):
        super().__init__(f"Unknown method: {method}")
        self.method = method


class ExpressionParseError(InputError):
    """The expression text (or markup) could not be parsed."""


class EvaluationError(OptimisationError, ArithmeticError):
    """
    Numeric evaluation failed: the binding is incomplete,
    or the value (or the resulting step) is not a finite real number.
    """


class SingularSystemError(OptimisationError, np.linalg.LinAlgError):
    """The linear system `H delta = grad` has no unique solution."""
