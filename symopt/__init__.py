"""
symopt: symbolic optimisation with explained trajectories.

Minimises an objective given as an expression string, optionally subject to
equality constraints, with Gradient Descent, Newton's Method, or a Lagrangian
method, and returns every visited point with a plain-language account of each step.
"""

from ._types import IterationSnapshot, OptimisationResult
from .cancel import CancelToken
from .convergence import displacement, has_converged
from .driver import solve
from .errors import (
    EvaluationError,
    ExpressionParseError,
    InputError,
    OptimisationError,
    SingularSystemError,
    UnknownMethodError,
)
from .observers import LoggingObserver, RecordingObserver, RichProgressObserver
from .parser import detect_variables, parse_latex_to_expression
from .selector import select_method
from .solvers import GradientDescent, IterativeSolver, Lagrangian, Newton
from .symbolic import Expression

__version__ = "0.1.0"

__all__ = [
    "CancelToken",
    "EvaluationError",
    "Expression",
    "ExpressionParseError",
    "GradientDescent",
    "InputError",
    "IterationSnapshot",
    "IterativeSolver",
    "Lagrangian",
    "LoggingObserver",
    "Newton",
    "OptimisationError",
    "OptimisationResult",
    "RecordingObserver",
    "RichProgressObserver",
    "SingularSystemError",
    "UnknownMethodError",
    "detect_variables",
    "displacement",
    "has_converged",
    "parse_latex_to_expression",
    "select_method",
    "solve",
]
