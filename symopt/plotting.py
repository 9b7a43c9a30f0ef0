# ---------- Trajectory plots ----------

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import sympy as sp
from matplotlib.axes import Axes

from ._types import OptimisationResult
from .symbolic import Expression
from .utils import format_float


def _contour(ax: Axes, objective: Expression, names: tuple[str, ...], traj: np.ndarray):
    lo, hi = traj[:, :2].min(axis=0), traj[:, :2].max(axis=0)
    margin = np.maximum(0.25 * (hi - lo), 1.0)
    x_vals = np.linspace(lo[0] - margin[0], hi[0] + margin[0], 200)
    y_vals = np.linspace(lo[1] - margin[1], hi[1] + margin[1], 200)
    X, Y = np.meshgrid(x_vals, y_vals)

    fn = sp.lambdify([sp.Symbol(n) for n in names], objective.sympy, modules="numpy")
    with np.errstate(all="ignore"):
        Z = np.broadcast_to(np.asarray(fn(X, Y), dtype=np.float64), X.shape)
    if np.any(np.isfinite(Z)):
        ax.contour(X, Y, np.ma.masked_invalid(Z), levels=30, cmap="jet", alpha=0.6)


def plot_trajectory(
    result: OptimisationResult,
    objective: "str | Expression | None" = None,
    ax: Optional[Axes] = None,
) -> Axes:
    """
    Plots the path of a run.

    With two or more variables, the first two are drawn against each other,
    over contour lines of `objective` when it is given and has exactly two variables.
    With a single variable, its value is drawn against the iteration `k`.
    """
    traj = np.array(result.trajectory, dtype=np.float64)
    names = result.variables or tuple(f"x{i + 1}" for i in range(traj.shape[1]))
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 6))

    if traj.shape[1] < 2:
        ax.plot(range(len(traj)), traj[:, 0], marker="o", label=result.method)
        ax.set_xlabel(r"Iteration $k$")
        ax.set_ylabel(f"${names[0]}$")
    else:
        if objective is not None and len(names) == 2:
            _contour(ax, Expression.parse(objective, names), names, traj)
        ax.plot(
            traj[:, 0],
            traj[:, 1],
            marker="o",
            markersize=3,
            color="black",
            label=f"{result.method} path",
        )
        ax.plot(
            traj[-1, 0],
            traj[-1, 1],
            marker="*",
            color="red",
            markersize=15,
            label=f"x*={format_float(result.solution, fprec=4, sep=', ')}",
        )
        ax.set_xlabel(f"${names[0]}$")
        ax.set_ylabel(f"${names[1]}$")

    x0 = format_float(result.trajectory[0], fprec=4, sep=", ")
    ax.set_title(f"{result.method} path from x0={x0}")
    ax.legend()
    ax.grid(True)
    return ax
