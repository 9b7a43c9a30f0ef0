from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from symopt import solve
from symopt.plotting import plot_trajectory


def test_two_variable_path_over_contours():
    result = solve("(x-2)^2 + (y-3)^2", ["x", "y"], [0.0, 0.0], method="gradient")
    ax = plot_trajectory(result, objective="(x-2)^2 + (y-3)^2")
    path = ax.lines[0]
    assert np.allclose(path.get_xdata(), [p[0] for p in result.trajectory])
    assert np.allclose(path.get_ydata(), [p[1] for p in result.trajectory])
    assert ax.get_xlabel() == "$x$"
    assert len(ax.collections) > 0  # contour lines
    plt.close("all")


def test_single_variable_against_iterations():
    result = solve("(x-1)^2", ["x"], [4.0], method="gradient", max_iterations=10)
    ax = plot_trajectory(result)
    line = ax.lines[0]
    assert list(line.get_xdata()) == list(range(len(result.trajectory)))
    assert ax.get_xlabel() == r"Iteration $k$"
    plt.close("all")


def test_three_variables_skip_contours():
    result = solve("x^2 + y^2 + z^2", ["x", "y", "z"], [1.0, 1.0, 1.0], method="newton")
    _, ax = plt.subplots()
    plot_trajectory(result, objective="x^2 + y^2 + z^2", ax=ax)
    assert len(ax.collections) == 0
    plt.close("all")
