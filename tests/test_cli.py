from __future__ import annotations

import json

import matplotlib

matplotlib.use("Agg")

import pytest

from symopt.cli import build_parser, main


def test_json_output(capsys):
    code = main(["(x-2)^2 + (y-3)^2", "--init", "0,0", "--json"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["method"] == "Gradient Descent"
    assert out["status"] == "converged"
    assert out["variables"] == ["x", "y"]
    assert out["trajectory"][0] == [0.0, 0.0]
    assert out["solution"] == pytest.approx([2.0, 3.0], abs=1e-4)


def test_constrained_problem_from_latex(capsys):
    code = main(
        [
            r"x^{2} + y^{2}",
            "--latex",
            "--constraint",
            "x + y - 1",
            "--init",
            "0.5,0.5",
            "--max-iter",
            "2000",
            "--tol",
            "1e-10",
            "--json",
        ]
    )
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["method"] == "Lagrangian"
    assert out["solution"] == pytest.approx([0.5, 0.5], abs=1e-6)
    assert out["multipliers"] == pytest.approx([-1.0], abs=1e-6)


def test_table_output(capsys):
    code = main(["(x-1)^2 + (y-1)^2", "--init", "5,5", "--method", "newton"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Newton" in out
    assert "Trajectory" in out
    assert "Converged at step 1" in out


def test_input_error_exit_code(capsys):
    assert main(["x^2", "--vars", "x", "--init", "1", "--alpha", "-1"]) == 2
    assert "alpha" in capsys.readouterr().err


def test_unknown_method_is_rejected_by_the_parser():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["x^2", "--method", "foo"])


def test_plot_is_saved(tmp_path, capsys):
    target = tmp_path / "path.png"
    assert main(["(x-2)^2 + (y-3)^2", "--plot", str(target)]) == 0
    assert target.exists() and target.stat().st_size > 0
