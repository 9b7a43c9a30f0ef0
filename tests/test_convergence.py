from __future__ import annotations

import pytest

from symopt.convergence import displacement, has_converged


def test_displacement_is_euclidean():
    assert displacement([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)
    assert displacement([1.0], [1.0]) == 0.0


def test_has_converged_is_strict():
    assert has_converged([0.0, 0.0], [0.0, 1e-7], 1e-6)
    assert not has_converged([0.0, 0.0], [3.0, 4.0], 5.0)
    assert has_converged([0.0, 0.0], [3.0, 4.0], 5.0 + 1e-9)


def test_dimension_mismatch():
    with pytest.raises(AssertionError):
        displacement([0.0], [0.0, 1.0])
