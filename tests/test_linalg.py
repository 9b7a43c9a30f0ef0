from __future__ import annotations

import numpy as np
import pytest

from symopt.errors import SingularSystemError
from symopt.linalg import LinearSystem, invert, multiply


def test_invert_and_multiply():
    A = np.array([[2.0, 1.0], [1.0, 3.0]])
    A_inv = invert(A)
    assert np.allclose(multiply(A, A_inv), np.eye(2))


def test_linear_system_solve():
    A = np.array([[4.0, 0.0], [0.0, 2.0]])
    b = np.array([8.0, -2.0])
    assert np.allclose(LinearSystem(A, b).solve(), [2.0, -1.0])


@pytest.mark.parametrize(
    "matrix",
    [
        [[2.0, 0.0], [0.0, 0.0]],
        [[1.0, 2.0], [2.0, 4.0]],
        [[0.0]],
        [[1.0, 0.0], [0.0, np.inf]],
        [[1.0, 2.0, 3.0]],
    ],
)
def test_singular_matrices_raise(matrix):
    with pytest.raises(SingularSystemError):
        invert(np.array(matrix))


def test_singular_system_error_is_a_linalg_error():
    with pytest.raises(np.linalg.LinAlgError):
        LinearSystem(np.zeros((2, 2)), np.ones(2)).solve()
