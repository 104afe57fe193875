import numpy as np
import pytest

from early_exercise import solve, SingularMatrixError, PricingError


def test_solves_known_system():
    A = np.array([[2.0, 1.0, -1.0],
                  [-3.0, -1.0, 2.0],
                  [-2.0, 1.0, 2.0]])
    b = np.array([8.0, -11.0, -3.0])
    x = solve(A, b)
    np.testing.assert_allclose(x, [2.0, 3.0, -1.0], rtol=1e-12, atol=1e-12)


def test_needs_pivoting():
    # zero in the leading position: fails without a row swap
    A = np.array([[0.0, 1.0], [1.0, 1.0]])
    b = np.array([2.0, 3.0])
    np.testing.assert_allclose(solve(A, b), [1.0, 2.0])


def test_random_system_residual():
    rng = np.random.default_rng(7)
    A = rng.standard_normal((6, 6)) + 6.0 * np.eye(6)
    b = rng.standard_normal(6)
    x = solve(A, b)
    np.testing.assert_allclose(A @ x, b, atol=1e-10)


def test_inputs_not_mutated():
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    b = np.array([5.0, 6.0])
    A_copy, b_copy = A.copy(), b.copy()
    solve(A, b)
    np.testing.assert_array_equal(A, A_copy)
    np.testing.assert_array_equal(b, b_copy)


def test_singular_matrix_raises():
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    with pytest.raises(SingularMatrixError):
        solve(A, [1.0, 2.0])


def test_nearly_singular_matrix_raises():
    A = np.array([[1.0, 1.0], [1.0, 1.0 + 1e-12]])
    with pytest.raises(PricingError):
        solve(A, [1.0, 1.0])


@pytest.mark.parametrize("A,b", [
    (np.ones((2, 3)), np.ones(2)),
    (np.eye(3), np.ones(2)),
])
def test_shape_mismatch(A, b):
    with pytest.raises(ValueError):
        solve(A, b)
