# early_exercise/regression.py
"""
Least-squares continuation-value estimator on a Laguerre polynomial basis.

Coefficients come from the normal equations (A^T A) beta = A^T y solved with
linear_solver.solve. Plain OLS, no regularisation.
"""

from dataclasses import dataclass

# Third party imports
import numpy as np

# Local package imports
from .linear_solver import solve, PIVOT_TOLERANCE


def laguerre_basis(x, degree):
    """
    Laguerre polynomials L_0..L_degree evaluated at x.

    L_0 = 1, L_1 = 1 - x, and for i >= 2
        L_i = ((2i - 1 - x) L_{i-1} - (i - 1) L_{i-2}) / i
    Returns an array of shape (len(x), degree + 1); a scalar x gives one row.
    """
    degree = int(degree)
    if degree < 0:
        raise ValueError("degree must be >= 0")
    x = np.atleast_1d(np.asarray(x, dtype=float)).reshape(-1)
    L = np.empty((x.shape[0], degree + 1))
    L[:, 0] = 1.0
    if degree >= 1:
        L[:, 1] = 1.0 - x
    for i in range(2, degree + 1):
        L[:, i] = ((2.0 * i - 1.0 - x) * L[:, i - 1] - (i - 1.0) * L[:, i - 2]) / i
    return L


@dataclass(frozen=True)
class RegressionFit:
    coefficients: np.ndarray
    fitted: np.ndarray
    r2: float


class RegressionEngine:
    """
    fit(xs, ys, degree) -> coefficients
    evaluate(coefficients, x) -> value(s)

    The caller guarantees len(xs) >= degree + 1; a rank-deficient sample shows
    up as a SingularMatrixError from the solver.
    """

    def __init__(self, tol=PIVOT_TOLERANCE):
        self.tol = float(tol)

    def design_matrix(self, xs, degree):
        return laguerre_basis(xs, degree)

    def fit(self, xs, ys, degree):
        xs = np.asarray(xs, dtype=float).reshape(-1)
        ys = np.asarray(ys, dtype=float).reshape(-1)
        if xs.shape[0] != ys.shape[0] or xs.shape[0] == 0:
            raise ValueError("Invalid regression input: xs and ys must be non-empty and of equal length")

        A = self.design_matrix(xs, degree)
        return solve(A.T @ A, A.T @ ys, tol=self.tol)

    def evaluate(self, coefficients, x):
        coefficients = np.asarray(coefficients, dtype=float)
        values = self.design_matrix(x, coefficients.shape[0] - 1) @ coefficients
        if np.ndim(x) == 0:
            return float(values[0])
        return values

    def fit_result(self, xs, ys, degree):
        """fit() plus fitted values and R^2, for diagnostics."""
        beta = self.fit(xs, ys, degree)
        ys = np.asarray(ys, dtype=float).reshape(-1)
        fitted = self.evaluate(beta, np.asarray(xs, dtype=float).reshape(-1))
        ss_res = float(np.sum((ys - fitted) ** 2))
        ss_tot = float(np.sum((ys - ys.mean()) ** 2)) if ys.size > 1 else 0.0
        r2 = 1.0 - ss_res / ss_tot if ss_tot > 0 else float("nan")
        return RegressionFit(coefficients=beta, fitted=fitted, r2=r2)
