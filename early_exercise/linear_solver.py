# early_exercise/linear_solver.py
"""
Dense square linear solve by Gaussian elimination with partial pivoting.

Used for the regression normal equations, which are tiny ((degree+1) x
(degree+1)) but can be badly conditioned; a near-zero pivot is reported as a
SingularMatrixError instead of returning a meaningless answer.
"""

# Third party imports
import numpy as np

# Local package imports
from .exceptions import SingularMatrixError

PIVOT_TOLERANCE = 1e-10


def solve(A, b, tol=PIVOT_TOLERANCE):
    """
    Solve A x = b for square A.

    A and b are copied; the caller's arrays are left untouched.
    Raises ValueError on shape mismatch and SingularMatrixError when a
    post-pivot diagonal entry is smaller than `tol` in magnitude.
    """
    A = np.array(A, dtype=float)
    b = np.array(b, dtype=float).reshape(-1)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Matrix must be square, got shape {A.shape}")
    n = A.shape[0]
    if b.shape[0] != n:
        raise ValueError(f"Right-hand side has {b.shape[0]} entries, expected {n}")

    for i in range(n):
        pivot_row = i + int(np.argmax(np.abs(A[i:, i])))
        if pivot_row != i:
            A[[i, pivot_row], i:] = A[[pivot_row, i], i:]
            b[[i, pivot_row]] = b[[pivot_row, i]]

        if abs(A[i, i]) < tol:
            raise SingularMatrixError(
                f"Matrix is singular or nearly singular (pivot {A[i, i]:.3e} at column {i})"
            )

        # Eliminate below the pivot
        factors = A[i + 1:, i] / A[i, i]
        A[i + 1:, i:] -= np.outer(factors, A[i, i:])
        b[i + 1:] -= factors * b[i]

    # Back substitution
    x = np.zeros(n)
    for i in range(n - 1, -1, -1):
        x[i] = (b[i] - A[i, i + 1:].dot(x[i + 1:])) / A[i, i]
    return x
