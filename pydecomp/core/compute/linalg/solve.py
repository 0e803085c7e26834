"""
Linear solves from precomputed factors.

Each solver takes the result of one decomposition and a right-hand side b,
which may be a vector (n,) or a matrix (n, k) of stacked right-hand sides.
Triangular systems are handed to scipy.linalg.solve_triangular after the
diagonal has been checked, so a singular factor surfaces as
SingularMatrixError instead of LinAlgError or Inf.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import solve_triangular

from pydecomp.core.exceptions import SingularMatrixError
from pydecomp.core.validation import check_array, check_finite, check_vector_length
from pydecomp.core.compute.tolerances import EPSILON_64
from pydecomp.core.compute.linalg.lu import LUResult
from pydecomp.core.compute.linalg.cholesky import CholeskyResult
from pydecomp.core.compute.linalg.qr import QRResult
from pydecomp.core.compute.linalg.svd import SVDResult


def _check_rhs(b: ArrayLike, n: int) -> NDArray[np.floating[Any]]:
    b_arr = check_array(b, 'b')
    check_vector_length(b_arr, n, 'b')
    check_finite(b_arr, 'b')
    return np.asarray(b_arr, dtype=np.float64)


def _check_diagonal(T: NDArray[np.floating[Any]], name: str) -> None:
    diag = np.diag(T)
    zero = np.flatnonzero(diag == 0.0)
    if len(zero) > 0:
        i = int(zero[0])
        raise SingularMatrixError(
            f"{name} has a zero diagonal entry at position {i}; "
            f"the factored matrix is singular",
            matrix_name=name,
            pivot_index=i,
            pivot_value=0.0,
            rank=len(diag) - len(zero),
            expected_rank=len(diag),
        )


def lu_solve(factors: LUResult, b: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b given A = LU.

    Forward substitution L y = b (unit diagonal), then back
    substitution U x = y.

    Raises:
        DimensionError: If b does not have n rows
        SingularMatrixError: If U has a zero diagonal entry
    """
    n = factors.U.shape[0]
    b_arr = _check_rhs(b, n)
    _check_diagonal(factors.U, 'U')

    y = solve_triangular(factors.L, b_arr, lower=True, unit_diagonal=True)
    return solve_triangular(factors.U, y, lower=False)


def cholesky_solve(factors: CholeskyResult, b: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b given A = L L^T.

    Raises:
        DimensionError: If b does not have n rows
        SingularMatrixError: If L has a zero diagonal entry
    """
    L = factors.L
    b_arr = _check_rhs(b, L.shape[0])
    _check_diagonal(L, 'L')

    z = solve_triangular(L, b_arr, lower=True)
    return solve_triangular(L.T, z, lower=False)


def qr_solve(factors: QRResult, b: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Least squares min ||A x - b|| given the reduced factorization A = QR.

    The solution is computed as x = R^{-1} Q^T b. For square A this is the
    exact solution of A x = b.

    Raises:
        DimensionError: If b does not have m rows
    """
    Q, R = factors.Q, factors.R
    b_arr = _check_rhs(b, Q.shape[0])
    _check_diagonal(R, 'R')

    Qtb = Q.T @ b_arr
    return solve_triangular(R, Qtb, lower=False)


def _svd_cutoff(S: NDArray[np.floating[Any]], shape: tuple[int, int],
                rcond: float | None) -> float:
    if rcond is None:
        rcond = max(shape) * EPSILON_64
    return rcond * float(S[0]) if len(S) > 0 else 0.0


def svd_pinv(
    factors: SVDResult,
    rcond: float | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Moore-Penrose pseudo-inverse V diag(1/S) U^T.

    Singular values at or below rcond * S[0] are treated as zero.
    rcond defaults to max(m, n) * eps.
    """
    U, S, V = factors.U, factors.S, factors.V
    cutoff = _svd_cutoff(S, (U.shape[0], V.shape[0]), rcond)
    S_inv = np.zeros_like(S)
    keep = S > cutoff
    S_inv[keep] = 1.0 / S[keep]
    return (V * S_inv) @ U.T


def svd_solve(
    factors: SVDResult,
    b: ArrayLike,
    rcond: float | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Minimum-norm least squares solution x = A^+ b.

    Unlike lu_solve/qr_solve this never raises for a rank-deficient
    matrix; directions with negligible singular values are dropped.

    Raises:
        DimensionError: If b does not have m rows
    """
    b_arr = _check_rhs(b, factors.U.shape[0])
    return svd_pinv(factors, rcond) @ b_arr
