"""
Determinants from triangular factors.

det(A) = prod(diag(U)) for A = LU (L has a unit diagonal), and
log det(A) = 2 sum(log diag(L)) for A = L L^T. The log form is the one to
use for large SPD matrices, whose determinant overflows long before the
factorization has any trouble.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pydecomp.core.compute.linalg.lu import LUResult
from pydecomp.core.compute.linalg.cholesky import CholeskyResult


def lu_det(factors: LUResult) -> float:
    """Determinant of A from its LU factors."""
    return float(np.prod(np.diag(factors.U)))


def lu_slogdet(factors: LUResult) -> tuple[float, float]:
    """
    Sign and log of |det(A)| from the LU factors.

    Returns:
        (sign, logabsdet) with sign in {-1.0, 0.0, 1.0}; logabsdet is -inf
        when the determinant is zero, matching numpy.linalg.slogdet.
    """
    diag = np.diag(factors.U)
    if np.any(diag == 0.0):
        return 0.0, float('-inf')
    sign = float(np.prod(np.sign(diag)))
    return sign, float(np.sum(np.log(np.abs(diag))))


def cholesky_logdet(factors: CholeskyResult) -> float:
    """Log-determinant of an SPD matrix from its Cholesky factor."""
    diag: NDArray[np.floating[Any]] = np.diag(factors.L)
    if np.any(diag == 0.0):
        return float('-inf')
    return float(2.0 * np.sum(np.log(diag)))
