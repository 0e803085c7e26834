"""
Cholesky decomposition of symmetric positive definite matrices.

Row-oriented (Cholesky-Banachiewicz) factorization A = L L^T. Unlike the
textbook sqrt(max(sum, 0)) form, a negative diagonal term beyond rounding
noise is reported instead of being clamped away.
"""

from dataclasses import dataclass
from typing import Any
import math
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.exceptions import NotPositiveDefiniteError
from pydecomp.core.matrix import as_matrix, freeze, is_symmetric, max_abs
from pydecomp.core.validation import check_square
from pydecomp.core.compute.tolerances import CHOLESKY_NEGATIVE_TOL, SYMMETRY_RTOL


@dataclass(frozen=True)
class CholeskyResult:
    """
    Result of Cholesky decomposition.

    Attributes:
        L: Lower triangular factor (n x n) with non-negative diagonal
    """
    L: NDArray[np.floating[Any]]


def cholesky_cpu(
    A: ArrayLike,
    *,
    tol: float = CHOLESKY_NEGATIVE_TOL,
    symmetry_rtol: float = SYMMETRY_RTOL,
) -> CholeskyResult:
    """
    Cholesky decomposition A = L L^T.

    For row i and column j <= i:
        s = A[i, j] - L[i, :j] . L[j, :j]
        L[i, i] = sqrt(s)          (i == j)
        L[i, j] = s / L[j, j]      (j < i)

    Args:
        A: Symmetric positive definite matrix (n x n). Only the lower
           triangle is read once symmetry has been checked.
        tol: Relative noise level. Diagonal terms in [-tol * max|A|, 0)
             are clamped to zero; anything below raises.
        symmetry_rtol: Accepted relative asymmetry.

    Returns:
        CholeskyResult with L @ L.T == A up to rounding

    Raises:
        DimensionError: If A is not square or is empty
        NotPositiveDefiniteError: If A is not symmetric, a diagonal term is
            below -tol * max|A|, or a zero diagonal term would be used as divisor
    """
    A = as_matrix(A, 'A')
    check_square(A, 'A')
    n = A.shape[0]

    if not is_symmetric(A, symmetry_rtol):
        asym = float(np.max(np.abs(A - A.T)))
        raise NotPositiveDefiniteError(
            f"Matrix is not symmetric: max|A - A^T| = {asym:.3e} "
            f"exceeds {symmetry_rtol:.1e} * max|A| = {symmetry_rtol * max_abs(A):.3e}",
            matrix_name='A',
        )

    noise = tol * max_abs(A)
    L = np.zeros((n, n))

    for i in range(n):
        for j in range(i + 1):
            s = A[i, j] - float(L[i, :j] @ L[j, :j])

            if i == j:
                if s < -noise:
                    raise NotPositiveDefiniteError(
                        f"Matrix is not positive definite: diagonal term "
                        f"{s:.6e} at row {i} is negative (below -{noise:.3e})",
                        matrix_name='A',
                        pivot_index=i,
                        pivot_value=s,
                    )
                L[i, i] = math.sqrt(max(s, 0.0))
            else:
                if L[j, j] == 0.0:
                    raise NotPositiveDefiniteError(
                        f"Matrix is singular (positive semi-definite at best): "
                        f"zero diagonal L[{j},{j}] needed to eliminate row {i}",
                        matrix_name='A',
                        pivot_index=j,
                        pivot_value=0.0,
                    )
                L[i, j] = s / L[j, j]

    freeze(L)
    return CholeskyResult(L=L)
