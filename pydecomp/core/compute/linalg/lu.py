"""
LU decomposition by Doolittle elimination.

Factors a square matrix A = LU with L unit lower triangular and U upper
triangular. No pivoting is performed: a pivot at or below tolerance is a
hard failure rather than a source of Inf/NaN in the factors.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.exceptions import SingularMatrixError
from pydecomp.core.matrix import as_matrix, freeze, max_abs
from pydecomp.core.validation import check_square
from pydecomp.core.compute.tolerances import default_pivot_tol


@dataclass(frozen=True)
class LUResult:
    """
    Result of LU decomposition.

    Attributes:
        L: Unit lower triangular matrix (n x n)
        U: Upper triangular matrix (n x n)
    """
    L: NDArray[np.floating[Any]]
    U: NDArray[np.floating[Any]]


def lu_cpu(
    A: ArrayLike,
    *,
    pivot_tol: float | None = None,
) -> LUResult:
    """
    LU decomposition without pivoting.

    For each column k < n-1 the multipliers L[k+1:, k] = U[k+1:, k] / U[k, k]
    are formed and the scaled pivot row is subtracted from every row below.

    Args:
        A: Square matrix (n x n)
        pivot_tol: Absolute threshold for |U[k, k]|. Defaults to
                   n * eps * max|A|.

    Returns:
        LUResult with L @ U == A up to rounding

    Raises:
        DimensionError: If A is not square or is empty
        SingularMatrixError: If a pivot used as divisor is at or below
                             pivot_tol

    Note:
        The last pivot U[n-1, n-1] is never divided by here, so a singular
        matrix whose leading (n-1) x (n-1) block is regular still factors.
        lu_solve() rejects such factors.
    """
    U = as_matrix(A, 'A')
    check_square(U, 'A')
    n = U.shape[0]

    if pivot_tol is None:
        pivot_tol = default_pivot_tol(n, max_abs(U))

    L = np.eye(n)

    for k in range(n - 1):
        pivot = U[k, k]
        if abs(pivot) <= pivot_tol:
            raise SingularMatrixError(
                f"Zero pivot at position {k}: |U[{k},{k}]| = {abs(pivot):.3e} "
                f"<= {pivot_tol:.3e}. LU without pivoting requires every "
                f"leading principal submatrix to be non-singular.",
                matrix_name='A',
                pivot_index=k,
                pivot_value=float(pivot),
            )

        L[k + 1:, k] = U[k + 1:, k] / pivot
        U[k + 1:, k:] -= np.outer(L[k + 1:, k], U[k, k:])
        U[k + 1:, k] = 0.0

    freeze(L, U)
    return LUResult(L=L, U=U)
