"""
QR decomposition by modified Gram-Schmidt.

Produces the reduced factorization A = QR of a tall, full column rank
matrix: Q (m x n) has orthonormal columns and R (n x n) is upper
triangular with a positive diagonal.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.exceptions import RankDeficientError
from pydecomp.core.matrix import as_matrix, freeze
from pydecomp.core.validation import check_tall
from pydecomp.core.compute.tolerances import default_rank_tol


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Matrix with orthonormal columns (m x n)
        R: Upper triangular matrix (n x n) with positive diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]


def qr_cpu(
    A: ArrayLike,
    *,
    tol: float | None = None,
) -> QRResult:
    """
    QR decomposition using modified Gram-Schmidt.

    Column k is normalized and then projected out of every remaining column
    before those columns are themselves normalized. Projecting from the
    partially orthogonalized columns (rather than from the original columns
    of A, as classical Gram-Schmidt does) keeps Q much closer to
    orthonormal in floating point. No re-orthogonalization is done.

    Args:
        A: Matrix to decompose (m x n), m >= n
        tol: Absolute threshold on the norm of an orthogonalized column.
             Defaults to max(m, n) * eps * (largest column norm of A).

    Returns:
        QRResult with Q @ R == A up to rounding

    Raises:
        DimensionError: If m < n or A is empty
        RankDeficientError: If an orthogonalized column norm is at or
                            below tol
    """
    Q = as_matrix(A, 'A')
    check_tall(Q, 'A')
    m, n = Q.shape

    if tol is None:
        scale = float(np.max(np.linalg.norm(Q, axis=0)))
        tol = default_rank_tol(m, n, scale)

    R = np.zeros((n, n))

    for k in range(n):
        norm = float(np.linalg.norm(Q[:, k]))
        if norm <= tol:
            raise RankDeficientError(
                f"Matrix is rank-deficient: column {k} is linearly dependent "
                f"on columns 0..{k - 1} (residual norm {norm:.3e} <= {tol:.3e})",
                matrix_name='A',
                pivot_index=k,
                pivot_value=norm,
                rank=k,
                expected_rank=n,
            )

        R[k, k] = norm
        Q[:, k] /= norm

        R[k, k + 1:] = Q[:, k] @ Q[:, k + 1:]
        Q[:, k + 1:] -= np.outer(Q[:, k], R[k, k + 1:])

    freeze(Q, R)
    return QRResult(Q=Q, R=R)


def orthogonality_error(Q: NDArray[np.floating[Any]]) -> float:
    """Loss of orthogonality max|Q^T Q - I|."""
    n = Q.shape[1]
    return float(np.max(np.abs(Q.T @ Q - np.eye(n))))
