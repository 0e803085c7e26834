"""
The dense matrix primitive shared by every decomposition.

A Matrix is a 2D, C-contiguous float64 ndarray: one buffer with row and
column strides, row-major so that M[i, j] is row i, column j. Kernels
always work on a fresh copy produced by as_matrix(), so the caller's array
is never mutated and never aliased by a result.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_nonempty,
)

Matrix = NDArray[np.float64]


def as_matrix(data: ArrayLike, name: str = 'A') -> Matrix:
    """
    Convert an array-like into a freshly owned, validated Matrix.

    Args:
        data: Nested sequences, ndarray, or anything np.asarray accepts
        name: Parameter name for error messages

    Returns:
        C-contiguous float64 copy of data

    Raises:
        ValidationError: Non-numeric or non-finite input
        DimensionError: Input is not 2D or has a zero dimension
    """
    array = check_array(data, name)
    check_2d(array, name)
    check_nonempty(array, name)
    check_finite(array, name)
    return np.array(array, dtype=np.float64, order='C', copy=True)


def freeze(*arrays: NDArray[Any]) -> None:
    """Mark result arrays read-only so results behave as value objects."""
    for array in arrays:
        array.flags.writeable = False


def max_abs(A: Matrix) -> float:
    """Largest absolute entry, the scale used by relative tolerances."""
    return float(np.max(np.abs(A))) if A.size else 0.0


def is_symmetric(A: Matrix, rtol: float) -> bool:
    """True if A is square and |A - A^T| <= rtol * max|A| entrywise."""
    if A.shape[0] != A.shape[1]:
        return False
    return bool(np.all(np.abs(A - A.T) <= rtol * max_abs(A)))
