"""
Input validation utilities for pydecomp.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pydecomp.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (ragged rows, mixed types) or a
    non-numeric dtype. Integer and boolean input is promoted to float64.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating ragged rows or non-numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: complex dtype {result.dtype}, only real matrices are supported"
        )

    if not (np.issubdtype(result.dtype, np.number) or result.dtype == np.bool_):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_nonempty(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array has at least one row and one column.

    Raises:
        DimensionError: If either dimension is zero
    """
    m, n = array.shape
    if m == 0 or n == 0:
        raise DimensionError(
            f"{name}: empty matrix with shape ({m}, {n}), need at least 1x1"
        )


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Raises:
        DimensionError: If rows != columns
    """
    m, n = array.shape
    if m != n:
        raise DimensionError(
            f"{name}: expected square matrix, got shape ({m}, {n})"
        )


def check_tall(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array has at least as many rows as columns.

    Raises:
        DimensionError: If rows < columns
    """
    m, n = array.shape
    if m < n:
        raise DimensionError(
            f"{name}: expected m >= n, got shape ({m}, {n}). "
            f"Factor the transpose instead."
        )


def check_vector_length(
    b: NDArray[np.floating[Any]],
    expected: int,
    name: str,
) -> None:
    """
    Verify a right-hand side has the expected number of rows.

    Accepts a vector (expected,) or a matrix (expected, k).

    Raises:
        DimensionError: If b is not 1D/2D or its first dimension is wrong
    """
    if b.ndim not in (1, 2):
        raise DimensionError(
            f"{name}: expected 1D or 2D right-hand side, got {b.ndim}D with shape {b.shape}"
        )
    if b.shape[0] != expected:
        raise DimensionError(
            f"{name}: expected {expected} rows, got {b.shape[0]}"
        )
