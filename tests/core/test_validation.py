"""
Tests for input validation utilities and the matrix primitive.

Validates:
    - check_array: conversion, dtype coercion, object/complex/string rejection
    - check_finite: NaN/Inf detection
    - check_2d / check_nonempty / check_square / check_tall
    - check_vector_length: right-hand side shape checks
    - as_matrix: fresh contiguous float64 copies
"""

import numpy as np
import pytest

from pydecomp.core.exceptions import DimensionError, ValidationError
from pydecomp.core.validation import (
    check_2d,
    check_array,
    check_finite,
    check_nonempty,
    check_square,
    check_tall,
    check_vector_length,
)
from pydecomp.core.matrix import (
    as_matrix,
    is_symmetric,
    max_abs,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:

    def test_nested_list_to_float(self):
        result = check_array([[1, 2], [3, 4]], "A")
        assert result.shape == (2, 2)
        assert np.issubdtype(result.dtype, np.floating)

    def test_bool_promoted_to_float(self):
        result = check_array(np.array([[True, False]]), "A")
        assert result.dtype == np.float64

    def test_rejects_ragged_rows(self):
        with pytest.raises(ValidationError, match="A"):
            check_array([[1.0, 2.0], [3.0]], "A")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array([["a", "b"], ["c", "d"]], "A")

    def test_rejects_complex(self):
        with pytest.raises(ValidationError, match="complex"):
            check_array(np.array([[1 + 2j]]), "A")


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([[1.0, 2.0]]), "A")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([[1.0, np.nan]]), "A")

    def test_inf_rejected(self):
        with pytest.raises(ValidationError, match="1 Inf"):
            check_finite(np.array([[-np.inf, 1.0]]), "A")


# ═══════════════════════════════════════════════════════════════════════
# Shape checks
# ═══════════════════════════════════════════════════════════════════════


class TestShapeChecks:

    def test_2d_rejects_vector(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.ones(3), "A")

    def test_nonempty_rejects_zero_rows(self):
        with pytest.raises(DimensionError, match="empty"):
            check_nonempty(np.ones((0, 3)), "A")

    def test_nonempty_rejects_zero_cols(self):
        with pytest.raises(DimensionError, match="empty"):
            check_nonempty(np.ones((3, 0)), "A")

    def test_square_passes(self):
        check_square(np.ones((3, 3)), "A")

    def test_square_rejects_rectangular(self):
        with pytest.raises(DimensionError, match=r"\(2, 3\)"):
            check_square(np.ones((2, 3)), "A")

    def test_tall_accepts_square(self):
        check_tall(np.ones((3, 3)), "A")

    def test_tall_rejects_wide(self):
        with pytest.raises(DimensionError, match="m >= n"):
            check_tall(np.ones((2, 3)), "A")

    def test_vector_length_accepts_matrix_rhs(self):
        check_vector_length(np.ones((4, 2)), 4, "b")

    def test_vector_length_rejects_wrong_rows(self):
        with pytest.raises(DimensionError, match="expected 4 rows, got 3"):
            check_vector_length(np.ones(3), 4, "b")

    def test_vector_length_rejects_3d(self):
        with pytest.raises(DimensionError):
            check_vector_length(np.ones((4, 1, 1)), 4, "b")


# ═══════════════════════════════════════════════════════════════════════
# Matrix primitive
# ═══════════════════════════════════════════════════════════════════════


class TestAsMatrix:

    def test_returns_contiguous_float64(self):
        M = as_matrix([[1, 2], [3, 4]])
        assert M.dtype == np.float64
        assert M.flags.c_contiguous

    def test_never_aliases_input(self):
        A = np.array([[1.0, 2.0], [3.0, 4.0]])
        M = as_matrix(A)
        assert not np.shares_memory(A, M)
        M[0, 0] = 99.0
        assert A[0, 0] == 1.0

    def test_fortran_input_becomes_c_order(self):
        A = np.asfortranarray(np.arange(6.0).reshape(2, 3))
        M = as_matrix(A)
        assert M.flags.c_contiguous
        np.testing.assert_array_equal(M, A)

    def test_rejects_empty(self):
        with pytest.raises(DimensionError):
            as_matrix(np.zeros((0, 0)))

    def test_rejects_nan(self):
        with pytest.raises(ValidationError):
            as_matrix([[np.nan]])

    def test_error_uses_name(self):
        with pytest.raises(DimensionError, match="my_matrix"):
            as_matrix([1.0, 2.0], "my_matrix")


class TestMatrixPredicates:

    def test_max_abs(self):
        assert max_abs(np.array([[1.0, -7.0], [3.0, 2.0]])) == 7.0

    def test_symmetric(self):
        A = np.array([[2.0, 1.0], [1.0, 3.0]])
        assert is_symmetric(A, 1e-12)
        A[0, 1] = 1.1
        assert not is_symmetric(A, 1e-12)

    def test_rectangular_not_symmetric(self):
        assert not is_symmetric(np.ones((2, 3)), 1e-12)
