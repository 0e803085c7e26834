"""
Tests for the LU kernel (Doolittle, no pivoting).
"""

import numpy as np
import pytest

from pydecomp.core.compute.linalg import lu_cpu
from pydecomp.core.exceptions import DimensionError, SingularMatrixError, ValidationError


class TestKnownFactors:

    def test_hand_computed_example(self):
        A = [[3.0, 1.0, 2.0], [6.0, 3.0, 4.0], [3.0, 1.0, 5.0]]
        result = lu_cpu(A)
        np.testing.assert_allclose(
            result.L, [[1.0, 0.0, 0.0], [2.0, 1.0, 0.0], [1.0, 0.0, 1.0]]
        )
        np.testing.assert_allclose(
            result.U, [[3.0, 1.0, 2.0], [0.0, 1.0, 0.0], [0.0, 0.0, 3.0]]
        )

    def test_one_by_one(self):
        result = lu_cpu([[5.0]])
        np.testing.assert_array_equal(result.L, [[1.0]])
        np.testing.assert_array_equal(result.U, [[5.0]])

    def test_identity(self):
        result = lu_cpu(np.eye(4))
        np.testing.assert_array_equal(result.L, np.eye(4))
        np.testing.assert_array_equal(result.U, np.eye(4))


class TestStructure:

    def test_reconstruction(self, diagonally_dominant):
        result = lu_cpu(diagonally_dominant)
        np.testing.assert_allclose(result.L @ result.U, diagonally_dominant,
                                   rtol=1e-12, atol=1e-12)

    def test_l_is_unit_lower_triangular(self, diagonally_dominant):
        L = lu_cpu(diagonally_dominant).L
        np.testing.assert_array_equal(np.triu(L, k=1), 0.0)
        np.testing.assert_array_equal(np.diag(L), 1.0)

    def test_u_is_exactly_upper_triangular(self, diagonally_dominant):
        U = lu_cpu(diagonally_dominant).U
        np.testing.assert_array_equal(np.tril(U, k=-1), 0.0)

    def test_input_not_mutated(self, diagonally_dominant):
        original = diagonally_dominant.copy()
        lu_cpu(diagonally_dominant)
        np.testing.assert_array_equal(diagonally_dominant, original)

    def test_factors_are_read_only(self, diagonally_dominant):
        result = lu_cpu(diagonally_dominant)
        assert not result.L.flags.writeable
        assert not result.U.flags.writeable
        assert not np.shares_memory(result.U, diagonally_dominant)

    def test_integer_input(self):
        result = lu_cpu([[2, 1], [4, 5]])
        assert result.U.dtype == np.float64
        np.testing.assert_allclose(result.U, [[2.0, 1.0], [0.0, 3.0]])


class TestSingular:

    def test_zero_leading_pivot(self):
        with pytest.raises(SingularMatrixError, match="Zero pivot at position 0") as exc_info:
            lu_cpu([[0.0, 1.0], [1.0, 0.0]])
        assert exc_info.value.pivot_index == 0
        assert exc_info.value.pivot_value == 0.0
        assert exc_info.value.matrix_name == 'A'

    def test_zero_interior_pivot(self):
        A = [[1.0, 2.0, 3.0], [2.0, 4.0, 1.0], [1.0, 1.0, 1.0]]
        with pytest.raises(SingularMatrixError) as exc_info:
            lu_cpu(A)
        assert exc_info.value.pivot_index == 1

    def test_relative_default_tolerance(self):
        """A pivot of 1e-20 next to O(1) entries is rounding noise."""
        with pytest.raises(SingularMatrixError):
            lu_cpu([[1e-20, 1.0], [1.0, 1.0]])

    def test_small_matrix_scaled_is_fine(self):
        """Uniformly tiny matrices are not singular."""
        A = 1e-20 * np.array([[2.0, 1.0], [1.0, 3.0]])
        result = lu_cpu(A)
        np.testing.assert_allclose(result.L @ result.U, A, rtol=1e-12)

    def test_explicit_pivot_tol(self):
        A = [[1e-3, 1.0], [1.0, 1.0]]
        lu_cpu(A)
        with pytest.raises(SingularMatrixError):
            lu_cpu(A, pivot_tol=1e-2)

    def test_last_pivot_not_checked(self):
        """The final pivot is never a divisor, so a singular matrix can factor."""
        result = lu_cpu([[1.0, 2.0], [2.0, 4.0]])
        assert result.U[1, 1] == 0.0

    def test_zero_matrix(self):
        with pytest.raises(SingularMatrixError):
            lu_cpu(np.zeros((3, 3)))


class TestValidation:

    def test_rectangular_rejected(self):
        with pytest.raises(DimensionError, match="square"):
            lu_cpu(np.ones((3, 2)))

    def test_empty_rejected(self):
        with pytest.raises(DimensionError):
            lu_cpu(np.zeros((0, 0)))

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="NaN"):
            lu_cpu([[1.0, np.nan], [0.0, 1.0]])

    def test_vector_rejected(self):
        with pytest.raises(DimensionError):
            lu_cpu([1.0, 2.0])
