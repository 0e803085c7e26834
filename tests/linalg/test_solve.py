"""
Tests for solves, least squares and determinants from precomputed factors.
"""

import numpy as np
import pytest

from pydecomp.core.compute.linalg import (
    cholesky_cpu,
    cholesky_logdet,
    cholesky_solve,
    lu_cpu,
    lu_det,
    lu_slogdet,
    lu_solve,
    qr_cpu,
    qr_solve,
    svd_cpu,
    svd_pinv,
    svd_solve,
)
from pydecomp.core.exceptions import DimensionError, SingularMatrixError, ValidationError


class TestLUSolve:

    def test_vector_rhs(self, diagonally_dominant, rng):
        b = rng.standard_normal(8)
        x = lu_solve(lu_cpu(diagonally_dominant), b)
        np.testing.assert_allclose(x, np.linalg.solve(diagonally_dominant, b), rtol=1e-10)

    def test_matrix_rhs(self, diagonally_dominant, rng):
        B = rng.standard_normal((8, 3))
        X = lu_solve(lu_cpu(diagonally_dominant), B)
        assert X.shape == (8, 3)
        np.testing.assert_allclose(diagonally_dominant @ X, B, atol=1e-10)

    def test_singular_last_pivot_rejected(self):
        factors = lu_cpu([[1.0, 2.0], [2.0, 4.0]])
        with pytest.raises(SingularMatrixError, match="zero diagonal") as exc_info:
            lu_solve(factors, [1.0, 1.0])
        assert exc_info.value.pivot_index == 1
        assert exc_info.value.rank == 1

    def test_wrong_length(self, diagonally_dominant):
        with pytest.raises(DimensionError, match="expected 8 rows"):
            lu_solve(lu_cpu(diagonally_dominant), np.ones(7))

    def test_non_finite_rhs(self, diagonally_dominant):
        b = np.ones(8)
        b[3] = np.inf
        with pytest.raises(ValidationError, match="Inf"):
            lu_solve(lu_cpu(diagonally_dominant), b)


class TestCholeskySolve:

    def test_vector_rhs(self, spd_matrix, rng):
        b = rng.standard_normal(6)
        x = cholesky_solve(cholesky_cpu(spd_matrix), b)
        np.testing.assert_allclose(spd_matrix @ x, b, atol=1e-10)

    def test_semidefinite_factor_rejected(self):
        factors = cholesky_cpu([[1.0, 1.0], [1.0, 1.0]])
        with pytest.raises(SingularMatrixError):
            cholesky_solve(factors, [1.0, 2.0])


class TestQRSolve:

    def test_least_squares_matches_lstsq(self, tall_matrix, rng):
        b = rng.standard_normal(30)
        x = qr_solve(qr_cpu(tall_matrix), b)
        expected = np.linalg.lstsq(tall_matrix, b, rcond=None)[0]
        np.testing.assert_allclose(x, expected, rtol=1e-10, atol=1e-12)

    def test_residual_orthogonal_to_columns(self, tall_matrix, rng):
        b = rng.standard_normal(30)
        x = qr_solve(qr_cpu(tall_matrix), b)
        residual = b - tall_matrix @ x
        np.testing.assert_allclose(tall_matrix.T @ residual, 0.0, atol=1e-10)

    def test_square_exact(self, diagonally_dominant, rng):
        b = rng.standard_normal(8)
        x = qr_solve(qr_cpu(diagonally_dominant), b)
        np.testing.assert_allclose(diagonally_dominant @ x, b, atol=1e-10)

    def test_rhs_must_have_m_rows(self, tall_matrix):
        with pytest.raises(DimensionError, match="expected 30 rows"):
            qr_solve(qr_cpu(tall_matrix), np.ones(5))


class TestSVDSolve:

    def test_pinv_matches_numpy(self, tall_matrix):
        np.testing.assert_allclose(
            svd_pinv(svd_cpu(tall_matrix)), np.linalg.pinv(tall_matrix),
            rtol=1e-9, atol=1e-12,
        )

    def test_pinv_shape(self, tall_matrix):
        assert svd_pinv(svd_cpu(tall_matrix)).shape == (5, 30)

    def test_full_rank_least_squares(self, tall_matrix, rng):
        b = rng.standard_normal(30)
        x = svd_solve(svd_cpu(tall_matrix), b)
        expected = np.linalg.lstsq(tall_matrix, b, rcond=None)[0]
        np.testing.assert_allclose(x, expected, rtol=1e-9, atol=1e-12)

    def test_minimum_norm_for_rank_deficient(self, collinear_matrix):
        """x3 = x1 + x2: the solution has no component along (1, 1, -1)."""
        b = collinear_matrix @ np.array([1.0, 1.0, 0.0])
        x = svd_solve(svd_cpu(collinear_matrix), b)
        np.testing.assert_allclose(collinear_matrix @ x, b, atol=1e-9)
        assert abs(x @ np.array([1.0, 1.0, -1.0])) < 1e-9
        np.testing.assert_allclose(x, [1.0 / 3, 1.0 / 3, 2.0 / 3], atol=1e-9)

    def test_zero_matrix_pinv_is_zero(self):
        np.testing.assert_array_equal(svd_pinv(svd_cpu(np.zeros((3, 2)))), 0.0)

    def test_large_rcond_truncates(self):
        A = np.diag([10.0, 1.0])
        P = svd_pinv(svd_cpu(A), rcond=0.5)
        np.testing.assert_allclose(P, np.diag([0.1, 0.0]), atol=1e-15)


class TestDeterminants:

    def test_lu_det(self):
        A = [[3.0, 1.0, 2.0], [6.0, 3.0, 4.0], [3.0, 1.0, 5.0]]
        assert lu_det(lu_cpu(A)) == pytest.approx(9.0)

    def test_lu_det_matches_numpy(self, diagonally_dominant):
        assert lu_det(lu_cpu(diagonally_dominant)) == pytest.approx(
            np.linalg.det(diagonally_dominant), rel=1e-10
        )

    def test_lu_slogdet_negative(self):
        sign, logdet = lu_slogdet(lu_cpu([[2.0, 1.0], [1.0, -3.0]]))
        assert sign == -1.0
        assert logdet == pytest.approx(np.log(7.0))

    def test_lu_slogdet_singular(self):
        sign, logdet = lu_slogdet(lu_cpu([[1.0, 2.0], [2.0, 4.0]]))
        assert sign == 0.0
        assert logdet == float('-inf')

    def test_cholesky_logdet(self, spd_matrix):
        expected = np.linalg.slogdet(spd_matrix)[1]
        assert cholesky_logdet(cholesky_cpu(spd_matrix)) == pytest.approx(expected, rel=1e-12)

    def test_cholesky_logdet_classic(self):
        A = [[4.0, 12.0, -16.0], [12.0, 37.0, -43.0], [-16.0, -43.0, 98.0]]
        assert cholesky_logdet(cholesky_cpu(A)) == pytest.approx(np.log(36.0))

    def test_cholesky_logdet_semidefinite(self):
        assert cholesky_logdet(cholesky_cpu([[1.0, 1.0], [1.0, 1.0]])) == float('-inf')
