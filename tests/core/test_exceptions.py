"""
Tests for pydecomp exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyDecompError)
    - Diagnostic attributes on SingularMatrixError, RankDeficientError,
      NotPositiveDefiniteError, ConvergenceError, SVDNonConvergenceError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pydecomp.core.exceptions import (
    ConvergenceError,
    DimensionError,
    NotPositiveDefiniteError,
    NumericalError,
    PyDecompError,
    RankDeficientError,
    SingularMatrixError,
    SVDNonConvergenceError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyDecompError."""

    def test_validation_error_is_pydecomp_error(self):
        with pytest.raises(PyDecompError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_singular_matrix_error_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise SingularMatrixError("singular")

    def test_rank_deficient_is_singular_matrix_error(self):
        with pytest.raises(SingularMatrixError):
            raise RankDeficientError("dependent columns")

    def test_not_positive_definite_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise NotPositiveDefiniteError("not PD")

    def test_not_positive_definite_is_not_singular(self):
        assert not isinstance(NotPositiveDefiniteError("x"), SingularMatrixError)

    def test_svd_nonconvergence_is_convergence_error(self):
        with pytest.raises(ConvergenceError):
            raise SVDNonConvergenceError("stuck", iterations=30)

    def test_convergence_error_is_not_numerical_error(self):
        """ConvergenceError inherits from PyDecompError, not NumericalError."""
        err = ConvergenceError("did not converge", iterations=100)
        assert not isinstance(err, NumericalError)
        assert isinstance(err, PyDecompError)


# ═══════════════════════════════════════════════════════════════════════
# SingularMatrixError / RankDeficientError
# ═══════════════════════════════════════════════════════════════════════


class TestSingularMatrixError:
    """SingularMatrixError carries pivot and rank diagnostics."""

    def test_all_attributes(self):
        err = SingularMatrixError(
            "zero pivot",
            matrix_name="A",
            pivot_index=2,
            pivot_value=1e-20,
            rank=2,
            expected_rank=3,
        )
        assert str(err) == "zero pivot"
        assert err.matrix_name == "A"
        assert err.pivot_index == 2
        assert err.pivot_value == 1e-20
        assert err.rank == 2
        assert err.expected_rank == 3

    def test_defaults_are_none(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.pivot_index is None
        assert err.pivot_value is None
        assert err.rank is None
        assert err.expected_rank is None

    def test_rank_deficient_carries_rank(self):
        with pytest.raises(RankDeficientError) as exc_info:
            raise RankDeficientError("dependent", rank=1, expected_rank=3)
        assert exc_info.value.rank == 1
        assert exc_info.value.expected_rank == 3


# ═══════════════════════════════════════════════════════════════════════
# NotPositiveDefiniteError
# ═══════════════════════════════════════════════════════════════════════


class TestNotPositiveDefiniteError:

    def test_all_attributes(self):
        err = NotPositiveDefiniteError(
            "negative pivot",
            matrix_name="Sigma",
            pivot_index=1,
            pivot_value=-0.5,
        )
        assert str(err) == "negative pivot"
        assert err.matrix_name == "Sigma"
        assert err.pivot_index == 1
        assert err.pivot_value == -0.5

    def test_defaults_are_none(self):
        err = NotPositiveDefiniteError("not PD")
        assert err.matrix_name is None
        assert err.pivot_index is None
        assert err.pivot_value is None


# ═══════════════════════════════════════════════════════════════════════
# ConvergenceError / SVDNonConvergenceError
# ═══════════════════════════════════════════════════════════════════════


class TestConvergenceError:

    def test_all_attributes(self):
        err = ConvergenceError(
            "did not converge",
            iterations=500,
            final_change=1e-4,
            reason="max_iterations",
            threshold=1e-8,
        )
        assert err.iterations == 500
        assert err.final_change == 1e-4
        assert err.reason == "max_iterations"
        assert err.threshold == 1e-8

    def test_required_iterations(self):
        err = ConvergenceError("failed", 42)
        assert err.iterations == 42
        assert err.final_change is None
        assert err.reason is None

    def test_svd_nonconvergence_reason_is_max_iterations(self):
        err = SVDNonConvergenceError("stuck", iterations=30, index=4, threshold=30.0)
        assert err.reason == "max_iterations"
        assert err.iterations == 30
        assert err.index == 4
        assert err.threshold == 30.0

    def test_svd_nonconvergence_index_default(self):
        err = SVDNonConvergenceError("stuck", iterations=0)
        assert err.index is None
