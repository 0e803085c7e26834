"""
Exception hierarchy for pydecomp.

All exceptions inherit from PyDecompError so callers can catch any
library-specific failure with a single clause. Every decomposition failure
mode maps onto exactly one class here:

    DimensionError          shape preconditions violated
    SingularMatrixError     LU pivot underflow, singular triangular factor
    RankDeficientError      QR column with (near) zero norm
    NotPositiveDefiniteError  Cholesky negative or zero pivot, asymmetry
    SVDNonConvergenceError  QR sweep cap exceeded in the SVD

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages include the actual offending values
    - A failed decomposition never returns a partial result
"""


class PyDecompError(Exception):
    """Base exception for all pydecomp errors."""
    pass


class ValidationError(PyDecompError):
    """
    Input validation failed.

    Raised when a matrix or right-hand side cannot be converted to a finite
    float64 array.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised for empty matrices, non-square input where a square matrix is
    required, m < n for QR/SVD, and right-hand sides that don't match
    the factored matrix.
    """
    pass


class NumericalError(PyDecompError):
    """
    Numerical computation failed.

    Base class for errors arising from the values of the matrix rather
    than its shape.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when elimination meets a pivot at or below tolerance, or when a
    solve needs to divide by a zero diagonal entry of a triangular factor.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Index of the offending pivot, if known
        pivot_value: Value of the offending pivot, if known
        rank: Numerical rank, if computed
        expected_rank: Expected rank
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        pivot_value: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.pivot_value = pivot_value
        self.rank = rank
        self.expected_rank = expected_rank


class RankDeficientError(SingularMatrixError):
    """
    Columns of the matrix are linearly dependent.

    Raised by QR when the orthogonalized column k has (near) zero norm.
    rank is the number of columns successfully orthogonalized before the
    failure; expected_rank is the number of columns.
    """
    pass


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not symmetric positive definite.

    Raised by Cholesky when a diagonal term goes negative beyond tolerance,
    when a zero diagonal term would be used as a divisor, or when the input
    is not symmetric.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Row at which the factorization broke down
        pivot_value: The (negative or zero) diagonal term at that row
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        pivot_value: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.pivot_value = pivot_value


class ConvergenceError(PyDecompError):
    """
    Iterative algorithm failed to converge.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final residual or off-diagonal magnitude, if known
        reason: Why convergence failed (e.g., 'max_iterations')
        threshold: The iteration cap or tolerance that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class SVDNonConvergenceError(ConvergenceError):
    """
    Implicit-shift QR iteration on the bidiagonal did not converge.

    Attributes:
        index: Position of the singular value being converged when the
               sweep cap was hit
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        index: int | None = None,
        final_change: float | None = None,
        threshold: float | None = None
    ):
        super().__init__(
            message,
            iterations=iterations,
            final_change=final_change,
            reason='max_iterations',
            threshold=threshold,
        )
        self.index = index
