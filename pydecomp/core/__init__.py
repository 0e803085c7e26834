"""
Core infrastructure for pydecomp.

This module provides shared abstractions, utilities, and the numeric
kernels used by the decomposition domain.

Key components:
    matrix: The dense matrix primitive (as_matrix)
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Device detection, timing, tolerances, decomposition kernels
"""

from pydecomp.core.protocols import Backend
from pydecomp.core.result import Result
from pydecomp.core.matrix import Matrix, as_matrix
from pydecomp.core.exceptions import (
    PyDecompError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    RankDeficientError,
    NotPositiveDefiniteError,
    ConvergenceError,
    SVDNonConvergenceError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Matrix primitive
    "Matrix",
    "as_matrix",
    # Exceptions
    "PyDecompError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "RankDeficientError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
    "SVDNonConvergenceError",
]
