"""
pydecomp: dense matrix decompositions for Python.

LU, Cholesky, QR and singular value decompositions of real matrices with
typed failures instead of NaN, CPU reference kernels and optional GPU
acceleration through PyTorch.

Submodules:
    decomposition: lu(), cholesky(), qr(), svd() and their solution types
    core: Matrix primitive, kernels, exceptions, Result envelope
"""

__version__ = "0.1.0"
__author__ = "pydecomp developers"

from pydecomp import decomposition
from pydecomp.decomposition import lu, cholesky, qr, svd
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
    "__version__",
    "decomposition",
    "lu",
    "cholesky",
    "qr",
    "svd",
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
