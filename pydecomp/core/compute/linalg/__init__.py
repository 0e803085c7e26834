"""
Linear algebra kernels for pydecomp.

Reference CPU implementations of the four dense decompositions plus the
routines that consume their factors.

All functions follow these conventions:
    - Inputs are validated and copied; the caller's array is never touched
    - Each decomposition returns a frozen result dataclass with read-only arrays
    - Failures raise a typed exception immediately; no NaN/Inf in results

Submodules:
    lu: LU decomposition (Doolittle, no pivoting)
    cholesky: Cholesky decomposition
    qr: QR decomposition (modified Gram-Schmidt)
    svd: Singular value decomposition (Golub-Kahan-Reinsch)
    solve: Solves and least squares from the factors
    determinant: Determinants and log-determinants from the factors
"""

from pydecomp.core.compute.linalg.lu import LUResult, lu_cpu
from pydecomp.core.compute.linalg.cholesky import CholeskyResult, cholesky_cpu
from pydecomp.core.compute.linalg.qr import QRResult, qr_cpu, orthogonality_error
from pydecomp.core.compute.linalg.svd import SVDResult, svd_cpu
from pydecomp.core.compute.linalg.solve import (
    lu_solve,
    cholesky_solve,
    qr_solve,
    svd_solve,
    svd_pinv,
)
from pydecomp.core.compute.linalg.determinant import (
    lu_det,
    lu_slogdet,
    cholesky_logdet,
)

__all__ = [
    # LU decomposition
    "LUResult",
    "lu_cpu",
    # Cholesky decomposition
    "CholeskyResult",
    "cholesky_cpu",
    # QR decomposition
    "QRResult",
    "qr_cpu",
    "orthogonality_error",
    # Singular value decomposition
    "SVDResult",
    "svd_cpu",
    # Solvers
    "lu_solve",
    "cholesky_solve",
    "qr_solve",
    "svd_solve",
    "svd_pinv",
    # Determinants
    "lu_det",
    "lu_slogdet",
    "cholesky_logdet",
]
