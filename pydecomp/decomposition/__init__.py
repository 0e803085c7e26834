"""
Dense matrix decompositions.

Public API:
    lu(A)        - LU decomposition (Doolittle, no pivoting)
    cholesky(A)  - Cholesky decomposition of an SPD matrix
    qr(A)        - Reduced QR decomposition (modified Gram-Schmidt)
    svd(A)       - Thin SVD (Golub-Kahan-Reinsch)

Each function handles input validation, design construction, backend
selection and result wrapping.

Example:
    >>> from pydecomp.decomposition import lu
    >>> result = lu([[3.0, 1.0, 2.0], [6.0, 3.0, 4.0], [3.0, 1.0, 5.0]])
    >>> float(result.U[2, 2])
    3.0
    >>> x = result.solve([1.0, 2.0, 3.0])
"""

from pydecomp.decomposition.design import MatrixDesign
from pydecomp.decomposition.solution import (
    LUSolution,
    CholeskySolution,
    QRSolution,
    SVDSolution,
)
from pydecomp.decomposition.solvers import lu, cholesky, qr, svd

__all__ = [
    "lu",
    "cholesky",
    "qr",
    "svd",
    "MatrixDesign",
    "LUSolution",
    "CholeskySolution",
    "QRSolution",
    "SVDSolution",
]
