"""
CPU reference backends for the four decompositions.

Thin wrappers around the kernels in core.compute.linalg that add timing,
diagnostics and the Result envelope. These are the reference
implementations every other backend is validated against.
"""

from __future__ import annotations

from typing import Any
import numpy as np

from pydecomp.core.result import Result
from pydecomp.core.matrix import max_abs
from pydecomp.core.compute.timing import Timer
from pydecomp.core.compute.tolerances import (
    CHOLESKY_NEGATIVE_TOL,
    GROWTH_WARN_THRESHOLD,
    ORTHOGONALITY_TOL,
    SVD_MAX_ITERATIONS,
    SYMMETRY_RTOL,
)
from pydecomp.core.compute.linalg import (
    LUResult,
    CholeskyResult,
    QRResult,
    SVDResult,
    lu_cpu,
    cholesky_cpu,
    qr_cpu,
    orthogonality_error,
)
from pydecomp.core.compute.linalg.svd import golub_kahan_svd
from pydecomp.core.validation import check_square, check_tall
from pydecomp.decomposition.design import MatrixDesign


def lu_diagnostics(design: MatrixDesign, factors: LUResult) -> tuple[dict[str, Any], list[str]]:
    """Growth factor of elimination without pivoting, and its warning."""
    scale = design.scale
    growth = max_abs(factors.U) / scale if scale > 0 else 1.0
    warnings_list: list[str] = []
    if growth > GROWTH_WARN_THRESHOLD:
        warnings_list.append(
            f"Large element growth in LU without pivoting "
            f"(max|U| / max|A| = {growth:.3e}); factors may be inaccurate"
        )
    return {'growth_factor': float(growth)}, warnings_list


def cholesky_diagnostics(factors: CholeskyResult) -> tuple[dict[str, Any], list[str]]:
    """Count of zero diagonal entries (semi-definite input), and its warning."""
    n_zero = int(np.sum(np.diag(factors.L) == 0.0))
    warnings_list: list[str] = []
    if n_zero > 0:
        warnings_list.append(
            f"Matrix is positive semi-definite, not definite: "
            f"{n_zero} zero diagonal entr{'y' if n_zero == 1 else 'ies'} in L"
        )
    return {'n_zero_pivots': n_zero}, warnings_list


def qr_diagnostics(factors: QRResult) -> tuple[dict[str, Any], list[str]]:
    """Loss of orthogonality of Q, and its warning."""
    ortho = orthogonality_error(factors.Q)
    warnings_list: list[str] = []
    if ortho > ORTHOGONALITY_TOL:
        warnings_list.append(
            f"Loss of orthogonality in Q: max|Q^T Q - I| = {ortho:.3e} "
            f"(matrix is ill-conditioned)"
        )
    return {'orthogonality_error': ortho}, warnings_list


class CPULUBackend:
    """CPU backend for LU decomposition (Doolittle, no pivoting)."""

    def __init__(self, pivot_tol: float | None = None):
        self.pivot_tol = pivot_tol

    @property
    def name(self) -> str:
        return 'cpu_lu'

    def solve(self, design: MatrixDesign) -> Result[LUResult]:
        """
        Factor A = LU.

        Raises:
            DimensionError: If A is not square
            SingularMatrixError: If a pivot is at or below tolerance
        """
        timer = Timer()
        timer.start()

        with timer.section('validation'):
            check_square(design.matrix, design.name)

        with timer.section('factorization'):
            factors = lu_cpu(design.matrix, pivot_tol=self.pivot_tol)

        with timer.section('diagnostics'):
            diag_info, warnings_list = lu_diagnostics(design, factors)

        timer.stop()

        info: dict[str, Any] = {
            'method': 'doolittle',
            'pivoting': False,
            'n': design.n,
            **diag_info,
        }

        return Result(
            params=factors,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class CPUCholeskyBackend:
    """CPU backend for Cholesky decomposition."""

    def __init__(
        self,
        tol: float = CHOLESKY_NEGATIVE_TOL,
        symmetry_rtol: float = SYMMETRY_RTOL,
    ):
        self.tol = tol
        self.symmetry_rtol = symmetry_rtol

    @property
    def name(self) -> str:
        return 'cpu_cholesky'

    def solve(self, design: MatrixDesign) -> Result[CholeskyResult]:
        """
        Factor A = L L^T.

        Raises:
            DimensionError: If A is not square
            NotPositiveDefiniteError: If A is not symmetric positive definite
        """
        timer = Timer()
        timer.start()

        with timer.section('validation'):
            check_square(design.matrix, design.name)

        with timer.section('factorization'):
            factors = cholesky_cpu(
                design.matrix, tol=self.tol, symmetry_rtol=self.symmetry_rtol,
            )

        with timer.section('diagnostics'):
            diag_info, warnings_list = cholesky_diagnostics(factors)

        timer.stop()

        info: dict[str, Any] = {
            'method': 'cholesky_banachiewicz',
            'n': design.n,
            **diag_info,
        }

        return Result(
            params=factors,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class CPUQRBackend:
    """CPU backend for QR decomposition (modified Gram-Schmidt)."""

    def __init__(self, tol: float | None = None):
        self.tol = tol

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: MatrixDesign) -> Result[QRResult]:
        """
        Factor A = QR.

        Raises:
            DimensionError: If m < n
            RankDeficientError: If the columns of A are linearly dependent
        """
        timer = Timer()
        timer.start()

        with timer.section('validation'):
            check_tall(design.matrix, design.name)

        with timer.section('factorization'):
            factors = qr_cpu(design.matrix, tol=self.tol)

        with timer.section('diagnostics'):
            diag_info, warnings_list = qr_diagnostics(factors)

        timer.stop()

        info: dict[str, Any] = {
            'method': 'modified_gram_schmidt',
            'm': design.m,
            'n': design.n,
            **diag_info,
        }

        return Result(
            params=factors,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class CPUSVDBackend:
    """CPU backend for the SVD (Golub-Kahan-Reinsch)."""

    def __init__(self, max_iterations: int = SVD_MAX_ITERATIONS):
        self.max_iterations = max_iterations

    @property
    def name(self) -> str:
        return 'cpu_svd'

    def solve(self, design: MatrixDesign) -> Result[SVDResult]:
        """
        Factor A = U diag(S) V^T.

        Raises:
            DimensionError: If m < n
            SVDNonConvergenceError: If the sweep cap is exceeded
        """
        timer = Timer()
        timer.start()

        with timer.section('validation'):
            check_tall(design.matrix, design.name)

        with timer.section('factorization'):
            U, S, V, sweeps = golub_kahan_svd(
                design.matrix, max_iterations=self.max_iterations,
            )

        timer.stop()

        info: dict[str, Any] = {
            'method': 'golub_kahan_reinsch',
            'm': design.m,
            'n': design.n,
            'sweeps': sweeps,
            'max_iterations': self.max_iterations,
        }

        return Result(
            params=SVDResult(U=U, S=S, V=V),
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
