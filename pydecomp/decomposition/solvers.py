"""
Solver dispatch for the decompositions.

Provides lu(), cholesky(), qr() and svd() as the public entry points, plus
backend selection. Each entry point validates its input into a
MatrixDesign, runs the chosen backend and wraps the Result in a solution
object. Non-fatal diagnostics recorded by the backend are re-emitted as
RuntimeWarning.
"""

from __future__ import annotations

from typing import Literal
import warnings

from numpy.typing import ArrayLike

from pydecomp.core.result import Result
from pydecomp.core.compute.device import select_device
from pydecomp.core.compute.tolerances import (
    CHOLESKY_NEGATIVE_TOL,
    SVD_MAX_ITERATIONS,
    SYMMETRY_RTOL,
)
from pydecomp.core.exceptions import ValidationError
from pydecomp.decomposition.design import MatrixDesign
from pydecomp.decomposition.solution import (
    LUSolution,
    CholeskySolution,
    QRSolution,
    SVDSolution,
)
from pydecomp.decomposition.backends.cpu import (
    CPULUBackend,
    CPUCholeskyBackend,
    CPUQRBackend,
    CPUSVDBackend,
)


BackendChoice = Literal['auto', 'cpu', 'gpu']


def _ensure_design(A: ArrayLike | MatrixDesign) -> MatrixDesign:
    """Convert raw array to MatrixDesign if needed."""
    if isinstance(A, MatrixDesign):
        return A
    return MatrixDesign.from_array(A)


def _use_gpu(backend: BackendChoice) -> bool:
    """
    Resolve a backend choice to CPU or GPU.

    Raises:
        ValidationError: Unknown backend name
        RuntimeError: 'gpu' requested but none available
    """
    if backend == 'cpu':
        return False
    if backend == 'gpu':
        select_device('gpu')
        return True
    if backend == 'auto':
        return select_device('auto').is_gpu
    raise ValidationError(
        f"Unknown backend: {backend!r}. Must be 'auto', 'cpu', or 'gpu'."
    )


def _emit(result: Result) -> None:
    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=3)


def lu(
    A: ArrayLike | MatrixDesign,
    *,
    pivot_tol: float | None = None,
    backend: BackendChoice = 'cpu',
) -> LUSolution:
    """
    LU decomposition A = LU without pivoting.

    Parameters
    ----------
    A : array-like or MatrixDesign
        Square matrix (n x n).
    pivot_tol : float, optional
        Absolute pivot threshold. Default n * eps * max|A|.
    backend : str
        'cpu' (default), 'gpu', or 'auto'.

    Returns
    -------
    LUSolution with L (unit lower triangular) and U (upper triangular).

    Raises
    ------
    DimensionError
        A is not square, or empty.
    SingularMatrixError
        A pivot used as divisor is at or below pivot_tol.
    """
    design = _ensure_design(A)
    if _use_gpu(backend):
        from pydecomp.decomposition.backends.gpu import GPULUBackend
        be = GPULUBackend(pivot_tol=pivot_tol)
    else:
        be = CPULUBackend(pivot_tol=pivot_tol)

    result = be.solve(design)
    _emit(result)
    return LUSolution(_result=result, _design=design)


def cholesky(
    A: ArrayLike | MatrixDesign,
    *,
    tol: float = CHOLESKY_NEGATIVE_TOL,
    symmetry_rtol: float = SYMMETRY_RTOL,
    backend: BackendChoice = 'cpu',
) -> CholeskySolution:
    """
    Cholesky decomposition A = L L^T.

    Parameters
    ----------
    A : array-like or MatrixDesign
        Symmetric positive definite matrix (n x n).
    tol : float
        Relative noise level. Negative diagonal terms down to
        -tol * max|A| are treated as rounding noise and clamped to zero;
        anything more negative raises. CPU backend only: the GPU backend
        factors with torch.linalg.cholesky_ex, which rejects every
        non-positive pivot, so a semi-definite matrix that the CPU backend
        accepts with a warning raises there. Passing a non-default tol
        with backend='gpu' or 'auto' raises ValidationError.
    symmetry_rtol : float
        Accepted asymmetry relative to max|A|.
    backend : str
        'cpu' (default), 'gpu', or 'auto'.

    Returns
    -------
    CholeskySolution with lower triangular L.

    Raises
    ------
    ValidationError
        Non-default tol with a backend other than 'cpu'.
    DimensionError
        A is not square, or empty.
    NotPositiveDefiniteError
        A is not symmetric positive definite.
    """
    if backend != 'cpu' and tol != CHOLESKY_NEGATIVE_TOL:
        raise ValidationError(
            f"tol={tol!r} is only supported by the CPU backend, got backend={backend!r}"
        )

    design = _ensure_design(A)
    if _use_gpu(backend):
        from pydecomp.decomposition.backends.gpu import GPUCholeskyBackend
        be = GPUCholeskyBackend(symmetry_rtol=symmetry_rtol)
    else:
        be = CPUCholeskyBackend(tol=tol, symmetry_rtol=symmetry_rtol)

    result = be.solve(design)
    _emit(result)
    return CholeskySolution(_result=result, _design=design)


def qr(
    A: ArrayLike | MatrixDesign,
    *,
    tol: float | None = None,
    backend: BackendChoice = 'cpu',
) -> QRSolution:
    """
    Reduced QR decomposition A = QR.

    Parameters
    ----------
    A : array-like or MatrixDesign
        Matrix (m x n) with m >= n and full column rank.
    tol : float, optional
        Column-norm threshold for rank deficiency.
        Default max(m, n) * eps * (largest column norm).
    backend : str
        'cpu' (default), 'gpu', or 'auto'.

    Returns
    -------
    QRSolution with Q (m x n, orthonormal columns) and R (n x n).

    Raises
    ------
    DimensionError
        m < n, or empty.
    RankDeficientError
        Columns of A are linearly dependent.
    """
    design = _ensure_design(A)
    if _use_gpu(backend):
        from pydecomp.decomposition.backends.gpu import GPUQRBackend
        be = GPUQRBackend(tol=tol)
    else:
        be = CPUQRBackend(tol=tol)

    result = be.solve(design)
    _emit(result)
    return QRSolution(_result=result, _design=design)


def svd(
    A: ArrayLike | MatrixDesign,
    *,
    max_iterations: int = SVD_MAX_ITERATIONS,
    backend: BackendChoice = 'cpu',
) -> SVDSolution:
    """
    Thin singular value decomposition A = U diag(S) V^T.

    Parameters
    ----------
    A : array-like or MatrixDesign
        Matrix (m x n) with m >= n. For m < n, decompose A.T and swap
        the roles of U and V.
    max_iterations : int
        Implicit QR sweeps allowed per singular value (CPU backend).
    backend : str
        'cpu' (default), 'gpu', or 'auto'.

    Returns
    -------
    SVDSolution with U (m x n), S (n,) descending and non-negative, V (n x n).

    Raises
    ------
    DimensionError
        m < n, or empty.
    SVDNonConvergenceError
        A singular value needed more than max_iterations sweeps.
    """
    if max_iterations < 1:
        raise ValidationError(f"max_iterations must be >= 1, got {max_iterations}")

    design = _ensure_design(A)
    if _use_gpu(backend):
        from pydecomp.decomposition.backends.gpu import GPUSVDBackend
        be = GPUSVDBackend()
    else:
        be = CPUSVDBackend(max_iterations=max_iterations)

    result = be.solve(design)
    _emit(result)
    return SVDSolution(_result=result, _design=design)
