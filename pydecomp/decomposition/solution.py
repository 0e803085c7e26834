"""
Decomposition solution types.

User-facing wrappers around Result[LUResult], Result[CholeskyResult],
Result[QRResult] and Result[SVDResult]. They expose the factors, the
quantities that follow cheaply from them (solves, determinants, rank,
condition number) and the envelope metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.result import Result
from pydecomp.core.compute.tolerances import EPSILON_64
from pydecomp.core.compute.linalg import (
    LUResult,
    CholeskyResult,
    QRResult,
    SVDResult,
    lu_solve,
    cholesky_solve,
    qr_solve,
    svd_solve,
    svd_pinv,
    lu_det,
    lu_slogdet,
    cholesky_logdet,
)

if TYPE_CHECKING:
    from pydecomp.decomposition.design import MatrixDesign


def _format_matrix(name: str, M: NDArray[np.floating[Any]]) -> list[str]:
    lines = [f"{name} ({M.shape[0]} x {M.shape[1]}):"] if M.ndim == 2 else [f"{name}:"]
    body = np.array2string(np.atleast_2d(M), precision=6, suppress_small=True)
    lines.extend("  " + row for row in body.splitlines())
    return lines


@dataclass
class _DecompositionSolution:
    """Envelope accessors shared by every decomposition solution."""
    _result: Result[Any]
    _design: 'MatrixDesign'

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def shape(self) -> tuple[int, int]:
        """Shape of the factored matrix."""
        return self._design.shape

    def _header(self, title: str) -> list[str]:
        m, n = self._design.shape
        lines = [f"{title} of {self._design.name} ({m} x {n})"]
        lines.append(f"Backend: {self.backend_name}")
        if self.timing is not None:
            lines.append(f"Time: {self.timing['total_seconds']:.6f}s")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return lines


@dataclass
class LUSolution(_DecompositionSolution):
    """LU factors A = LU of a square matrix."""
    _result: Result[LUResult]

    @property
    def L(self) -> NDArray[np.floating[Any]]:
        """Unit lower triangular factor (n x n)."""
        return self._result.params.L

    @property
    def U(self) -> NDArray[np.floating[Any]]:
        """Upper triangular factor (n x n)."""
        return self._result.params.U

    @property
    def factors(self) -> LUResult:
        return self._result.params

    @property
    def det(self) -> float:
        """Determinant of A."""
        return lu_det(self._result.params)

    def slogdet(self) -> tuple[float, float]:
        """Sign and natural log of |det(A)|."""
        return lu_slogdet(self._result.params)

    @property
    def growth_factor(self) -> float:
        """max|U| / max|A|; large values mean elimination lost accuracy."""
        return self._result.info['growth_factor']

    def solve(self, b: ArrayLike) -> NDArray[np.floating[Any]]:
        """Solve A x = b."""
        return lu_solve(self._result.params, b)

    def inverse(self) -> NDArray[np.floating[Any]]:
        """A^{-1}, by solving against the identity."""
        return self.solve(np.eye(self._design.n))

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """L @ U."""
        return self.L @ self.U

    def summary(self) -> str:
        lines = self._header("LU decomposition")
        lines.append(f"Growth factor: {self.growth_factor:.4g}")
        lines.extend(_format_matrix("L", self.L))
        lines.extend(_format_matrix("U", self.U))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"LUSolution(n={self._design.n}, backend={self.backend_name!r})"


@dataclass
class CholeskySolution(_DecompositionSolution):
    """Cholesky factor A = L L^T of a symmetric positive definite matrix."""
    _result: Result[CholeskyResult]

    @property
    def L(self) -> NDArray[np.floating[Any]]:
        """Lower triangular factor (n x n)."""
        return self._result.params.L

    @property
    def factors(self) -> CholeskyResult:
        return self._result.params

    @property
    def logdet(self) -> float:
        """log det(A)."""
        return cholesky_logdet(self._result.params)

    @property
    def det(self) -> float:
        """det(A); prefer logdet for large matrices."""
        return float(np.prod(np.diag(self.L)) ** 2)

    def solve(self, b: ArrayLike) -> NDArray[np.floating[Any]]:
        """Solve A x = b."""
        return cholesky_solve(self._result.params, b)

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """L @ L^T."""
        return self.L @ self.L.T

    def summary(self) -> str:
        lines = self._header("Cholesky decomposition")
        lines.append(f"log det: {self.logdet:.6g}")
        lines.extend(_format_matrix("L", self.L))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"CholeskySolution(n={self._design.n}, backend={self.backend_name!r})"


@dataclass
class QRSolution(_DecompositionSolution):
    """Reduced QR factors A = QR of a tall matrix."""
    _result: Result[QRResult]

    @property
    def Q(self) -> NDArray[np.floating[Any]]:
        """Orthonormal columns (m x n)."""
        return self._result.params.Q

    @property
    def R(self) -> NDArray[np.floating[Any]]:
        """Upper triangular factor (n x n)."""
        return self._result.params.R

    @property
    def factors(self) -> QRResult:
        return self._result.params

    @property
    def orthogonality_error(self) -> float:
        """max|Q^T Q - I|."""
        return self._result.info['orthogonality_error']

    def solve(self, b: ArrayLike) -> NDArray[np.floating[Any]]:
        """Least squares solution of min ||A x - b||."""
        return qr_solve(self._result.params, b)

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Q @ R."""
        return self.Q @ self.R

    def summary(self) -> str:
        lines = self._header("QR decomposition")
        lines.append(f"Orthogonality error: {self.orthogonality_error:.3e}")
        lines.extend(_format_matrix("Q", self.Q))
        lines.extend(_format_matrix("R", self.R))
        return "\n".join(lines)

    def __repr__(self) -> str:
        m, n = self._design.shape
        return f"QRSolution(m={m}, n={n}, backend={self.backend_name!r})"


@dataclass
class SVDSolution(_DecompositionSolution):
    """Thin SVD A = U diag(S) V^T of a tall matrix."""
    _result: Result[SVDResult]

    @property
    def U(self) -> NDArray[np.floating[Any]]:
        """Left singular vectors (m x n)."""
        return self._result.params.U

    @property
    def S(self) -> NDArray[np.floating[Any]]:
        """Singular values (n,), descending."""
        return self._result.params.S

    @property
    def V(self) -> NDArray[np.floating[Any]]:
        """Right singular vectors (n x n)."""
        return self._result.params.V

    @property
    def factors(self) -> SVDResult:
        return self._result.params

    @property
    def iterations(self) -> int | None:
        """Implicit QR sweeps performed (None for GPU backends)."""
        return self._result.info.get('sweeps')

    def rank(self, tol: float | None = None) -> int:
        """
        Numerical rank: number of singular values above tol.

        tol defaults to max(m, n) * eps * S[0], the numpy.linalg.matrix_rank rule.
        """
        if tol is None:
            tol = max(self._design.shape) * EPSILON_64 * float(self.S[0])
        return int(np.sum(self.S > tol))

    @property
    def condition_number(self) -> float:
        """2-norm condition number S[0] / S[-1]; inf if singular."""
        if self.S[-1] == 0.0:
            return float('inf')
        return float(self.S[0] / self.S[-1])

    def pinv(self, rcond: float | None = None) -> NDArray[np.floating[Any]]:
        """Moore-Penrose pseudo-inverse (n x m)."""
        return svd_pinv(self._result.params, rcond)

    def solve(self, b: ArrayLike, rcond: float | None = None) -> NDArray[np.floating[Any]]:
        """Minimum-norm least squares solution."""
        return svd_solve(self._result.params, b, rcond)

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """U @ diag(S) @ V^T."""
        return (self.U * self.S) @ self.V.T

    def summary(self) -> str:
        lines = self._header("Singular value decomposition")
        if self.iterations is not None:
            lines.append(f"QR sweeps: {self.iterations}")
        lines.append(f"Rank: {self.rank()}  Condition number: {self.condition_number:.6g}")
        lines.extend(_format_matrix("S", self.S))
        return "\n".join(lines)

    def __repr__(self) -> str:
        m, n = self._design.shape
        return f"SVDSolution(m={m}, n={n}, rank={self.rank()}, backend={self.backend_name!r})"
