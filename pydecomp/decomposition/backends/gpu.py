"""
GPU backends for the four decompositions using PyTorch.

Performance path for large matrices, validated against the CPU reference.
Supports CUDA (float64) and MPS (float32 only; Apple GPUs have no float64).

LU runs the same Doolittle elimination as the CPU kernel on device tensors,
since torch's LU always pivots. Cholesky, QR and SVD use torch.linalg and
map its failures onto the pydecomp exception hierarchy. QR factors are
normalized so that diag(R) > 0, matching the Gram-Schmidt convention of
the CPU backend.

All results are returned as float64 NumPy arrays.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pydecomp.core.result import Result
from pydecomp.core.matrix import freeze
from pydecomp.core.exceptions import (
    NotPositiveDefiniteError,
    RankDeficientError,
    SingularMatrixError,
    SVDNonConvergenceError,
)
from pydecomp.core.compute.timing import Timer
from pydecomp.core.compute.device import DeviceInfo, select_device
from pydecomp.core.compute.tolerances import SYMMETRY_RTOL
from pydecomp.core.compute.linalg import LUResult, CholeskyResult, QRResult, SVDResult
from pydecomp.core.validation import check_square, check_tall
from pydecomp.decomposition.design import MatrixDesign
from pydecomp.decomposition.backends.cpu import (
    lu_diagnostics,
    cholesky_diagnostics,
    qr_diagnostics,
)


def _to_numpy(tensor) -> NDArray[np.floating[Any]]:
    array = np.ascontiguousarray(tensor.detach().cpu().numpy(), dtype=np.float64)
    freeze(array)
    return array


class _GPUBackend:
    """
    Device and precision handling shared by the GPU backends.

    Parameters
    ----------
    device : DeviceInfo, optional
        Device info from select_device(). If None, requires a GPU.
    """

    algorithm: str = ''

    def __init__(self, device: DeviceInfo | None = None):
        import torch

        if device is None:
            device = select_device('gpu')
        if not device.is_gpu:
            raise ValueError(
                f"{type(self).__name__} requires GPU device, got {device.device_type}"
            )

        self.device_info = device
        self.device = torch.device(device.torch_device)
        self.dtype = torch.float64 if device.supports_fp64 else torch.float32

    @property
    def precision(self) -> str:
        import torch
        return 'fp64' if self.dtype == torch.float64 else 'fp32'

    @property
    def eps(self) -> float:
        import torch
        return float(torch.finfo(self.dtype).eps)

    @property
    def name(self) -> str:
        return f'gpu_{self.algorithm}_{self.precision}'

    def _result(self, params, info: dict[str, Any], timer: Timer,
                warnings_list: list[str]) -> Result:
        info = {**info, 'device': str(self.device_info), 'precision': self.precision}
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class GPULUBackend(_GPUBackend):
    """Doolittle elimination without pivoting on device tensors."""

    algorithm = 'lu'

    def __init__(self, device: DeviceInfo | None = None, pivot_tol: float | None = None):
        super().__init__(device)
        self.pivot_tol = pivot_tol

    def solve(self, design: MatrixDesign) -> Result[LUResult]:
        import torch

        timer = Timer(sync_cuda=True)
        timer.start()

        check_square(design.matrix, design.name)
        n = design.n
        pivot_tol = self.pivot_tol
        if pivot_tol is None:
            pivot_tol = max(n, 1) * self.eps * design.scale

        with timer.section('transfer'):
            U = design.to_tensor(self.device, self.dtype)
            L = torch.eye(n, device=self.device, dtype=self.dtype)

        with timer.section('factorization'):
            for k in range(n - 1):
                pivot = float(U[k, k].item())
                if abs(pivot) <= pivot_tol:
                    raise SingularMatrixError(
                        f"Zero pivot at position {k}: |U[{k},{k}]| = {abs(pivot):.3e} "
                        f"<= {pivot_tol:.3e}",
                        matrix_name=design.name,
                        pivot_index=k,
                        pivot_value=pivot,
                    )
                L[k + 1:, k] = U[k + 1:, k] / U[k, k]
                U[k + 1:, k:] -= torch.outer(L[k + 1:, k], U[k, k:])
                U[k + 1:, k] = 0.0

        with timer.section('transfer'):
            factors = LUResult(L=_to_numpy(L), U=_to_numpy(U))

        diag_info, warnings_list = lu_diagnostics(design, factors)
        timer.stop()

        info = {'method': 'doolittle', 'pivoting': False, 'n': n, **diag_info}
        return self._result(factors, info, timer, warnings_list)


class GPUCholeskyBackend(_GPUBackend):
    """Cholesky via torch.linalg.cholesky_ex."""

    algorithm = 'cholesky'

    def __init__(self, device: DeviceInfo | None = None,
                 symmetry_rtol: float = SYMMETRY_RTOL):
        super().__init__(device)
        self.symmetry_rtol = symmetry_rtol

    def solve(self, design: MatrixDesign) -> Result[CholeskyResult]:
        import torch

        timer = Timer(sync_cuda=True)
        timer.start()

        check_square(design.matrix, design.name)
        if not design.is_symmetric(self.symmetry_rtol):
            raise NotPositiveDefiniteError(
                f"Matrix is not symmetric (relative tolerance {self.symmetry_rtol:.1e})",
                matrix_name=design.name,
            )

        with timer.section('transfer'):
            A = design.to_tensor(self.device, self.dtype)

        with timer.section('factorization'):
            L, err = torch.linalg.cholesky_ex(A)
            failed_at = int(err.item())

        if failed_at > 0:
            raise NotPositiveDefiniteError(
                f"Matrix is not positive definite: factorization failed "
                f"at row {failed_at - 1}",
                matrix_name=design.name,
                pivot_index=failed_at - 1,
            )

        with timer.section('transfer'):
            factors = CholeskyResult(L=_to_numpy(L))

        diag_info, warnings_list = cholesky_diagnostics(factors)
        timer.stop()

        info = {'method': 'torch_cholesky', 'n': design.n, **diag_info}
        return self._result(factors, info, timer, warnings_list)


class GPUQRBackend(_GPUBackend):
    """Householder QR via torch.linalg.qr, sign-normalized to diag(R) > 0."""

    algorithm = 'qr'

    def __init__(self, device: DeviceInfo | None = None, tol: float | None = None):
        super().__init__(device)
        self.tol = tol

    def solve(self, design: MatrixDesign) -> Result[QRResult]:
        import torch

        timer = Timer(sync_cuda=True)
        timer.start()

        check_tall(design.matrix, design.name)
        m, n = design.shape

        with timer.section('transfer'):
            A = design.to_tensor(self.device, self.dtype)

        with timer.section('factorization'):
            Q, R = torch.linalg.qr(A, mode='reduced')
            signs = torch.sign(torch.diagonal(R))
            signs = torch.where(signs == 0, torch.ones_like(signs), signs)
            Q = Q * signs
            R = R * signs.unsqueeze(1)

        tol = self.tol
        if tol is None:
            tol = max(m, n) * self.eps * float(torch.linalg.norm(A, dim=0).max().item())
        diag_R = torch.diagonal(R).abs().cpu().numpy()
        deficient = np.flatnonzero(diag_R <= tol)
        if len(deficient) > 0:
            k = int(deficient[0])
            raise RankDeficientError(
                f"Matrix is rank-deficient: |R[{k},{k}]| = {diag_R[k]:.3e} <= {tol:.3e}",
                matrix_name=design.name,
                pivot_index=k,
                pivot_value=float(diag_R[k]),
                rank=int(np.sum(diag_R > tol)),
                expected_rank=n,
            )

        with timer.section('transfer'):
            factors = QRResult(Q=_to_numpy(Q), R=_to_numpy(R))

        diag_info, warnings_list = qr_diagnostics(factors)
        timer.stop()

        info = {'method': 'torch_householder', 'm': m, 'n': n, **diag_info}
        return self._result(factors, info, timer, warnings_list)


class GPUSVDBackend(_GPUBackend):
    """Thin SVD via torch.linalg.svd."""

    algorithm = 'svd'

    def solve(self, design: MatrixDesign) -> Result[SVDResult]:
        import torch

        timer = Timer(sync_cuda=True)
        timer.start()

        check_tall(design.matrix, design.name)

        with timer.section('transfer'):
            A = design.to_tensor(self.device, self.dtype)

        with timer.section('factorization'):
            try:
                U, S, Vh = torch.linalg.svd(A, full_matrices=False)
            except torch.linalg.LinAlgError as e:
                raise SVDNonConvergenceError(
                    f"SVD did not converge on {self.device_info}: {e}",
                    iterations=0,
                ) from e

        with timer.section('transfer'):
            factors = SVDResult(U=_to_numpy(U), S=_to_numpy(S), V=_to_numpy(Vh.mT))

        timer.stop()

        info = {'method': 'torch_gesvd', 'm': design.m, 'n': design.n}
        return self._result(factors, info, timer, [])
