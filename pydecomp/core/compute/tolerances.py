"""
Numerical tolerances for the decomposition kernels.

Two kinds of constants live here:
- Algorithm defaults: thresholds the kernels use to decide that a pivot,
  a column norm or a bidiagonal entry is negligible. Every one of them can
  be overridden per call by a keyword argument.
- Tolerance tiers: precision expectations for checking results of the
  different compute paths (CPU FP64 reference, GPU FP64, GPU FP32).

Used by the kernels, the backends' diagnostics, and the test suite.
"""

from dataclasses import dataclass

import numpy as np


# Machine epsilon for float64
EPSILON_64: float = float(np.finfo(np.float64).eps)  # ~2.22e-16

# Smallest magnitude treated as distinct from zero in the SVD
# deflation tests (2**-966, as in LINPACK/JAMA).
TINY_64: float = 2.0 ** -966.0

# Cholesky: diagonal terms in [-tol * max|A|, 0) are rounding noise and
# clamped to zero; anything more negative means the matrix is not positive
# definite.
CHOLESKY_NEGATIVE_TOL: float = 1e-10

# Cholesky: relative asymmetry |A - A^T| / max|A| accepted as symmetric.
SYMMETRY_RTOL: float = 1e-10

# SVD: implicit-shift QR sweeps allowed per singular value.
SVD_MAX_ITERATIONS: int = 30

# QR: max|Q^T Q - I| above which a loss-of-orthogonality warning is issued.
ORTHOGONALITY_TOL: float = 1e-6

# LU: growth factor max|U| / max|A| above which elimination without
# pivoting is reported as unreliable.
GROWTH_WARN_THRESHOLD: float = 1e8


def default_pivot_tol(n: int, scale: float) -> float:
    """
    LU pivot threshold: n * eps * max|A|.

    A pivot at or below this magnitude is indistinguishable from the
    rounding error accumulated while eliminating an n x n matrix.
    """
    return max(n, 1) * EPSILON_64 * scale


def default_rank_tol(m: int, n: int, scale: float) -> float:
    """
    QR column-norm threshold: max(m, n) * eps * (largest column norm).

    Same rule LAPACK-based rank estimates use on the diagonal of R.
    """
    return max(m, n) * EPSILON_64 * scale


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# CPU reference kernels
CPU_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision reference kernels',
)

# GPU with FP64 (CUDA)
GPU_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

# GPU with FP32 (MPS has no float64)
GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='gpu_fp32',
    description='GPU single precision',
)


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend."""
    if backend_name.startswith('gpu'):
        if 'fp32' in backend_name:
            return GPU_FP32
        return GPU_FP64
    return CPU_FP64
