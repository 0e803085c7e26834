"""
Shared compute infrastructure for pydecomp.

This module provides hardware detection, timing utilities, tolerances and
the decomposition kernels themselves.

IMPORTANT: This is NOT where backends live. Those go in
decomposition/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
    tolerances: Algorithm thresholds and result tolerance tiers
    linalg: Decomposition kernels (LU, Cholesky, QR, SVD) and solvers
"""

from pydecomp.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pydecomp.core.compute.timing import Timer, timed

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
    "timed",
]
