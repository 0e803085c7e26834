"""
Decomposition backends.

Available backends:
    CPULUBackend, CPUCholeskyBackend, CPUQRBackend, CPUSVDBackend:
        CPU reference implementations
    GPULUBackend, GPUCholeskyBackend, GPUQRBackend, GPUSVDBackend:
        PyTorch implementations (import from backends.gpu; requires torch)
"""

from pydecomp.decomposition.backends.cpu import (
    CPULUBackend,
    CPUCholeskyBackend,
    CPUQRBackend,
    CPUSVDBackend,
)

__all__ = [
    "CPULUBackend",
    "CPUCholeskyBackend",
    "CPUQRBackend",
    "CPUSVDBackend",
]
