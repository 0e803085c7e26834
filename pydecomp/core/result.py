"""
Generic result container for all pydecomp computations.

The Result class is the envelope every backend returns. The payload is one
of the four decomposition results (LUResult, CholeskyResult, QRResult,
SVDResult); the envelope adds timing, diagnostics and provenance so that
solution wrappers can report how a factorization was produced.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, sweeps, growth factor)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

import numpy as np

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Version metadata recorded with every result."""
    from pydecomp import __version__

    return {
        'pydecomp_version': __version__,
        'numpy_version': np.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for a decomposition.

    Type Parameters:
        P: The decomposition payload type

    Attributes:
        params: The factors (LUResult, CholeskyResult, QRResult, SVDResult)
        info: Structured metadata (method, sizes, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Library versions that produced the result

    Examples:
        >>> Result(
        ...     params=LUResult(L=L, U=U),
        ...     info={'method': 'doolittle', 'growth_factor': 1.3},
        ...     timing={'total_seconds': 0.01, 'factorization': 0.008},
        ...     backend_name='cpu_lu'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
