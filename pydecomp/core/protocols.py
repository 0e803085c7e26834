"""
Core protocols for pydecomp.

Structural interface every decomposition backend satisfies. Protocol
(structural typing) rather than ABC so CPU and GPU backends share no base
class and a third-party backend needs no import from here.
"""

from typing import Protocol, TypeVar, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from pydecomp.core.result import Result

D = TypeVar('D', contravariant=True)  # Design type
P = TypeVar('P', covariant=True)      # Payload type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Each backend takes a validated MatrixDesign and produces a Result
    wrapping one decomposition payload. Backends are stateless apart from
    the device handle given at construction, which makes them easy to
    test and swap.

    Type Parameters:
        D: The design type this backend accepts
        P: The decomposition payload this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_lu', 'cpu_svd', 'gpu_cholesky'
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Factor the design matrix.

        Raises:
            NumericalError: If the matrix violates the decomposition's
                numerical preconditions (singular, not PD, rank-deficient)
            ConvergenceError: If an iterative phase fails to converge
            DimensionError: If the design's shape is invalid for this backend
        """
        ...
