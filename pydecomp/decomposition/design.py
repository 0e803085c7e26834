"""
MatrixDesign: validated input wrapper for the decomposition pipeline.

Wraps a dense matrix once it has passed validation so backends can trust
it. Follows the pydecomp Design pattern: build at the boundary, trust
everywhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.matrix import as_matrix, freeze, is_symmetric, max_abs
from pydecomp.core.compute.tolerances import SYMMETRY_RTOL

if TYPE_CHECKING:
    import torch


@dataclass(frozen=True)
class MatrixDesign:
    """
    Design for a dense decomposition.

    Holds a private read-only float64 copy of the input matrix (m x n).
    Immutable after construction.

    Construction:
        MatrixDesign.from_array(A)
    """
    _matrix: NDArray[np.floating[Any]]
    _m: int
    _n: int
    _name: str

    @classmethod
    def from_array(cls, data: ArrayLike, *, name: str = 'A') -> MatrixDesign:
        """
        Build MatrixDesign from array-like data.

        Parameters
        ----------
        data : array-like
            2D matrix: nested lists, numpy array, or anything with a
            numeric .values attribute (e.g. a pandas DataFrame).
        name : str
            Name used in error messages.

        Raises
        ------
        ValidationError
            Non-numeric or non-finite entries.
        DimensionError
            Not 2D, or an empty dimension.
        """
        if hasattr(data, 'values') and not isinstance(data, np.ndarray):
            data = data.values
        matrix = as_matrix(data, name)
        freeze(matrix)
        m, n = matrix.shape
        return cls(_matrix=matrix, _m=m, _n=n, _name=name)

    @property
    def matrix(self) -> NDArray[np.floating[Any]]:
        """Read-only matrix (m x n)."""
        return self._matrix

    @property
    def m(self) -> int:
        """Number of rows."""
        return self._m

    @property
    def n(self) -> int:
        """Number of columns."""
        return self._n

    @property
    def shape(self) -> tuple[int, int]:
        return (self._m, self._n)

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_square(self) -> bool:
        return self._m == self._n

    @property
    def is_tall(self) -> bool:
        """True if m >= n, as QR and SVD require."""
        return self._m >= self._n

    @property
    def scale(self) -> float:
        """Largest absolute entry."""
        return max_abs(self._matrix)

    def is_symmetric(self, rtol: float = SYMMETRY_RTOL) -> bool:
        """Whether the matrix is symmetric to relative tolerance rtol."""
        return is_symmetric(self._matrix, rtol)

    def to_tensor(self, device: 'torch.device', dtype: 'torch.dtype') -> 'torch.Tensor':
        """Copy the matrix to a torch tensor on device (GPU backends)."""
        import torch
        return torch.from_numpy(self._matrix.copy()).to(device=device, dtype=dtype)

    def __repr__(self) -> str:
        return f"MatrixDesign(name={self._name!r}, m={self._m}, n={self._n})"
