"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def spd_matrix(rng):
    """Well-conditioned 6x6 symmetric positive definite matrix."""
    X = rng.standard_normal((20, 6))
    return X.T @ X + 6 * np.eye(6)


@pytest.fixture
def diagonally_dominant(rng):
    """Square matrix that LU can factor without pivoting."""
    n = 8
    A = rng.standard_normal((n, n))
    A += np.diag(np.sum(np.abs(A), axis=1) + 1.0)
    return A


@pytest.fixture
def tall_matrix(rng):
    """Full column rank 30x5 matrix."""
    return rng.standard_normal((30, 5))


@pytest.fixture
def collinear_matrix(rng):
    """Matrix with perfect collinearity (third column = first + second)."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    return np.column_stack([x1, x2, x1 + x2])
