"""
Singular value decomposition by the Golub-Kahan-Reinsch algorithm.

Computes the thin SVD A = U diag(S) V^T of a tall matrix (m >= n):

1. Householder bidiagonalization. Column reflections zero A below the
   diagonal and row reflections zero A right of the superdiagonal. The
   reflection vectors are kept in U and V and expanded into orthogonal
   matrices afterwards.
2. Implicit-shift QR on the bidiagonal (d, e). Each sweep chases a bulge
   down the bidiagonal with Givens rotations applied to U and V. A
   negligible e[k] splits the problem; a negligible d[k] is chased out
   before sweeping. The shift is the eigenvalue of the trailing 2x2 block
   of B^T B closer to its last diagonal entry.
3. Converged values are made non-negative and sorted in descending order
   with the columns of U and V permuted to match.

The iteration structure follows LINPACK's dsvdc as popularized by JAMA.
"""

from dataclasses import dataclass
from typing import Any
import math
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.exceptions import SVDNonConvergenceError
from pydecomp.core.matrix import as_matrix, freeze
from pydecomp.core.validation import check_tall
from pydecomp.core.compute.tolerances import EPSILON_64, TINY_64, SVD_MAX_ITERATIONS


@dataclass(frozen=True)
class SVDResult:
    """
    Result of singular value decomposition.

    Attributes:
        U: Left singular vectors (m x n), orthonormal columns
        S: Singular values (n,), non-negative, sorted descending
        V: Right singular vectors (n x n), orthogonal
    """
    U: NDArray[np.floating[Any]]
    S: NDArray[np.floating[Any]]
    V: NDArray[np.floating[Any]]


def svd_cpu(
    A: ArrayLike,
    *,
    max_iterations: int = SVD_MAX_ITERATIONS,
) -> SVDResult:
    """
    Thin SVD A = U diag(S) V^T.

    Args:
        A: Matrix to decompose (m x n), m >= n
        max_iterations: QR sweeps allowed per singular value

    Returns:
        SVDResult with S sorted descending

    Raises:
        DimensionError: If A is empty or m < n
        SVDNonConvergenceError: If a singular value needs more than
                                max_iterations sweeps
    """
    U, S, V, _ = golub_kahan_svd(A, max_iterations=max_iterations)
    return SVDResult(U=U, S=S, V=V)


def golub_kahan_svd(
    A: ArrayLike,
    *,
    max_iterations: int = SVD_MAX_ITERATIONS,
) -> tuple[NDArray, NDArray, NDArray, int]:
    """
    SVD kernel returning the factors and the total number of QR sweeps.

    svd_cpu() is the public entry point; backends call this directly to
    report the sweep count.
    """
    a = as_matrix(A, 'A')
    check_tall(a, 'A')
    m, n = a.shape

    U, d, e, V = _bidiagonalize(a)
    sweeps = _diagonalize(d, e, U, V, max_iterations)

    order = np.argsort(-d, kind='stable')
    S = d[order]
    U = np.ascontiguousarray(U[:, order])
    V = np.ascontiguousarray(V[:, order])

    freeze(U, S, V)
    return U, S, V, sweeps


def _norm(x: NDArray) -> float:
    """Euclidean norm accumulated with hypot to avoid overflow."""
    return float(np.hypot.reduce(x, initial=0.0))


def _bidiagonalize(
    a: NDArray,
) -> tuple[NDArray, NDArray, NDArray, NDArray]:
    """
    Householder reduction of a (overwritten) to upper bidiagonal form.

    Returns:
        U: (m x n) accumulated left transformations
        d: (n,) diagonal of the bidiagonal
        e: (n,) superdiagonal, e[k] couples d[k] and d[k+1], e[n-1] == 0
        V: (n x n) accumulated right transformations
    """
    m, n = a.shape
    d = np.zeros(n)
    e = np.zeros(n)
    work = np.zeros(m)
    U = np.zeros((m, n))
    V = np.zeros((n, n))

    nct = min(m - 1, n)
    nrt = max(0, min(n - 2, m))

    for k in range(max(nct, nrt)):
        if k < nct:
            # Column reflection zeroing a[k+1:, k]; d[k] receives the
            # resulting diagonal entry, the reflector is left in a[k:, k].
            dk = _norm(a[k:, k])
            if dk != 0.0:
                if a[k, k] < 0.0:
                    dk = -dk
                a[k:, k] /= dk
                a[k, k] += 1.0
            d[k] = -dk

        if k < nct and d[k] != 0.0:
            t = -(a[k:, k] @ a[k:, k + 1:]) / a[k, k]
            a[k:, k + 1:] += np.outer(a[k:, k], t)

        # Row k right of the diagonal, the target of the row reflection.
        e[k + 1:] = a[k, k + 1:]

        if k < nct:
            U[k:, k] = a[k:, k]

        if k < nrt:
            # Row reflection zeroing e[k+2:]; e[k] receives the
            # superdiagonal entry, the reflector is left in e[k+1:].
            ek = _norm(e[k + 1:])
            if ek != 0.0:
                if e[k + 1] < 0.0:
                    ek = -ek
                e[k + 1:] /= ek
                e[k + 1] += 1.0
            e[k] = -ek

            if k + 1 < m and e[k] != 0.0:
                work[k + 1:] = a[k + 1:, k + 1:] @ e[k + 1:]
                a[k + 1:, k + 1:] += np.outer(work[k + 1:], -e[k + 1:] / e[k + 1])

            V[k + 1:, k] = e[k + 1:]

    # Entries of the bidiagonal not produced by a reflection.
    if nct < n:
        d[nct] = a[nct, nct]
    if nrt + 1 < n:
        e[nrt] = a[nrt, n - 1]
    e[n - 1] = 0.0

    # Expand the column reflectors into U.
    for j in range(nct, n):
        U[:, j] = 0.0
        U[j, j] = 1.0
    for k in range(nct - 1, -1, -1):
        if d[k] != 0.0:
            t = -(U[k:, k] @ U[k:, k + 1:]) / U[k, k]
            U[k:, k + 1:] += np.outer(U[k:, k], t)
            U[k:, k] = -U[k:, k]
            U[k, k] += 1.0
            U[:k, k] = 0.0
        else:
            U[:, k] = 0.0
            U[k, k] = 1.0

    # Expand the row reflectors into V.
    for k in range(n - 1, -1, -1):
        if k < nrt and e[k] != 0.0:
            t = -(V[k + 1:, k] @ V[k + 1:, k + 1:]) / V[k + 1, k]
            V[k + 1:, k + 1:] += np.outer(V[k + 1:, k], t)
        V[:, k] = 0.0
        V[k, k] = 1.0

    return U, d, e, V


def _rotate(M: NDArray, i: int, j: int, cs: float, sn: float) -> None:
    """Apply the Givens rotation [[cs, -sn], [sn, cs]] to columns i, j of M."""
    mi = M[:, i].copy()
    mj = M[:, j]
    M[:, i] = cs * mi + sn * mj
    M[:, j] = -sn * mi + cs * mj


def _diagonalize(
    d: NDArray,
    e: NDArray,
    U: NDArray,
    V: NDArray,
    max_iterations: int,
) -> int:
    """
    Drive the superdiagonal e to zero in place, updating U and V.

    On return d holds the (unsorted, non-negative) singular values.

    Returns:
        Total number of implicit QR sweeps performed
    """
    p = len(d)
    iterations = 0
    sweeps = 0

    while p > 0:
        # Find the largest k < p-1 with negligible e[k]; k == -1 if none.
        k = p - 2
        while k >= 0:
            if abs(e[k]) <= TINY_64 + EPSILON_64 * (abs(d[k]) + abs(d[k + 1])):
                e[k] = 0.0
                break
            k -= 1

        # kase 4: d[p-1] has converged.
        # kase 1: d[p-1] negligible, deflate it.
        # kase 2: d[ks] negligible, split at ks.
        # kase 3: no negligible d in k+1..p-1, take a QR step.
        if k == p - 2:
            kase = 4
        else:
            ks = p - 1
            while ks > k:
                t = abs(e[ks]) + (abs(e[ks - 1]) if ks != k + 1 else 0.0)
                if abs(d[ks]) <= TINY_64 + EPSILON_64 * t:
                    d[ks] = 0.0
                    break
                ks -= 1
            if ks == k:
                kase = 3
            elif ks == p - 1:
                kase = 1
            else:
                kase = 2
                k = ks
        k += 1

        if kase == 1:
            f = e[p - 2]
            e[p - 2] = 0.0
            for j in range(p - 2, k - 1, -1):
                t = math.hypot(d[j], f)
                cs = d[j] / t
                sn = f / t
                d[j] = t
                if j != k:
                    f = -sn * e[j - 1]
                    e[j - 1] = cs * e[j - 1]
                _rotate(V, j, p - 1, cs, sn)

        elif kase == 2:
            f = e[k - 1]
            e[k - 1] = 0.0
            for j in range(k, p):
                t = math.hypot(d[j], f)
                cs = d[j] / t
                sn = f / t
                d[j] = t
                f = -sn * e[j]
                e[j] = cs * e[j]
                _rotate(U, j, k - 1, cs, sn)

        elif kase == 3:
            if iterations >= max_iterations:
                raise SVDNonConvergenceError(
                    f"SVD did not converge: singular value {p - 1} still "
                    f"coupled (|e| = {abs(e[p - 2]):.3e}) after "
                    f"{iterations} QR sweeps",
                    iterations=iterations,
                    index=p - 1,
                    final_change=float(abs(e[p - 2])),
                    threshold=float(max_iterations),
                )

            scale = max(abs(d[p - 1]), abs(d[p - 2]), abs(e[p - 2]),
                        abs(d[k]), abs(e[k]))
            sp = d[p - 1] / scale
            spm1 = d[p - 2] / scale
            epm1 = e[p - 2] / scale
            sk = d[k] / scale
            ek = e[k] / scale
            b = ((spm1 + sp) * (spm1 - sp) + epm1 * epm1) / 2.0
            c = (sp * epm1) ** 2
            shift = 0.0
            if b != 0.0 or c != 0.0:
                shift = math.sqrt(b * b + c)
                if b < 0.0:
                    shift = -shift
                shift = c / (b + shift)
            f = (sk + sp) * (sk - sp) + shift
            g = sk * ek

            # Chase the bulge from row k to row p-1.
            for j in range(k, p - 1):
                t = math.hypot(f, g)
                cs = f / t
                sn = g / t
                if j != k:
                    e[j - 1] = t
                f = cs * d[j] + sn * e[j]
                e[j] = cs * e[j] - sn * d[j]
                g = sn * d[j + 1]
                d[j + 1] = cs * d[j + 1]
                _rotate(V, j, j + 1, cs, sn)

                t = math.hypot(f, g)
                cs = f / t
                sn = g / t
                d[j] = t
                f = cs * e[j] + sn * d[j + 1]
                d[j + 1] = -sn * e[j] + cs * d[j + 1]
                g = sn * e[j + 1]
                e[j + 1] = cs * e[j + 1]
                _rotate(U, j, j + 1, cs, sn)

            e[p - 2] = f
            iterations += 1
            sweeps += 1

        else:
            if d[k] <= 0.0:
                d[k] = -d[k] if d[k] < 0.0 else 0.0
                V[:, k] = -V[:, k]
            iterations = 0
            p -= 1

    return sweeps
