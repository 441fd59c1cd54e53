"""
Polynomial and complex-root helpers.

Coefficient sequences are ordered by ascending power of the delay
operator z^-1 (index 0 is the constant term), which is also descending
power of z. Roots are therefore the roots in the z-plane.
"""

from typing import Sequence, Tuple

import numpy as np

from ..interfaces import RootKind


def poly_multiply(p: Sequence[float], q: Sequence[float]) -> np.ndarray:
    """Polynomial product (full convolution)."""
    return np.convolve(np.asarray(p, dtype=np.float64), np.asarray(q, dtype=np.float64))


def poly_add(p: Sequence[float], q: Sequence[float]) -> np.ndarray:
    """
    Sum of two coefficient sequences aligned at index 0.

    The shorter sequence is zero-padded at the end.
    """
    p = np.asarray(p, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    result = np.zeros(max(len(p), len(q)))
    result[:len(p)] += p
    result[:len(q)] += q
    return result


def poly_roots(coefficients: Sequence[float]) -> np.ndarray:
    """Roots of a coefficient sequence (leading zeros are ignored)."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    nonzero = np.flatnonzero(coefficients)
    if len(nonzero) == 0:
        return np.array([], dtype=np.complex128)

    return np.roots(coefficients[nonzero[0]:]).astype(np.complex128)


def poly_from_roots(roots: Sequence[complex]) -> np.ndarray:
    """
    Monic polynomial with the given roots.

    For conjugate-symmetric roots the (round-off) imaginary part
    of the coefficients is dropped.
    """
    roots = np.asarray(roots, dtype=np.complex128)
    if len(roots) == 0:
        return np.array([1.0])

    return np.real(np.poly(roots))


def split_conjugates(roots: Sequence[complex], tol: float = 1e-8) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split roots into complex-conjugate pairs and real roots.

    Args:
        roots: Roots of a real polynomial
        tol: Relative tolerance used to decide whether a root is real
             and whether two roots are conjugates

    Returns:
        Tuple (complex_half, reals): one member of each conjugate pair
        (positive imaginary part) and the real roots as floats

    Raises:
        ValueError: If a complex root has no conjugate partner
    """
    roots = np.asarray(roots, dtype=np.complex128)
    if len(roots) == 0:
        return np.array([], dtype=np.complex128), np.array([], dtype=np.float64)

    scale = np.maximum(np.abs(roots), 1.0)
    is_real = np.abs(roots.imag) <= tol * scale

    reals = np.sort(roots[is_real].real)
    upper = list(roots[~is_real & (roots.imag > 0)])
    lower = list(roots[~is_real & (roots.imag < 0)])

    if len(upper) != len(lower):
        raise ValueError("Complex roots do not come in conjugate pairs")

    complex_half = []
    for z in upper:
        distances = [abs(w - np.conj(z)) for w in lower]
        idx = int(np.argmin(distances))
        if distances[idx] > tol * max(abs(z), 1.0) * 1e3:
            raise ValueError(f"Root {z} has no conjugate partner")
        # average the pair so the quadratic factor is exactly real
        complex_half.append((z + np.conj(lower.pop(idx))) / 2)

    return np.array(complex_half, dtype=np.complex128), reals


def nearest_root_index(roots: Sequence[complex], target: complex,
                       kind: RootKind = RootKind.ANY) -> int:
    """
    Index of the root closest to target.

    Args:
        roots: Candidate roots
        target: Point in the z-plane
        kind: Restrict candidates to real or complex roots

    Returns:
        Index into roots

    Raises:
        ValueError: If no root of the requested kind exists
    """
    roots = np.asarray(roots, dtype=np.complex128)
    candidates = np.arange(len(roots))

    if kind is RootKind.REAL:
        candidates = candidates[roots.imag == 0]
    elif kind is RootKind.COMPLEX:
        candidates = candidates[roots.imag != 0]

    if len(candidates) == 0:
        raise ValueError(f"No {kind.value} root available")

    distances = np.abs(roots[candidates] - target)
    return int(candidates[np.argmin(distances)])
