"""
Transfer function model of discrete-time LTI systems.

A TransferFunction owns numerator and denominator coefficients at full
(design) precision. Zero/pole/gain and state-space forms are computed
from the current coefficients on every access.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy import signal

from core import get_config
from dsp.utils.polynomials import (
    poly_multiply, poly_add, poly_roots, poly_from_roots
)
from .exceptions import InvalidCoefficientsError, UnsupportedDegreeError

logger = logging.getLogger('dsp.filters.transfer_function')


@dataclass(frozen=True)
class StateSpace:
    """
    Immutable state-space realization (A, B, C, D) of a SISO system.

    x[n+1] = A x[n] + B u[n]
    y[n]   = C x[n] + D u[n]
    """
    A: np.ndarray
    B: np.ndarray
    C: np.ndarray
    D: float

    def __post_init__(self):
        """Validate matrix shapes and create immutable copies"""
        A = np.array(self.A, dtype=np.float64, ndmin=2)
        if A.size == 0:
            A = A.reshape(0, 0)
        B = np.array(self.B, dtype=np.float64).ravel()
        C = np.array(self.C, dtype=np.float64).ravel()

        n = A.shape[0]
        if A.shape != (n, n):
            raise ValueError(f"A must be square, got shape {A.shape}")
        if len(B) != n or len(C) != n:
            raise ValueError(f"B and C must have length {n}, got {len(B)} and {len(C)}")

        for matrix in (A, B, C):
            matrix.flags.writeable = False

        object.__setattr__(self, 'A', A)
        object.__setattr__(self, 'B', B)
        object.__setattr__(self, 'C', C)
        object.__setattr__(self, 'D', float(self.D))

    @property
    def order(self) -> int:
        """Number of state variables"""
        return self.A.shape[0]


class TransferFunction:
    """
    Rational transfer function H(z) = B(z) / A(z).

    Coefficients are ordered by ascending power of z^-1: index 0 is the
    constant term. A system is normalized when denominator[0] == 1.
    """

    def __init__(self, numerator: Sequence[float], denominator: Optional[Sequence[float]] = None):
        """
        Initialize transfer function from coefficients.

        Args:
            numerator: Numerator coefficients
            denominator: Denominator coefficients, [1] (pure FIR) if omitted

        Raises:
            InvalidCoefficientsError: If an array is empty or denominator[0] is zero
        """
        self._numerator = self._as_coefficients(numerator, 'numerator')
        self._denominator = self._as_coefficients(
            [1.0] if denominator is None else denominator, 'denominator'
        )

        if self._denominator[0] == 0:
            raise InvalidCoefficientsError("leading denominator coefficient cannot be zero")

    @classmethod
    def from_zpk(cls, zeros: Sequence[complex], poles: Sequence[complex],
                 gain: float = 1.0) -> 'TransferFunction':
        """
        Build a transfer function from zeros, poles and gain.

        Complex zeros and poles must come in conjugate pairs.
        """
        numerator = gain * poly_from_roots(zeros)
        denominator = poly_from_roots(poles)
        return cls(numerator, denominator)

    @classmethod
    def from_state_space(cls, ss: StateSpace) -> 'TransferFunction':
        """
        Build a transfer function from a state-space realization.

        den = det(zI - A), num = det(zI - A + B C) + (D - 1) den

        Both come out in powers of z. Leading (round-off) zeros of the
        numerator are dropped so that a strictly proper system keeps its
        original z^-1 alignment instead of gaining a delay.
        """
        if ss.order == 0:
            return cls([ss.D], [1.0])

        denominator = np.real(np.poly(ss.A))
        numerator = np.real(np.poly(ss.A - np.outer(ss.B, ss.C))) + (ss.D - 1.0) * denominator

        threshold = 1e-12 * max(np.max(np.abs(numerator)), np.finfo(np.float64).tiny)
        significant = np.flatnonzero(np.abs(numerator) > threshold)
        start = significant[0] if len(significant) else len(numerator) - 1
        return cls(numerator[start:], denominator)

    @staticmethod
    def _as_coefficients(values: Sequence[float], name: str) -> np.ndarray:
        coefficients = np.array(values, dtype=np.float64).ravel()
        if coefficients.size == 0:
            raise InvalidCoefficientsError(f"{name} coefficients cannot be empty")
        return coefficients

    @property
    def numerator(self) -> np.ndarray:
        """Numerator coefficients (read-only view)"""
        view = self._numerator.view()
        view.flags.writeable = False
        return view

    @property
    def denominator(self) -> np.ndarray:
        """Denominator coefficients (read-only view)"""
        view = self._denominator.view()
        view.flags.writeable = False
        return view

    @property
    def zeros(self) -> np.ndarray:
        """Zeros of the transfer function"""
        return poly_roots(self._numerator)

    @property
    def poles(self) -> np.ndarray:
        """Poles of the transfer function"""
        return poly_roots(self._denominator)

    @property
    def gain(self) -> float:
        """Ratio of the leading non-zero numerator coefficient to denominator[0]"""
        nonzero = np.flatnonzero(self._numerator)
        if len(nonzero) == 0:
            return 0.0
        return float(self._numerator[nonzero[0]] / self._denominator[0])

    @property
    def state_space(self) -> StateSpace:
        """
        Controllable canonical state-space realization.

        Raises:
            UnsupportedDegreeError: If the numerator is longer than the denominator
        """
        if len(self._numerator) > len(self._denominator):
            raise UnsupportedDegreeError(
                f"Improper system: numerator length {len(self._numerator)} "
                f"exceeds denominator length {len(self._denominator)}"
            )

        a = self._denominator / self._denominator[0]
        b = self._numerator / self._denominator[0]

        n = len(a) - 1
        padded = np.zeros(n + 1)
        padded[n + 1 - len(b):] = b
        d = padded[0]

        if n == 0:
            return StateSpace(np.zeros((0, 0)), np.zeros(0), np.zeros(0), d)

        A = np.zeros((n, n))
        A[0, :] = -a[1:]
        A[1:, :-1] = np.eye(n - 1)

        B = np.zeros(n)
        B[0] = 1.0

        C = padded[1:] - d * a[1:]

        return StateSpace(A, B, C, d)

    def normalize(self, tolerance: Optional[float] = None) -> None:
        """
        Divide all coefficients by denominator[0] in place.

        Args:
            tolerance: Threshold for "already 1" and "zero" checks,
                       configured normalization_tolerance if omitted

        Raises:
            InvalidCoefficientsError: If denominator[0] is numerically zero
        """
        tolerance = get_config().normalization_tolerance if tolerance is None else tolerance
        a0 = self._denominator[0]

        if abs(a0 - 1.0) < tolerance:
            return

        if abs(a0) < tolerance:
            raise InvalidCoefficientsError("leading denominator coefficient cannot be zero")

        self._numerator /= a0
        self._denominator /= a0

    def group_delay(self, fft_size: Optional[int] = None) -> np.ndarray:
        """
        Group delay in samples on fft_size // 2 + 1 frequencies in [0, pi].

        Uses the derivative-of-phase relation with c = b * reversed(a):
        gd(w) = Re(DFT(n c[n]) / DFT(c[n])) - (len(a) - 1)

        Args:
            fft_size: DFT size, configured default_fft_size if omitted

        Returns:
            Group delay values (0 at singular frequencies)
        """
        fft_size = fft_size or get_config().default_fft_size

        c = np.convolve(self._numerator, self._denominator[::-1])
        if len(c) > fft_size:
            raise ValueError(f"fft_size {fft_size} is too small for a system of length {len(c)}")

        num = np.fft.rfft(c * np.arange(len(c)), fft_size)
        den = np.fft.rfft(c, fft_size)

        singular = np.abs(den) < 10 * np.finfo(np.float64).eps
        if np.any(singular):
            logger.warning(f"Group delay is singular at {np.count_nonzero(singular)} frequencies, setting to 0")

        gd = np.zeros(len(den))
        gd[~singular] = np.real(num[~singular] / den[~singular]) - (len(self._denominator) - 1)
        return gd

    def frequency_response(self, fft_size: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Complex frequency response on fft_size // 2 + 1 frequencies in [0, pi].

        Returns:
            Tuple of (normalized angular frequencies, complex response)
        """
        fft_size = fft_size or get_config().default_fft_size
        w, h = signal.freqz(self._numerator, self._denominator,
                            worN=fft_size // 2 + 1, include_nyquist=True)
        return w, h

    def impulse_response(self, length: Optional[int] = None) -> np.ndarray:
        """Impulse response truncated to length samples"""
        length = length or get_config().default_impulse_response_length
        impulse = np.zeros(length)
        impulse[0] = 1.0
        return signal.lfilter(self._numerator, self._denominator, impulse)

    def __mul__(self, other: 'TransferFunction') -> 'TransferFunction':
        """Series connection: numerators and denominators are multiplied"""
        if not isinstance(other, TransferFunction):
            return NotImplemented

        return TransferFunction(
            poly_multiply(self._numerator, other._numerator),
            poly_multiply(self._denominator, other._denominator)
        )

    def __add__(self, other: 'TransferFunction') -> 'TransferFunction':
        """Parallel connection: b1 a2 + b2 a1 over a1 a2"""
        if not isinstance(other, TransferFunction):
            return NotImplemented

        numerator = poly_add(
            poly_multiply(self._numerator, other._denominator),
            poly_multiply(other._numerator, self._denominator)
        )
        return TransferFunction(numerator, poly_multiply(self._denominator, other._denominator))

    def __repr__(self) -> str:
        return (f"TransferFunction(numerator={self._numerator.tolist()}, "
                f"denominator={self._denominator.tolist()})")
