"""
Realized (runtime) LTI filters.

A realized filter keeps its own reduced-precision coefficient set for
filtering and, optionally, the design-precision TransferFunction it was
built from for analysis. Two execution paths are provided: streaming
(process, sample by sample, with circular delay lines) and block
(apply_block, stateless, from rest).
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np
from scipy.signal import lfilter

from core import get_config
from dsp.interfaces import Connection, DiscreteSignal, FilterKind
from .delay_line import DelayLine
from .exceptions import (
    FilterDesignError, FilterProcessingError, InvalidCoefficientsError, LengthMismatchError
)
from .transfer_function import TransferFunction

logger = logging.getLogger('dsp.filters.digital_filter')


class LtiFilter(ABC):
    """
    Base class of realized LTI filters.

    Filters can be combined with * (series) and + (parallel); the result is
    a new filter realized from the combined transfer function.
    """

    @property
    @abstractmethod
    def tf(self) -> TransferFunction:
        """Transfer function used for analysis and filter algebra"""

    @property
    @abstractmethod
    def kind(self) -> FilterKind:
        """Recursive or non-recursive structure"""

    @abstractmethod
    def process(self, sample: float) -> float:
        """Filter one sample (online)"""

    @abstractmethod
    def apply_block(self, samples: np.ndarray) -> np.ndarray:
        """Filter a whole array from rest (offline)"""

    @abstractmethod
    def reset(self) -> None:
        """Clear streaming state"""

    def apply_to(self, signal: DiscreteSignal) -> DiscreteSignal:
        """
        Filter a signal offline.

        Args:
            signal: Input signal

        Returns:
            Filtered signal with the same sampling rate
        """
        return DiscreteSignal(self.apply_block(signal.samples), signal.sampling_rate)

    def __mul__(self, other: 'LtiFilter') -> 'LtiFilter':
        if not isinstance(other, LtiFilter):
            return NotImplemented
        from .algebra import combine
        return combine(self, other, Connection.SERIES)

    def __add__(self, other: 'LtiFilter') -> 'LtiFilter':
        if not isinstance(other, LtiFilter):
            return NotImplemented
        from .algebra import combine
        return combine(self, other, Connection.PARALLEL)


class IirFilter(LtiFilter):
    """
    Recursive filter realizing the difference equation

        y[n] = sum_k b[k] x[n-k] - sum_{m>=1} a[m] y[n-m]

    a[0] is assumed to be 1 while filtering; call normalize() for
    coefficient sets where it is not.
    """

    def __init__(self, b: Sequence[float], a: Sequence[float], dtype=None):
        """
        Initialize filter from coefficients.

        Coefficients are cast to the runtime precision (configured
        runtime_dtype unless dtype is given). Use from_tf() to keep a
        design-precision transfer function attached for analysis.

        Args:
            b: Numerator (non-recursive) coefficients
            a: Denominator (recursive) coefficients
            dtype: Runtime precision override
        """
        dtype = np.dtype(get_config().runtime_dtype if dtype is None else dtype)

        self._b = np.array(b, dtype=dtype).ravel()
        self._a = np.array(a, dtype=dtype).ravel()
        if self._b.size == 0 or self._a.size == 0:
            raise InvalidCoefficientsError("Filter coefficients cannot be empty")

        self._tf: Optional[TransferFunction] = None

        self._delay_line_b: Optional[DelayLine] = None
        self._delay_line_a: Optional[DelayLine] = None
        self._reset_internals()

        logger.debug(f"Initialized {type(self).__name__} "
                     f"(b: {len(self._b)}, a: {len(self._a)}, dtype: {dtype.name})")

    @classmethod
    def from_tf(cls, tf: TransferFunction, dtype=None) -> 'IirFilter':
        """
        Realize a transfer function.

        Runtime coefficients are cast down; tf itself stays attached
        at full precision.
        """
        filt = cls(tf.numerator, tf.denominator, dtype=dtype)
        filt._tf = tf
        return filt

    @property
    def tf(self) -> TransferFunction:
        """
        Attached transfer function, or one derived from the runtime coefficients.

        Raises:
            InvalidCoefficientsError: If no transfer function is attached and
                                      the runtime a[0] is zero (so the filter
                                      cannot take part in filter algebra)
        """
        if self._tf is not None:
            return self._tf

        if self._a[0] == 0:
            raise InvalidCoefficientsError(
                f"Cannot derive a transfer function for {type(self).__name__}: "
                f"runtime denominator a[0] is zero"
            )
        return TransferFunction(self._b.astype(np.float64), self._a.astype(np.float64))

    @property
    def kind(self) -> FilterKind:
        return FilterKind.RECURSIVE

    @property
    def b(self) -> np.ndarray:
        """Runtime numerator coefficients (read-only view)"""
        view = self._b.view()
        view.flags.writeable = False
        return view

    @property
    def a(self) -> np.ndarray:
        """Runtime denominator coefficients (read-only view)"""
        view = self._a.view()
        view.flags.writeable = False
        return view

    def process(self, sample: float) -> float:
        """
        Filter one sample using the circular delay lines.

        Args:
            sample: Input sample

        Returns:
            Output sample
        """
        dl_b = self._delay_line_b
        dl_a = self._delay_line_a

        dl_b.write(sample)
        output = dl_b.dot(self._b) - dl_a.dot(self._a, skip_current=True)
        dl_a.write(output)

        dl_b.advance()
        dl_a.advance()

        return float(output)

    def apply_block(self, samples: np.ndarray) -> np.ndarray:
        """
        Filter an entire array with zero initial conditions.

        The streaming delay lines are neither read nor written.

        Args:
            samples: Input samples (1D)

        Returns:
            Filtered samples, same length as the input

        Raises:
            FilterProcessingError: If processing fails
        """
        try:
            samples = np.asarray(samples, dtype=self._b.dtype)

            if samples.ndim != 1:
                raise FilterProcessingError(f"Unsupported signal shape: {samples.shape}")

            if samples.size == 0:
                return samples.copy()

            a = self._a.copy()
            a[0] = 1.0
            return lfilter(self._b, a, samples)

        except FilterProcessingError:
            raise
        except Exception as e:
            logger.error(f"Block filtering failed: {e}")
            raise FilterProcessingError(f"Block filtering error: {e}") from e

    def reset(self) -> None:
        """Zero both delay lines and rewind their offsets"""
        self._reset_internals()
        logger.debug("Filter state reset")

    def normalize(self, tolerance: Optional[float] = None) -> None:
        """
        Divide runtime coefficients by a[0] and normalize the attached
        transfer function (if any).

        The attached transfer function is normalized even when the runtime
        coefficients already are (FirFilter.from_tf scales b on its own).

        Raises:
            InvalidCoefficientsError: If a[0] is numerically zero
        """
        tolerance = get_config().normalization_tolerance if tolerance is None else tolerance
        a0 = float(self._a[0])

        if abs(a0) < tolerance:
            raise InvalidCoefficientsError("leading denominator coefficient cannot be zero")

        if self._tf is not None:
            self._tf.normalize(tolerance)

        if abs(a0 - 1.0) >= tolerance:
            self._a /= a0
            self._b /= a0

    def change_numerator_coefficients(self, b: Sequence[float], strict: Optional[bool] = None) -> None:
        """
        Replace runtime numerator coefficients in place.

        Args:
            b: New coefficients, same count as the current ones
            strict: Raise on a length mismatch instead of ignoring the call,
                    configured strict_coefficient_swap if omitted

        Raises:
            LengthMismatchError: On a length mismatch in strict mode
        """
        self._replace_coefficients(self._b, b, 'numerator', strict)

    def change_denominator_coefficients(self, a: Sequence[float], strict: Optional[bool] = None) -> None:
        """Replace runtime denominator coefficients in place (see change_numerator_coefficients)"""
        self._replace_coefficients(self._a, a, 'denominator', strict)

    def _replace_coefficients(self, target: np.ndarray, values: Sequence[float],
                              name: str, strict: Optional[bool]) -> None:
        values = np.asarray(values, dtype=target.dtype).ravel()

        if len(values) != len(target):
            strict = get_config().strict_coefficient_swap if strict is None else strict
            if strict:
                raise LengthMismatchError(
                    f"Expected {len(target)} {name} coefficients, got {len(values)}"
                )
            logger.debug(f"Ignoring {name} coefficients: expected {len(target)}, got {len(values)}")
            return

        target[:] = values

    def _reset_internals(self) -> None:
        if self._delay_line_b is None or self._delay_line_a is None:
            self._delay_line_b = DelayLine(len(self._b), dtype=self._b.dtype)
            self._delay_line_a = DelayLine(len(self._a), dtype=self._a.dtype)
        else:
            self._delay_line_b.reset()
            self._delay_line_a.reset()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(b={self._b.tolist()}, a={self._a.tolist()})"


class FirFilter(IirFilter):
    """
    Non-recursive filter: y[n] = sum_k b[k] x[n-k].

    The denominator is fixed to [1].
    """

    def __init__(self, b: Sequence[float], dtype=None):
        super().__init__(b, [1.0], dtype=dtype)

    @classmethod
    def from_tf(cls, tf: TransferFunction, dtype=None) -> 'FirFilter':
        """
        Realize a transfer function with a trivial denominator.

        Raises:
            FilterDesignError: If the denominator has more than one coefficient
        """
        if len(tf.denominator) != 1:
            raise FilterDesignError(
                f"Non-recursive realization needs a trivial denominator, got {len(tf.denominator)} coefficients"
            )

        filt = cls(tf.numerator / tf.denominator[0], dtype=dtype)
        filt._tf = tf
        return filt

    @property
    def kind(self) -> FilterKind:
        return FilterKind.NON_RECURSIVE

    def __repr__(self) -> str:
        return f"FirFilter(b={self._b.tolist()})"
