"""
Second-order-section (biquad cascade) codec.

Converts a TransferFunction into an ordered cascade of real quadratic
sections and back. Roots are paired "nearest first": the pole closest to
the unit circle goes into the last section together with the zeros
nearest to it, which keeps the high-Q sections at the end of the cascade.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from core import get_config
from dsp.interfaces import RootKind
from dsp.utils.polynomials import (
    poly_multiply, poly_from_roots, split_conjugates, nearest_root_index
)
from ..exceptions import SosPairingError
from ..transfer_function import TransferFunction

logger = logging.getLogger('dsp.filters.design.sos_codec')


def tf_to_sos(tf: TransferFunction, tolerance: Optional[float] = None) -> List[TransferFunction]:
    """
    Factor a transfer function into second-order sections.

    Args:
        tf: Transfer function to decompose
        tolerance: Relative tolerance for real / conjugate root detection,
                   configured root_pairing_tolerance if omitted

    Returns:
        Sections with monic numerators and denominators; the system gain
        is applied to the first section only

    Raises:
        SosPairingError: If the numerator starts with a zero coefficient
                         or complex roots cannot be paired
    """
    tolerance = get_config().root_pairing_tolerance if tolerance is None else tolerance

    if tf.numerator[0] == 0:
        raise SosPairingError("numerator with a leading zero coefficient (pure delay) "
                              "cannot be factored into sections")

    gain = tf.gain
    zeros = list(tf.zeros)
    poles = list(tf.poles)

    # the shorter side gets neutral roots at the origin
    count = max(len(zeros), len(poles))
    zeros += [0j] * (count - len(zeros))
    poles += [0j] * (count - len(poles))

    if count == 0:
        return [TransferFunction([gain], [1.0])]

    section_count = (count + 1) // 2
    if count % 2 == 1:
        zeros.append(0j)
        poles.append(0j)

    try:
        z_complex, z_real = split_conjugates(zeros, tolerance)
        p_complex, p_real = split_conjugates(poles, tolerance)
    except ValueError as e:
        raise SosPairingError(f"Cannot pair roots into real sections: {e}") from e

    # real roots carry an exact zero imaginary part from here on
    z = np.concatenate([z_complex, z_real.astype(np.complex128)])
    p = np.concatenate([p_complex, p_real.astype(np.complex128)])

    sections: List[Optional[TransferFunction]] = [None] * section_count

    for i in range(section_count - 1, -1, -1):
        p1_idx = int(np.argmin(np.abs(1 - np.abs(p))))
        p1 = p[p1_idx]
        p = np.delete(p, p1_idx)

        if p1.imag != 0:
            p2 = np.conj(p1)
        else:
            real_idx = np.flatnonzero(p.imag == 0)
            p2_idx = real_idx[np.argmin(np.abs(1 - np.abs(p[real_idx])))]
            p2 = p[p2_idx]
            p = np.delete(p, p2_idx)

        z1_idx = nearest_root_index(z, p1, RootKind.ANY)
        z1 = z[z1_idx]
        z = np.delete(z, z1_idx)

        if z1.imag != 0:
            z2 = np.conj(z1)
        else:
            z2_idx = nearest_root_index(z, p1, RootKind.REAL)
            z2 = z[z2_idx]
            z = np.delete(z, z2_idx)

        sections[i] = TransferFunction(poly_from_roots([z1, z2]), poly_from_roots([p1, p2]))

    sections[0] = TransferFunction(gain * sections[0].numerator, sections[0].denominator)

    logger.debug(f"Decomposed system of order {count} into {section_count} sections")
    return sections


def sos_to_tf(sections: Sequence[TransferFunction]) -> TransferFunction:
    """
    Multiply sections back into one transfer function.

    Args:
        sections: Cascade in processing order

    Returns:
        Composite transfer function
    """
    if not sections:
        raise ValueError("At least one section is required")

    numerator = np.array([1.0])
    denominator = np.array([1.0])
    for section in sections:
        numerator = poly_multiply(numerator, section.numerator)
        denominator = poly_multiply(denominator, section.denominator)

    return TransferFunction(numerator, denominator)


def sos_to_array(sections: Sequence[TransferFunction]) -> np.ndarray:
    """
    Pack sections into the (n, 6) [b0, b1, b2, a0, a1, a2] layout used by scipy.signal.

    Raises:
        ValueError: If a section has more than three coefficients
    """
    sos = np.zeros((len(sections), 6))
    for i, section in enumerate(sections):
        b, a = section.numerator, section.denominator
        if len(b) > 3 or len(a) > 3:
            raise ValueError(f"Section {i} is not second order")
        sos[i, :len(b)] = b
        sos[i, 3:3 + len(a)] = a
    return sos


def sos_from_array(sos: np.ndarray) -> List[TransferFunction]:
    """Unpack an (n, 6) second-order-section array into transfer functions."""
    sos = np.atleast_2d(np.asarray(sos, dtype=np.float64))
    if sos.ndim != 2 or sos.shape[1] != 6:
        raise ValueError(f"SOS array must have shape (n, 6), got {sos.shape}")
    return [TransferFunction(row[:3], row[3:]) for row in sos]
