"""
Filter algebra: combine realized filters and re-realize the result.

The structure of the combined filter is a pure function of the combined
transfer function's denominator length.
"""

import logging

from dsp.interfaces import Connection, FilterKind, ILtiFilter
from .digital_filter import FirFilter, IirFilter, LtiFilter
from .transfer_function import TransferFunction

logger = logging.getLogger('dsp.filters.algebra')


def classify(tf: TransferFunction) -> FilterKind:
    """Non-recursive iff the denominator is a single coefficient."""
    if len(tf.denominator) > 1:
        return FilterKind.RECURSIVE
    return FilterKind.NON_RECURSIVE


def realize(tf: TransferFunction, dtype=None) -> LtiFilter:
    """
    Build the minimal runtime structure for a transfer function.

    Args:
        tf: Design-precision transfer function (stays attached to the result)
        dtype: Runtime precision override

    Returns:
        FirFilter for a trivial denominator, IirFilter otherwise
    """
    if classify(tf) is FilterKind.NON_RECURSIVE:
        return FirFilter.from_tf(tf, dtype=dtype)
    return IirFilter.from_tf(tf, dtype=dtype)


def combine(f1: ILtiFilter, f2: ILtiFilter, connection: Connection) -> LtiFilter:
    """
    Connect two filters and realize the combined system.

    Args:
        f1: First filter
        f2: Second filter
        connection: SERIES (product of transfer functions) or PARALLEL (sum)

    Returns:
        New filter; the operands are left untouched
    """
    if connection is Connection.SERIES:
        tf = f1.tf * f2.tf
    elif connection is Connection.PARALLEL:
        tf = f1.tf + f2.tf
    else:
        raise ValueError(f"Unsupported connection: {connection}")

    result = realize(tf)

    logger.debug(f"Combined {f1.kind.value} and {f2.kind.value} filters in {connection.value} "
                 f"-> {result.kind.value}")
    return result
