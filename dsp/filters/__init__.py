"""
Digital Filter System

This package provides the transfer-function model of LTI systems, its
conversions (zero/pole/gain, state space, second-order sections), filter
algebra, and runtime filters with streaming and block execution.
"""

from .transfer_function import TransferFunction, StateSpace
from .digital_filter import LtiFilter, IirFilter, FirFilter
from .filter_chain import FilterChain
from .delay_line import DelayLine
from .algebra import classify, realize, combine
from .design.sos_codec import tf_to_sos, sos_to_tf, sos_to_array, sos_from_array
from .exceptions import (
    FilterError, FilterDesignError, FilterProcessingError,
    InvalidCoefficientsError, UnsupportedDegreeError, SosPairingError, LengthMismatchError
)

__all__ = [
    'TransferFunction',
    'StateSpace',
    'LtiFilter',
    'IirFilter',
    'FirFilter',
    'FilterChain',
    'DelayLine',
    'classify',
    'realize',
    'combine',
    'tf_to_sos',
    'sos_to_tf',
    'sos_to_array',
    'sos_from_array',
    'FilterError',
    'FilterDesignError',
    'FilterProcessingError',
    'InvalidCoefficientsError',
    'UnsupportedDegreeError',
    'SosPairingError',
    'LengthMismatchError'
]
