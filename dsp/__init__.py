"""
DSP package of the LTI filter engine

Key Components:
- TransferFunction: design-precision model of an LTI system with
  zero/pole/gain and state-space views
- Second-order-section codec for numerically robust cascades
- Realized filters (IirFilter, FirFilter, FilterChain) with streaming
  (sample by sample) and block execution
- Filter algebra: series (*) and parallel (+) connection
"""

from .interfaces import (
    FilterKind, Connection, RootKind, DiscreteSignal, ILtiFilter
)
from .filters import (
    TransferFunction, StateSpace,
    LtiFilter, IirFilter, FirFilter, FilterChain, DelayLine,
    classify, realize, combine,
    tf_to_sos, sos_to_tf, sos_to_array, sos_from_array,
    FilterError, FilterDesignError, FilterProcessingError,
    InvalidCoefficientsError, UnsupportedDegreeError, SosPairingError, LengthMismatchError
)

__all__ = [
    'FilterKind', 'Connection', 'RootKind', 'DiscreteSignal', 'ILtiFilter',
    'TransferFunction', 'StateSpace',
    'LtiFilter', 'IirFilter', 'FirFilter', 'FilterChain', 'DelayLine',
    'classify', 'realize', 'combine',
    'tf_to_sos', 'sos_to_tf', 'sos_to_array', 'sos_from_array',
    'FilterError', 'FilterDesignError', 'FilterProcessingError',
    'InvalidCoefficientsError', 'UnsupportedDegreeError', 'SosPairingError', 'LengthMismatchError'
]
