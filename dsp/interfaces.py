"""
LTI Filter Engine Interfaces

This module defines the value objects, enumerations and protocols shared by
the transfer-function layer and the realized (runtime) filters.
"""

from typing import TYPE_CHECKING, Protocol
from dataclasses import dataclass
from enum import Enum
import numpy as np

if TYPE_CHECKING:
    from dsp.filters.transfer_function import TransferFunction

class FilterKind(Enum):
    """Structure of a realized filter"""
    NON_RECURSIVE = "non_recursive"
    RECURSIVE = "recursive"

class Connection(Enum):
    """How two LTI systems are connected"""
    SERIES = "series"
    PARALLEL = "parallel"

class RootKind(Enum):
    """Root subsets used when searching for the nearest root"""
    ANY = "any"
    REAL = "real"
    COMPLEX = "complex"

@dataclass(frozen=True)
class DiscreteSignal:
    """
    Immutable discrete-time signal.

    The sampling rate is opaque to filters: it is carried through
    unchanged into filtered results.
    """
    samples: np.ndarray
    sampling_rate: float

    def __post_init__(self):
        """Validate signal parameters"""
        samples = np.asarray(self.samples, dtype=np.float32)
        if samples.ndim != 1:
            raise ValueError("Signal samples must be a 1D array")

        if self.sampling_rate <= 0:
            raise ValueError("Sampling rate must be positive")

        # Create immutable copy of sample data
        samples = samples.copy()
        samples.flags.writeable = False
        object.__setattr__(self, 'samples', samples)

    @property
    def length(self) -> int:
        """Number of samples"""
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Signal duration in seconds"""
        return len(self.samples) / self.sampling_rate

class ILtiFilter(Protocol):
    """
    Interface for realized LTI filters.

    Defines the contract consumed by effects and applications: streaming
    and block filtering, state reset and access to the transfer function.
    """

    @property
    def tf(self) -> 'TransferFunction':
        """Transfer function used for analysis and filter algebra"""
        ...

    @property
    def kind(self) -> FilterKind:
        """Recursive or non-recursive structure"""
        ...

    def process(self, sample: float) -> float:
        """
        Filter one sample (online).

        Args:
            sample: Input sample

        Returns:
            Output sample
        """
        ...

    def apply_block(self, samples: np.ndarray) -> np.ndarray:
        """
        Filter an entire array from rest (offline).

        Args:
            samples: Input samples

        Returns:
            Output samples, same length as the input
        """
        ...

    def apply_to(self, signal: DiscreteSignal) -> DiscreteSignal:
        """Filter a signal, keeping its sampling rate"""
        ...

    def reset(self) -> None:
        """Clear the streaming state"""
        ...
