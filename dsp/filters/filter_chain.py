"""
Cascade of realized filters.

Used to run a second-order-section decomposition as a chain of small
recursive filters, which is numerically far more robust than one
high-order difference equation at reduced precision.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from dsp.interfaces import FilterKind, ILtiFilter
from .digital_filter import LtiFilter
from .exceptions import FilterProcessingError
from .transfer_function import TransferFunction

logger = logging.getLogger('dsp.filters.filter_chain')


class FilterChain(LtiFilter):
    """
    Ordered collection of filters connected in series.

    Every member keeps its own streaming state; the chain's transfer
    function is the product of the members' transfer functions.
    Members can be any ILtiFilter implementation, not only LtiFilter
    subclasses.
    """

    def __init__(self, filters: Optional[Iterable[ILtiFilter]] = None):
        """
        Initialize chain.

        Args:
            filters: Filters in processing order
        """
        self._filters: List[ILtiFilter] = list(filters or [])

        logger.debug(f"FilterChain initialized with {len(self._filters)} filters")

    @classmethod
    def from_sos(cls, sections: Sequence[TransferFunction], dtype=None) -> 'FilterChain':
        """
        Realize a second-order-section cascade.

        Args:
            sections: Sections as returned by tf_to_sos
            dtype: Runtime precision override
        """
        from .algebra import realize
        return cls(realize(section, dtype=dtype) for section in sections)

    def add(self, filter_instance: ILtiFilter) -> None:
        """Append filter at the end of the chain"""
        self._filters.append(filter_instance)
        logger.debug(f"Added {type(filter_instance).__name__} to chain")

    def insert(self, index: int, filter_instance: ILtiFilter) -> None:
        """Insert filter at given position"""
        self._filters.insert(index, filter_instance)
        logger.debug(f"Inserted {type(filter_instance).__name__} at position {index}")

    def remove(self, index: int) -> ILtiFilter:
        """
        Remove filter from the chain.

        Args:
            index: Position of the filter

        Returns:
            The removed filter
        """
        filter_instance = self._filters.pop(index)
        logger.debug(f"Removed {type(filter_instance).__name__} from position {index}")
        return filter_instance

    @property
    def filters(self) -> List[ILtiFilter]:
        """Filters in processing order"""
        return self._filters.copy()

    def __len__(self) -> int:
        return len(self._filters)

    @property
    def tf(self) -> TransferFunction:
        """Product of the members' transfer functions"""
        tf = TransferFunction([1.0])
        for filter_instance in self._filters:
            tf = tf * filter_instance.tf
        return tf

    @property
    def kind(self) -> FilterKind:
        if any(f.kind is FilterKind.RECURSIVE for f in self._filters):
            return FilterKind.RECURSIVE
        return FilterKind.NON_RECURSIVE

    def process(self, sample: float) -> float:
        """Pass one sample through every filter in order"""
        for filter_instance in self._filters:
            sample = filter_instance.process(sample)
        return float(sample)

    def apply_block(self, samples: np.ndarray) -> np.ndarray:
        """
        Filter a whole array through every member from rest.

        Raises:
            FilterProcessingError: If a member fails
        """
        processed = np.asarray(samples)
        if processed.ndim != 1:
            raise FilterProcessingError(f"Unsupported signal shape: {processed.shape}")

        processed = processed.copy()
        for filter_instance in self._filters:
            processed = filter_instance.apply_block(processed)
        return processed

    def reset(self) -> None:
        """Reset state for all filters in the chain"""
        for filter_instance in self._filters:
            filter_instance.reset()
        logger.debug("Reset all filter states in chain")
