"""Circular delay line used by the streaming filters."""

import numpy as np


class DelayLine:
    """Fixed-length circular buffer with a decrementing write offset.

    The most recent sample sits at the current offset; older samples follow
    it at increasing indices (wrapping around the end of the buffer). After
    each write the offset moves one step back, so nothing is ever shifted.

    Usage:
        dl = DelayLine(3)
        dl.write(x)
        y = dl.dot(coeffs)      # coeffs[0] * newest + coeffs[1] * previous + ...
        dl.advance()
    """

    def __init__(self, length: int, dtype=np.float32):
        if length <= 0:
            raise ValueError("Delay line length must be positive")
        self.buffer = np.zeros(length, dtype=dtype)
        self.length = length
        self.offset = length - 1

    def write(self, sample: float):
        """Store a sample at the current offset."""
        self.buffer[self.offset] = sample

    def advance(self):
        """Move the write offset one step back (wrapping)."""
        self.offset -= 1
        if self.offset < 0:
            self.offset = self.length - 1

    def dot(self, coeffs: np.ndarray, skip_current: bool = False) -> float:
        """Weighted sum of the buffer walked from the current offset.

        skip_current=False: coeffs[0] pairs with buffer[offset], coeffs[1]
        with buffer[offset + 1], ... (len(coeffs) == length).

        skip_current=True: the slot at the offset (about to be overwritten)
        is skipped; coeffs[1] pairs with buffer[offset + 1] and coeffs[0] is
        ignored. Used for the recursive part of the difference equation.
        """
        buf = self.buffer
        off = self.offset
        n = self.length
        if skip_current:
            # coeffs[1 : n - off] -> buf[off + 1:], coeffs[n - off:] -> buf[:off]
            return buf[off + 1:] @ coeffs[1:n - off] + buf[:off] @ coeffs[n - off:]
        return buf[off:] @ coeffs[:n - off] + buf[:off] @ coeffs[n - off:]

    def reset(self):
        """Clear the buffer and rewind the offset (no reallocation)."""
        self.buffer[:] = 0.0
        self.offset = self.length - 1
