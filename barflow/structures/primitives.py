"""
Fixed-capacity storage primitive for O(1) hot-loop operations.

RingBuffer is an index-based circular array over a preallocated numpy
buffer. It never reallocates: capacity is fixed at construction and a push
into a full buffer overwrites (and reports) the oldest element.

Performance Contract:
- RingBuffer.push(): O(1)
- RingBuffer.__getitem__(): O(1)
- RingBuffer.oldest() / newest(): O(1)
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np


class RingBuffer:
    """
    Fixed-size circular buffer for O(1) push and index access.

    Elements are accessed by index where 0 is the oldest element
    and len-1 is the most recently pushed element.

    Example:
        >>> buf = RingBuffer(size=3)
        >>> buf.push(1.0)
        >>> buf.push(2.0)
        >>> buf.push(3.0)
        >>> buf.is_full()
        True
        >>> buf.push(4.0)  # overwrites 1.0
        1.0
        >>> buf[0]
        2.0
        >>> buf.newest()
        4.0

    Attributes:
        size: Maximum number of elements the buffer can hold.
    """

    __slots__ = ("size", "_buffer", "_head", "_count")

    def __init__(self, size: int) -> None:
        """
        Initialize ring buffer with fixed size.

        Args:
            size: Maximum number of elements (must be >= 1).

        Raises:
            ValueError: If size < 1.
        """
        if size < 1:
            raise ValueError(
                f"size must be >= 1, got {size}\n"
                f"\n"
                f"Fix: RingBuffer(size=14)"
            )
        self.size = size
        self._buffer = np.full(size, np.nan, dtype=np.float64)
        self._head = 0  # Next write position (== oldest slot once full)
        self._count = 0  # Number of elements stored

    def push(self, value: float) -> float | None:
        """
        Add a value to the buffer, overwriting oldest if full.

        Args:
            value: Value to add.

        Returns:
            The evicted oldest value if the buffer was full, else None.
        """
        evicted = None
        if self._count == self.size:
            evicted = float(self._buffer[self._head])
        self._buffer[self._head] = value
        self._head = (self._head + 1) % self.size
        if self._count < self.size:
            self._count += 1
        return evicted

    def __getitem__(self, idx: int) -> float:
        """
        Get element by logical index (0 = oldest, count-1 = newest).

        Raises:
            IndexError: If idx is out of range.
        """
        if idx < 0 or idx >= self._count:
            raise IndexError(
                f"Index {idx} out of range [0, {self._count})\n"
                f"\n"
                f"Buffer has {self._count} elements."
            )
        # Physical index: oldest element is at (_head - _count) mod size
        physical = (self._head - self._count + idx) % self.size
        return float(self._buffer[physical])

    def oldest(self) -> float:
        """Return the oldest element (next to be evicted when full)."""
        return self[0]

    def newest(self) -> float:
        """Return the most recently pushed element."""
        return self[self._count - 1]

    def __iter__(self) -> Iterator[float]:
        """Iterate from oldest to newest."""
        start = self._head - self._count
        for i in range(self._count):
            yield float(self._buffer[(start + i) % self.size])

    def is_full(self) -> bool:
        """True if buffer contains exactly 'size' elements."""
        return self._count == self.size

    def __len__(self) -> int:
        """Return the number of elements currently in the buffer."""
        return self._count

    def clear(self) -> None:
        """Clear all elements from the buffer."""
        self._buffer.fill(np.nan)
        self._head = 0
        self._count = 0

    def to_array(self) -> np.ndarray:
        """
        Return a copy of the buffer contents in logical order.

        Returns:
            numpy array with oldest element first, newest last.
            Length equals current count (not size).
        """
        if self._count == 0:
            return np.array([], dtype=np.float64)
        start = (self._head - self._count) % self.size
        return np.roll(self._buffer, -start)[: self._count].copy()
