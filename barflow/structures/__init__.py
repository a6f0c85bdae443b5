"""
Shared window primitives.

Primitives (from primitives.py):
    RingBuffer              - Fixed-size circular buffer (preallocated numpy array)

Windows (from window.py):
    SlidingWindowAggregate  - O(1) running sum / sum of squares with an open slot
    RangeTracker            - Rolling min/max with %K/%D smoothing stages
"""

from .primitives import RingBuffer
from .window import RangeTracker, SlidingWindowAggregate

__all__ = [
    "RingBuffer",
    "SlidingWindowAggregate",
    "RangeTracker",
]
