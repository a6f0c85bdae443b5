"""
Windowed aggregates with a dual (finalized / provisional) update contract.

- SlidingWindowAggregate: O(1) running sum and sum of squares over the last
  `periods` samples (mean, sample variance, std).
- RangeTracker: rolling min/max over a window with %K/%D smoothing stages
  (stochastic oscillator over an arbitrary series, e.g. RSI).

Both keep a committed window that only push_close() changes, plus a single
"open slot" holding the sample of the bar that is still forming. A
provisional push computes the observable result for "committed window with
its oldest sample expired and the open sample appended", straight from the
committed state. Repeated provisional pushes therefore replace the open slot
instead of compounding, and push_close() simply drops it.

Warm-up only advances on finalized pushes: a provisional push into a window
that is not yet full is ignored.
"""

from __future__ import annotations

import math
from itertools import islice
from typing import Iterable

import numpy as np

from .primitives import RingBuffer


class SlidingWindowAggregate:
    """
    Fixed-capacity window of scalars with O(1) sum / sum-of-squares.

    Example:
        >>> w = SlidingWindowAggregate(periods=3)
        >>> for x in (1.0, 2.0, 3.0):
        ...     w.push_close(x)
        >>> w.mean()
        2.0
        >>> w.push_provisional(6.0)   # window seen as [2, 3, 6]
        True
        >>> w.mean()
        3.6666666666666665
        >>> w.push_close(4.0)         # open slot dropped, window [2, 3, 4]
        >>> w.mean()
        3.0
    """

    __slots__ = (
        "periods",
        "_buffer",
        "_sum",
        "_sum_sq",
        "_open",
        "_open_sum",
        "_open_sum_sq",
    )

    def __init__(self, periods: int) -> None:
        if periods < 1:
            raise ValueError(
                f"periods must be >= 1, got {periods}\n"
                f"\n"
                f"Fix: SlidingWindowAggregate(periods=14)"
            )
        self.periods = periods
        self._buffer = RingBuffer(periods)
        self._sum = 0.0
        self._sum_sq = 0.0
        self._open: float | None = None
        self._open_sum = 0.0
        self._open_sum_sq = 0.0

    def push_close(self, x: float) -> None:
        """Commit a sample from a closed bar, evicting the oldest if full."""
        self._open = None
        evicted = self._buffer.push(x)
        if evicted is not None:
            self._sum -= evicted
            self._sum_sq -= evicted * evicted
        self._sum += x
        self._sum_sq += x * x

    def push_provisional(self, x: float) -> bool:
        """
        Replace the open slot with the forming bar's sample.

        Returns:
            False (and changes nothing) while the window is warming up.
        """
        if not self._buffer.is_full():
            return False
        oldest = self._buffer.oldest()
        self._open = x
        self._open_sum = self._sum - oldest + x
        self._open_sum_sq = self._sum_sq - oldest * oldest + x * x
        return True

    def discard_provisional(self) -> None:
        """Drop the open slot; observable state falls back to committed."""
        self._open = None

    @property
    def in_candle(self) -> bool:
        """True while a provisional sample is applied."""
        return self._open is not None

    @property
    def open_value(self) -> float | None:
        return self._open

    @property
    def sum(self) -> float:
        """Observable sum (includes the open slot, if any)."""
        return self._open_sum if self._open is not None else self._sum

    @property
    def sum_sq(self) -> float:
        """Observable sum of squares (includes the open slot, if any)."""
        return self._open_sum_sq if self._open is not None else self._sum_sq

    @property
    def committed_sum(self) -> float:
        return self._sum

    @property
    def committed_sum_sq(self) -> float:
        return self._sum_sq

    @property
    def is_ready(self) -> bool:
        return self._buffer.is_full()

    def __len__(self) -> int:
        return len(self._buffer)

    def mean(self) -> float | None:
        """Observable mean, None until the window is full."""
        if not self.is_ready:
            return None
        return self.sum / self.periods

    def committed_mean(self) -> float | None:
        """Mean of the committed samples only."""
        if not self.is_ready:
            return None
        return self._sum / self.periods

    def variance(self) -> float | None:
        """
        Observable sample variance (ddof=1).

            variance = (sum_sq - sum^2 / n) / (n - 1)

        None until full, and always None for a 1-sample window.
        """
        if not self.is_ready or self.periods < 2:
            return None
        n = self.periods
        total = self.sum
        return (self.sum_sq - (total * total) / n) / (n - 1)

    def std(self) -> float | None:
        """Observable sample standard deviation."""
        variance = self.variance()
        if variance is None:
            return None
        # Cancellation in sum_sq - sum^2/n can leave a tiny negative
        return math.sqrt(max(variance, 0.0))

    def values(self) -> np.ndarray:
        """Committed samples, oldest first."""
        return self._buffer.to_array()

    def reset(self) -> None:
        self._buffer.clear()
        self._sum = 0.0
        self._sum_sq = 0.0
        self._open = None
        self._open_sum = 0.0
        self._open_sum_sq = 0.0


def _extremes(values: Iterable[float]) -> tuple[float, float]:
    lo = math.inf
    hi = -math.inf
    for v in values:
        if v < lo:
            lo = v
        if v > hi:
            hi = v
    return lo, hi


class RangeTracker:
    """
    Rolling min/max over `length` values, producing stochastic %K and %D.

    Formula:
        raw_k = (latest - min) / (max - min)       (undefined when max == min)
        %K    = 100 * sma(raw_k, k_smoothing)
        %D    = 100 * sma(%K / 100, d_smoothing)

    Min/max are maintained in O(1) per push. Only when the evicted value was
    the current min or max is the window rescanned (O(length)).

    Provisional pushes never touch the committed min/max. When the sample
    about to expire is an extreme, the rescan of the remaining committed
    samples is cached until the next finalized push, so repeated provisional
    pushes for the same bar stay O(1).
    """

    __slots__ = (
        "length",
        "k_smoothing",
        "d_smoothing",
        "_window",
        "_min",
        "_max",
        "_trimmed",
        "_k_stage",
        "_d_stage",
        "_raw_k",
        "_k",
        "_d",
    )

    def __init__(self, length: int, k_smoothing: int = 3, d_smoothing: int = 3) -> None:
        if length < 2:
            raise ValueError(
                f"length must be >= 2, got {length}\n"
                f"\n"
                f"Fix: RangeTracker(length=14, k_smoothing=3, d_smoothing=3)"
            )
        if k_smoothing < 1 or d_smoothing < 1:
            raise ValueError(
                f"k_smoothing and d_smoothing must be >= 1, "
                f"got k_smoothing={k_smoothing}, d_smoothing={d_smoothing}\n"
                f"\n"
                f"Fix: RangeTracker(length=14, k_smoothing=3, d_smoothing=3)"
            )
        self.length = length
        self.k_smoothing = k_smoothing
        self.d_smoothing = d_smoothing
        self._window = RingBuffer(length)
        self._k_stage = SlidingWindowAggregate(k_smoothing)
        self._d_stage = SlidingWindowAggregate(d_smoothing)
        self._init_state()

    def _init_state(self) -> None:
        self._min = math.inf
        self._max = -math.inf
        # (min, max) of the committed window without its oldest sample
        self._trimmed: tuple[float, float] | None = None
        self._raw_k: float | None = None
        self._k: float | None = None
        self._d: float | None = None

    def push_close(self, x: float) -> None:
        """Commit a value from a closed bar."""
        self._k_stage.discard_provisional()
        self._d_stage.discard_provisional()
        self._trimmed = None

        evicted = self._window.push(x)
        if evicted is not None and (evicted == self._min or evicted == self._max):
            self._min, self._max = _extremes(self._window)
        else:
            if x < self._min:
                self._min = x
            if x > self._max:
                self._max = x

        raw_k = self._raw(x, self._min, self._max)
        self._raw_k = raw_k
        if raw_k is None:
            self._k = None
            self._d = None
            return

        self._k_stage.push_close(raw_k)
        self._k = self._k_stage.mean()
        if self._k is None:
            self._d = None
            return
        self._d_stage.push_close(self._k)
        self._d = self._d_stage.mean()

    def push_provisional(self, x: float) -> bool:
        """
        Recompute %K/%D as if x were the newest value, without committing.

        Returns:
            False (and changes nothing) while the value window is warming up.
        """
        if not self._window.is_full():
            return False

        oldest = self._window.oldest()
        if oldest == self._min or oldest == self._max:
            if self._trimmed is None:
                self._trimmed = _extremes(islice(self._window, 1, None))
            lo, hi = self._trimmed
        else:
            lo, hi = self._min, self._max
        lo = min(lo, x)
        hi = max(hi, x)

        raw_k = None if hi == lo else (x - lo) / (hi - lo)
        self._raw_k = raw_k
        if raw_k is None or not self._k_stage.push_provisional(raw_k):
            self._k_stage.discard_provisional()
            self._d_stage.discard_provisional()
            self._k = None
            self._d = None
            return True

        self._k = self._k_stage.mean()
        if self._d_stage.push_provisional(self._k):
            self._d = self._d_stage.mean()
        else:
            self._d = None
        return True

    def _raw(self, latest: float, lo: float, hi: float) -> float | None:
        if not self._window.is_full() or hi == lo:
            return None
        return (latest - lo) / (hi - lo)

    @property
    def raw_k(self) -> float | None:
        """Unsmoothed stochastic of the latest value, in [0, 1]."""
        return self._raw_k

    @property
    def k(self) -> float | None:
        """Smoothed %K on a 0-100 scale."""
        return None if self._k is None else self._k * 100.0

    @property
    def d(self) -> float | None:
        """%D (smoothed %K) on a 0-100 scale."""
        return None if self._d is None else self._d * 100.0

    @property
    def minimum(self) -> float | None:
        """Committed window minimum."""
        return None if len(self._window) == 0 else self._min

    @property
    def maximum(self) -> float | None:
        """Committed window maximum."""
        return None if len(self._window) == 0 else self._max

    @property
    def is_ready(self) -> bool:
        return self._k is not None and self._d is not None

    def values(self) -> np.ndarray:
        """Committed window values, oldest first."""
        return self._window.to_array()

    def reset(self) -> None:
        self._window.clear()
        self._k_stage.reset()
        self._d_stage.reset()
        self._init_state()
