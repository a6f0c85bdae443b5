"""
Moving-average indicators: SMA, Mean, StdDev, EMA and EMA cross.

Window-backed indicators share _WindowIndicator, which feeds one scalar per
bar into a SlidingWindowAggregate and reads back a statistic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from ...config.constants import (
    DEFAULT_EMA_CROSS_LONG,
    DEFAULT_EMA_CROSS_SHORT,
    DEFAULT_EMA_PERIODS,
    DEFAULT_MEAN_PERIODS,
    DEFAULT_PRICE_SOURCE,
    DEFAULT_SMA_PERIODS,
    DEFAULT_STDDEV_PERIODS,
    PERCENT_SCALE,
)
from ...structures import SlidingWindowAggregate
from ...utils.helpers import require_min_int
from ..types import (
    EmaCrossValue,
    EmaValue,
    MeanValue,
    PriceBar,
    ScalarValue,
    SmaValue,
    StdDevValue,
    validate_source,
)
from .base import IncrementalIndicator
from .smoothing import RecursiveSmoother


@dataclass
class _WindowIndicator(IncrementalIndicator):
    """Scalar statistic over the last `periods` samples."""

    periods: int
    _window: SlidingWindowAggregate = field(init=False, repr=False)

    _value_type: ClassVar[type[ScalarValue]]

    def __post_init__(self) -> None:
        require_min_int(
            "periods", self.periods, 2, f"{type(self).__name__}(periods=14)"
        )
        self._window = SlidingWindowAggregate(self.periods)

    def _sample(self, bar: PriceBar) -> float:
        return bar.close

    def _compute(self) -> float | None:
        return self._window.mean()

    def update_on_close(self, bar: PriceBar) -> None:
        self._window.push_close(self._sample(bar))

    def update_provisional(self, bar: PriceBar) -> None:
        self._window.push_provisional(self._sample(bar))

    def reset(self) -> None:
        self._window.reset()

    def get_last(self) -> ScalarValue | None:
        result = self._compute()
        if result is None:
            return None
        return self._value_type(result)

    @property
    def is_ready(self) -> bool:
        return self._window.is_ready

    @property
    def period(self) -> int:
        return self.periods

    @property
    def warmup_bars(self) -> int:
        return self.periods


@dataclass
class Sma(_WindowIndicator):
    """
    Simple Moving Average of close with O(1) updates.

    Uses running sum technique:
        sma = (sum + new - oldest) / periods

    Matches pandas Series.rolling(periods).mean().
    """

    periods: int = DEFAULT_SMA_PERIODS

    _value_type: ClassVar[type[ScalarValue]] = SmaValue


@dataclass
class Mean(_WindowIndicator):
    """Rolling mean of a selectable price source (close, hl2, volume, ...)."""

    periods: int = DEFAULT_MEAN_PERIODS
    source: str = DEFAULT_PRICE_SOURCE

    _value_type: ClassVar[type[ScalarValue]] = MeanValue

    def __post_init__(self) -> None:
        super().__post_init__()
        validate_source(self.source)

    def _sample(self, bar: PriceBar) -> float:
        return bar.source(self.source)


@dataclass
class StdDev(Mean):
    """
    Rolling sample standard deviation (ddof=1) of a price source.

    Formula:
        var = (sum_sq - sum^2 / n) / (n - 1)

    Matches pandas Series.rolling(periods).std().
    """

    periods: int = DEFAULT_STDDEV_PERIODS

    _value_type: ClassVar[type[ScalarValue]] = StdDevValue

    def _compute(self) -> float | None:
        return self._window.std()


@dataclass
class Ema(IncrementalIndicator):
    """
    Exponential Moving Average of close with O(1) updates.

    Formula:
        alpha = 2 / (periods + 1)
        ema = alpha * close + (1 - alpha) * ema_prev

    Seeded by the SMA of the first `periods` closes, then matches
    pandas ewm(span=periods, adjust=False).

    `slope` is the percent change against the previous committed EMA.
    `sma` is the simple average of the same `periods` closes.
    """

    periods: int = DEFAULT_EMA_PERIODS
    _smoother: RecursiveSmoother = field(init=False, repr=False)
    _sma_window: SlidingWindowAggregate = field(init=False, repr=False)
    _slope: float | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        require_min_int("periods", self.periods, 2, "Ema(periods=9)")
        self._smoother = RecursiveSmoother(self.periods, "ema")
        self._sma_window = SlidingWindowAggregate(self.periods)

    @staticmethod
    def _relative_change(new: float | None, prev: float | None) -> float | None:
        if new is None or prev is None or new == 0:
            return None
        return (new - prev) / new * PERCENT_SCALE

    def update_on_close(self, bar: PriceBar) -> None:
        prev = self._smoother.committed
        new = self._smoother.update_close(bar.close)
        self._sma_window.push_close(bar.close)
        self._slope = self._relative_change(new, prev)

    def update_provisional(self, bar: PriceBar) -> None:
        new = self._smoother.update_provisional(bar.close)
        self._sma_window.push_provisional(bar.close)
        if new is not None:
            self._slope = self._relative_change(new, self._smoother.committed)

    def reset(self) -> None:
        self._smoother.reset()
        self._sma_window.reset()
        self._slope = None

    def get_last(self) -> EmaValue | None:
        if not self._smoother.is_ready:
            return None
        return EmaValue(self._smoother.value)

    @property
    def slope(self) -> float | None:
        return self._slope

    @property
    def sma(self) -> SmaValue | None:
        mean = self._sma_window.mean()
        if mean is None:
            return None
        return SmaValue(mean)

    @property
    def is_ready(self) -> bool:
        return self._smoother.is_ready

    @property
    def period(self) -> int:
        return self.periods

    @property
    def warmup_bars(self) -> int:
        return self.periods


@dataclass
class EmaCross(IncrementalIndicator):
    """
    Short and long EMA of close; trend is True while short > long.

    Both legs receive every update, so the cross is ready once the long
    EMA is.
    """

    short_periods: int = DEFAULT_EMA_CROSS_SHORT
    long_periods: int = DEFAULT_EMA_CROSS_LONG
    _short: Ema = field(init=False, repr=False)
    _long: Ema = field(init=False, repr=False)

    def __post_init__(self) -> None:
        fix = "EmaCross(short_periods=9, long_periods=21)"
        require_min_int("short_periods", self.short_periods, 2, fix)
        require_min_int("long_periods", self.long_periods, 2, fix)
        if self.short_periods >= self.long_periods:
            raise ValueError(
                f"short_periods must be < long_periods, "
                f"got short_periods={self.short_periods}, long_periods={self.long_periods}\n"
                f"\n"
                f"Fix: {fix}"
            )
        self._short = Ema(self.short_periods)
        self._long = Ema(self.long_periods)

    def update_on_close(self, bar: PriceBar) -> None:
        self._short.update_on_close(bar)
        self._long.update_on_close(bar)

    def update_provisional(self, bar: PriceBar) -> None:
        self._short.update_provisional(bar)
        self._long.update_provisional(bar)

    def reset(self) -> None:
        self._short.reset()
        self._long.reset()

    def get_last(self) -> EmaCrossValue | None:
        short = self._short.get_last()
        long = self._long.get_last()
        if short is None or long is None:
            return None
        return EmaCrossValue(short=short.value, long=long.value, trend=short.value > long.value)

    @property
    def is_ready(self) -> bool:
        return self._short.is_ready and self._long.is_ready

    @property
    def period(self) -> int:
        return self.long_periods

    @property
    def warmup_bars(self) -> int:
        return self.long_periods
