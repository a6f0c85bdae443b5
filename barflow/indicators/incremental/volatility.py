"""
Volatility and trend-strength indicators: ATR, ADX, historical volatility.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ...config.constants import (
    ANNUALIZATION_DAYS,
    DEFAULT_ADX_PERIODS,
    DEFAULT_ATR_PERIODS,
    DEFAULT_DI_LENGTH,
    DEFAULT_HIST_VOL_PERIODS,
    PERCENT_SCALE,
    PRICE_EPSILON,
)
from ...structures import SlidingWindowAggregate
from ...utils.helpers import require_min_int
from ..types import AdxValue, AtrValue, HistVolatilityValue, PriceBar
from .base import IncrementalIndicator
from .smoothing import DirectionalMovementBuffer, RecursiveSmoother, true_range


@dataclass
class Atr(IncrementalIndicator):
    """
    Average True Range with O(1) updates.

    Uses Wilder's smoothing:
        tr = max(high-low, |high-prev_close|, |low-prev_close|)
        atr = (atr_prev * (n-1) + tr) / n

    The first bar contributes high-low. The first `periods` true ranges are
    averaged to seed the recurrence.
    """

    periods: int = DEFAULT_ATR_PERIODS
    _smoother: RecursiveSmoother = field(init=False, repr=False)
    _prev_close: float | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        require_min_int("periods", self.periods, 1, "Atr(periods=14)")
        self._smoother = RecursiveSmoother(self.periods, "wilder")

    def update_on_close(self, bar: PriceBar) -> None:
        self._smoother.update_close(true_range(bar.high, bar.low, self._prev_close))
        self._prev_close = bar.close

    def update_provisional(self, bar: PriceBar) -> None:
        if self._prev_close is None:
            return
        self._smoother.update_provisional(true_range(bar.high, bar.low, self._prev_close))

    def reset(self) -> None:
        self._smoother.reset()
        self._prev_close = None

    def get_last(self) -> AtrValue | None:
        if not self._smoother.is_ready:
            return None
        return AtrValue(self._smoother.value)

    def normalized(self, price: float) -> float | None:
        """ATR as a percentage of price (NATR); None if price is ~0 or not ready."""
        if not self._smoother.is_ready or abs(price) < PRICE_EPSILON:
            return None
        return self._smoother.value / price * PERCENT_SCALE

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
class Adx(IncrementalIndicator):
    """
    Average Directional Index with O(1) updates.

    DX comes from Wilder-smoothed TR / +DM / -DM over `di_length`;
    ADX is the Wilder smoothing of DX over `periods`, seeded by the mean of
    the first `periods` DX values.

    Ready after di_length + periods bars.
    """

    periods: int = DEFAULT_ADX_PERIODS
    di_length: int = DEFAULT_DI_LENGTH
    _dm: DirectionalMovementBuffer = field(init=False, repr=False)
    _adx: RecursiveSmoother = field(init=False, repr=False)

    def __post_init__(self) -> None:
        fix = "Adx(periods=14, di_length=14)"
        require_min_int("periods", self.periods, 1, fix)
        require_min_int("di_length", self.di_length, 1, fix)
        self._dm = DirectionalMovementBuffer(self.di_length)
        self._adx = RecursiveSmoother(self.periods, "wilder")

    def update_on_close(self, bar: PriceBar) -> None:
        dx = self._dm.update_close(bar.high, bar.low, bar.close)
        if dx is not None:
            self._adx.update_close(dx)

    def update_provisional(self, bar: PriceBar) -> None:
        dx = self._dm.update_provisional(bar.high, bar.low, bar.close)
        if dx is not None:
            self._adx.update_provisional(dx)

    def reset(self) -> None:
        self._dm.reset()
        self._adx.reset()

    def get_last(self) -> AdxValue | None:
        if not self._adx.is_ready:
            return None
        return AdxValue(self._adx.value)

    @property
    def dx(self) -> float | None:
        return self._dm.dx

    @property
    def plus_di(self) -> float | None:
        return self._dm.plus_di

    @property
    def minus_di(self) -> float | None:
        return self._dm.minus_di

    @property
    def is_ready(self) -> bool:
        return self._adx.is_ready

    @property
    def period(self) -> int:
        return self.periods

    @property
    def warmup_bars(self) -> int:
        return self.di_length + self.periods


@dataclass
class HistoricalVolatility(IncrementalIndicator):
    """
    Annualized close-to-close volatility, in percent.

    Formula:
        r  = ln(close / prev_close)
        hv = std(r, periods, ddof=1) * sqrt(365) * 100

    A non-positive close makes ln() raise; that is a data error upstream.
    """

    periods: int = DEFAULT_HIST_VOL_PERIODS
    _returns: SlidingWindowAggregate = field(init=False, repr=False)
    _prev_close: float | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        require_min_int("periods", self.periods, 2, "HistoricalVolatility(periods=20)")
        self._returns = SlidingWindowAggregate(self.periods)

    def update_on_close(self, bar: PriceBar) -> None:
        if self._prev_close is not None:
            self._returns.push_close(math.log(bar.close / self._prev_close))
        self._prev_close = bar.close

    def update_provisional(self, bar: PriceBar) -> None:
        if self._prev_close is None:
            return
        self._returns.push_provisional(math.log(bar.close / self._prev_close))

    def reset(self) -> None:
        self._returns.reset()
        self._prev_close = None

    def get_last(self) -> HistVolatilityValue | None:
        std = self._returns.std()
        if std is None:
            return None
        return HistVolatilityValue(std * math.sqrt(ANNUALIZATION_DAYS) * PERCENT_SCALE)

    @property
    def is_ready(self) -> bool:
        return self._returns.is_ready

    @property
    def period(self) -> int:
        return self.periods

    @property
    def warmup_bars(self) -> int:
        return self.periods + 1
