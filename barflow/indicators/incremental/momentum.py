"""
Momentum indicators: RSI (with SMA-of-RSI and Stochastic RSI) and StochRSI.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...config.constants import (
    DEFAULT_RSI_PERIODS,
    DEFAULT_RSI_SMA_LENGTH,
    DEFAULT_STOCH_D_SMOOTHING,
    DEFAULT_STOCH_K_SMOOTHING,
    DEFAULT_STOCH_LENGTH,
)
from ...structures import RangeTracker, SlidingWindowAggregate
from ...utils.helpers import require_min_int
from ..types import PriceBar, RsiValue, SmaRsiValue, StochRsiValue
from .base import IncrementalIndicator
from .smoothing import ChangeBuffer


@dataclass
class Rsi(IncrementalIndicator):
    """
    Relative Strength Index with O(1) updates.

    Uses Wilder's smoothing seeded by the simple average of the first
    `periods` changes:
        avg_gain = (avg_gain_prev * (n - 1) + gain) / n
        (same for avg_loss)
        rsi = 100 - 100 / (1 + avg_gain / avg_loss)
        rsi = 100 when avg_loss == 0

    Every RSI value is also fed to a Stochastic-RSI range tracker
    (`stoch_length`, `k_smoothing`, `d_smoothing`) and, unless `sma_length`
    is None, to an SMA-of-RSI window. Provisional RSI values reach them as
    provisional pushes.
    """

    periods: int = DEFAULT_RSI_PERIODS
    stoch_length: int = DEFAULT_STOCH_LENGTH
    k_smoothing: int = DEFAULT_STOCH_K_SMOOTHING
    d_smoothing: int = DEFAULT_STOCH_D_SMOOTHING
    sma_length: int | None = DEFAULT_RSI_SMA_LENGTH
    _changes: ChangeBuffer = field(init=False, repr=False)
    _stoch: RangeTracker = field(init=False, repr=False)
    _sma: SlidingWindowAggregate | None = field(default=None, init=False, repr=False)
    _prev_close: float | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        fix = "Rsi(periods=14, stoch_length=14, k_smoothing=3, d_smoothing=3, sma_length=10)"
        require_min_int("periods", self.periods, 2, fix)
        require_min_int("stoch_length", self.stoch_length, 2, fix)
        require_min_int("k_smoothing", self.k_smoothing, 1, fix)
        require_min_int("d_smoothing", self.d_smoothing, 1, fix)
        if self.sma_length is not None:
            require_min_int("sma_length", self.sma_length, 2, fix)
            self._sma = SlidingWindowAggregate(self.sma_length)
        self._changes = ChangeBuffer(self.periods)
        self._stoch = RangeTracker(self.stoch_length, self.k_smoothing, self.d_smoothing)

    def update_on_close(self, bar: PriceBar) -> None:
        close = bar.close
        prev = self._prev_close
        self._prev_close = close
        if prev is None:
            return
        if not self._changes.push_close(close - prev):
            return
        rsi = self._changes.rsi()
        self._stoch.push_close(rsi)
        if self._sma is not None:
            self._sma.push_close(rsi)

    def update_provisional(self, bar: PriceBar) -> None:
        if self._prev_close is None:
            return
        if not self._changes.push_provisional(bar.close - self._prev_close):
            return
        rsi = self._changes.rsi()
        self._stoch.push_provisional(rsi)
        if self._sma is not None:
            self._sma.push_provisional(rsi)

    def reset(self) -> None:
        self._changes.reset()
        self._stoch.reset()
        if self._sma is not None:
            self._sma.reset()
        self._prev_close = None

    def get_last(self) -> RsiValue | None:
        rsi = self._changes.rsi()
        if rsi is None:
            return None
        return RsiValue(rsi)

    def get_sma_rsi(self) -> SmaRsiValue | None:
        """SMA of the last `sma_length` RSI values (None when sma_length is None)."""
        if self._sma is None:
            return None
        mean = self._sma.mean()
        if mean is None:
            return None
        return SmaRsiValue(mean)

    def get_stoch(self) -> StochRsiValue | None:
        """Stochastic RSI %K/%D, None until both are defined."""
        k = self._stoch.k
        d = self._stoch.d
        if k is None or d is None:
            return None
        return StochRsiValue(k=k, d=d)

    @property
    def avg_gain(self) -> float | None:
        return self._changes.avg_gain

    @property
    def avg_loss(self) -> float | None:
        return self._changes.avg_loss

    @property
    def stoch_is_ready(self) -> bool:
        return self._stoch.is_ready

    @property
    def stoch_warmup_bars(self) -> int:
        return self.periods + self.stoch_length + self.k_smoothing + self.d_smoothing - 2

    @property
    def is_ready(self) -> bool:
        return self._changes.is_ready

    @property
    def period(self) -> int:
        return self.periods

    @property
    def warmup_bars(self) -> int:
        return self.periods + 1


@dataclass
class StochasticRsi(IncrementalIndicator):
    """
    Stochastic RSI with O(1) updates.

    Formula:
        rsi   = RSI(close, periods)
        raw_k = (rsi - min(rsi, periods)) / (max(rsi, periods) - min(rsi, periods))
        %K    = 100 * SMA(raw_k, k_smoothing)
        %D    = SMA(%K, d_smoothing)

    The RSI and the stochastic window share `periods`.
    """

    periods: int = DEFAULT_RSI_PERIODS
    k_smoothing: int = DEFAULT_STOCH_K_SMOOTHING
    d_smoothing: int = DEFAULT_STOCH_D_SMOOTHING
    _rsi: Rsi = field(init=False, repr=False)

    def __post_init__(self) -> None:
        fix = "StochasticRsi(periods=14, k_smoothing=3, d_smoothing=3)"
        require_min_int("periods", self.periods, 2, fix)
        require_min_int("k_smoothing", self.k_smoothing, 1, fix)
        require_min_int("d_smoothing", self.d_smoothing, 1, fix)
        self._rsi = Rsi(
            periods=self.periods,
            stoch_length=self.periods,
            k_smoothing=self.k_smoothing,
            d_smoothing=self.d_smoothing,
            sma_length=None,
        )

    def update_on_close(self, bar: PriceBar) -> None:
        self._rsi.update_on_close(bar)

    def update_provisional(self, bar: PriceBar) -> None:
        self._rsi.update_provisional(bar)

    def reset(self) -> None:
        self._rsi.reset()

    def get_last(self) -> StochRsiValue | None:
        return self._rsi.get_stoch()

    @property
    def rsi(self) -> float | None:
        """Underlying RSI value."""
        last = self._rsi.get_last()
        return None if last is None else last.value

    @property
    def is_ready(self) -> bool:
        return self._rsi.stoch_is_ready

    @property
    def period(self) -> int:
        return self.periods

    @property
    def warmup_bars(self) -> int:
        return self._rsi.stoch_warmup_bars
