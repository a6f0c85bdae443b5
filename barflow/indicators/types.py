"""
Input bar and output value types shared by all incremental indicators.

Provides:
- PriceBar: Immutable OHLCV bar fed to update_on_close / update_provisional
- ValueKind: Tag identifying which indicator produced a value
- One frozen dataclass per value shape (RsiValue, StochRsiValue, ...)

Every value exposes `primary`, the scalar a single-column consumer should
read (the first field of the dataclass).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from ..config.constants import PRICE_SOURCES


def validate_source(source: str) -> str:
    """
    Check a price source name, failing loudly on unknown names.

    Raises:
        ValueError: If source is not one of PRICE_SOURCES.
    """
    if source not in PRICE_SOURCES:
        raise ValueError(
            f"Unknown price source '{source}'. Valid: {list(PRICE_SOURCES)}\n"
            f"\n"
            f"Fix: Mean(periods=14, source='close')"
        )
    return source


@dataclass(frozen=True, slots=True)
class PriceBar:
    """
    Single OHLCV bar.

    Volume and timestamps are optional; a missing volume reads as 0.0 when
    selected as a price source.

    Example:
        >>> bar = PriceBar(open=100.0, high=110.0, low=95.0, close=105.0)
        >>> bar.hl2
        102.5
        >>> bar.source("volume")
        0.0
    """

    open: float
    high: float
    low: float
    close: float
    volume: float | None = None
    open_time: int | None = None
    close_time: int | None = None

    @property
    def hl2(self) -> float:
        return (self.high + self.low) / 2.0

    @property
    def hlc3(self) -> float:
        return (self.high + self.low + self.close) / 3.0

    @property
    def ohlc4(self) -> float:
        return (self.open + self.high + self.low + self.close) / 4.0

    def source(self, name: str) -> float:
        """Select a scalar from the bar by price source name."""
        if name == "close":
            return self.close
        if name == "volume":
            return 0.0 if self.volume is None else self.volume
        validate_source(name)
        return getattr(self, name)


class ValueKind(str, Enum):
    """Which indicator produced a value."""

    RSI = "rsi"
    STOCH_RSI = "stoch_rsi"
    EMA = "ema"
    EMA_CROSS = "ema_cross"
    SMA = "sma"
    SMA_RSI = "sma_rsi"
    ADX = "adx"
    ATR = "atr"
    VOLUME_MA = "volume_ma"
    STDDEV = "stddev"
    MEAN = "mean"
    HIST_VOLATILITY = "hist_volatility"


@dataclass(frozen=True, slots=True)
class ScalarValue:
    """Single-field value. Subclasses only differ by their kind tag."""

    value: float
    kind: ClassVar[ValueKind]

    @property
    def primary(self) -> float:
        return self.value


@dataclass(frozen=True, slots=True)
class RsiValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.RSI


@dataclass(frozen=True, slots=True)
class EmaValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.EMA


@dataclass(frozen=True, slots=True)
class SmaValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.SMA


@dataclass(frozen=True, slots=True)
class SmaRsiValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.SMA_RSI


@dataclass(frozen=True, slots=True)
class AdxValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.ADX


@dataclass(frozen=True, slots=True)
class AtrValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.ATR


@dataclass(frozen=True, slots=True)
class VolumeMaValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.VOLUME_MA


@dataclass(frozen=True, slots=True)
class StdDevValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.STDDEV


@dataclass(frozen=True, slots=True)
class MeanValue(ScalarValue):
    kind: ClassVar[ValueKind] = ValueKind.MEAN


@dataclass(frozen=True, slots=True)
class HistVolatilityValue(ScalarValue):
    """Annualized historical volatility, in percent."""

    kind: ClassVar[ValueKind] = ValueKind.HIST_VOLATILITY


@dataclass(frozen=True, slots=True)
class StochRsiValue:
    """Stochastic RSI %K and %D, both on a 0-100 scale."""

    k: float
    d: float
    kind: ClassVar[ValueKind] = ValueKind.STOCH_RSI

    @property
    def primary(self) -> float:
        return self.k


@dataclass(frozen=True, slots=True)
class EmaCrossValue:
    """
    Short and long EMA of the same series.

    Attributes:
        short: Short-period EMA.
        long: Long-period EMA.
        trend: True while short > long (bullish).
    """

    short: float
    long: float
    trend: bool
    kind: ClassVar[ValueKind] = ValueKind.EMA_CROSS

    @property
    def primary(self) -> float:
        return self.short


Value = Union[
    RsiValue,
    StochRsiValue,
    EmaValue,
    EmaCrossValue,
    SmaValue,
    SmaRsiValue,
    AdxValue,
    AtrValue,
    VolumeMaValue,
    StdDevValue,
    MeanValue,
    HistVolatilityValue,
]
