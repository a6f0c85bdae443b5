"""
Indicator Module: streaming technical indicators over OHLCV bars.

Components:
- types: PriceBar input and tagged Value outputs
- incremental: O(1) indicators with finalized / provisional updates
- compute: DataFrame replay for batch use and parity checks

Usage:
    from barflow.indicators import PriceBar, create_incremental_indicator

    rsi = create_incremental_indicator("rsi", {"periods": 14})
    rsi.update_on_close(PriceBar(open=1.0, high=1.2, low=0.9, close=1.1))
"""

from .types import (
    PriceBar,
    ValueKind,
    Value,
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
)
from .incremental import (
    IncrementalIndicator,
    Sma,
    Mean,
    StdDev,
    Ema,
    EmaCross,
    Rsi,
    StochasticRsi,
    Atr,
    Adx,
    HistoricalVolatility,
    VolumeMovingAverage,
    INCREMENTAL_INDICATORS,
    create_incremental_indicator,
    supports_incremental,
    list_incremental_indicators,
)
from .compute import bars_from_frame, replay_frame, get_warmup_from_indicators

__all__ = [
    # Types
    "PriceBar",
    "ValueKind",
    "Value",
    "RsiValue",
    "StochRsiValue",
    "EmaValue",
    "EmaCrossValue",
    "SmaValue",
    "SmaRsiValue",
    "AdxValue",
    "AtrValue",
    "VolumeMaValue",
    "StdDevValue",
    "MeanValue",
    "HistVolatilityValue",
    # Indicators
    "IncrementalIndicator",
    "Sma",
    "Mean",
    "StdDev",
    "Ema",
    "EmaCross",
    "Rsi",
    "StochasticRsi",
    "Atr",
    "Adx",
    "HistoricalVolatility",
    "VolumeMovingAverage",
    # Factory
    "INCREMENTAL_INDICATORS",
    "create_incremental_indicator",
    "supports_incremental",
    "list_incremental_indicators",
    # DataFrame replay
    "bars_from_frame",
    "replay_frame",
    "get_warmup_from_indicators",
]
