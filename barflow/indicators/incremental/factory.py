"""
Factory function and registry for incremental indicators.

Provides create_incremental_indicator() to instantiate any incremental
indicator from a type string and parameter dict, plus registry query functions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ...config import constants as C
from .base import IncrementalIndicator
from .core import Ema, EmaCross, Mean, Sma, StdDev
from .momentum import Rsi, StochasticRsi
from .volatility import Adx, Atr, HistoricalVolatility
from .volume import VolumeMovingAverage

logger = logging.getLogger(__name__)


# Type name -> indicator class
INCREMENTAL_INDICATORS: dict[str, type[IncrementalIndicator]] = {
    "sma": Sma,
    "mean": Mean,
    "stddev": StdDev,
    "ema": Ema,
    "ema_cross": EmaCross,
    "rsi": Rsi,
    "stochrsi": StochasticRsi,
    "atr": Atr,
    "adx": Adx,
    "hist_vol": HistoricalVolatility,
    "volume_ma": VolumeMovingAverage,
}


_VALID_PARAMS: dict[str, frozenset[str]] = {
    "sma": frozenset({"periods"}),
    "mean": frozenset({"periods", "source"}),
    "stddev": frozenset({"periods", "source"}),
    "ema": frozenset({"periods"}),
    "ema_cross": frozenset({"short_periods", "long_periods"}),
    "rsi": frozenset({"periods", "stoch_length", "k_smoothing", "d_smoothing", "sma_length"}),
    "stochrsi": frozenset({"periods", "k_smoothing", "d_smoothing"}),
    "atr": frozenset({"periods"}),
    "adx": frozenset({"periods", "di_length"}),
    "hist_vol": frozenset({"periods"}),
    "volume_ma": frozenset({"periods"}),
}


def _validate_params(indicator_type: str, params: dict[str, Any]) -> None:
    """Raise ValueError if params contains unknown keys for this indicator."""
    valid = _VALID_PARAMS.get(indicator_type)
    if valid is None:
        return
    unknown = set(params.keys()) - valid
    if unknown:
        raise ValueError(
            f"Unknown params for '{indicator_type}': {sorted(unknown)}. "
            f"Valid: {sorted(valid)}\n"
            f"\n"
            f"Fix: drop {sorted(unknown)} from the params dict"
        )


_FACTORY: dict[str, Callable[[dict[str, Any]], IncrementalIndicator]] = {
    "sma": lambda p: Sma(periods=p.get("periods", C.DEFAULT_SMA_PERIODS)),
    "mean": lambda p: Mean(
        periods=p.get("periods", C.DEFAULT_MEAN_PERIODS),
        source=p.get("source", C.DEFAULT_PRICE_SOURCE),
    ),
    "stddev": lambda p: StdDev(
        periods=p.get("periods", C.DEFAULT_STDDEV_PERIODS),
        source=p.get("source", C.DEFAULT_PRICE_SOURCE),
    ),
    "ema": lambda p: Ema(periods=p.get("periods", C.DEFAULT_EMA_PERIODS)),
    "ema_cross": lambda p: EmaCross(
        short_periods=p.get("short_periods", C.DEFAULT_EMA_CROSS_SHORT),
        long_periods=p.get("long_periods", C.DEFAULT_EMA_CROSS_LONG),
    ),
    "rsi": lambda p: Rsi(
        periods=p.get("periods", C.DEFAULT_RSI_PERIODS),
        stoch_length=p.get("stoch_length", C.DEFAULT_STOCH_LENGTH),
        k_smoothing=p.get("k_smoothing", C.DEFAULT_STOCH_K_SMOOTHING),
        d_smoothing=p.get("d_smoothing", C.DEFAULT_STOCH_D_SMOOTHING),
        sma_length=p.get("sma_length", C.DEFAULT_RSI_SMA_LENGTH),
    ),
    "stochrsi": lambda p: StochasticRsi(
        periods=p.get("periods", C.DEFAULT_RSI_PERIODS),
        k_smoothing=p.get("k_smoothing", C.DEFAULT_STOCH_K_SMOOTHING),
        d_smoothing=p.get("d_smoothing", C.DEFAULT_STOCH_D_SMOOTHING),
    ),
    "atr": lambda p: Atr(periods=p.get("periods", C.DEFAULT_ATR_PERIODS)),
    "adx": lambda p: Adx(
        periods=p.get("periods", C.DEFAULT_ADX_PERIODS),
        di_length=p.get("di_length", C.DEFAULT_DI_LENGTH),
    ),
    "hist_vol": lambda p: HistoricalVolatility(periods=p.get("periods", C.DEFAULT_HIST_VOL_PERIODS)),
    "volume_ma": lambda p: VolumeMovingAverage(periods=p.get("periods", C.DEFAULT_VOLUME_MA_PERIODS)),
}


def create_incremental_indicator(
    indicator_type: str,
    params: dict[str, Any] | None = None,
) -> IncrementalIndicator | None:
    """
    Create an incremental indicator from type and params.

    Returns None if the indicator type is not supported incrementally.
    Raises ValueError if params contains unknown keys or invalid values.
    """
    params = params or {}
    indicator_type = indicator_type.lower()
    _validate_params(indicator_type, params)

    factory_fn = _FACTORY.get(indicator_type)
    if factory_fn is None:
        logger.debug("No incremental implementation for '%s'", indicator_type)
        return None
    indicator = factory_fn(params)
    logger.debug("Created %r", indicator)
    return indicator


def supports_incremental(indicator_type: str) -> bool:
    """Check if indicator type supports incremental computation."""
    return indicator_type.lower() in _FACTORY


def list_incremental_indicators() -> list[str]:
    """Get sorted list of all indicator types the factory can build."""
    return sorted(_FACTORY)
