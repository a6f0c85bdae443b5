"""
Incremental indicator computation for live bars.

O(1) per-bar updates with a dual contract: update_on_close() commits a
finished bar, update_provisional() previews a bar that is still forming
without disturbing committed state.

Usage:
    from barflow.indicators.incremental import Ema, Rsi

    # Initialize with warmup data
    rsi = Rsi(periods=14)
    rsi.load(historical_bars)

    # Preview the forming bar as ticks arrive
    rsi.update_provisional(forming_bar)
    live_value = rsi.get_last()

    # Commit it once it closes
    rsi.update_on_close(closed_bar)
"""

from __future__ import annotations

# Base class
from .base import IncrementalIndicator

# Moving averages
from .core import Ema, EmaCross, Mean, Sma, StdDev

# Momentum
from .momentum import Rsi, StochasticRsi

# Volatility / trend strength
from .volatility import Adx, Atr, HistoricalVolatility

# Volume
from .volume import VolumeMovingAverage

# Smoothing primitives
from .smoothing import (
    ChangeBuffer,
    DirectionalMovementBuffer,
    RecursiveSmoother,
    compute_rsi,
    directional_movement,
    true_range,
)

# Factory
from .factory import (
    INCREMENTAL_INDICATORS,
    create_incremental_indicator,
    list_incremental_indicators,
    supports_incremental,
)

__all__ = [
    # Base
    "IncrementalIndicator",
    # Moving averages
    "Sma",
    "Mean",
    "StdDev",
    "Ema",
    "EmaCross",
    # Momentum
    "Rsi",
    "StochasticRsi",
    # Volatility
    "Atr",
    "Adx",
    "HistoricalVolatility",
    # Volume
    "VolumeMovingAverage",
    # Smoothing primitives
    "RecursiveSmoother",
    "ChangeBuffer",
    "DirectionalMovementBuffer",
    "true_range",
    "directional_movement",
    "compute_rsi",
    # Factory
    "INCREMENTAL_INDICATORS",
    "create_incremental_indicator",
    "supports_incremental",
    "list_incremental_indicators",
]
