"""
Centralized constants for the indicator library.

Indicator parameters are always constructor arguments. The values here are
the defaults used when a caller (or the factory) does not supply one.
"""

import numpy as np


# ==================== Default Periods ====================

DEFAULT_SMA_PERIODS = 9
DEFAULT_EMA_PERIODS = 9
DEFAULT_MEAN_PERIODS = 14
DEFAULT_STDDEV_PERIODS = 20

DEFAULT_EMA_CROSS_SHORT = 9
DEFAULT_EMA_CROSS_LONG = 21

DEFAULT_RSI_PERIODS = 14
DEFAULT_STOCH_LENGTH = 14
DEFAULT_STOCH_K_SMOOTHING = 3
DEFAULT_STOCH_D_SMOOTHING = 3
DEFAULT_RSI_SMA_LENGTH = 10

DEFAULT_ATR_PERIODS = 14
DEFAULT_ADX_PERIODS = 14
DEFAULT_DI_LENGTH = 14

DEFAULT_HIST_VOL_PERIODS = 20
DEFAULT_VOLUME_MA_PERIODS = 14


# ==================== Numeric Policy ====================

# Historical volatility is annualized over calendar days (crypto markets never close)
ANNUALIZATION_DAYS = 365.0

# Oscillators and DI/DX are reported on a 0-100 scale
PERCENT_SCALE = 100.0

# Smoothed true range at or below this is treated as "no range" (DX = 0)
DX_EPSILON = float(np.finfo(np.float64).eps)

# |price| below this makes normalized ATR undefined
PRICE_EPSILON = float(np.finfo(np.float64).eps)


# ==================== Price Sources ====================

PRICE_SOURCES = ("open", "high", "low", "close", "hl2", "hlc3", "ohlc4", "volume")
DEFAULT_PRICE_SOURCE = "close"
