"""
barflow - Streaming technical indicators

Incremental indicators (SMA, EMA, RSI, Stochastic RSI, ATR, ADX, ...) that
update in O(1) per bar and accept both finalized (bar closed) and
provisional (bar still forming) updates without corrupting committed state.
"""

import logging

__version__ = "1.0.0"
__author__ = "barflow"

from .config import get_config
from .indicators import (
    PriceBar,
    ValueKind,
    IncrementalIndicator,
    create_incremental_indicator,
    list_incremental_indicators,
    replay_frame,
)
from .utils import get_logger, setup_logger

# Silent unless the application configures logging
logging.getLogger("barflow").addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "get_config",
    "PriceBar",
    "ValueKind",
    "IncrementalIndicator",
    "create_incremental_indicator",
    "list_incremental_indicators",
    "replay_frame",
    "get_logger",
    "setup_logger",
]
