"""
DataFrame replay for incremental indicators.

Feeds an OHLCV DataFrame through an incremental indicator bar by bar and
collects its values, so streaming results can be compared against (or
joined onto) vectorized pandas computations.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Iterable

import pandas as pd

from ..utils.helpers import safe_float
from .incremental.base import IncrementalIndicator
from .types import PriceBar

logger = logging.getLogger(__name__)

OHLC_COLUMNS = ("open", "high", "low", "close")


def get_warmup_from_indicators(indicators: Iterable[IncrementalIndicator]) -> int:
    """
    Finalized bars needed before every indicator in the set is ready.

    Returns:
        Maximum warmup_bars across indicators (0 for an empty set)
    """
    return max((ind.warmup_bars for ind in indicators), default=0)


def bars_from_frame(df: pd.DataFrame) -> list[PriceBar]:
    """
    Convert DataFrame rows into PriceBars.

    Args:
        df: Columns open, high, low, close; optional volume, open_time,
            close_time. Missing or NaN volume becomes None.

    Raises:
        ValueError: If any OHLC column is missing.
    """
    missing = [c for c in OHLC_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(
            f"DataFrame is missing required columns: {missing}. "
            f"Got: {list(df.columns)}\n"
            f"\n"
            f"Fix: df.rename(columns={{'Close': 'close', ...}}) so that "
            f"{list(OHLC_COLUMNS)} are present"
        )

    has_volume = "volume" in df.columns
    has_open_time = "open_time" in df.columns
    has_close_time = "close_time" in df.columns

    bars = []
    for row in df.to_dict("records"):
        volume = safe_float(row["volume"], default=None) if has_volume else None
        bars.append(
            PriceBar(
                open=float(row["open"]),
                high=float(row["high"]),
                low=float(row["low"]),
                close=float(row["close"]),
                volume=volume,
                open_time=row["open_time"] if has_open_time else None,
                close_time=row["close_time"] if has_close_time else None,
            )
        )
    return bars


def replay_frame(
    indicator: IncrementalIndicator,
    df: pd.DataFrame,
    reset: bool = True,
) -> pd.DataFrame:
    """
    Run every row of df through indicator.update_on_close().

    Args:
        indicator: Indicator to feed (reset first unless reset=False)
        df: OHLCV DataFrame (see bars_from_frame)
        reset: Start from a fresh state

    Returns:
        DataFrame indexed like df with one column per value field
        (e.g. "value", or "k"/"d"); NaN while warming up.
    """
    bars = bars_from_frame(df)
    if reset:
        indicator.reset()

    rows = []
    for bar in bars:
        indicator.update_on_close(bar)
        last = indicator.get_last()
        rows.append({} if last is None else asdict(last))

    result = pd.DataFrame(rows, index=df.index)
    warm = sum(1 for r in rows if not r)
    logger.debug(
        "Replayed %d rows through %s (%d warming)",
        len(rows), type(indicator).__name__, warm,
    )
    return result
