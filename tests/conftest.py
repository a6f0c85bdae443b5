"""
Pytest configuration and shared fixtures for indicator tests.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pytest

from barflow.config import reset_config
from barflow.indicators import PriceBar


def _make_bar(
    close: float,
    high: float | None = None,
    low: float | None = None,
    open: float | None = None,
    volume: float | None = None,
) -> PriceBar:
    return PriceBar(
        open=close if open is None else open,
        high=close if high is None else high,
        low=close if low is None else low,
        close=close,
        volume=volume,
    )


def _random_walk_frame(n_bars: int, seed: int) -> pd.DataFrame:
    rng = np.random.RandomState(seed)
    close = 100.0 * np.exp(np.cumsum(rng.normal(0.0, 0.01, n_bars)))
    open_ = np.concatenate([[100.0], close[:-1]])
    high = np.maximum(open_, close) * (1.0 + np.abs(rng.normal(0.0, 0.004, n_bars)))
    low = np.minimum(open_, close) * (1.0 - np.abs(rng.normal(0.0, 0.004, n_bars)))
    volume = rng.uniform(100.0, 1000.0, n_bars)
    return pd.DataFrame(
        {
            "open": open_,
            "high": high,
            "low": low,
            "close": close,
            "volume": volume,
        },
        index=pd.date_range("2024-01-01", periods=n_bars, freq="1h"),
    )


@pytest.fixture
def make_bar():
    """Builder for bars; unspecified OHLC fields default to close."""
    return _make_bar


@pytest.fixture
def ohlcv_frame() -> pd.DataFrame:
    """Seeded 300-bar random-walk OHLCV DataFrame."""
    return _random_walk_frame(300, seed=42)


@pytest.fixture
def random_bars(ohlcv_frame: pd.DataFrame) -> list[PriceBar]:
    """The seeded random walk as PriceBars."""
    return [
        PriceBar(
            open=row.open,
            high=row.high,
            low=row.low,
            close=row.close,
            volume=row.volume,
        )
        for row in ohlcv_frame.itertuples()
    ]


@pytest.fixture
def clean_config():
    """Drop the cached config before and after the test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_barflow_logger():
    """Undo setup_logger() side effects on the shared "barflow" logger."""
    logger = logging.getLogger("barflow")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        logger.addHandler(handler)
    logger.setLevel(saved_level)
